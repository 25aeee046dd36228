"""
Core Module - Pure Algorithm Logic
==================================
This module contains no console or file I/O.
Validation, policy resolution and pixel blending are implemented here.
"""

from .compositor import composite, composite_band, composite_pixel, composite_reference
from .errors import (
    DecodeError,
    EncodeError,
    FormatError,
    InputFileMissing,
    OutputExtensionError,
    ParseError,
    RangeError,
    SizeError,
    WatermarkError,
)
from .models import (
    Color,
    ColorKey,
    GridPlacement,
    ImageData,
    NoSpecialTransparency,
    PixelFormat,
    SinglePlacement,
    Transparency,
    UseWatermarkAlpha,
)
from .policy import resolve_policy
from .validator import validate_fit, validate_format, validate_output_extension

__all__ = [
    # Compositor
    "composite",
    "composite_band",
    "composite_pixel",
    "composite_reference",
    # Errors
    "WatermarkError",
    "InputFileMissing",
    "DecodeError",
    "EncodeError",
    "FormatError",
    "SizeError",
    "RangeError",
    "ParseError",
    "OutputExtensionError",
    # Models
    "Color",
    "ColorKey",
    "GridPlacement",
    "ImageData",
    "NoSpecialTransparency",
    "PixelFormat",
    "SinglePlacement",
    "Transparency",
    "UseWatermarkAlpha",
    # Policy / validation
    "resolve_policy",
    "validate_fit",
    "validate_format",
    "validate_output_extension",
]
