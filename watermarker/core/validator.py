"""
Image and Input Validation
==========================
Predicate checks over already-decoded images and already-parsed answers.
Each check returns None on success and raises a WatermarkError subclass
carrying the user-facing diagnostic otherwise.
"""

from pathlib import Path
from typing import Iterable, Sequence, Tuple, Union

from .errors import FormatError, OutputExtensionError, RangeError, SizeError
from .models import (
    MAX_BLEND_WEIGHT,
    MAX_CHANNEL,
    MIN_BLEND_WEIGHT,
    MIN_CHANNEL,
    Color,
    ImageData,
    SinglePlacement,
)

REQUIRED_COLOR_COMPONENTS = 3
ALLOWED_BITS_PER_PIXEL = (24, 32)
ALLOWED_OUTPUT_EXTENSIONS = ("jpg", "png")


def validate_format(image: ImageData, label: str) -> None:
    """
    Check that an image has 3 color components and 24 or 32 bits per pixel.

    Args:
        image: Decoded image to check.
        label: Name used in the diagnostic ("image", "watermark").

    Raises:
        FormatError: If either attribute is out of range.
    """
    if image.format.color_components != REQUIRED_COLOR_COMPONENTS:
        raise FormatError(f"The number of {label} color components isn't 3.")
    if image.format.bits_per_pixel not in ALLOWED_BITS_PER_PIXEL:
        raise FormatError(f"The {label} isn't 24 or 32-bit.")


def validate_fit(base: ImageData, watermark: ImageData, label: str = "watermark") -> None:
    """Raise SizeError when the watermark is wider or taller than the base."""
    if watermark.width > base.width or watermark.height > base.height:
        raise SizeError(f"The {label}'s dimensions are larger.")


def placement_bounds(base: ImageData, watermark: ImageData) -> Tuple[int, int]:
    """Largest valid (origin_x, origin_y) for a single placement."""
    return base.width - watermark.width, base.height - watermark.height


def validate_placement(placement: SinglePlacement, base: ImageData, watermark: ImageData) -> None:
    max_x, max_y = placement_bounds(base, watermark)
    if not (0 <= placement.origin_x <= max_x and 0 <= placement.origin_y <= max_y):
        raise RangeError("The position input is out of range.")


def validate_blend_weight(weight: int) -> None:
    if not MIN_BLEND_WEIGHT <= weight <= MAX_BLEND_WEIGHT:
        raise RangeError("The transparency percentage is out of range.")


def channels_in_range(values: Sequence[int], expected_count: int = 3) -> bool:
    """
    True when exactly `expected_count` values are given and every one of
    them lies in 0-255.
    """
    return len(values) == expected_count and all(
        MIN_CHANNEL <= value <= MAX_CHANNEL for value in values
    )


def validate_key_color(values: Sequence[int]) -> Color:
    """Turn three parsed channel values into a key Color, or raise RangeError."""
    if not channels_in_range(values):
        raise RangeError("The transparency color input is invalid.")
    red, green, blue = values
    return Color(red, green, blue)


def output_extension(path: Union[str, Path]) -> str:
    """Lower-cased extension without the dot ("" when there is none)."""
    return Path(path).suffix.lower().lstrip(".")


def validate_output_extension(
        path: Union[str, Path],
        allowed: Iterable[str] = ALLOWED_OUTPUT_EXTENSIONS
) -> str:
    """
    Check the output filename extension before any compositing happens.

    Returns:
        The normalised extension ("jpg" or "png").

    Raises:
        OutputExtensionError: For any other extension.
    """
    extension = output_extension(path)
    if extension not in tuple(allowed):
        raise OutputExtensionError('The output file extension isn\'t "jpg" or "png".')
    return extension
