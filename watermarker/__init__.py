"""
Watermarker Package
===================
A console tool that blends a watermark image into a base image.

Modules:
    - core: Pure algorithm logic (validation, policy, blending)
    - workers: Thread pool compositing
    - io: Pillow image decoding and encoding
    - ui: Interactive console prompts

Usage:
    from watermarker.core import composite, resolve_policy
    from watermarker.workers import CompositeWorker, CompositeConfig
    from watermarker.io import decode, encode
    from watermarker.ui import ConsolePrompter
"""

__version__ = "1.0.0"
__app_name__ = "Watermarker"

# Config exports
from .config import AppConfig, PromptLabels
# Core exports
from .core import (
    Color,
    ColorKey,
    GridPlacement,
    NoSpecialTransparency,
    SinglePlacement,
    UseWatermarkAlpha,
    WatermarkError,
    composite,
    resolve_policy,
)
# I/O exports
from .io import decode, encode
# UI exports
from .ui import ConsolePrompter
# Worker exports
from .workers import CompositeConfig, CompositeResult, CompositeWorker

__all__ = [
    # Version info
    "__version__",
    "__app_name__",

    # Config
    "AppConfig",
    "PromptLabels",

    # Core
    "Color",
    "ColorKey",
    "GridPlacement",
    "NoSpecialTransparency",
    "SinglePlacement",
    "UseWatermarkAlpha",
    "WatermarkError",
    "composite",
    "resolve_policy",

    # I/O
    "decode",
    "encode",

    # UI
    "ConsolePrompter",

    # Workers
    "CompositeWorker",
    "CompositeConfig",
    "CompositeResult",
]
