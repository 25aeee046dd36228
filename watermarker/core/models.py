"""
Watermark Data Model
====================
Value objects shared by the validator, the policy resolver and the compositor.

Technical Notes:
- Decoded images keep their pixels as an H x W x 4 uint8 RGBA array,
  alpha is 255 wherever the source format has no alpha band
- ImageData marks its pixel array read-only; the compositor writes into a
  separately allocated H x W x 3 buffer
- Policies and placements are small frozen dataclasses; each exposes a
  scalar method (one pixel) and a vectorised method (numpy arrays)
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

# Blend weight bounds (percent of the watermark in the linear mix)
MIN_BLEND_WEIGHT = 0
MAX_BLEND_WEIGHT = 100

# Channel bounds
MIN_CHANNEL = 0
MAX_CHANNEL = 255

BlendWeight = int


class Transparency(Enum):
    """Transparency classification of an image's color model."""
    OPAQUE = 1
    BITMASK = 2
    TRANSLUCENT = 3


@dataclass(frozen=True)
class PixelFormat:
    """Color component count (alpha excluded) and storage bits per pixel."""
    color_components: int
    bits_per_pixel: int


@dataclass(frozen=True)
class Color:
    """An RGBA color, each channel 0-255."""
    red: int
    green: int
    blue: int
    alpha: int = MAX_CHANNEL

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return self.red, self.green, self.blue


@dataclass(frozen=True)
class ImageData:
    """
    Immutable decoded image.

    Fields:
        pixels: H x W x 4 uint8 RGBA array (read-only after construction).
        format: Pixel format of the source file.
        transparency: Transparency classification of the source file.
        path: Source file, if the image came from disk.
    """
    pixels: np.ndarray
    format: PixelFormat
    transparency: Transparency = Transparency.OPAQUE
    path: Optional[Path] = None

    def __post_init__(self):
        if self.pixels.dtype != np.uint8 or self.pixels.ndim != 3 or self.pixels.shape[-1] != 4:
            raise TypeError("expected uint8 (H,W,4) RGBA pixels")
        self.pixels.flags.writeable = False

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def pixel(self, x: int, y: int) -> Color:
        r, g, b, a = (int(v) for v in self.pixels[y, x])
        return Color(r, g, b, a)


# =============================================================================
# TRANSPARENCY POLICIES
# =============================================================================

@dataclass(frozen=True)
class NoSpecialTransparency:
    """Every watermark pixel takes part in the blend."""

    def is_transparent(self, pixel: Color) -> bool:
        return False

    def transparent_mask(self, rgba: np.ndarray) -> np.ndarray:
        return np.zeros(rgba.shape[:2], dtype=bool)


@dataclass(frozen=True)
class UseWatermarkAlpha:
    """Watermark pixels with alpha 0 let the base pixel through unchanged."""

    def is_transparent(self, pixel: Color) -> bool:
        return pixel.alpha == 0

    def transparent_mask(self, rgba: np.ndarray) -> np.ndarray:
        return rgba[..., 3] == 0


@dataclass(frozen=True)
class ColorKey:
    """
    Watermark pixels whose RGB equals the key color are fully transparent.

    Only red, green and blue are compared; alpha is ignored on both sides.
    """
    color: Color

    def is_transparent(self, pixel: Color) -> bool:
        return pixel.rgb == self.color.rgb

    def transparent_mask(self, rgba: np.ndarray) -> np.ndarray:
        key = np.array(self.color.rgb, dtype=np.uint8)
        return np.all(rgba[..., :3] == key, axis=-1)


TransparencyPolicy = Union[NoSpecialTransparency, UseWatermarkAlpha, ColorKey]


# =============================================================================
# PLACEMENT MODES
# =============================================================================

@dataclass(frozen=True)
class SinglePlacement:
    """Watermark drawn once with its top-left corner at (origin_x, origin_y)."""
    origin_x: int
    origin_y: int

    def source_of(self, x: int, y: int, wm_width: int, wm_height: int) -> Optional[Tuple[int, int]]:
        """Watermark coordinates used at base (x, y), or None outside the footprint."""
        local_x = x - self.origin_x
        local_y = y - self.origin_y
        if 0 <= local_x < wm_width and 0 <= local_y < wm_height:
            return local_x, local_y
        return None


@dataclass(frozen=True)
class GridPlacement:
    """Watermark tiled over the whole base image, wrapping at its edges."""

    def source_of(self, x: int, y: int, wm_width: int, wm_height: int) -> Optional[Tuple[int, int]]:
        return x % wm_width, y % wm_height


PlacementMode = Union[SinglePlacement, GridPlacement]
