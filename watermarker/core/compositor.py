"""
Watermark Compositor
====================
Blends a watermark image into a base image under a fixed policy, weight and
placement.

Technical Notes:
- Output is always opaque 24-bit RGB with the base image's dimensions
- Each output pixel depends only on the base pixel and the watermark pixel
  mapped onto it, so any band of rows can be computed independently
- Channel blend: (weight * w + (100 - weight) * i) // 100, all operands are
  non-negative so floor division equals truncation
- composite_pixel() is the scalar rule; composite_band() applies the same
  rule to whole rows with numpy
"""

from typing import Optional, Tuple

import numpy as np

from .models import (
    MAX_BLEND_WEIGHT,
    BlendWeight,
    Color,
    GridPlacement,
    ImageData,
    PlacementMode,
    SinglePlacement,
    TransparencyPolicy,
)

RGB = Tuple[int, int, int]


def blend_channel(watermark_value: int, base_value: int, weight: BlendWeight) -> int:
    return (weight * watermark_value + (MAX_BLEND_WEIGHT - weight) * base_value) // MAX_BLEND_WEIGHT


def composite_pixel(
        base_pixel: Color,
        watermark_pixel: Optional[Color],
        policy: TransparencyPolicy,
        weight: BlendWeight
) -> RGB:
    """
    Output color for one coordinate.

    Args:
        base_pixel: Base image pixel at the coordinate.
        watermark_pixel: Watermark pixel mapped onto it, None outside the footprint.
        policy: Active transparency policy.
        weight: Watermark weight in percent.

    Returns:
        (red, green, blue) of the output pixel.
    """
    if watermark_pixel is None or policy.is_transparent(watermark_pixel):
        return base_pixel.rgb
    return (
        blend_channel(watermark_pixel.red, base_pixel.red, weight),
        blend_channel(watermark_pixel.green, base_pixel.green, weight),
        blend_channel(watermark_pixel.blue, base_pixel.blue, weight),
    )


def allocate_output(base: ImageData) -> np.ndarray:
    """Fresh H x W x 3 uint8 buffer for the composited image."""
    return np.zeros((base.height, base.width, 3), dtype=np.uint8)


def _source_indices(
        placement: PlacementMode,
        rows: np.ndarray,
        cols: np.ndarray,
        wm_width: int,
        wm_height: int
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Map base rows/columns to watermark rows/columns.

    Returns:
        (watermark_rows, watermark_cols, covered) where covered is a 2D bool
        mask of the base coordinates inside the watermark footprint. Indices
        outside the footprint are clipped so they can still be gathered.
    """
    if isinstance(placement, GridPlacement):
        covered = np.ones((rows.size, cols.size), dtype=bool)
        return rows % wm_height, cols % wm_width, covered

    if isinstance(placement, SinglePlacement):
        local_rows = rows - placement.origin_y
        local_cols = cols - placement.origin_x
        rows_in = (local_rows >= 0) & (local_rows < wm_height)
        cols_in = (local_cols >= 0) & (local_cols < wm_width)
        covered = rows_in[:, None] & cols_in[None, :]
        return (
            np.clip(local_rows, 0, wm_height - 1),
            np.clip(local_cols, 0, wm_width - 1),
            covered,
        )

    raise TypeError(f"Unknown placement mode: {placement!r}")


def composite_band(
        base: ImageData,
        watermark: ImageData,
        policy: TransparencyPolicy,
        weight: BlendWeight,
        placement: PlacementMode,
        start_row: int,
        stop_row: int,
        out: np.ndarray
) -> None:
    """
    Composite rows [start_row, stop_row) of the base image into `out`.

    Only out[start_row:stop_row] is written, so disjoint bands may run on
    different threads against the same buffer.
    """
    if start_row >= stop_row:
        return

    rows = np.arange(start_row, stop_row)
    cols = np.arange(base.width)
    wm_rows, wm_cols, covered = _source_indices(
        placement, rows, cols, watermark.width, watermark.height
    )

    layer = watermark.pixels[np.ix_(wm_rows, wm_cols)]
    base_rgb = base.pixels[start_row:stop_row, :, :3].astype(np.int32)
    wm_rgb = layer[..., :3].astype(np.int32)

    blended = (weight * wm_rgb + (MAX_BLEND_WEIGHT - weight) * base_rgb) // MAX_BLEND_WEIGHT
    keep_base = ~covered | policy.transparent_mask(layer)

    out[start_row:stop_row] = np.where(keep_base[..., None], base_rgb, blended).astype(np.uint8)


def composite(
        base: ImageData,
        watermark: ImageData,
        policy: TransparencyPolicy,
        weight: BlendWeight,
        placement: PlacementMode
) -> np.ndarray:
    """Composite the whole image on the calling thread."""
    out = allocate_output(base)
    composite_band(base, watermark, policy, weight, placement, 0, base.height, out)
    return out


def composite_reference(
        base: ImageData,
        watermark: ImageData,
        policy: TransparencyPolicy,
        weight: BlendWeight,
        placement: PlacementMode
) -> np.ndarray:
    """Pixel-by-pixel version of composite(); slow, kept for cross-checking."""
    out = allocate_output(base)
    for y in range(base.height):
        for x in range(base.width):
            source = placement.source_of(x, y, watermark.width, watermark.height)
            wm_pixel = watermark.pixel(*source) if source is not None else None
            out[y, x] = composite_pixel(base.pixel(x, y), wm_pixel, policy, weight)
    return out
