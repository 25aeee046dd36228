"""
Image I/O
=========
Decoding of input images and encoding of the composited result using Pillow.

Technical Notes:
- Pixel format (color components, bits per pixel) is derived from the Pillow
  mode of the file as decoded, before any conversion; 16-bit per channel
  RGB/RGBA files are recognised from their raw tile mode
- Oversized images (Pillow decompression bomb limit) fail as DecodeError
- Modes with an alpha band are TRANSLUCENT; palette/RGB images carrying a
  single transparent color entry are BITMASK; everything else is OPAQUE
- Pixels are always handed to the core as H x W x 4 uint8 RGBA
- Output is written as opaque RGB, JPEG for .jpg and PNG for .png
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from watermarker.core.errors import DecodeError, EncodeError, InputFileMissing
from watermarker.core.models import ImageData, PixelFormat, Transparency
from watermarker.core.validator import validate_output_extension

logger = logging.getLogger(__name__)

# Pillow mode -> (color components, bits per pixel)
MODE_FORMATS: Dict[str, Tuple[int, int]] = {
    "1": (1, 1),
    "L": (1, 8),
    "LA": (1, 16),
    "La": (1, 16),
    "P": (3, 8),
    "PA": (3, 16),
    "RGB": (3, 24),
    "RGBA": (3, 32),
    "RGBa": (3, 32),
    "RGBX": (3, 32),
    "YCbCr": (3, 24),
    "LAB": (3, 24),
    "HSV": (3, 24),
    "CMYK": (4, 32),
    "I": (1, 32),
    "F": (1, 32),
    "I;16": (1, 16),
    "I;16L": (1, 16),
    "I;16B": (1, 16),
    "I;16N": (1, 16),
}

# Output extension -> Pillow format name
OUTPUT_FORMATS = {"jpg": "JPEG", "png": "PNG"}

JPEG_QUALITY = 95


def source_rawmode(image: Image.Image) -> Optional[str]:
    """
    Raw mode of the file's first tile, e.g. "RGB;16B" for a 16-bit RGB PNG.

    Must be read before image.load(), which clears the tile list.
    """
    tile = getattr(image, "tile", None)
    if not tile:
        return None
    args = tile[0][3]
    if isinstance(args, tuple):
        args = args[0] if args else None
    return args if isinstance(args, str) else None


def pixel_format_of(image: Image.Image, rawmode: Optional[str] = None) -> PixelFormat:
    """
    Color components (alpha excluded) and bits per pixel of a Pillow image.

    Pillow decodes 16-bit per channel RGB/RGBA files into 8-bit modes; the
    raw mode of the file keeps the real depth.
    """
    bands = image.getbands()
    color_bands = [band for band in bands if band not in ("A", "a")]

    if rawmode and ";16" in rawmode and image.mode in ("RGB", "RGBA"):
        return PixelFormat(color_components=len(color_bands), bits_per_pixel=16 * len(bands))

    if image.mode in MODE_FORMATS:
        components, bits = MODE_FORMATS[image.mode]
        return PixelFormat(color_components=components, bits_per_pixel=bits)

    return PixelFormat(color_components=len(color_bands), bits_per_pixel=8 * len(bands))


def transparency_of(image: Image.Image) -> Transparency:
    if "A" in image.getbands() or image.mode in ("RGBa", "La"):
        return Transparency.TRANSLUCENT
    if "transparency" in image.info:
        return Transparency.BITMASK
    return Transparency.OPAQUE


def _to_rgba_array(image: Image.Image) -> np.ndarray:
    try:
        rgba = image.convert("RGBA")
    except ValueError:
        # No direct conversion for some high bit depth modes
        rgba = image.convert("L").convert("RGBA")
    return np.array(rgba, dtype=np.uint8)


def image_from_pil(
        image: Image.Image,
        path: Optional[Path] = None,
        rawmode: Optional[str] = None
) -> ImageData:
    """Wrap a Pillow image as immutable ImageData."""
    return ImageData(
        pixels=_to_rgba_array(image),
        format=pixel_format_of(image, rawmode),
        transparency=transparency_of(image),
        path=path,
    )


def decode(path: Union[str, Path]) -> ImageData:
    """
    Read an image file from disk.

    Args:
        path: Path to the image file.

    Returns:
        ImageData with RGBA pixels, pixel format and transparency.

    Raises:
        InputFileMissing: If the path does not exist.
        DecodeError: If Pillow cannot read the file.
    """
    path = Path(path)
    if not path.exists():
        raise InputFileMissing(f"The file {path} doesn't exist.")

    try:
        with Image.open(path) as image:
            rawmode = source_rawmode(image)
            image.load()
            data = image_from_pil(image, path, rawmode)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise DecodeError(f"The file {path} couldn't be read as an image.") from exc

    logger.debug(
        "Decoded %s: %dx%d, %s, %s",
        path, data.width, data.height, data.format, data.transparency.name
    )
    return data


def encode(pixels: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Write an H x W x 3 uint8 array as an opaque RGB image.

    Returns:
        The written path.

    Raises:
        OutputExtensionError: If the extension is not jpg or png.
        EncodeError: If the file could not be written.
    """
    path = Path(path)
    extension = validate_output_extension(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        image = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
        if extension == "jpg":
            image.save(path, format=OUTPUT_FORMATS[extension], quality=JPEG_QUALITY)
        else:
            image.save(path, format=OUTPUT_FORMATS[extension])
    except (OSError, ValueError) as exc:
        raise EncodeError(f"The file {path} couldn't be written: {exc}") from exc

    logger.debug("Encoded %s", path)
    return path


def describe_image(path: Union[str, Path]) -> List[str]:
    """
    Metadata lines for an image file.

    Raises:
        InputFileMissing / DecodeError: As decode().
    """
    data = decode(path)
    components = data.format.color_components
    if data.transparency is not Transparency.OPAQUE:
        components += 1
    return [
        f"Image file: {path}",
        f"Width: {data.width}",
        f"Height: {data.height}",
        f"Number of components: {components}",
        f"Number of color components: {data.format.color_components}",
        f"Bits per pixel: {data.format.bits_per_pixel}",
        f"Transparency: {data.transparency.name}",
    ]
