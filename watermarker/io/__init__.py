"""
I/O Module - Image Files
========================
Pillow-backed decoding and encoding of image files.
"""

from .image_io import decode, describe_image, encode, image_from_pil

__all__ = ["decode", "encode", "describe_image", "image_from_pil"]
