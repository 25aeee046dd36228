"""
Watermark Errors
================
Every failure the pipeline can hit is fatal: the driver prints the message
of the raised error as a single diagnostic line and exits with status 1.
"""


class WatermarkError(Exception):
    """Base class for all watermark pipeline failures."""


class InputFileMissing(WatermarkError):
    """An input image path does not exist."""


class DecodeError(WatermarkError):
    """An input file exists but could not be decoded as an image."""


class EncodeError(WatermarkError):
    """The output image could not be written."""


class FormatError(WatermarkError):
    """Wrong number of color components or unsupported bit depth."""


class SizeError(WatermarkError):
    """The watermark is larger than the base image in some dimension."""


class RangeError(WatermarkError):
    """A numeric answer lies outside its valid domain."""


class ParseError(WatermarkError):
    """An answer could not be parsed into the expected type."""


class OutputExtensionError(WatermarkError):
    """The output filename does not end in jpg or png."""
