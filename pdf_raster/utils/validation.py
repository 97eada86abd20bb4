"""
Image Object Validation and Error Types
Typed failures for image decoding and attribute validation helpers.

Every failure is local to a single image object. Batch extraction catches
PdfRasterError subclasses, records them and moves on to the next image.
"""

import logging
from typing import Any, Optional, Sequence

from pdf_raster.utils.pdf_objects import is_number

logger = logging.getLogger(__name__)


class PdfRasterError(Exception):
    """Base exception for image decoding failures"""
    pass


class NotAnImage(PdfRasterError):
    """Object is not flagged as an image by its /Type and /Subtype"""
    pass


class MalformedFilterDeclaration(PdfRasterError):
    """Image declares no filter, or a /Filter value of the wrong shape"""
    pass


class UnsupportedFilterChain(PdfRasterError):
    """A non-terminal filter in the chain is not a generic byte transform"""

    def __init__(self, chain: Sequence[str], filter_name: str):
        self.chain = list(chain)
        self.filter_name = filter_name
        super().__init__(
            f"Unsupported filter '{filter_name}' in filter chain [{', '.join(self.chain)}]"
        )


class UnsupportedColorSpace(PdfRasterError):
    """Color space description is not one of the recognized forms"""

    def __init__(self, name: Optional[str], detail: str = ""):
        self.name = name
        message = f"An unsupported colorspace '{name}' was provided"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnsupportedBitDepth(PdfRasterError):
    """Bits per component has no pixel format for the given color space"""

    def __init__(self, bits_per_component: Any, detail: str = ""):
        self.bits_per_component = bits_per_component
        message = f"The specified pixel depth '{bits_per_component}' is not supported"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class UnsupportedEncoding(PdfRasterError):
    """Valid description whose decoding into pixels is not implemented"""
    pass


class InvalidPalette(PdfRasterError):
    """Palette lookup is neither an inline string nor a stream reference"""
    pass


class PaletteTooShort(PdfRasterError):
    """Palette lookup holds fewer bytes than high value + 1 RGB entries"""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Palette requires {expected} bytes but only {actual} are available"
        )


class MissingRequiredAttribute(PdfRasterError):
    """Image object lacks /Width, /Height or /BitsPerComponent"""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Image object is missing required attribute {key}")


class StreamDecodeError(PdfRasterError):
    """A generic byte transform could not decode its input"""

    def __init__(self, filter_name: str, detail: str = ""):
        self.filter_name = filter_name
        message = f"Failed to decode stream data with {filter_name}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


def require_int(value: Any, key: str) -> int:
    """
    Validate a required integer attribute.

    Args:
        value: Attribute value read from the host object (None if absent)
        key: PDF key used in the error message

    Returns:
        The value as a Python int

    Raises:
        MissingRequiredAttribute: If the value is absent or not numeric
    """
    if value is None:
        raise MissingRequiredAttribute(key)
    if not is_number(value):
        logger.debug(f"Attribute {key} has non-integer value {value!r}")
        raise MissingRequiredAttribute(key)
    return int(value)


def error_kind(error: BaseException) -> str:
    """Short name of an error for reports"""
    return error.__class__.__name__


__all__ = [
    'PdfRasterError',
    'NotAnImage',
    'MalformedFilterDeclaration',
    'UnsupportedFilterChain',
    'UnsupportedColorSpace',
    'UnsupportedBitDepth',
    'UnsupportedEncoding',
    'InvalidPalette',
    'PaletteTooShort',
    'MissingRequiredAttribute',
    'StreamDecodeError',
    'require_int',
    'error_kind',
]
