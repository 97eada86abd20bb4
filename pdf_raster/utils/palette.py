"""
Palette Resolution

Turns the lookup of an indexed color space into RGB entries, and builds the
synthetic palettes used for grayscale and bilevel images.
"""

import logging
from typing import Any

import numpy as np

from pdf_raster.extractors.stream_filters import unfilter_stream
from pdf_raster.models.raster import Palette
from pdf_raster.utils.pdf_objects import is_dictionary, is_stream, is_string
from pdf_raster.utils.validation import InvalidPalette, PaletteTooShort

logger = logging.getLogger(__name__)

BYTES_PER_ENTRY = 3
MAX_PALETTE_ENTRIES = 256

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def resolve_palette_bytes(source: Any) -> bytes:
    """
    Get the raw palette bytes (3 per RGB entry, in source order).

    Args:
        source: Inline string, or a stream reached through a reference

    Returns:
        Palette bytes; the stream's own filters are fully undone

    Raises:
        InvalidPalette: If the source is neither a string nor a stream reference
    """
    if is_string(source):
        # String octets map one-to-one to bytes
        return bytes(source)

    if is_stream(source):
        return unfilter_stream(source)

    if is_dictionary(source):
        # Referenced object without a stream
        logger.debug("Palette lookup references an object without a stream")
        return b''

    raise InvalidPalette(f"The specified palette information was incorrect: {type(source).__name__}")


def to_palette(raw: bytes, count: int) -> Palette:
    """
    Slice count consecutive RGB triples from raw.

    Raises:
        InvalidPalette: If count is outside 1..256
        PaletteTooShort: If raw holds fewer than count * 3 bytes
    """
    if not 1 <= count <= MAX_PALETTE_ENTRIES:
        raise InvalidPalette(f"Palette must hold 1 to {MAX_PALETTE_ENTRIES} entries, got {count}")
    expected = count * BYTES_PER_ENTRY
    if len(raw) < expected:
        raise PaletteTooShort(expected, len(raw))
    entries = np.frombuffer(raw, dtype=np.uint8, count=expected).reshape(count, BYTES_PER_ENTRY)
    return tuple(tuple(int(c) for c in entry) for entry in entries)


def resolve_palette(source: Any, count: int) -> Palette:
    return to_palette(resolve_palette_bytes(source), count)


def gray_ramp(bits_per_component: int) -> Palette:
    """
    Evenly spaced gray levels for a grayscale image.

    2 ** bits_per_component levels, capped at 256. Entry i is
    round(i * 255 / (levels - 1)); a single level is black.
    """
    levels = min(2 ** bits_per_component, MAX_PALETTE_ENTRIES)
    if levels <= 1:
        return (BLACK,)
    values = np.rint(np.arange(levels) * 255.0 / (levels - 1)).astype(np.uint8)
    return tuple((int(v), int(v), int(v)) for v in values)


def bilevel_palette(black_is_1: bool) -> Palette:
    """Two-entry palette for fax images"""
    if black_is_1:
        return (BLACK, WHITE)
    return (WHITE, BLACK)
