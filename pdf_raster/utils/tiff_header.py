"""
Minimal TIFF container for CCITT Group 4 data.

Wraps a compressed fax stream in the smallest single-strip TIFF that a
generic TIFF codec will decode:

    header (8)  byte order, 42, IFD offset 8
    IFD         entry count (2), 10 entries (12 each), next IFD = 0 (4)
    strip       the compressed bytes, verbatim

The container describes nothing beyond what is needed to locate and decode
the one strip.
"""

import struct
import sys
from typing import Dict

from pdf_raster.models.raster import ImageDescriptor

TIFF_VERSION = 42
IFD_OFFSET = 8
ENTRY_COUNT = 10
ENTRY_SIZE = 12
HEADER_LENGTH = 10 + ENTRY_COUNT * ENTRY_SIZE + 4

# Field types
TYPE_SHORT = 3
TYPE_LONG = 4

# Tags, ascending
TAG_NEW_SUBFILE_TYPE = 254
TAG_IMAGE_WIDTH = 256
TAG_IMAGE_LENGTH = 257
TAG_BITS_PER_SAMPLE = 258
TAG_COMPRESSION = 259
TAG_PHOTOMETRIC = 262
TAG_STRIP_OFFSETS = 273
TAG_SAMPLES_PER_PIXEL = 277
TAG_ROWS_PER_STRIP = 278
TAG_STRIP_BYTE_COUNTS = 279

COMPRESSION_CCITT_G4 = 4
PHOTOMETRIC_WHITE_IS_ZERO = 0


def _byte_order() -> str:
    return '<' if sys.byteorder == 'little' else '>'


def _byte_order_marker() -> bytes:
    return b'II' if sys.byteorder == 'little' else b'MM'


def build_tiff_container(descriptor: ImageDescriptor, compressed: bytes) -> bytes:
    """
    Build a single-strip Group 4 TIFF around compressed.

    Args:
        descriptor: Image whose width and height describe the strip
        compressed: CCITT Group 4 encoded bytes

    Returns:
        Complete TIFF file bytes
    """
    order = _byte_order()

    # Tag format: (tag_id, type, value)
    tags = [
        (TAG_NEW_SUBFILE_TYPE, TYPE_LONG, 0),
        (TAG_IMAGE_WIDTH, TYPE_LONG, descriptor.width),
        (TAG_IMAGE_LENGTH, TYPE_LONG, descriptor.height),
        (TAG_BITS_PER_SAMPLE, TYPE_SHORT, 1),
        (TAG_COMPRESSION, TYPE_SHORT, COMPRESSION_CCITT_G4),
        (TAG_PHOTOMETRIC, TYPE_SHORT, PHOTOMETRIC_WHITE_IS_ZERO),
        (TAG_STRIP_OFFSETS, TYPE_LONG, HEADER_LENGTH),
        (TAG_SAMPLES_PER_PIXEL, TYPE_SHORT, 1),
        (TAG_ROWS_PER_STRIP, TYPE_LONG, descriptor.height),
        (TAG_STRIP_BYTE_COUNTS, TYPE_LONG, len(compressed)),
    ]

    parts = [
        _byte_order_marker(),
        struct.pack(order + 'HI', TIFF_VERSION, IFD_OFFSET),
        struct.pack(order + 'H', len(tags)),
    ]
    for tag_id, tag_type, value in tags:
        if tag_type == TYPE_SHORT:
            # SHORT values sit in the first 2 bytes of the value field
            parts.append(struct.pack(order + 'HHIHH', tag_id, tag_type, 1, value, 0))
        else:
            parts.append(struct.pack(order + 'HHII', tag_id, tag_type, 1, value))

    # Next IFD pointer (0 = no more IFDs)
    parts.append(struct.pack(order + 'I', 0))
    parts.append(bytes(compressed))

    return b''.join(parts)


def read_tiff_directory(container: bytes) -> Dict[int, int]:
    """
    Read the first directory of a TIFF built with single-valued entries.

    Returns:
        Mapping of tag id to value
    """
    marker = container[:2]
    if marker == b'II':
        order = '<'
    elif marker == b'MM':
        order = '>'
    else:
        raise ValueError(f"Not a TIFF container: {marker!r}")

    version, ifd_offset = struct.unpack_from(order + 'HI', container, 2)
    if version != TIFF_VERSION:
        raise ValueError(f"Unexpected TIFF version {version}")

    (count,) = struct.unpack_from(order + 'H', container, ifd_offset)
    directory = {}
    for index in range(count):
        offset = ifd_offset + 2 + index * ENTRY_SIZE
        tag_id, tag_type, _ = struct.unpack_from(order + 'HHI', container, offset)
        if tag_type == TYPE_SHORT:
            (value,) = struct.unpack_from(order + 'H', container, offset + 8)
        else:
            (value,) = struct.unpack_from(order + 'I', container, offset + 8)
        directory[tag_id] = value
    return directory
