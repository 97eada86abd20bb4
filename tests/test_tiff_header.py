import struct
import sys

import pytest

from pdf_raster.models.colorspace import Gray
from pdf_raster.models.raster import ImageDescriptor
from pdf_raster.utils.tiff_header import (
    COMPRESSION_CCITT_G4,
    ENTRY_COUNT,
    HEADER_LENGTH,
    PHOTOMETRIC_WHITE_IS_ZERO,
    TAG_BITS_PER_SAMPLE,
    TAG_COMPRESSION,
    TAG_IMAGE_LENGTH,
    TAG_IMAGE_WIDTH,
    TAG_NEW_SUBFILE_TYPE,
    TAG_PHOTOMETRIC,
    TAG_ROWS_PER_STRIP,
    TAG_SAMPLES_PER_PIXEL,
    TAG_STRIP_BYTE_COUNTS,
    TAG_STRIP_OFFSETS,
    build_tiff_container,
    read_tiff_directory,
)

STRIP = b'\x26\xa0\x13\x80\x08'


@pytest.fixture
def descriptor():
    return ImageDescriptor(
        width=1728,
        height=2200,
        bits_per_component=1,
        length=len(STRIP),
        color_space=Gray(),
        raw_stream=STRIP,
    )


def test_header_length():
    assert HEADER_LENGTH == 134


def test_container_layout(descriptor):
    container = build_tiff_container(descriptor, STRIP)

    assert len(container) == HEADER_LENGTH + len(STRIP)
    assert container[HEADER_LENGTH:] == STRIP
    expected_marker = b'II' if sys.byteorder == 'little' else b'MM'
    assert container[:2] == expected_marker


def test_directory_entries(descriptor):
    container = build_tiff_container(descriptor, STRIP)
    directory = read_tiff_directory(container)

    assert directory == {
        TAG_NEW_SUBFILE_TYPE: 0,
        TAG_IMAGE_WIDTH: 1728,
        TAG_IMAGE_LENGTH: 2200,
        TAG_BITS_PER_SAMPLE: 1,
        TAG_COMPRESSION: COMPRESSION_CCITT_G4,
        TAG_PHOTOMETRIC: PHOTOMETRIC_WHITE_IS_ZERO,
        TAG_STRIP_OFFSETS: HEADER_LENGTH,
        TAG_SAMPLES_PER_PIXEL: 1,
        TAG_ROWS_PER_STRIP: 2200,
        TAG_STRIP_BYTE_COUNTS: len(STRIP),
    }


def test_tags_are_ascending_and_next_ifd_is_zero(descriptor):
    container = build_tiff_container(descriptor, STRIP)
    order = '<' if container[:2] == b'II' else '>'

    (count,) = struct.unpack_from(order + 'H', container, 8)
    assert count == ENTRY_COUNT
    tags = [struct.unpack_from(order + 'H', container, 10 + i * 12)[0] for i in range(count)]
    assert tags == sorted(tags)
    (next_ifd,) = struct.unpack_from(order + 'I', container, 10 + count * 12)
    assert next_ifd == 0


def test_empty_strip(descriptor):
    directory = read_tiff_directory(build_tiff_container(descriptor, b''))
    assert directory[TAG_STRIP_BYTE_COUNTS] == 0


def test_rejects_non_tiff():
    with pytest.raises(ValueError):
        read_tiff_directory(b'%PDF-1.7')
