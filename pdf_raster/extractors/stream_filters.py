"""
Generic Stream Filters

Byte-to-byte transforms that may appear anywhere in a filter chain. These
undo an encoding without giving the data any pixel interpretation, unlike
the raster decoders which always terminate a chain.
"""

import base64
import logging
import zlib
from typing import Any, Callable, Dict, List, Optional

from pdf_raster.constants.pdf_keys import (
    FILTER_ASCII85,
    FILTER_ASCII85_ABBR,
    FILTER_ASCII_HEX,
    FILTER_ASCII_HEX_ABBR,
    FILTER_FLATE,
    FILTER_FLATE_ABBR,
    FILTER_RUN_LENGTH,
    FILTER_RUN_LENGTH_ABBR,
    KEY_BITS_PER_COMPONENT,
    KEY_COLORS,
    KEY_COLUMNS,
    KEY_DECODE_PARMS,
    KEY_FILTER,
    KEY_PREDICTOR,
)
from pdf_raster.models.image_object import read_stream_bytes
from pdf_raster.utils.pdf_objects import filter_names, get_int, get_value, is_array
from pdf_raster.utils.validation import StreamDecodeError, UnsupportedFilterChain

logger = logging.getLogger(__name__)


# --- Transforms ---

def decompress_flate(data: bytes) -> bytes:
    """Decompress FlateDecode (zlib) compressed data with systematic fallback methods"""
    if not data:
        raise StreamDecodeError(FILTER_FLATE, "empty input")

    # Define decompression strategies to try in order
    strategies = [
        # Method 1: Standard zlib decompression
        lambda: zlib.decompress(data),
        # Method 2: Raw deflate without zlib header
        lambda: zlib.decompress(data, -15),
    ]

    # Method 3: Try skipping potential extra bytes at the beginning
    for skip in [1, 2, 3, 4]:
        if len(data) > skip:
            strategies.extend([
                lambda s=skip: zlib.decompress(data[s:]),
                lambda s=skip: zlib.decompress(data[s:], -15),
            ])

    last_error: Optional[zlib.error] = None
    for strategy in strategies:
        try:
            return strategy()
        except zlib.error as e:
            last_error = e
            continue

    # Truncated streams still carry usable rows; keep what inflates
    decompressor = zlib.decompressobj()
    try:
        partial = decompressor.decompress(data)
    except zlib.error:
        partial = b''
    if partial:
        logger.warning(f"FlateDecode stream is truncated, recovered {len(partial)} bytes")
        return partial

    raise StreamDecodeError(FILTER_FLATE, str(last_error))


def decompress_runlength(data: bytes) -> bytes:
    """Decompress Run-length encoded data"""
    result = bytearray()
    i = 0
    while i < len(data):
        length = data[i]
        if length == 128:  # EOD marker
            break
        elif length < 128:
            # Copy next length+1 bytes literally
            count = length + 1
            result.extend(data[i+1:i+1+count])
            i += count + 1
        else:
            # Repeat next byte 257-length times
            count = 257 - length
            if i + 1 < len(data):
                result.extend([data[i+1]] * count)
            i += 2
    return bytes(result)


def decode_ascii85(data: bytes) -> bytes:
    """Decode ASCII85 encoded data"""
    cleaned_data = bytes(data).strip()
    if not cleaned_data.startswith(b'<~'):
        cleaned_data = b'<~' + cleaned_data
    if not cleaned_data.endswith(b'~>'):
        cleaned_data = cleaned_data + b'~>'
    try:
        return base64.a85decode(cleaned_data, adobe=True, ignorechars=b' \t\n\r\x0b\x0c')
    except ValueError as e:
        raise StreamDecodeError(FILTER_ASCII85, str(e))


def decode_ascii_hex(data: bytes) -> bytes:
    """Decode ASCII hex encoded data"""
    # Everything after the EOD marker '>' is ignored, as is whitespace
    cleaned_data = bytes(data).split(b'>', 1)[0]
    cleaned_data = b''.join(cleaned_data.split())
    # An odd final digit behaves as if followed by 0
    if len(cleaned_data) % 2:
        cleaned_data += b'0'
    try:
        return base64.b16decode(cleaned_data, casefold=True)
    except ValueError as e:
        raise StreamDecodeError(FILTER_ASCII_HEX, str(e))


def _paeth(a: int, b: int, c: int) -> int:
    """Paeth predictor"""
    p = a + b - c
    pa = abs(p - a)
    pb = abs(p - b)
    pc = abs(p - c)
    if pa <= pb and pa <= pc:
        return a
    if pb <= pc:
        return b
    return c


def undo_predictor(data: bytes, params: Any) -> bytes:
    """
    Reverse the TIFF (2) or PNG (10-15) predictor named in decode parameters.

    Data without a /Predictor entry, or with Predictor 1, is returned as is.
    """
    predictor = get_int(params, KEY_PREDICTOR, 1)
    if predictor is None or predictor == 1:
        return data

    colors = get_int(params, KEY_COLORS, 1)
    bits = get_int(params, KEY_BITS_PER_COMPONENT, 8)
    columns = get_int(params, KEY_COLUMNS, 1)
    bytes_per_pixel = max(1, colors * bits // 8)
    row_size = (columns * colors * bits + 7) // 8

    if predictor == 2:
        if bits != 8:
            logger.warning(f"TIFF predictor with {bits} bits per component is not supported, leaving data as is")
            return data
        result = bytearray()
        for row_start in range(0, len(data), row_size):
            row = bytearray(data[row_start:row_start + row_size])
            for i in range(bytes_per_pixel, len(row)):
                row[i] = (row[i] + row[i - bytes_per_pixel]) & 0xFF
            result.extend(row)
        return bytes(result)

    if predictor >= 10:
        result = bytearray()
        prev_row = bytearray(row_size)
        i = 0
        while i < len(data):
            filter_type = data[i]
            i += 1
            row = bytearray(data[i:i + row_size])
            i += row_size

            if filter_type == 1:
                # Sub
                for j in range(bytes_per_pixel, len(row)):
                    row[j] = (row[j] + row[j - bytes_per_pixel]) & 0xFF
            elif filter_type == 2:
                # Up
                for j in range(len(row)):
                    row[j] = (row[j] + prev_row[j]) & 0xFF
            elif filter_type == 3:
                # Average
                for j in range(len(row)):
                    left = row[j - bytes_per_pixel] if j >= bytes_per_pixel else 0
                    row[j] = (row[j] + (left + prev_row[j]) // 2) & 0xFF
            elif filter_type == 4:
                # Paeth
                for j in range(len(row)):
                    left = row[j - bytes_per_pixel] if j >= bytes_per_pixel else 0
                    up_left = prev_row[j - bytes_per_pixel] if j >= bytes_per_pixel else 0
                    row[j] = (row[j] + _paeth(left, prev_row[j], up_left)) & 0xFF
            elif filter_type != 0:
                raise StreamDecodeError(FILTER_FLATE, f"unknown PNG row filter {filter_type}")

            result.extend(row)
            prev_row = row + bytearray(row_size - len(row))
        return bytes(result)

    logger.warning(f"Unknown predictor {predictor}, leaving data as is")
    return data


def decode_flate(data: bytes, params: Any = None) -> bytes:
    """FlateDecode with the predictor from its decode parameters undone"""
    return undo_predictor(decompress_flate(data), params)


GENERIC_FILTERS: Dict[str, Callable[[bytes], bytes]] = {
    FILTER_FLATE: decompress_flate,
    FILTER_FLATE_ABBR: decompress_flate,
    FILTER_RUN_LENGTH: decompress_runlength,
    FILTER_RUN_LENGTH_ABBR: decompress_runlength,
    FILTER_ASCII85: decode_ascii85,
    FILTER_ASCII85_ABBR: decode_ascii85,
    FILTER_ASCII_HEX: decode_ascii_hex,
    FILTER_ASCII_HEX_ABBR: decode_ascii_hex,
}


def is_generic_filter(filter_name: Optional[str]) -> bool:
    return filter_name in GENERIC_FILTERS


# --- Chains ---

def check_generic_chain(chain: List[Optional[str]], full_chain: Optional[List[Optional[str]]] = None) -> None:
    """
    Raises:
        UnsupportedFilterChain: Naming the first entry that is not a generic filter
    """
    for filter_name in chain:
        if not is_generic_filter(filter_name):
            reported_chain = [str(name) for name in (full_chain or chain)]
            raise UnsupportedFilterChain(reported_chain, str(filter_name))


def apply_filters(
    data: bytes,
    chain: List[Optional[str]],
    full_chain: Optional[List[Optional[str]]] = None,
    parms: Optional[List[Any]] = None,
) -> bytes:
    """
    Apply generic filters to data in chain order.

    Args:
        data: Encoded bytes
        chain: Filter names to apply, first to last
        full_chain: Whole declared chain, reported in errors (defaults to chain)
        parms: Decode parameters per chain entry, used for Flate predictors

    Raises:
        UnsupportedFilterChain: If any name is not a generic filter
        StreamDecodeError: If a filter cannot decode its input
    """
    check_generic_chain(chain, full_chain)

    current_data = bytes(data)
    for index, filter_name in enumerate(chain):
        transform = GENERIC_FILTERS[filter_name]
        current_data = transform(current_data)
        if transform is decompress_flate and parms and index < len(parms):
            current_data = undo_predictor(current_data, parms[index])
        logger.debug(f"Applied {filter_name}: {len(current_data)} bytes")
    return current_data


def unfilter_stream(stream: Any) -> bytes:
    """
    Fully decoded content of a stream whose own filters are all generic.

    Used for streams referenced from an image (palette lookups), whose filter
    chain is independent of the image's chain.
    """
    raw_data = read_stream_bytes(stream)
    chain = filter_names(get_value(stream, KEY_FILTER))
    if not chain:
        return raw_data

    parms = get_value(stream, KEY_DECODE_PARMS)
    if parms is None:
        parm_list = []
    elif is_array(parms):
        parm_list = list(parms)
    else:
        parm_list = [parms]
    return apply_filters(raw_data, chain, parms=parm_list)
