"""
Filter Chain Resolution

Turns an image's declared /Filter into a decode pipeline. Every filter but
the last must be a generic byte transform; those are applied in order and
fold into a new image view declaring only the last filter. The last
(terminal) filter picks the raster decoder.
"""

import logging
from typing import Any, Callable, Dict, Optional

from pdf_raster.constants.pdf_keys import (
    FILTER_CCITT,
    FILTER_CCITT_ABBR,
    FILTER_DCT,
    FILTER_DCT_ABBR,
    FILTER_FLATE,
    FILTER_FLATE_ABBR,
)
from pdf_raster.extractors.raster_decoders import (
    decode_ccitt_raster,
    decode_dct_raster,
    decode_flate_raster,
)
from pdf_raster.extractors.stream_filters import apply_filters, check_generic_chain
from pdf_raster.models.image_object import ImageObject
from pdf_raster.models.raster import DecodedRaster
from pdf_raster.utils.pdf_objects import filter_names, is_array, is_name, name_of
from pdf_raster.utils.validation import MalformedFilterDeclaration

logger = logging.getLogger(__name__)

RASTER_DECODERS: Dict[str, Callable[[ImageObject], DecodedRaster]] = {
    FILTER_DCT: decode_dct_raster,
    FILTER_DCT_ABBR: decode_dct_raster,
    FILTER_FLATE: decode_flate_raster,
    FILTER_FLATE_ABBR: decode_flate_raster,
    FILTER_CCITT: decode_ccitt_raster,
    FILTER_CCITT_ABBR: decode_ccitt_raster,
}


def dispatch_terminal_filter(image: ImageObject, filter_name: str) -> Optional[DecodedRaster]:
    """
    Run the raster decoder for filter_name.

    Returns:
        The decoded raster, or None when no decoder handles the filter
    """
    decoder = RASTER_DECODERS.get(filter_name)
    if decoder is None:
        logger.debug(f"No raster decoder for terminal filter {filter_name}, skipping image")
        return None
    return decoder(image)


def unwrap_filter_chain(image: ImageObject) -> ImageObject:
    """
    Apply all but the last declared filter.

    Returns:
        A view declaring a single filter name; the input view when it
        already does

    Raises:
        MalformedFilterDeclaration: No filter, empty array, or non-name entries
        UnsupportedFilterChain: A non-terminal filter is not a generic transform
    """
    declared = image.filter
    if declared is None:
        raise MalformedFilterDeclaration("Image object declares no /Filter")

    if is_name(declared) or isinstance(declared, str):
        if name_of(declared) is None:
            raise MalformedFilterDeclaration(f"Invalid filter name {declared!r}")
        return image

    if not (is_array(declared) or isinstance(declared, (list, tuple))):
        raise MalformedFilterDeclaration(
            f"/Filter must be a name or an array of names, got {type(declared).__name__}"
        )

    chain = filter_names(declared)
    if not chain:
        raise MalformedFilterDeclaration("Image object declares an empty /Filter array")
    if any(name is None for name in chain):
        raise MalformedFilterDeclaration(f"/Filter array holds a non-name entry: {declared!r}")

    terminal_index = len(chain) - 1
    check_generic_chain(chain[:terminal_index], chain)

    parms = [image.decode_parms_at(index) for index in range(len(chain))]
    transformed = apply_filters(image.data, chain[:terminal_index], chain, parms[:terminal_index])
    if terminal_index:
        logger.debug(f"Unwrapped filter chain {chain}: {len(image.data)} -> {len(transformed)} bytes")

    return image.with_filter(chain[terminal_index], transformed, parms[terminal_index])


def resolve_filter_chain(image: Any) -> Optional[DecodedRaster]:
    """
    Decode an image object through its declared filters.

    Args:
        image: ImageObject view, or a pikepdf Stream already known to be an image

    Returns:
        The decoded raster, or None if the terminal filter is not recognized
    """
    if not isinstance(image, ImageObject):
        image = ImageObject.from_stream(image)

    single = unwrap_filter_chain(image)
    return dispatch_terminal_filter(single, name_of(single.filter))
