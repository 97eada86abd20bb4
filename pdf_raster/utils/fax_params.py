"""
CCITTFaxDecode parameter parsing
"""

import logging
from typing import Any, Optional

from pdf_raster.constants.pdf_keys import (
    KEY_BLACK_IS_1,
    KEY_COLUMNS,
    KEY_DAMAGED_ROWS_BEFORE_ERROR,
    KEY_ENCODED_BYTE_ALIGN,
    KEY_END_OF_BLOCK,
    KEY_END_OF_LINE,
    KEY_K,
    KEY_ROWS,
)
from pdf_raster.models.raster import FaxDecodeParameters
from pdf_raster.utils.pdf_objects import get_bool, get_int

logger = logging.getLogger(__name__)


def parse_fax_parameters(params: Optional[Any]) -> FaxDecodeParameters:
    """
    Read fax decode parameters from an optional /DecodeParms dictionary.

    Absent keys, and a missing dictionary, take the PDF defaults.
    """
    defaults = FaxDecodeParameters()
    if params is None:
        return defaults

    parsed = FaxDecodeParameters(
        k=get_int(params, KEY_K, defaults.k),
        end_of_line=get_bool(params, KEY_END_OF_LINE, defaults.end_of_line),
        encoded_byte_align=get_bool(params, KEY_ENCODED_BYTE_ALIGN, defaults.encoded_byte_align),
        columns=get_int(params, KEY_COLUMNS, defaults.columns),
        rows=get_int(params, KEY_ROWS, defaults.rows),
        end_of_block=get_bool(params, KEY_END_OF_BLOCK, defaults.end_of_block),
        black_is_1=get_bool(params, KEY_BLACK_IS_1, defaults.black_is_1),
        damaged_rows_before_error=get_int(
            params, KEY_DAMAGED_ROWS_BEFORE_ERROR, defaults.damaged_rows_before_error
        ),
    )
    logger.debug(f"Fax decode parameters: {parsed}")
    return parsed
