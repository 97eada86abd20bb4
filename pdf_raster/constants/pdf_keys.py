"""
PDF Dictionary Keys and Name Constants
"""

# Resource Dictionary Keys
KEY_RESOURCES = "/Resources"
KEY_XOBJECT = "/XObject"
KEY_PARENT = "/Parent"

# Object Types and Subtypes
KEY_TYPE = "/Type"
KEY_SUBTYPE = "/Subtype"
VAL_XOBJECT = "/XObject"
VAL_IMAGE = "/Image"
VAL_FORM = "/Form"

# Image Properties
KEY_WIDTH = "/Width"
KEY_HEIGHT = "/Height"
KEY_BITS_PER_COMPONENT = "/BitsPerComponent"
KEY_LENGTH = "/Length"
KEY_COLOR_SPACE = "/ColorSpace"
KEY_FILTER = "/Filter"
KEY_DECODE_PARMS = "/DecodeParms"

# Color Space Names
CS_DEVICE_RGB = "/DeviceRGB"
CS_DEVICE_GRAY = "/DeviceGray"
CS_DEVICE_CMYK = "/DeviceCMYK"
CS_INDEXED = "/Indexed"

# Filter Names (full and abbreviated forms)
FILTER_FLATE = "/FlateDecode"
FILTER_FLATE_ABBR = "/Fl"
FILTER_DCT = "/DCTDecode"
FILTER_DCT_ABBR = "/DCT"
FILTER_CCITT = "/CCITTFaxDecode"
FILTER_CCITT_ABBR = "/CCF"
FILTER_RUN_LENGTH = "/RunLengthDecode"
FILTER_RUN_LENGTH_ABBR = "/RL"
FILTER_ASCII85 = "/ASCII85Decode"
FILTER_ASCII85_ABBR = "/A85"
FILTER_ASCII_HEX = "/ASCIIHexDecode"
FILTER_ASCII_HEX_ABBR = "/AHx"

# CCITTFaxDecode Parameter Keys
KEY_K = "/K"
KEY_END_OF_LINE = "/EndOfLine"
KEY_ENCODED_BYTE_ALIGN = "/EncodedByteAlign"
KEY_COLUMNS = "/Columns"
KEY_ROWS = "/Rows"
KEY_END_OF_BLOCK = "/EndOfBlock"
KEY_BLACK_IS_1 = "/BlackIs1"
KEY_DAMAGED_ROWS_BEFORE_ERROR = "/DamagedRowsBeforeError"

# FlateDecode Predictor Parameter Keys
KEY_PREDICTOR = "/Predictor"
KEY_COLORS = "/Colors"
