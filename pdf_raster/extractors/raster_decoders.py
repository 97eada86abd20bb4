"""
Raster Decoders

One decoder per terminal filter:

- DCTDecode: the stream is a complete JPEG, decoded by Pillow as is
- FlateDecode: inflated raw samples laid out into the pixel format chosen
  from bits per component and color space
- CCITTFaxDecode: the stream is wrapped in a synthesized Group 4 TIFF and
  decoded by Pillow's libtiff codec scanline by scanline
"""

import io
import logging
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from pdf_raster.constants.pdf_keys import (
    CS_DEVICE_CMYK,
    FILTER_CCITT,
    FILTER_DCT,
    KEY_BITS_PER_COMPONENT,
    KEY_COLOR_SPACE,
    KEY_HEIGHT,
    KEY_LENGTH,
    KEY_WIDTH,
)
from pdf_raster.extractors.stream_filters import decode_flate
from pdf_raster.models.colorspace import (
    CMYK,
    ColorSpace,
    Gray,
    Indexed,
    RGB,
    color_space_name,
    parse_color_space,
)
from pdf_raster.models.image_object import ImageObject
from pdf_raster.models.raster import DecodedRaster, ImageDescriptor, PixelFormat
from pdf_raster.utils.fax_params import parse_fax_parameters
from pdf_raster.utils.palette import bilevel_palette, gray_ramp, resolve_palette
from pdf_raster.utils.pdf_objects import get_int, name_of
from pdf_raster.utils.pixel_format import map_pixel_format
from pdf_raster.utils.tiff_header import build_tiff_container
from pdf_raster.utils.validation import (
    StreamDecodeError,
    UnsupportedEncoding,
    require_int,
)

logger = logging.getLogger(__name__)


# --- Descriptor ---

def build_image_descriptor(image: ImageObject, bits_per_component: Optional[int] = None) -> ImageDescriptor:
    """
    Read the image attributes the decoders need.

    Args:
        image: Image object view
        bits_per_component: Forced depth (fax images are always 1 bit)

    Raises:
        MissingRequiredAttribute: If /Width, /Height or /BitsPerComponent is absent
        UnsupportedColorSpace: If /ColorSpace cannot be parsed
    """
    width = require_int(image.get(KEY_WIDTH), KEY_WIDTH)
    height = require_int(image.get(KEY_HEIGHT), KEY_HEIGHT)
    if bits_per_component is None:
        bits_per_component = require_int(image.get(KEY_BITS_PER_COMPONENT), KEY_BITS_PER_COMPONENT)

    raw_color_space = image.get(KEY_COLOR_SPACE)
    # Default to RGB Color Space
    color_space = parse_color_space(raw_color_space) if raw_color_space is not None else RGB()

    palette = None
    if isinstance(color_space, Indexed) and color_space.is_rgb:
        palette = resolve_palette(color_space.palette_source, color_space.colors)

    length = get_int(image.attributes, KEY_LENGTH)
    if length is None:
        length = len(image.data)

    return ImageDescriptor(
        width=width,
        height=height,
        bits_per_component=bits_per_component,
        length=length,
        color_space=color_space,
        raw_stream=image.data,
        palette=palette,
    )


def reject_unsupported_color_space(color_space: ColorSpace) -> None:
    """
    Raises:
        UnsupportedEncoding: For CMYK, and for indexed spaces over anything but RGB
    """
    if isinstance(color_space, CMYK):
        raise UnsupportedEncoding("CMYK encoded images are not supported")
    if isinstance(color_space, Indexed) and not color_space.is_rgb:
        raise UnsupportedEncoding(
            f"The indexed colorspace '{color_space_name(color_space.base)}' is not supported"
        )


# --- Pixel Buffer Helpers ---

def rgb_to_bgr(data: bytes) -> bytes:
    """Swap the first and third byte of every 3-byte pixel"""
    usable = len(data) - len(data) % 3
    pixels = np.frombuffer(data, dtype=np.uint8, count=usable).reshape(-1, 3)
    return pixels[:, ::-1].tobytes() + bytes(data[usable:])


def copy_rows(data: bytes, width: int, height: int, pixel_format: PixelFormat) -> bytes:
    """
    Lay out packed source rows into a buffer with the format's stride.

    Source rows are read at the target format's stride, so 2-bit samples
    stored in 4-bit slots are copied unexpanded.
    """
    stride = pixel_format.stride_for(width)
    buffer = bytearray(height * stride)

    required = stride * height
    if len(data) < required:
        logger.warning(f"Image data is short: {len(data)} bytes for {required} expected, padding with zeros")

    for y in range(height):
        row = data[y * stride:(y + 1) * stride]
        if not row:
            break
        buffer[y * stride:y * stride + len(row)] = row
    return bytes(buffer)


# --- Decoders ---

def decode_dct_raster(image: ImageObject) -> DecodedRaster:
    """
    Decode a DCTDecode (JPEG) image.

    The stream bytes are a self-contained JPEG; the result keeps whatever
    layout Pillow reports, mapped to the closest PixelFormat.
    """
    if name_of(image.get(KEY_COLOR_SPACE)) == CS_DEVICE_CMYK:
        raise UnsupportedEncoding("CMYK encoded images are not supported")

    try:
        pil_image = Image.open(io.BytesIO(image.data))
        pil_image.load()
    except Image.DecompressionBombError as e:
        raise UnsupportedEncoding(f"JPEG image is too large to decode: {e}")
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise StreamDecodeError(FILTER_DCT, str(e))

    if pil_image.mode == 'CMYK':
        raise UnsupportedEncoding("CMYK encoded images are not supported")

    if pil_image.mode == 'L':
        return DecodedRaster(
            width=pil_image.width,
            height=pil_image.height,
            format=PixelFormat.INDEXED_8BPP,
            pixels=pil_image.tobytes(),
            palette=gray_ramp(8),
        )

    if pil_image.mode != 'RGB':
        logger.debug(f"Converting JPEG from {pil_image.mode} to RGB")
        pil_image = pil_image.convert('RGB')

    return DecodedRaster(
        width=pil_image.width,
        height=pil_image.height,
        format=PixelFormat.RGB_24BPP,
        pixels=pil_image.tobytes('raw', 'BGR'),
    )


def decode_flate_raster(image: ImageObject) -> DecodedRaster:
    """
    Decode a FlateDecode image of raw samples.

    Raises:
        UnsupportedEncoding: For CMYK, indexed over non-RGB, and plain RGB
            below 8 bits per component
        UnsupportedBitDepth: For depths without a pixel format
    """
    descriptor = build_image_descriptor(image)
    color_space = descriptor.color_space
    reject_unsupported_color_space(color_space)

    # FlateDecode can be either indexed or a traditional ColorSpace
    pixel_format = map_pixel_format(descriptor.bits_per_component, color_space, color_space.is_indexed)

    if isinstance(color_space, Indexed):
        palette = descriptor.palette
    elif isinstance(color_space, Gray):
        palette = gray_ramp(descriptor.bits_per_component)
    elif pixel_format.is_indexed:
        raise UnsupportedEncoding(
            f"{descriptor.bits_per_component}-bit {color_space_name(color_space)} images are not supported"
        )
    else:
        palette = None

    data = decode_flate(descriptor.raw_stream, image.decode_parms)

    # Rasters store 24-bit pixels in BGR order, the PDF stream is RGB
    if pixel_format is PixelFormat.RGB_24BPP:
        data = rgb_to_bgr(data)

    logger.debug(f"Decoded FlateDecode image {descriptor} as {pixel_format.name}")
    return DecodedRaster(
        width=descriptor.width,
        height=descriptor.height,
        format=pixel_format,
        pixels=copy_rows(data, descriptor.width, descriptor.height, pixel_format),
        palette=palette,
    )


def decode_ccitt_raster(image: ImageObject) -> DecodedRaster:
    """
    Decode a CCITTFaxDecode image.

    Bit 1 of the result is the fax codec's black; the palette decides how
    that is displayed according to /BlackIs1.
    """
    descriptor = build_image_descriptor(image, bits_per_component=1)
    if isinstance(descriptor.color_space, CMYK):
        raise UnsupportedEncoding("CMYK encoded images are not supported")

    params = parse_fax_parameters(image.decode_parms)
    container = build_tiff_container(descriptor, descriptor.raw_stream)

    try:
        pil_image = Image.open(io.BytesIO(container))
        pil_image.load()
    except Image.DecompressionBombError as e:
        raise UnsupportedEncoding(f"Fax image is too large to decode: {e}")
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise StreamDecodeError(FILTER_CCITT, str(e))

    if pil_image.mode != '1':
        pil_image = pil_image.convert('1')

    # Packed scanlines, MSB first, with fax black as 1
    scanlines = pil_image.tobytes('raw', '1;I')

    logger.debug(f"Decoded CCITT image {descriptor} (K={params.k}, BlackIs1={params.black_is_1})")
    return DecodedRaster(
        width=descriptor.width,
        height=descriptor.height,
        format=PixelFormat.INDEXED_1BPP,
        pixels=copy_rows(scanlines, descriptor.width, descriptor.height, PixelFormat.INDEXED_1BPP),
        palette=bilevel_palette(params.black_is_1),
    )
