import io
import struct
import zlib

import pikepdf
import pytest
from pikepdf import Array, Dictionary, Name
from PIL import Image, ImageDraw


@pytest.fixture
def pdf():
    document = pikepdf.new()
    yield document
    document.close()


@pytest.fixture
def make_image(pdf):
    """Build an image XObject stream holding data exactly as given"""
    def _make_image(data, width, height, bits_per_component=8, color_space='/DeviceRGB',
                    filter_='/FlateDecode', decode_parms=None, **extra):
        stream = pikepdf.Stream(pdf, data)
        stream[Name.Type] = Name.XObject
        stream[Name.Subtype] = Name.Image
        stream[Name.Width] = width
        stream[Name.Height] = height
        if bits_per_component is not None:
            stream[Name.BitsPerComponent] = bits_per_component
        if color_space is not None:
            stream[Name.ColorSpace] = Name(color_space) if isinstance(color_space, str) else color_space
        if filter_ is not None:
            if isinstance(filter_, (list, tuple)):
                stream[Name.Filter] = Array([Name(name) for name in filter_])
            else:
                stream[Name.Filter] = Name(filter_)
        if decode_parms is not None:
            stream[Name.DecodeParms] = decode_parms
        for key, value in extra.items():
            stream[Name('/' + key)] = value
        return pdf.make_indirect(stream)
    return _make_image


@pytest.fixture
def indexed_rgb():
    """Four-entry indexed color space over DeviceRGB with an inline lookup"""
    lookup = bytes([0, 0, 0, 255, 0, 0, 0, 255, 0, 0, 0, 255])
    return Array([Name.Indexed, Name.DeviceRGB, 3, pikepdf.String(lookup)])


@pytest.fixture
def add_page(pdf):
    """Append a page whose resources reference the given XObjects"""
    def _add_page(xobjects):
        page = pdf.add_blank_page(page_size=(612, 792))
        page.obj[Name.Resources] = Dictionary(XObject=Dictionary(xobjects))
        return page
    return _add_page


def flate(data):
    return zlib.compress(bytes(data))


def jpeg_bytes(mode='RGB', size=(4, 2), color=(200, 30, 10)):
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format='JPEG', quality=95)
    return buffer.getvalue()


def group4_strip(width=16, height=8):
    """
    Group 4 data whose top half is coded as white runs and bottom half as
    black runs (Pillow writes its black pixels as fax white).

    Returns:
        (compressed strip bytes, width, height)
    """
    image = Image.new('1', (width, height), 1)
    ImageDraw.Draw(image).rectangle([0, 0, width - 1, height // 2 - 1], fill=0)
    buffer = io.BytesIO()
    image.save(buffer, format='TIFF', compression='group4')
    buffer.seek(0)
    tiff = Image.open(buffer)
    offsets = tiff.tag_v2[273]
    counts = tiff.tag_v2[279]
    offset = offsets[0] if isinstance(offsets, tuple) else offsets
    count = counts[0] if isinstance(counts, tuple) else counts
    return buffer.getvalue()[offset:offset + count], width, height


def oversized_jpeg(width=60000, height=60000):
    """Valid JPEG whose frame header declares far larger dimensions"""
    data = bytearray(jpeg_bytes())
    frame = data.index(b'\xff\xc0')
    # Marker (2), segment length (2), precision (1), then height and width
    data[frame + 5:frame + 9] = struct.pack('>HH', height, width)
    return bytes(data)
