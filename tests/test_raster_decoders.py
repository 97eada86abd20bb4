import pytest
from pikepdf import Array, Dictionary, Name, String

from conftest import flate, group4_strip, jpeg_bytes, oversized_jpeg
from pdf_raster.extractors.raster_decoders import (
    build_image_descriptor,
    copy_rows,
    decode_ccitt_raster,
    decode_dct_raster,
    decode_flate_raster,
    rgb_to_bgr,
)
from pdf_raster.models.colorspace import RGB, Indexed
from pdf_raster.models.image_object import ImageObject
from pdf_raster.models.raster import PixelFormat
from pdf_raster.utils.palette import BLACK, WHITE
from pdf_raster.utils.validation import (
    MissingRequiredAttribute,
    PaletteTooShort,
    StreamDecodeError,
    UnsupportedBitDepth,
    UnsupportedEncoding,
)


def view(stream):
    return ImageObject.from_stream(stream)


# --- Descriptor ---

def test_descriptor_resolves_rgb_palette(make_image, indexed_rgb):
    descriptor = build_image_descriptor(view(make_image(flate(b'\x01\x02'), 2, 1, color_space=indexed_rgb)))

    assert descriptor.width == 2
    assert descriptor.height == 1
    assert descriptor.bits_per_component == 8
    assert isinstance(descriptor.color_space, Indexed)
    assert descriptor.palette == ((0, 0, 0), (255, 0, 0), (0, 255, 0), (0, 0, 255))


def test_descriptor_defaults_to_rgb(make_image):
    descriptor = build_image_descriptor(view(make_image(flate(b'\x00' * 3), 1, 1, color_space=None)))
    assert descriptor.color_space == RGB()
    assert descriptor.palette is None


def test_descriptor_requires_dimensions(make_image):
    stream = make_image(flate(b'\x00'), 1, 1, color_space='/DeviceGray')
    del stream[Name.Width]
    with pytest.raises(MissingRequiredAttribute) as excinfo:
        build_image_descriptor(view(stream))
    assert excinfo.value.key == '/Width'


def test_descriptor_requires_bits_per_component(make_image):
    stream = make_image(flate(b'\x00'), 1, 1, bits_per_component=None, color_space='/DeviceGray')
    with pytest.raises(MissingRequiredAttribute):
        build_image_descriptor(view(stream))


def test_forced_bits_per_component(make_image):
    stream = make_image(b'', 8, 1, bits_per_component=None, color_space='/DeviceGray')
    assert build_image_descriptor(view(stream), bits_per_component=1).bits_per_component == 1


# --- Buffer helpers ---

def test_rgb_to_bgr():
    assert rgb_to_bgr(bytes([1, 2, 3, 4, 5, 6, 7])) == bytes([3, 2, 1, 6, 5, 4, 7])


def test_copy_rows_pads_short_data():
    assert copy_rows(b'\x01\x02\x03', 2, 2, PixelFormat.INDEXED_8BPP) == b'\x01\x02\x03\x00'


# --- FlateDecode ---

def test_indexed_eight_bit(make_image, indexed_rgb):
    raster = decode_flate_raster(view(make_image(flate(b'\x01\x02'), 2, 1, color_space=indexed_rgb)))

    assert raster.format is PixelFormat.INDEXED_8BPP
    assert (raster.width, raster.height) == (2, 1)
    assert raster.pixels == b'\x01\x02'
    assert raster.palette[1] == (255, 0, 0)
    assert raster.palette[2] == (0, 255, 0)


def test_indexed_four_bit_rows(make_image, indexed_rgb):
    data = bytes([0x12, 0x30, 0x21, 0x00])
    raster = decode_flate_raster(view(make_image(flate(data), 3, 2, bits_per_component=4, color_space=indexed_rgb)))

    assert raster.format is PixelFormat.INDEXED_4BPP
    assert raster.stride == 2
    assert raster.row(1) == bytes([0x21, 0x00])


def test_two_bit_gray(make_image):
    raster = decode_flate_raster(view(make_image(flate(bytes([0x1B, 0x00])), 4, 1, bits_per_component=2,
                                                 color_space='/DeviceGray')))

    assert raster.format is PixelFormat.INDEXED_4BPP
    assert raster.palette == ((0, 0, 0), (85, 85, 85), (170, 170, 170), (255, 255, 255))
    assert raster.pixels == bytes([0x1B, 0x00])


def test_one_bit_gray(make_image):
    raster = decode_flate_raster(view(make_image(flate(bytes([0xF0, 0x0F])), 8, 2, bits_per_component=1,
                                                 color_space='/DeviceGray')))

    assert raster.format is PixelFormat.INDEXED_1BPP
    assert raster.pixels == bytes([0xF0, 0x0F])
    assert raster.palette == (BLACK, WHITE)


def test_eight_bit_gray(make_image):
    raster = decode_flate_raster(view(make_image(flate(bytes([0, 128, 255])), 3, 1, color_space='/DeviceGray')))

    assert raster.format is PixelFormat.INDEXED_8BPP
    assert raster.pixels == bytes([0, 128, 255])
    assert len(raster.palette) == 256


def test_rgb_is_stored_bgr(make_image):
    raster = decode_flate_raster(view(make_image(flate(bytes([255, 0, 0, 0, 0, 255])), 2, 1)))

    assert raster.format is PixelFormat.RGB_24BPP
    assert raster.pixels == bytes([0, 0, 255, 255, 0, 0])
    assert raster.palette is None
    image = raster.to_image()
    assert image.getpixel((0, 0)) == (255, 0, 0)
    assert image.getpixel((1, 0)) == (0, 0, 255)


def test_flate_predictor_from_decode_parms(make_image):
    encoded = bytes([0, 10, 20, 2, 1, 1])
    parms = Dictionary(Predictor=12, Columns=2)
    raster = decode_flate_raster(view(make_image(flate(encoded), 2, 2, color_space='/DeviceGray',
                                                 decode_parms=parms)))
    assert raster.pixels == bytes([10, 20, 11, 21])


def test_cmyk_is_not_decoded(make_image):
    with pytest.raises(UnsupportedEncoding):
        decode_flate_raster(view(make_image(flate(bytes(4)), 1, 1, color_space='/DeviceCMYK')))


def test_indexed_over_gray_is_not_decoded(make_image):
    color_space = Array([Name.Indexed, Name.DeviceGray, 1, String(b'\x00\xff')])
    with pytest.raises(UnsupportedEncoding):
        decode_flate_raster(view(make_image(flate(b'\x00'), 1, 1, color_space=color_space)))


def test_low_depth_rgb_is_not_decoded(make_image):
    with pytest.raises(UnsupportedEncoding):
        decode_flate_raster(view(make_image(flate(b'\x00'), 8, 1, bits_per_component=1)))


def test_four_bit_gray_has_no_format(make_image):
    with pytest.raises(UnsupportedBitDepth):
        decode_flate_raster(view(make_image(flate(b'\x00'), 2, 1, bits_per_component=4,
                                            color_space='/DeviceGray')))


def test_short_palette_fails(make_image):
    color_space = Array([Name.Indexed, Name.DeviceRGB, 3, String(bytes(6))])
    with pytest.raises(PaletteTooShort):
        decode_flate_raster(view(make_image(flate(b'\x00'), 1, 1, color_space=color_space)))


def test_corrupt_flate_data(make_image):
    with pytest.raises(StreamDecodeError):
        decode_flate_raster(view(make_image(b'\x00garbage', 1, 1, color_space='/DeviceGray')))


# --- DCTDecode ---

def test_rgb_jpeg(make_image):
    raster = decode_dct_raster(view(make_image(jpeg_bytes(), 4, 2, filter_='/DCTDecode')))

    assert raster.format is PixelFormat.RGB_24BPP
    assert (raster.width, raster.height) == (4, 2)
    assert len(raster.pixels) == 4 * 2 * 3
    red, green, blue = raster.to_image().getpixel((0, 0))
    assert red > 150 and green < 80 and blue < 60


def test_gray_jpeg(make_image):
    data = jpeg_bytes(mode='L', color=128)
    raster = decode_dct_raster(view(make_image(data, 4, 2, color_space='/DeviceGray', filter_='/DCTDecode')))

    assert raster.format is PixelFormat.INDEXED_8BPP
    assert len(raster.palette) == 256
    assert abs(raster.pixels[0] - 128) < 4


def test_declared_cmyk_jpeg(make_image):
    with pytest.raises(UnsupportedEncoding):
        decode_dct_raster(view(make_image(jpeg_bytes(), 4, 2, color_space='/DeviceCMYK', filter_='/DCTDecode')))


def test_cmyk_jpeg_content(make_image):
    data = jpeg_bytes(mode='CMYK', color=(0, 255, 255, 0))
    with pytest.raises(UnsupportedEncoding):
        decode_dct_raster(view(make_image(data, 4, 2, filter_='/DCTDecode')))


def test_invalid_jpeg(make_image):
    with pytest.raises(StreamDecodeError):
        decode_dct_raster(view(make_image(b'not a jpeg', 4, 2, filter_='/DCTDecode')))


def test_oversized_jpeg_is_rejected(make_image):
    with pytest.raises(UnsupportedEncoding):
        decode_dct_raster(view(make_image(oversized_jpeg(), 4, 2, filter_='/DCTDecode')))


# --- CCITTFaxDecode ---

def _assert_two_bands(raster):
    stride = raster.stride
    top = raster.row(0)
    bottom = raster.row(raster.height - 1)
    assert len(top) == stride
    assert all(raster.row(y) == top for y in range(raster.height // 2))
    assert all(raster.row(y) == bottom for y in range(raster.height // 2, raster.height))
    assert set(top) <= {0x00, 0xFF}
    assert set(bottom) <= {0x00, 0xFF}
    assert top != bottom


def test_fax_without_decode_parms(make_image):
    strip, width, height = group4_strip()
    stream = make_image(strip, width, height, bits_per_component=None, color_space=None,
                        filter_='/CCITTFaxDecode')
    raster = decode_ccitt_raster(view(stream))

    assert raster.format is PixelFormat.INDEXED_1BPP
    assert (raster.width, raster.height) == (width, height)
    assert raster.palette == (WHITE, BLACK)
    _assert_two_bands(raster)


def test_fax_black_is_1(make_image):
    strip, width, height = group4_strip()
    parms = Dictionary(K=-1, Columns=width, Rows=height, BlackIs1=True)
    stream = make_image(strip, width, height, bits_per_component=1, color_space='/DeviceGray',
                        filter_='/CCITTFaxDecode', decode_parms=parms)
    raster = decode_ccitt_raster(view(stream))

    assert raster.palette == (BLACK, WHITE)
    _assert_two_bands(raster)


def test_fax_palette_flips_display(make_image):
    strip, width, height = group4_strip()
    plain = decode_ccitt_raster(view(make_image(strip, width, height, bits_per_component=None,
                                                color_space=None, filter_='/CCITTFaxDecode')))
    flipped = decode_ccitt_raster(view(make_image(strip, width, height, bits_per_component=None,
                                                  color_space=None, filter_='/CCITTFaxDecode',
                                                  decode_parms=Dictionary(K=-1, BlackIs1=True))))

    assert plain.pixels == flipped.pixels
    plain_image = plain.to_image().convert('RGB')
    flipped_image = flipped.to_image().convert('RGB')
    assert plain_image.getpixel((0, 0)) != flipped_image.getpixel((0, 0))


def test_fax_rejects_cmyk(make_image):
    strip, width, height = group4_strip()
    with pytest.raises(UnsupportedEncoding):
        decode_ccitt_raster(view(make_image(strip, width, height, bits_per_component=None,
                                            color_space='/DeviceCMYK', filter_='/CCITTFaxDecode')))


def _fax_raster(make_image, decode_parms=None):
    strip, width, height = group4_strip()
    stream = make_image(strip, width, height, bits_per_component=None, color_space=None,
                        filter_='/CCITTFaxDecode', decode_parms=decode_parms)
    return decode_ccitt_raster(view(stream))


def test_fax_white_runs_are_zero_bits(make_image):
    raster = _fax_raster(make_image)

    assert raster.row(0) == b'\x00\x00'
    assert raster.row(raster.height - 1) == b'\xff\xff'
    image = raster.to_image().convert('RGB')
    assert image.getpixel((0, 0)) == WHITE
    assert image.getpixel((0, raster.height - 1)) == BLACK


def test_fax_black_is_1_shows_zero_bits_black(make_image):
    raster = _fax_raster(make_image, Dictionary(K=-1, BlackIs1=True))

    assert raster.row(0) == b'\x00\x00'
    image = raster.to_image().convert('RGB')
    assert image.getpixel((0, 0)) == BLACK
    assert image.getpixel((0, raster.height - 1)) == WHITE
