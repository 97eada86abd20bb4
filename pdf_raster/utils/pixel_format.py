"""
Pixel Format Mapping

Maps bits per component and color space to the storage layout of the
decoded raster.
"""

from pdf_raster.models.colorspace import ColorSpace, Gray, RGB
from pdf_raster.models.raster import PixelFormat
from pdf_raster.utils.validation import UnsupportedBitDepth


def map_pixel_format(bits_per_component: int, color_space: ColorSpace, is_indexed: bool) -> PixelFormat:
    """
    Choose the PixelFormat for an image.

    Valid component depths are 1, 2, 4 and 8. 2-bit samples are kept in
    4-bit slots, which is how rasters with that depth have always been laid
    out here.

    Raises:
        UnsupportedBitDepth: For any combination without a storage layout
    """
    if bits_per_component == 1:
        return PixelFormat.INDEXED_1BPP
    if bits_per_component == 2:
        return PixelFormat.INDEXED_4BPP
    if bits_per_component == 4 and is_indexed:
        return PixelFormat.INDEXED_4BPP
    if bits_per_component == 8:
        if is_indexed:
            return PixelFormat.INDEXED_8BPP
        if isinstance(color_space, Gray):
            return PixelFormat.INDEXED_8BPP
        if isinstance(color_space, RGB):
            return PixelFormat.RGB_24BPP

    raise UnsupportedBitDepth(
        bits_per_component,
        f"indexed={is_indexed}, colorspace={type(color_space).__name__}",
    )
