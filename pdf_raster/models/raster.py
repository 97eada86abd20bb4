"""
Raster value types: pixel formats, palettes, decoded rasters, image
descriptors and fax decode parameters.

All types are immutable and built per extraction call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from PIL import Image

from pdf_raster.models.colorspace import ColorSpace, color_space_name

RGBTriple = Tuple[int, int, int]
Palette = Tuple[RGBTriple, ...]


class PixelFormat(Enum):
    """
    Storage layout of a decoded raster.

    Each value carries (bits_per_pixel, Pillow mode, Pillow raw unpack mode).
    24-bpp rows are stored blue-green-red.
    """
    INDEXED_1BPP = (1, "P", "P;1")
    INDEXED_4BPP = (4, "P", "P;4")
    INDEXED_8BPP = (8, "P", "P")
    RGB_24BPP = (24, "RGB", "BGR")

    @property
    def bits_per_pixel(self) -> int:
        return self.value[0]

    @property
    def pil_mode(self) -> str:
        return self.value[1]

    @property
    def raw_mode(self) -> str:
        return self.value[2]

    @property
    def is_indexed(self) -> bool:
        return self is not PixelFormat.RGB_24BPP

    def stride_for(self, width: int) -> int:
        """Bytes per row: ceil(width * bpp / 8), rows are byte aligned"""
        return (width * self.bits_per_pixel + 7) // 8


@dataclass(frozen=True)
class DecodedRaster:
    """
    Decoded pixel buffer plus its format metadata.

    The caller owns the returned value; decoders keep no reference to it.
    """
    width: int
    height: int
    format: PixelFormat
    pixels: bytes = field(repr=False)
    palette: Optional[Palette] = None

    @property
    def stride(self) -> int:
        return self.format.stride_for(self.width)

    def row(self, y: int) -> bytes:
        """Packed bytes of row y"""
        start = y * self.stride
        return self.pixels[start:start + self.stride]

    def to_image(self) -> Image.Image:
        """
        View the raster as a Pillow image.

        Indexed formats become mode 'P' images with the palette attached;
        24-bpp rasters become mode 'RGB' images.
        """
        image = Image.frombytes(
            self.format.pil_mode,
            (self.width, self.height),
            self.pixels,
            "raw",
            self.format.raw_mode,
            self.stride,
            1,
        )
        if self.format.is_indexed and self.palette:
            image.putpalette(bytes(component for entry in self.palette for component in entry))
        return image

    def __repr__(self) -> str:
        palette_info = f", palette={len(self.palette)}" if self.palette is not None else ""
        return f"DecodedRaster({self.width}x{self.height}, {self.format.name}{palette_info})"


@dataclass(frozen=True)
class ImageDescriptor:
    """
    Attributes of one image object, read once from the host.

    palette is resolved while the descriptor is built, and only for indexed
    color spaces over RGB.
    """
    width: int
    height: int
    bits_per_component: int
    length: int
    color_space: ColorSpace
    raw_stream: bytes = field(repr=False)
    palette: Optional[Palette] = None

    def __str__(self) -> str:
        return (
            f"{self.width}x{self.height} @ {self.bits_per_component}bpc "
            f"{color_space_name(self.color_space)}"
        )


@dataclass(frozen=True)
class FaxDecodeParameters:
    """CCITTFaxDecode parameters with their PDF defaults"""
    k: int = 0
    end_of_line: bool = False
    encoded_byte_align: bool = False
    columns: int = 1728
    rows: int = 0
    end_of_block: bool = True
    black_is_1: bool = False
    damaged_rows_before_error: int = 0
