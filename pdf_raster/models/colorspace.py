"""
Color Space Model

Closed set of color space variants used by the raster decoders, plus the
parser that builds them from a /ColorSpace entry.

    Gray                     /DeviceGray
    RGB                      /DeviceRGB
    CMYK                     /DeviceCMYK (parses, but never decodes)
    Indexed(base, hival, lookup)
                             [/Indexed base hival lookup]
"""

import logging
from dataclasses import dataclass
from typing import Any, Union

from pdf_raster.constants.pdf_keys import (
    CS_DEVICE_CMYK,
    CS_DEVICE_GRAY,
    CS_DEVICE_RGB,
    CS_INDEXED,
)
from pdf_raster.utils.pdf_objects import is_array, is_name, is_number, name_of
from pdf_raster.utils.validation import UnsupportedColorSpace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Gray:
    @property
    def is_indexed(self) -> bool:
        return False

    @property
    def is_rgb(self) -> bool:
        return False


@dataclass(frozen=True)
class RGB:
    @property
    def is_indexed(self) -> bool:
        return False

    @property
    def is_rgb(self) -> bool:
        return True


@dataclass(frozen=True)
class CMYK:
    @property
    def is_indexed(self) -> bool:
        return False

    @property
    def is_rgb(self) -> bool:
        return False


@dataclass(frozen=True)
class Indexed:
    """
    Indexed color space.

    Attributes:
        base: Color space the palette entries are expressed in
        high_value: Maximum valid index (palette holds high_value + 1 entries)
        palette_source: Unresolved lookup, either an inline string or a
            stream reached through a reference
    """
    base: 'ColorSpace'
    high_value: int
    palette_source: Any

    @property
    def is_indexed(self) -> bool:
        return True

    @property
    def is_rgb(self) -> bool:
        return isinstance(self.base, RGB)

    @property
    def colors(self) -> int:
        """Number of palette entries"""
        return self.high_value + 1


ColorSpace = Union[Gray, RGB, CMYK, Indexed]

_NAMED_COLOR_SPACES = {
    CS_DEVICE_RGB: RGB,
    CS_DEVICE_GRAY: Gray,
    CS_DEVICE_CMYK: CMYK,
}


def parse_color_space(item: Any) -> ColorSpace:
    """
    Parse a /ColorSpace entry.

    Args:
        item: A name, an array, or a reference to either

    Returns:
        The parsed ColorSpace variant

    Raises:
        UnsupportedColorSpace: For unknown names and unrecognized array shapes
    """
    if item is None:
        raise UnsupportedColorSpace(None, "no color space given")

    if is_name(item):
        name = name_of(item)
        factory = _NAMED_COLOR_SPACES.get(name)
        if factory is None:
            raise UnsupportedColorSpace(name)
        return factory()

    if is_array(item):
        return _parse_indexed(item)

    raise UnsupportedColorSpace(repr(item), "expected a name or an array")


def _parse_indexed(array: Any) -> Indexed:
    """Parse the four-element [/Indexed base hival lookup] form"""
    family = name_of(array)
    if family != CS_INDEXED or len(array) != 4:
        raise UnsupportedColorSpace(
            family, f"array color spaces must be [{CS_INDEXED} base hival lookup]"
        )

    base = parse_color_space(array[1])
    if not is_number(array[2]):
        raise UnsupportedColorSpace(family, f"hival {array[2]!r} is not an integer")
    high_value = int(array[2])

    logger.debug(f"Parsed indexed color space over {type(base).__name__} with {high_value + 1} colors")
    return Indexed(base=base, high_value=high_value, palette_source=array[3])


def color_space_name(color_space: ColorSpace) -> str:
    """Readable name for logs and reports"""
    if isinstance(color_space, Indexed):
        return f"Indexed({color_space_name(color_space.base)}, {color_space.colors})"
    return type(color_space).__name__
