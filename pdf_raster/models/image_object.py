"""
Immutable view of an image XObject.

Mimics the parts of a PDF stream the decoders need: dictionary lookups
through get(), the declared filter, the decode parameters and the current
stream bytes. Applying a generic filter produces a new view instead of
modifying the host object.
"""

from dataclasses import dataclass, field, replace
from typing import Any

from pikepdf import PdfError

from pdf_raster.constants.pdf_keys import KEY_DECODE_PARMS, KEY_FILTER
from pdf_raster.utils.pdf_objects import get_value, is_array, is_stream, name_of
from pdf_raster.utils.validation import StreamDecodeError


def read_stream_bytes(stream: Any) -> bytes:
    """
    Raw (still filtered) bytes of a stream.

    Raises:
        StreamDecodeError: If the object has no stream data or it cannot be read
    """
    filter_name = str(name_of(get_value(stream, KEY_FILTER)))
    if not is_stream(stream):
        raise StreamDecodeError(filter_name, f"{type(stream).__name__} object has no stream data")
    try:
        return bytes(stream.read_raw_bytes())
    except PdfError as e:
        raise StreamDecodeError(filter_name, str(e))


@dataclass(frozen=True)
class ImageObject:
    attributes: Any = field(repr=False)
    data: bytes = field(repr=False)
    filter: Any = None
    decode_parms: Any = None

    @classmethod
    def from_stream(cls, stream: Any) -> 'ImageObject':
        """Snapshot a pikepdf Stream: its raw (still filtered) bytes and filter entries"""
        return cls(
            attributes=stream,
            data=read_stream_bytes(stream),
            filter=get_value(stream, KEY_FILTER),
            decode_parms=get_value(stream, KEY_DECODE_PARMS),
        )

    def get(self, key: str, default: Any = None) -> Any:
        if key == KEY_FILTER:
            return self.filter if self.filter is not None else default
        if key == KEY_DECODE_PARMS:
            return self.decode_parms if self.decode_parms is not None else default
        return get_value(self.attributes, key, default)

    def decode_parms_at(self, index: int) -> Any:
        """Decode parameters for the filter at position index of the chain"""
        if is_array(self.decode_parms) or isinstance(self.decode_parms, (list, tuple)):
            if 0 <= index < len(self.decode_parms):
                return self.decode_parms[index]
            return None
        return self.decode_parms

    def with_filter(self, filter_name: str, data: bytes, decode_parms: Any = None) -> 'ImageObject':
        """New view declaring a single filter over data; other attributes unchanged"""
        return replace(self, filter=filter_name, data=data, decode_parms=decode_parms)
