"""
Host Object Helpers

Pure, stateless accessors over pikepdf objects. pikepdf resolves indirect
references on access, so a reference to a name or array already behaves as
that name or array here.
"""

import logging
from decimal import Decimal
from typing import Any, List, Optional

from pikepdf import Array, Dictionary, Name, Stream, String

logger = logging.getLogger(__name__)


def is_name(item: Any) -> bool:
    return isinstance(item, Name)


def is_array(item: Any) -> bool:
    return isinstance(item, Array)


def is_string(item: Any) -> bool:
    return isinstance(item, (String, bytes))


def is_stream(item: Any) -> bool:
    return isinstance(item, Stream)


def is_number(item: Any) -> bool:
    """Integers and reals as pikepdf returns them; booleans are not numbers"""
    return isinstance(item, (int, float, Decimal)) and not isinstance(item, bool)


def is_dictionary(item: Any) -> bool:
    return isinstance(item, Dictionary)


def name_of(item: Any) -> Optional[str]:
    """
    Get the '/Name' form of a name object.

    Arrays report the name of their first element, which is how color spaces
    and filter chains identify themselves in error messages.
    """
    if item is None:
        return None
    if isinstance(item, Name):
        return str(item)
    if isinstance(item, str) and item.startswith('/'):
        return item
    if isinstance(item, Array) and len(item) > 0:
        return name_of(item[0])
    return None


def get_value(obj: Any, key: str, default: Any = None) -> Any:
    """Read a key from a dictionary or stream dictionary, or return default"""
    if obj is None:
        return default
    try:
        if key in obj:
            return obj[key]
    except (TypeError, ValueError) as e:
        logger.debug(f"Cannot read {key} from {type(obj).__name__}: {e}")
    return default


def get_int(obj: Any, key: str, default: Optional[int] = None) -> Optional[int]:
    value = get_value(obj, key)
    if value is None:
        return default
    if not is_number(value):
        logger.warning(f"Ignoring non-integer value for {key}: {value!r}")
        return default
    return int(value)


def get_bool(obj: Any, key: str, default: bool) -> bool:
    value = get_value(obj, key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    logger.warning(f"Ignoring non-boolean value for {key}: {value!r}")
    return default


def filter_names(value: Any) -> List[Optional[str]]:
    """
    Normalize a /Filter value into a list of names.

    A single name becomes a one-element list. Array elements that are not
    names become None so callers can report the malformed entry.
    """
    if value is None:
        return []
    if isinstance(value, (Array, list, tuple)):
        return [name_of(item) if not isinstance(item, Array) else None for item in value]
    return [name_of(value)]
