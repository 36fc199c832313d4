"""
Value classification.

Every value bound in the variable store falls into exactly one
:class:`ValueKind`.  The writer and the engine branch on the kind instead
of sprinkling ``isinstance`` checks through the code.
"""

import datetime
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any


class ValueKind(Enum):
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    DATETIME = "datetime"
    TEXT = "text"
    LIST = "list"
    RECORD_ARRAY = "record_array"
    OTHER = "other"


def is_record_array(value: Any) -> bool:
    """Return True for a non-empty list/tuple made only of mappings."""
    if not isinstance(value, (list, tuple)) or not value:
        return False
    return all(isinstance(item, Mapping) for item in value)


def value_kind(value: Any) -> ValueKind:
    """Classify *value* into its :class:`ValueKind`."""
    if value is None:
        return ValueKind.NULL
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, (float, Decimal)):
        return ValueKind.FLOAT
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return ValueKind.DATETIME
    if isinstance(value, str):
        return ValueKind.TEXT
    if is_record_array(value):
        return ValueKind.RECORD_ARRAY
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    return ValueKind.OTHER


def render_text(value: Any) -> str:
    """Text form of *value*, used for partial substitutions and sheet names."""
    if value is None:
        return ""
    return str(value)
