"""Rule objects and per-kind converters used by `kestrel.Field`."""

from .base import CustomRule
from .core import Bounds, is_numeric, to_float, to_int, to_text
from .datetime import convert_date, convert_datetime, convert_time, convert_timestamp
from .membership import convert_enum
from .string import EmailRule

__all__ = [
    "CustomRule",
    "EmailRule",
    "Bounds",
    "is_numeric",
    "to_int",
    "to_float",
    "to_text",
    "convert_date",
    "convert_datetime",
    "convert_time",
    "convert_timestamp",
    "convert_enum",
]
