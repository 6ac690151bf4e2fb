"""Numeric parsing and min/max/range bounds shared by field kinds."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any

from ..exceptions import FieldError

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^\s*[+-]?\d+\s*$")


def is_numeric(value: Any) -> bool:
    """
    Return True for ints, floats and numeric strings.

    Booleans are not numeric. Strings may carry a sign, a decimal part, an
    exponent and surrounding whitespace (``" 1e3 "``, ``"-10.5"``), but not
    underscores, ``inf`` or ``nan``. Strings too large for a float
    (``"1e400"``) are not numeric either.
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value == value and value not in (float("inf"), float("-inf"))
    if isinstance(value, str):
        return _NUMERIC_RE.match(value) is not None and math.isfinite(float(value))
    return False


def to_int(value: Any) -> int:
    """Truncate a numeric value toward zero. Caller checks `is_numeric` first."""
    if isinstance(value, str):
        if _INTEGER_RE.match(value):
            return int(value)
        return int(float(value))
    return int(value)


def to_float(value: Any) -> float:
    """Convert a numeric value to float. Caller checks `is_numeric` first."""
    return float(value)


def to_text(value: Any) -> str:
    """
    Cast a scalar to the string stored in text columns.

    Integral floats drop their ``.0`` (``50.0`` -> ``"50"``) and booleans
    map to ``"1"``/``""``.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else ""
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    return str(value)


@dataclass
class Bounds:
    """
    The min/max/range limits declared on a field.

    For numeric kinds each limit clamps; for string kinds `min` and the low
    end of `range` reject short values while `max` and the high end of
    `range` truncate. All declared limits apply in sequence: min, then max,
    then range.
    """

    min: int | float | None = None
    max: int | float | None = None
    range: tuple[int | float, int | float] | None = None

    def clamp(self, value: int | float) -> int | float:
        if self.min is not None:
            value = max(self.min, value)
        if self.max is not None:
            value = min(self.max, value)
        if self.range is not None:
            low, high = self.range
            value = max(low, value)
            value = min(high, value)
        return value

    def clamp_int(self, value: int) -> int:
        return int(self.clamp(value))

    def clamp_float(self, value: float) -> float:
        return float(self.clamp(value))

    def bound_length(self, value: str) -> str:
        if self.min is not None and len(value) < self.min:
            raise FieldError("Invalid min length")
        if self.max is not None:
            value = value[: int(self.max)]
        if self.range is not None:
            low, high = self.range
            if len(value) < low:
                raise FieldError("Invalid min length")
            value = value[: int(high)]
        return value


def parse_bound(text: str, as_float: bool) -> int | float | None:
    """
    Parse the number after ``min:``/``max:``.

    Returns None for an empty bound and raises `ValueError` when the text
    is not a number.
    """
    text = text.strip()
    if text == "":
        return None
    if not is_numeric(text):
        raise ValueError(f"Invalid bound: {text!r}")
    return to_float(text) if as_float else to_int(text)


def parse_range(text: str, as_float: bool) -> tuple[int | float, int | float]:
    """Parse ``LO,HI`` after ``range:``; raises `ValueError` when malformed."""
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid range: {text!r}")
    low = parse_bound(parts[0], as_float)
    high = parse_bound(parts[1], as_float)
    if low is None or high is None:
        raise ValueError(f"Invalid range: {text!r}")
    return low, high
