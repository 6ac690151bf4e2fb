"""Enum membership check."""

from __future__ import annotations

from typing import Any, Sequence

from ..exceptions import FieldError
from .core import to_text


def convert_enum(value: Any, values: Sequence[str]) -> str:
    """Return the value as a string if it is exactly one of `values`."""
    text = to_text(value)
    if text not in values:
        raise FieldError("Invalid enum value")
    return text
