"""Built-in rules for string values."""

from __future__ import annotations

from typing import Any

from ..exceptions import FieldError
from .base import CustomRule
from .core import to_text


class EmailRule(CustomRule):
    """
    Loose e-mail check declared with the ``email`` rule token.

    The value must contain an ``@`` that is neither the first nor the last
    character. No further syntax is checked.

    Examples
    --------
        >>> EmailRule().apply("a@a")
        'a@a'
    """

    def apply(self, value: Any) -> Any:
        text = to_text(value)
        position = text.find("@")
        if position == -1:
            raise FieldError("Invalid email value")
        if position == 0 or position == len(text) - 1:
            raise FieldError("Invalid email value")
        return value

    def __repr__(self) -> str:
        return "EmailRule()"
