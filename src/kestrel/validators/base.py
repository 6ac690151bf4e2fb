"""Rule contract shared by built-in and caller-supplied rules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CustomRule(ABC):
    """
    Pluggable coercion step run by `Field` after type conversion.

    Subclasses implement `apply`, returning the (possibly transformed) value
    or raising `FieldError` to reject it. Rules run in the order they were
    declared on the field, each one receiving the previous rule's output.

    Examples
    --------
        >>> from kestrel import CustomRule, Field, FieldError
        >>> class NoAzerty(CustomRule):
        ...     def apply(self, value):
        ...         if value == "azerty":
        ...             raise FieldError("invalid azerty value")
        ...         return value
        >>> field = Field("varchar", [NoAzerty()])
        >>> field.coerce("qwerty")
        'qwerty'
    """

    @abstractmethod
    def apply(self, value: Any) -> Any:
        """Return the value to keep, or raise `FieldError`."""
        raise NotImplementedError
