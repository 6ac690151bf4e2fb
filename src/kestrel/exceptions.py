"""Exception types raised by fields, models and database clients."""

from enum import Enum
from typing import Any


class FieldError(ValueError):
    """Raised when a field declaration is invalid or a value cannot be coerced."""


class ErrorKind(str, Enum):
    """Outcome kind carried by `ModelError`."""

    FIELDS = "FIELDS"
    ERROR = "ERROR"


class ModelError(Exception):
    """
    Raised by `Model` operations.

    `kind` tells the caller where to look for details: with
    ``ErrorKind.FIELDS`` the per-field reasons are authoritative, with
    ``ErrorKind.ERROR`` a single message describes the failure.

    Parameters
    ----------
    kind : ErrorKind
        Failure category.
    messages : list[str], optional
        Snapshot of the model's error messages when the error was raised.
    fields : dict[str, list[str]], optional
        Snapshot of the model's field errors when the error was raised.
    """

    def __init__(
        self,
        kind: ErrorKind,
        messages: list[str] | None = None,
        fields: dict[str, list[str]] | None = None,
    ):
        super().__init__(kind.value)
        self.kind = kind
        self.messages = list(messages or [])
        self.fields = {name: list(reasons) for name, reasons in (fields or {}).items()}


class DatabaseError(Exception):
    """Raised by a database client when a statement fails."""

    def __init__(self, message: str, query: str | None = None, params: Any = None):
        super().__init__(message)
        self.query = query
        self.params = params
