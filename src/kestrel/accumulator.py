"""Per-operation collection of error and warning messages."""


class ErrorAccumulator:
    """
    Collects errors and warnings produced while a model operation runs.

    Each severity has two channels: free-text messages and reasons keyed by
    field name. Nothing is cleared automatically here; `Model` calls
    `reset_all()` at the start of every public operation.

    Examples
    --------
        >>> acc = ErrorAccumulator()
        >>> acc.add_error_field("title", "Invalid min length")
        >>> acc.add_error_message("Formating values invalid")
        >>> acc.error_fields
        {'title': ['Invalid min length']}
    """

    def __init__(self):
        self._error_messages: list[str] = []
        self._error_fields: dict[str, list[str]] = {}
        self._warning_messages: list[str] = []
        self._warning_fields: dict[str, list[str]] = {}

    # Errors

    @property
    def error_messages(self) -> list[str]:
        return list(self._error_messages)

    def has_error_messages(self) -> bool:
        return len(self._error_messages) > 0

    def add_error_message(self, error: str) -> None:
        self._error_messages.append(error)

    def reset_error_messages(self) -> None:
        self._error_messages = []

    @property
    def error_fields(self) -> dict[str, list[str]]:
        return {name: list(reasons) for name, reasons in self._error_fields.items()}

    def has_error_fields(self) -> bool:
        return len(self._error_fields) > 0

    def add_error_field(self, field: str, reason: str) -> None:
        self._error_fields.setdefault(field, []).append(reason)

    def reset_error_fields(self, field: str | None = None) -> None:
        """Clear all field errors, or only those of `field`."""
        if field is None:
            self._error_fields = {}
            return
        self._error_fields.pop(field, None)

    # Warnings

    @property
    def warning_messages(self) -> list[str]:
        return list(self._warning_messages)

    def has_warning_messages(self) -> bool:
        return len(self._warning_messages) > 0

    def add_warning_message(self, warning: str) -> None:
        self._warning_messages.append(warning)

    def reset_warning_messages(self) -> None:
        self._warning_messages = []

    @property
    def warning_fields(self) -> dict[str, list[str]]:
        return {name: list(reasons) for name, reasons in self._warning_fields.items()}

    def has_warning_fields(self) -> bool:
        return len(self._warning_fields) > 0

    def add_warning_field(self, field: str, reason: str) -> None:
        self._warning_fields.setdefault(field, []).append(reason)

    def reset_warning_fields(self, field: str | None = None) -> None:
        """Clear all field warnings, or only those of `field`."""
        if field is None:
            self._warning_fields = {}
            return
        self._warning_fields.pop(field, None)

    def reset_all_errors(self) -> None:
        """Clear both error channels, keeping warnings."""
        self.reset_error_fields()
        self.reset_error_messages()

    def reset_all(self) -> None:
        """Clear errors and warnings."""
        self.reset_all_errors()
        self.reset_warning_fields()
        self.reset_warning_messages()
