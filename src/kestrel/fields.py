"""Field declarations and the value-coercion pipeline."""

from enum import Enum
from typing import Any, Callable, Sequence

from .exceptions import FieldError
from .validators import (
    Bounds,
    CustomRule,
    EmailRule,
    convert_date,
    convert_datetime,
    convert_enum,
    convert_time,
    convert_timestamp,
    is_numeric,
    to_float,
    to_int,
    to_text,
)
from .validators.core import parse_bound, parse_range


class _Absent:
    """Type of the `ABSENT` sentinel."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self):
        return "ABSENT"


# Sentinel value to distinguish "no value supplied" from an explicit None
ABSENT: Any = _Absent()

# Converters per kind (populated at module end)
_CONVERTERS: dict["FieldKind", Callable[["Field", Any], Any]] = {}

YEAR_MIN = 1901
YEAR_MAX = 2155


class FieldKind(str, Enum):
    """Column types a `Field` can declare."""

    INT = "int"
    FLOAT = "float"
    CHAR = "char"
    VARCHAR = "varchar"
    TEXT = "text"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    TIMESTAMP = "timestamp"
    YEAR = "year"
    ENUM = "enum"

    @property
    def is_string(self) -> bool:
        return self in (FieldKind.CHAR, FieldKind.VARCHAR, FieldKind.TEXT)


_INVALID_TYPE_MESSAGE = (
    "Incorrect Type. Valid type: "
    + ", ".join(kind.value for kind in FieldKind if kind is not FieldKind.ENUM)
    + ", enum:v1,v2"
)

_RULE_TOKENS = ("pk", "fk", "unsigned", "email", "not_null", "max", "min", "range")

_INVALID_RULE_MESSAGE = (
    "Incorrect Rule. Valid rule: "
    + ", ".join(_RULE_TOKENS)
    + ", max:int, min:int, range:int,int"
)


class Field:
    """
    One column's type, constraint rules and default value.

    Parameters
    ----------
    kind : str or FieldKind
        Column type. As a string, one of ``int``, ``float``, ``char``,
        ``varchar``, ``text``, ``date``, ``datetime``, ``time``,
        ``timestamp``, ``year`` or ``enum:v1,v2,...``.
    rules : sequence, optional
        Rule tokens and rule objects, applied in order:

        - ``pk`` / ``fk``: primary or foreign key. Integer keys must be >= 1.
        - ``not_null``: None is rejected and a missing value needs a default.
        - ``unsigned``: negative numbers clamp to zero.
        - ``email``: value must contain an inner ``@``.
        - ``min:N``, ``max:N``, ``range:LO,HI``: numeric clamps, or length
          limits for string kinds.
        - `CustomRule` instances: caller-defined steps.
    default : Any, optional
        Value used when none is supplied. It goes through `coerce` once,
        here. Leave it out to have no default; ``None`` is a real default.
    values : sequence of str, optional
        Allowed values when `kind` is ``FieldKind.ENUM``.
    description : str, optional
        Human-readable description of this field.

    Raises
    ------
    FieldError
        On an unknown kind or rule, or when `default` does not coerce.

    Examples
    --------
        >>> from kestrel import Field
        >>> Field("varchar", ["max:5"]).coerce("first test")
        'first'
        >>> Field("int", ["unsigned"]).coerce("-4")
        0
        >>> Field("enum:yes,no", ["not_null"], "yes").coerce()
        'yes'
    """

    def __init__(
        self,
        kind: "str | FieldKind",
        rules: Sequence[Any] = (),
        default: Any = ABSENT,
        *,
        values: Sequence[str] | None = None,
        description: str | None = None,
    ):
        self.name: str | None = None  # Set by ModelMeta
        self.description = description
        self.enum_values: list[str] = []
        self.kind = self._parse_kind(kind, values)

        self.not_null = False
        self.is_primary_key = False
        self.is_foreign_key = False
        self.unsigned = False
        self.bounds = Bounds()
        self.rules: list[CustomRule] = []
        self._parse_rules(rules)

        self.default: Any = ABSENT
        if default is not ABSENT:
            self.default = self.coerce(default)

    def __repr__(self) -> str:
        return f"Field({self.kind.value!r}, name={self.name!r})"

    @property
    def is_key(self) -> bool:
        return self.is_primary_key or self.is_foreign_key

    @property
    def has_default(self) -> bool:
        return self.default is not ABSENT

    def _parse_kind(self, kind: "str | FieldKind", values: Sequence[str] | None) -> FieldKind:
        if isinstance(kind, FieldKind):
            if kind is FieldKind.ENUM:
                self.enum_values = list(values or [])
            return kind

        if not isinstance(kind, str):
            raise FieldError(_INVALID_TYPE_MESSAGE)

        if kind.startswith("enum:"):
            self.enum_values = kind[len("enum:") :].split(",")
            return FieldKind.ENUM

        try:
            parsed = FieldKind(kind)
        except ValueError:
            raise FieldError(_INVALID_TYPE_MESSAGE) from None
        if parsed is FieldKind.ENUM:
            # Bare "enum" has no values to check against
            raise FieldError(_INVALID_TYPE_MESSAGE)
        return parsed

    def _parse_rules(self, rules: Sequence[Any]) -> None:
        as_float = self.kind is FieldKind.FLOAT

        for rule in rules:
            if isinstance(rule, CustomRule):
                self.rules.append(rule)
                continue

            if not isinstance(rule, str):
                raise FieldError(_INVALID_RULE_MESSAGE)

            try:
                if rule.startswith("min:"):
                    self.bounds.min = parse_bound(rule[len("min:") :], as_float)
                    continue
                if rule.startswith("max:"):
                    self.bounds.max = parse_bound(rule[len("max:") :], as_float)
                    continue
                if rule.startswith("range:"):
                    self.bounds.range = parse_range(rule[len("range:") :], as_float)
                    continue
            except (ValueError, OverflowError):
                raise FieldError(_INVALID_RULE_MESSAGE) from None

            if rule not in _RULE_TOKENS:
                raise FieldError(_INVALID_RULE_MESSAGE)

            if rule == "not_null":
                self.not_null = True
            elif rule == "pk":
                self.is_primary_key = True
            elif rule == "fk":
                self.is_foreign_key = True
            elif rule == "unsigned":
                self.unsigned = True
            elif rule == "email":
                self.rules.append(EmailRule())

    def coerce(self, value: Any = ABSENT) -> Any:
        """
        Convert and validate a raw value for this column.

        Parameters
        ----------
        value : Any, optional
            Raw input. Leave it out (or pass `ABSENT`) to ask for the
            default value.

        Returns
        -------
        Any
            The typed value: int, float, str (text, temporal and enum
            kinds) or None.

        Raises
        ------
        FieldError
            When the value is rejected by the conversion or by a rule.
        """
        if value is ABSENT:
            return self._apply_default(ABSENT)

        if not self.not_null and value is None:
            return None

        value = self._convert(value)
        value = self._apply_rules(value)

        return self._apply_default(value)

    def _convert(self, value: Any) -> Any:
        if value is None and self.not_null:
            raise FieldError("Null not authorized")

        return _CONVERTERS[self.kind](self, value)

    def _apply_rules(self, value: Any) -> Any:
        for rule in self.rules:
            value = rule.apply(value)
        return value

    def _apply_default(self, value: Any) -> Any:
        if value is not ABSENT:
            return value

        if self.default is not ABSENT:
            return self.default

        if self.not_null:
            raise FieldError("Invalid default value")

        return None

    def _convert_int(self, value: Any) -> int:
        if not is_numeric(value):
            raise FieldError("Invalid int value")

        number = to_int(value)

        if number < 0 and self.unsigned:
            number = 0

        if self.is_key and number < 1:
            raise FieldError("Invalid key value")

        return self.bounds.clamp_int(number)

    def _convert_float(self, value: Any) -> float:
        if not is_numeric(value):
            raise FieldError("Invalid float value")

        try:
            number = to_float(value)
        except OverflowError:
            raise FieldError("Invalid float value") from None

        if number < 0 and self.unsigned:
            number = 0.0

        return self.bounds.clamp_float(number)

    def _convert_string(self, value: Any) -> str:
        return self.bounds.bound_length(to_text(value))

    def _convert_date(self, value: Any) -> str:
        return convert_date(value)

    def _convert_datetime(self, value: Any) -> str:
        return convert_datetime(value)

    def _convert_time(self, value: Any) -> str:
        return convert_time(value)

    def _convert_timestamp(self, value: Any) -> str:
        return convert_timestamp(value)

    def _convert_year(self, value: Any) -> int:
        if not is_numeric(value):
            raise FieldError("Invalid year value")

        year = to_int(value)

        if year < 0 and self.unsigned:
            year = 0

        year = self.bounds.clamp_int(year)

        if year < YEAR_MIN or year > YEAR_MAX:
            raise FieldError("Invalid year value")

        return year

    def _convert_enum(self, value: Any) -> str:
        return convert_enum(value, self.enum_values)


_CONVERTERS.update(
    {
        FieldKind.INT: Field._convert_int,
        FieldKind.FLOAT: Field._convert_float,
        FieldKind.CHAR: Field._convert_string,
        FieldKind.VARCHAR: Field._convert_string,
        FieldKind.TEXT: Field._convert_string,
        FieldKind.DATE: Field._convert_date,
        FieldKind.DATETIME: Field._convert_datetime,
        FieldKind.TIME: Field._convert_time,
        FieldKind.TIMESTAMP: Field._convert_timestamp,
        FieldKind.YEAR: Field._convert_year,
        FieldKind.ENUM: Field._convert_enum,
    }
)
