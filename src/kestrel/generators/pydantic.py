"""Pydantic row model generator."""

from typing import TYPE_CHECKING, Any, Literal, Optional

from pydantic import BaseModel, create_model
from pydantic import Field as PydanticField

from ..fields import Field, FieldKind

if TYPE_CHECKING:
    from ..base import Model

# Python type of a coerced value, per kind (enum handled separately)
_PYTHON_TYPES: dict[FieldKind, type] = {
    FieldKind.INT: int,
    FieldKind.FLOAT: float,
    FieldKind.CHAR: str,
    FieldKind.VARCHAR: str,
    FieldKind.TEXT: str,
    FieldKind.DATE: str,
    FieldKind.DATETIME: str,
    FieldKind.TIME: str,
    FieldKind.TIMESTAMP: str,
    FieldKind.YEAR: int,
}


def _python_type(field: Field) -> Any:
    if field.kind is FieldKind.ENUM:
        if not field.enum_values:
            return str
        return Literal[tuple(field.enum_values)]
    return _PYTHON_TYPES[field.kind]


def _constraint_kwargs(field: Field) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}

    if field.kind.is_string:
        if field.bounds.max is not None:
            kwargs["max_length"] = field.bounds.max
        if field.bounds.min is not None:
            kwargs["min_length"] = field.bounds.min
    elif field.kind in (FieldKind.INT, FieldKind.FLOAT) and field.unsigned:
        kwargs["ge"] = 0

    if field.kind is FieldKind.INT and field.is_key:
        kwargs["ge"] = 1

    return kwargs


def create_pydantic_model(model_cls: "type[Model]") -> type[BaseModel]:
    """
    Generate a Pydantic BaseModel describing one coerced row of a Model.

    Temporal kinds stay strings in their canonical format, enums become
    ``Literal`` types and columns that are not ``not_null`` accept None.

    Parameters
    ----------
    model_cls : type[Model]
        A subclass of Model.

    Returns
    -------
    type[BaseModel]
        A dynamically created Pydantic BaseModel class named after the
        model with a ``Row`` suffix.
    """
    pydantic_fields = {}

    for field_name, field in model_cls.declared_fields().items():
        python_type = _python_type(field)
        nullable = not field.not_null

        if nullable:
            python_type = Optional[python_type]

        field_kwargs = _constraint_kwargs(field)

        if field.description:
            field_kwargs["description"] = field.description

        if field.has_default:
            field_kwargs["default"] = field.default
        elif nullable:
            field_kwargs["default"] = None

        if field_kwargs:
            pydantic_fields[field_name] = (python_type, PydanticField(**field_kwargs))
        else:
            pydantic_fields[field_name] = (python_type, ...)

    model_name = model_cls.__name__.removesuffix("Model") + "Row"
    # create_model is dynamically typed
    return create_model(model_name, **pydantic_fields)  # type: ignore[call-overload, no-any-return]
