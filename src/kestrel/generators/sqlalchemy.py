"""SQLAlchemy table generator."""

from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Enum,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    Time,
)

from ..fields import Field, FieldKind

if TYPE_CHECKING:
    from ..base import Model


def _column_type(field: Field) -> Any:
    kind = field.kind
    length = field.bounds.max
    if field.bounds.range is not None:
        length = field.bounds.range[1]

    if kind in (FieldKind.INT, FieldKind.YEAR):
        return Integer()
    if kind is FieldKind.FLOAT:
        return Float()
    if kind in (FieldKind.CHAR, FieldKind.VARCHAR):
        return String(length) if length else String()
    if kind is FieldKind.TEXT:
        return Text()
    if kind is FieldKind.DATE:
        return Date()
    if kind in (FieldKind.DATETIME, FieldKind.TIMESTAMP):
        return DateTime()
    if kind is FieldKind.TIME:
        return Time()
    return Enum(*field.enum_values, name=f"{field.name}_enum")


def create_sqlalchemy_table(
    model_cls: "type[Model]",
    table_name: str | None = None,
    metadata: MetaData | None = None,
) -> Table:
    """
    Generate a SQLAlchemy Table from a Model class.

    Meant for tests and bootstrapping an empty database, not for
    migrations. Defaults become server defaults. Foreign keys get an index
    but no constraint, since fields do not name the table they point to.

    Parameters
    ----------
    model_cls : type[Model]
        A subclass of Model.
    table_name : str, optional
        Name of the SQL table. Defaults to the model's `table`.
    metadata : sqlalchemy.MetaData, optional
        An existing MetaData instance. If not provided, a new MetaData
        object is created.

    Returns
    -------
    sqlalchemy.Table
        A Table with one column per declared field.
    """
    if metadata is None:
        metadata = MetaData()

    if table_name is None:
        table_name = model_cls.table

    primary_keys = [f for f in model_cls.declared_fields().values() if f.is_primary_key]
    columns = []

    for field_name, field in model_cls.declared_fields().items():
        column_kwargs: dict[str, Any] = {"nullable": not field.not_null}

        if field.is_primary_key:
            column_kwargs["primary_key"] = True
            column_kwargs["nullable"] = False
            # Only a lone integer key is generated by the database
            column_kwargs["autoincrement"] = (
                len(primary_keys) == 1 and field.kind is FieldKind.INT
            )

        if field.is_foreign_key:
            column_kwargs["index"] = True

        # Statements run through text(), so only database-side defaults apply
        if field.has_default and field.default is not None:
            column_kwargs["server_default"] = str(field.default)

        if field.description:
            column_kwargs["comment"] = field.description

        columns.append(Column(field_name, _column_type(field), **column_kwargs))

    return Table(table_name, metadata, *columns)
