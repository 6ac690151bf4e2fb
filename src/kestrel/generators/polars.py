"""Polars DataFrame generator for coerced rows."""

from typing import TYPE_CHECKING, Any, Iterable, Mapping

import polars as pl
from loguru import logger

from ..fields import Field, FieldKind

if TYPE_CHECKING:
    from ..base import Model

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
TIME_FORMAT = "%H:%M:%S"


def _source_dtype(field: Field) -> pl.DataType:
    """Dtype of the coerced value as it comes out of `Field.coerce`."""
    if field.kind in (FieldKind.INT, FieldKind.YEAR):
        return pl.Int64
    if field.kind is FieldKind.FLOAT:
        return pl.Float64
    return pl.Utf8


def _cast_expr(field_name: str, field: Field) -> pl.Expr | None:
    """Expression turning the canonical string column into its typed form."""
    column = pl.col(field_name)

    if field.kind is FieldKind.DATE:
        return column.str.to_date(DATE_FORMAT)
    if field.kind in (FieldKind.DATETIME, FieldKind.TIMESTAMP):
        return column.str.to_datetime(DATETIME_FORMAT)
    if field.kind is FieldKind.TIME:
        return column.str.to_time(TIME_FORMAT)
    if field.kind is FieldKind.ENUM:
        return column.cast(pl.Enum(field.enum_values))
    return None


def create_polars_frame(
    model_cls: "type[Model]", rows: Iterable[Mapping[str, Any]]
) -> pl.DataFrame:
    """
    Build a typed DataFrame from rows returned by a Model.

    One column per declared field, in declaration order. Columns missing
    from a row are null and keys that are not fields are dropped.

    Parameters
    ----------
    model_cls : type[Model]
        A subclass of Model.
    rows : iterable of mapping
        Coerced rows, e.g. the result of ``Model.all``.

    Returns
    -------
    pl.DataFrame
        Frame with Int64, Float64, Utf8, Date, Datetime, Time and Enum
        columns.

    Examples
    --------
        >>> frame = create_polars_frame(ArticleModel, articles.all({"no_limit": 1}))
        >>> frame.schema["date_start"]
        Datetime(time_unit='us', time_zone=None)
    """
    fields = model_cls.declared_fields()
    rows = list(rows)

    data = {name: [row.get(name) for row in rows] for name in fields}
    schema = {name: _source_dtype(field) for name, field in fields.items()}
    frame = pl.DataFrame(data, schema=schema)

    casts = [
        expr.alias(name)
        for name, field in fields.items()
        if (expr := _cast_expr(name, field)) is not None
    ]
    if casts:
        frame = frame.with_columns(casts)

    logger.debug(f"Built {frame.height} row frame for {model_cls.__name__}")
    return frame
