"""Generators for different frameworks."""

from .polars import create_polars_frame
from .pydantic import create_pydantic_model
from .sqlalchemy import create_sqlalchemy_table

__all__ = [
    "create_polars_frame",
    "create_pydantic_model",
    "create_sqlalchemy_table",
]
