"""
Kestrel: Typed Fields and CRUD Models

Declare your columns once. Coerce every value. Keep SQL plain.
"""

from .accumulator import ErrorAccumulator
from .base import Model
from .callbacks import CallbackRegistry, Hook
from .config import Settings, get_settings
from .database import Database, SQLAlchemyDatabase
from .exceptions import DatabaseError, ErrorKind, FieldError, ModelError
from .fields import ABSENT, Field, FieldKind
from .json_output import JsonOutput
from .validators import CustomRule, EmailRule

__version__ = "0.1.0"

__all__ = [
    # Core
    "Model",
    "Field",
    "FieldKind",
    "ABSENT",
    "CustomRule",
    "EmailRule",
    # Errors
    "ErrorAccumulator",
    "ErrorKind",
    "FieldError",
    "ModelError",
    "DatabaseError",
    # Collaborators
    "CallbackRegistry",
    "Hook",
    "Database",
    "SQLAlchemyDatabase",
    "JsonOutput",
    "Settings",
    "get_settings",
]
