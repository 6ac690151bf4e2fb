"""Core `Model` class: field collection and the CRUD operations built on it."""

from typing import Any, Iterable, Mapping

from loguru import logger

from . import pagination
from .accumulator import ErrorAccumulator
from .callbacks import AfterCallback, BeforeCallback, CallbackRegistry, Hook
from .config import Settings, get_settings
from .database import Database
from .exceptions import DatabaseError, ErrorKind, FieldError, ModelError
from .fields import Field


class ModelMeta(type):
    """
    Metaclass that collects `Field` definitions from the class body.

    Fields of parent models are inherited, and a field redeclared in a
    subclass replaces the parent's one in place. When no class in the
    hierarchy sets `table`, it is derived from the class name:

        class ArticleModel(Model):      # table == "articles"
            id = Field("int", ["pk", "unsigned", "not_null"])
            title = Field("varchar", ["max:255"])
    """

    def __new__(mcs, name, bases, namespace):
        fields: dict[str, Field] = {}

        for base in reversed(bases):
            fields.update(getattr(base, "_fields", {}))

        for key, value in list(namespace.items()):
            if isinstance(value, Field):
                value.name = key
                fields[key] = value
                del namespace[key]

        namespace["_fields"] = fields
        cls = super().__new__(mcs, name, bases, namespace)

        if fields and not getattr(cls, "table", ""):
            cls.table = name.removesuffix("Model").lower() + "s"

        return cls


class Model(ErrorAccumulator, metaclass=ModelMeta):
    """
    Base class for table models with validated CRUD operations.

    Declare columns as `Field` class attributes. Every public operation
    clears the error accumulator, coerces its input through the fields,
    and raises `ModelError` on failure. With ``ErrorKind.FIELDS`` the
    reasons are in `error_fields`; with ``ErrorKind.ERROR`` the message is
    in `error_messages`.

    Subclasses customise listing through `get_sql_all_select`,
    `get_sql_all_join` and `get_sql_all_where` (which may add bind values
    to `sql_params`), and can adjust coerced parameters before create and
    update in `treat_parameters_after_clean`.

    Parameters
    ----------
    database : Database
        Client the statements are executed on.
    callbacks : CallbackRegistry, optional
        Before/after callbacks. Share one registry between models to share
        callbacks; by default each instance gets its own.
    settings : Settings, optional
        Listing defaults. Defaults to `get_settings()`.

    Examples
    --------
        >>> from kestrel import Field, Model, SQLAlchemyDatabase
        >>> class ArticleModel(Model):
        ...     table = "articles"
        ...     id = Field("int", ["pk", "unsigned", "not_null"])
        ...     title = Field("varchar", ["max:5"])
        ...     date_start = Field("datetime", ["not_null"])
        >>> articles = ArticleModel(SQLAlchemyDatabase("sqlite:///example.db"))
        >>> new_id = articles.create(
        ...     {"title": "first test", "date_start": "2018-08-07 20:06:23"}
        ... )
        >>> articles.one(new_id)["title"]
        'first'
    """

    _fields: dict[str, Field] = {}
    table: str = ""
    parameters_to_remove: tuple[str, ...] = ()

    def __init__(
        self,
        database: Database,
        callbacks: CallbackRegistry | None = None,
        settings: Settings | None = None,
    ):
        super().__init__()
        self.database = database
        self.fields: dict[str, Field] = dict(self._fields)
        self.callbacks = callbacks if callbacks is not None else CallbackRegistry()
        self.settings = settings or get_settings()
        self.sql_params: dict[str, Any] = {}
        self.last_insert_id: Any = None

    @classmethod
    def declared_fields(cls) -> dict[str, Field]:
        """Return the fields declared on this model, in declaration order."""
        return cls._fields.copy()

    def is_valid_field(self, name: Any) -> bool:
        return isinstance(name, str) and name in self.fields

    def _error(self, kind: ErrorKind, message: str) -> ModelError:
        self.add_error_message(message)
        return ModelError(kind, self.error_messages, self.error_fields)

    # Listing

    def all(
        self,
        args: Mapping[str, Any] | None = None,
        valid_fields: Iterable[str] | None = None,
    ) -> list[dict[str, Any]] | int:
        """
        List rows, or count them when ``args["rows_count"]`` is 1.

        Parameters
        ----------
        args : Mapping, optional
            Request arguments: ``rows_count``, ``no_limit``, ``count``,
            ``page`` and ``order`` (see `kestrel.pagination`), plus whatever
            the subclass's SQL hooks read.
        valid_fields : iterable of str, optional
            Columns allowed in ``order``. Defaults to the declared fields.

        Returns
        -------
        list[dict] or int
            Coerced rows, or the row count.

        Raises
        ------
        ModelError
            ``ERROR`` when the query fails, ``FIELDS`` when a stored value
            does not coerce.
        """
        self.reset_all()
        args = dict(args or {})

        if pagination.is_rows_count(args, self.settings):
            return self._all_count(args)

        return self._all_rows(args, valid_fields)

    def _all_count(self, args: dict[str, Any]) -> int:
        self.sql_params = {}

        parts = [
            "SELECT count(*)",
            f"FROM {self.table}",
            self.get_sql_all_join(args),
            "WHERE",
            self.get_sql_all_where(args),
        ]
        sql = " ".join(part for part in parts if part)

        try:
            return self.database.count(sql, self.sql_params)
        except DatabaseError as e:
            logger.warning(f"Count on '{self.table}' failed: {e}")
            raise self._error(ErrorKind.ERROR, "Error select count all") from e

    def _all_rows(
        self, args: dict[str, Any], valid_fields: Iterable[str] | None
    ) -> list[dict[str, Any]]:
        self.sql_params = {}

        if valid_fields is None:
            valid_fields = self.fields.keys()
        orders = pagination.get_order_by_order_field(args, valid_fields, self.settings)
        limit, offset = pagination.get_limit_offset_count(args, self.settings)

        parts = [
            f"SELECT {self.get_sql_all_select(args)}",
            f"FROM {self.table}",
            self.get_sql_all_join(args),
            "WHERE",
            self.get_sql_all_where(args),
            f"ORDER BY {pagination.implode_order(orders)}",
        ]

        if pagination.has_limit(args, self.settings):
            parts.append("LIMIT :count OFFSET :offset")
            self.sql_params["count"] = limit
            self.sql_params["offset"] = offset

        sql = " ".join(part for part in parts if part)

        try:
            rows = self.database.select_all(sql, self.sql_params)
        except DatabaseError as e:
            logger.warning(f"Listing '{self.table}' failed: {e}")
            raise self._error(ErrorKind.ERROR, "Error select all") from e

        return [self._format_values(row) for row in rows]

    def get_sql_all_select(self, args: dict[str, Any]) -> str:
        return f"{self.table}.*"

    def get_sql_all_join(self, args: dict[str, Any]) -> str:
        return ""

    def get_sql_all_where(self, args: dict[str, Any]) -> str:
        return "1=1"

    # Single rows

    def one(self, *primary_keys: Any) -> dict[str, Any]:
        """
        Fetch one row by primary key values, given in field order.

        Returns an empty dict when no row matches.
        """
        self.reset_all()
        self.sql_params = {}

        where = self._where_with_primary_keys(primary_keys)
        sql = f"SELECT * FROM {self.table} WHERE {' AND '.join(where)}"

        try:
            row = self.database.select_row(sql, self.sql_params)
        except DatabaseError as e:
            logger.warning(f"Reading from '{self.table}' failed: {e}")
            raise self._error(ErrorKind.ERROR, "Error select one") from e

        return self._format_values(row)

    def create(self, args: Mapping[str, Any]) -> Any:
        """
        Insert a row built from `args` and return the generated id.

        Unknown keys and keys listed in `parameters_to_remove` are
        ignored. Missing not-null columns take their default; without one
        they are reported as ``"field is required"``.

        Raises
        ------
        ModelError
            ``FIELDS`` when a value does not coerce or a required column is
            missing, ``ERROR`` when nothing is left to insert or the insert
            fails.
        """
        self.reset_all()

        self.sql_params = dict(args)
        self._remove_parameters()
        self.sql_params = self._format_values(self.sql_params)
        self.treat_parameters_after_clean("create")

        sql = f"INSERT INTO {self.table} {self._create_sql_fields_from_params()}"

        sql, self.sql_params = self.callbacks.run_before(
            Hook.BEFORE_CREATE, sql, self.sql_params
        )

        sql = self._check_not_null_field_is_present(sql)

        try:
            self.last_insert_id = self.database.insert(sql, self.sql_params)
        except DatabaseError as e:
            logger.warning(f"Insert into '{self.table}' failed: {e}")
            raise self._error(ErrorKind.ERROR, "Error creating") from e

        logger.debug(f"Created row {self.last_insert_id} in '{self.table}'")

        self.callbacks.run_after(Hook.AFTER_CREATE, self.sql_params, self.last_insert_id)

        return self.last_insert_id

    def update(self, args: Mapping[str, Any], *primary_keys: Any) -> None:
        """
        Update the row identified by `primary_keys` with the values in `args`.

        Primary key columns are never part of the SET list.

        Raises
        ------
        ModelError
            ``FIELDS`` when a value or key does not coerce, ``ERROR`` when
            there is nothing to update, no primary key is declared or the
            update fails.
        """
        self.reset_all()

        self.sql_params = dict(args)
        where = self._where_with_primary_keys(primary_keys)

        self._remove_parameters()
        self.sql_params = self._format_values(self.sql_params)
        self.treat_parameters_after_clean("update")

        assignments = self._update_sql_fields_from_params()
        sql = f"UPDATE {self.table} SET {assignments} WHERE {' AND '.join(where)}"

        sql, self.sql_params = self.callbacks.run_before(
            Hook.BEFORE_UPDATE, sql, self.sql_params
        )

        try:
            self.database.update(sql, self.sql_params)
        except DatabaseError as e:
            logger.warning(f"Update of '{self.table}' failed: {e}")
            raise self._error(ErrorKind.ERROR, "Error updating") from e

        self.callbacks.run_after(Hook.AFTER_UPDATE, self.sql_params)

    def delete(self, *primary_keys: Any) -> None:
        """Delete the row identified by `primary_keys`."""
        self.reset_all()
        self.sql_params = {}

        where = self._where_with_primary_keys(primary_keys)
        sql = f"DELETE FROM {self.table} WHERE {' AND '.join(where)}"

        sql, self.sql_params = self.callbacks.run_before(
            Hook.BEFORE_DELETE, sql, self.sql_params
        )

        try:
            self.database.delete(sql, self.sql_params)
        except DatabaseError as e:
            logger.warning(f"Delete from '{self.table}' failed: {e}")
            raise self._error(ErrorKind.ERROR, "Error deleting") from e

        self.callbacks.run_after(Hook.AFTER_DELETE, self.sql_params)

    def treat_parameters_after_clean(self, mode: str) -> None:
        """
        Adjust `sql_params` after coercion; `mode` is ``"create"`` or ``"update"``.

        Does nothing by default. May raise `ModelError`.
        """

    # Statement building

    def _format_values(self, params: Mapping[Any, Any]) -> dict[str, Any]:
        """Coerce known columns, collecting every failure before raising."""
        formatted: dict[str, Any] = {}

        for name, value in params.items():
            if not self.is_valid_field(name):
                continue

            try:
                formatted[name] = self.fields[name].coerce(value)
            except FieldError as e:
                self.add_error_field(name, str(e))

        if self.has_error_fields():
            logger.warning(f"Invalid values for '{self.table}': {self.error_fields}")
            raise self._error(ErrorKind.FIELDS, "Formating values invalid")

        return formatted

    def _where_with_primary_keys(self, primary_keys: Iterable[Any]) -> list[str]:
        remaining = list(primary_keys)
        where = []

        for name, field in self.fields.items():
            if not field.is_primary_key:
                continue

            value = remaining.pop(0) if remaining else None
            self.sql_params.update(self._format_values({name: value}))
            where.append(f"{name} = :{name}")

        if not where:
            raise self._error(ErrorKind.ERROR, "Error no primary key")

        return where

    def _remove_parameters(self) -> None:
        for name in self.parameters_to_remove:
            self.sql_params.pop(name, None)

    def _create_sql_fields_from_params(self) -> str:
        columns = [name for name in self.sql_params if self.is_valid_field(name)]

        if not columns:
            raise self._error(ErrorKind.ERROR, "Insert sql query is empty")

        placeholders = ",".join(f":{name}" for name in columns)
        return f"({','.join(columns)}) VALUES ({placeholders})"

    def _check_not_null_field_is_present(self, sql: str) -> str:
        """Add defaults for missing not-null columns to `sql` and `sql_params`."""
        for name, field in self.fields.items():
            if not field.not_null or field.is_primary_key:
                continue

            if name in self.sql_params:
                continue

            if not field.has_default:
                self.add_error_field(name, "field is required")
                continue

            logger.info(f"Using default for '{name}' on insert into '{self.table}'")
            self.sql_params[name] = field.default

            head, separator, tail = sql.partition(") VALUES (")
            if separator and tail.endswith(")"):
                sql = f"{head},{name}{separator}{tail[:-1]},:{name})"

        if self.has_error_fields():
            raise self._error(ErrorKind.FIELDS, "Missing required fields")

        return sql

    def _update_sql_fields_from_params(self) -> str:
        assignments = [
            f"{name} = :{name}"
            for name in self.sql_params
            if self.is_valid_field(name) and not self.fields[name].is_primary_key
        ]

        if not assignments:
            raise self._error(ErrorKind.ERROR, "Update sql query is empty")

        return ",".join(assignments)

    # Callbacks

    def add_before_create(self, name: str, callback: BeforeCallback) -> None:
        self.callbacks.add(Hook.BEFORE_CREATE, name, callback)

    def add_after_create(self, name: str, callback: AfterCallback) -> None:
        self.callbacks.add(Hook.AFTER_CREATE, name, callback)

    def add_before_update(self, name: str, callback: BeforeCallback) -> None:
        self.callbacks.add(Hook.BEFORE_UPDATE, name, callback)

    def add_after_update(self, name: str, callback: AfterCallback) -> None:
        self.callbacks.add(Hook.AFTER_UPDATE, name, callback)

    def add_before_delete(self, name: str, callback: BeforeCallback) -> None:
        self.callbacks.add(Hook.BEFORE_DELETE, name, callback)

    def add_after_delete(self, name: str, callback: AfterCallback) -> None:
        self.callbacks.add(Hook.AFTER_DELETE, name, callback)

    def remove_before_create(self, name: str) -> None:
        self.callbacks.remove(Hook.BEFORE_CREATE, name)

    def remove_after_create(self, name: str) -> None:
        self.callbacks.remove(Hook.AFTER_CREATE, name)

    def remove_before_update(self, name: str) -> None:
        self.callbacks.remove(Hook.BEFORE_UPDATE, name)

    def remove_after_update(self, name: str) -> None:
        self.callbacks.remove(Hook.AFTER_UPDATE, name)

    def remove_before_delete(self, name: str) -> None:
        self.callbacks.remove(Hook.BEFORE_DELETE, name)

    def remove_after_delete(self, name: str) -> None:
        self.callbacks.remove(Hook.AFTER_DELETE, name)

    # Database client

    def get_database_errors(self) -> list[dict[str, Any]]:
        return self.database.get_errors()

    def get_database_last_error(self) -> dict[str, Any] | None:
        return self.database.get_last_error()

    # Generators

    @classmethod
    def to_sqlalchemy(cls, table_name: str | None = None, metadata=None):
        """
        Generate a SQLAlchemy Table from this model's fields.

        Parameters
        ----------
        table_name : str, optional
            Table name. Defaults to the model's `table`.
        metadata : sqlalchemy.MetaData, optional
            MetaData to attach the table to. A new one is created if omitted.

        Examples
        --------
            >>> from sqlalchemy import MetaData, create_engine
            >>> metadata = MetaData()
            >>> table = ArticleModel.to_sqlalchemy(metadata=metadata)
            >>> metadata.create_all(create_engine("sqlite:///example.db"))
        """
        from .generators.sqlalchemy import create_sqlalchemy_table

        return create_sqlalchemy_table(cls, table_name=table_name, metadata=metadata)

    @classmethod
    def to_pydantic(cls) -> type:
        """Generate a pydantic model describing one coerced row."""
        from .generators.pydantic import create_pydantic_model

        return create_pydantic_model(cls)

    def to_polars(self, args: Mapping[str, Any] | None = None):
        """
        List rows with `all` and return them as a typed polars DataFrame.

        Without `args` every row is fetched. ``rows_count`` is ignored.
        """
        from .generators.polars import create_polars_frame

        if args is None:
            args = {self.settings.NO_LIMIT_KEY: 1}
        args = {
            key: value
            for key, value in args.items()
            if key != self.settings.ROWS_COUNT_KEY
        }

        return create_polars_frame(type(self), self.all(args))
