"""Database client contract and its SQLAlchemy implementation."""

from typing import Any, Callable, Mapping, Protocol, TypeVar, runtime_checkable

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import CursorResult, Engine
from sqlalchemy.exc import SQLAlchemyError

from .exceptions import DatabaseError

T = TypeVar("T")


@runtime_checkable
class Database(Protocol):
    """
    What `Model` needs from a database client.

    Statements use named ``:param`` placeholders. Every method raises
    `DatabaseError` on failure, and details of past failures stay available
    through `get_errors` and `get_last_error`.
    """

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> int: ...

    def select_all(
        self, sql: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]: ...

    def select_row(
        self, sql: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]: ...

    def count(self, sql: str, params: Mapping[str, Any] | None = None) -> int: ...

    def insert(self, sql: str, params: Mapping[str, Any] | None = None) -> Any: ...

    def update(self, sql: str, params: Mapping[str, Any] | None = None) -> int: ...

    def delete(self, sql: str, params: Mapping[str, Any] | None = None) -> int: ...

    def get_errors(self) -> list[dict[str, Any]]: ...

    def get_last_error(self) -> dict[str, Any] | None: ...


class SQLAlchemyDatabase:
    """
    `Database` implementation on top of a SQLAlchemy engine.

    Each statement runs on its own connection inside ``engine.begin()`` and
    commits on success. Failures are recorded as
    ``{"query", "params", "message"}`` dicts before `DatabaseError` is
    raised, with the original `SQLAlchemyError` chained.

    Parameters
    ----------
    engine : sqlalchemy.Engine or str
        An engine, or a database URL passed to `create_engine`.
    **engine_kwargs
        Extra `create_engine` arguments when `engine` is a URL.

    Examples
    --------
        >>> db = SQLAlchemyDatabase("sqlite:///example.db")
        >>> db.execute("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)")
        >>> db.insert("INSERT INTO t (name) VALUES (:name)", {"name": "a"})
        1
    """

    def __init__(self, engine: Engine | str, **engine_kwargs: Any):
        if isinstance(engine, str):
            engine = create_engine(engine, **engine_kwargs)
        self.engine = engine
        self._errors: list[dict[str, Any]] = []

    def _run(
        self,
        sql: str,
        params: Mapping[str, Any] | None,
        handler: Callable[[CursorResult], T],
    ) -> T:
        bound = dict(params or {})
        logger.debug(f"Executing: {sql} with {bound}")
        try:
            with self.engine.begin() as connection:
                result = connection.execute(text(sql), bound)
                return handler(result)
        except SQLAlchemyError as e:
            self._errors.append({"query": sql, "params": bound, "message": str(e)})
            logger.warning(f"Statement failed: {sql}: {e}")
            raise DatabaseError(str(e), query=sql, params=bound) from e

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        return self._run(sql, params, lambda result: result.rowcount)

    def select_all(
        self, sql: str, params: Mapping[str, Any] | None = None
    ) -> list[dict[str, Any]]:
        return self._run(
            sql, params, lambda result: [dict(row) for row in result.mappings()]
        )

    def select_row(
        self, sql: str, params: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        def first(result: CursorResult) -> dict[str, Any]:
            row = result.mappings().first()
            return dict(row) if row is not None else {}

        return self._run(sql, params, first)

    def count(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        return self._run(sql, params, lambda result: int(result.scalar() or 0))

    def insert(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        """Run an INSERT and return the generated id (``RETURNING`` value if any)."""

        def inserted_id(result: CursorResult) -> Any:
            if result.returns_rows:
                return result.scalar()
            return result.lastrowid

        return self._run(sql, params, inserted_id)

    def update(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        return self._run(sql, params, lambda result: result.rowcount)

    def delete(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        return self._run(sql, params, lambda result: result.rowcount)

    def get_errors(self) -> list[dict[str, Any]]:
        return [dict(error) for error in self._errors]

    def get_last_error(self) -> dict[str, Any] | None:
        return dict(self._errors[-1]) if self._errors else None

    def disconnect(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()
