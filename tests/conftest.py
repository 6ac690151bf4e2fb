"""Shared fixtures for kestrel tests."""

from typing import Any

import pytest
from sqlalchemy import MetaData

from kestrel import DatabaseError, Field, Model, SQLAlchemyDatabase


class RecordingDatabase:
    """In-memory database client that records every statement it receives."""

    def __init__(self):
        self.calls: list[tuple[str, str, dict[str, Any]]] = []
        self.rows: list[dict[str, Any]] = []
        self.row: dict[str, Any] = {}
        self.count_result = 0
        self.next_id = 1
        self.affected = 1
        self.fail = False
        self._errors: list[dict[str, Any]] = []

    def _record(self, method: str, sql: str, params) -> None:
        params = dict(params or {})
        self.calls.append((method, sql, params))
        if self.fail:
            self._errors.append({"query": sql, "params": params, "message": "failed"})
            raise DatabaseError("failed", query=sql, params=params)

    @property
    def last_call(self) -> tuple[str, str, dict[str, Any]]:
        return self.calls[-1]

    def execute(self, sql, params=None):
        self._record("execute", sql, params)
        return self.affected

    def select_all(self, sql, params=None):
        self._record("select_all", sql, params)
        return [dict(row) for row in self.rows]

    def select_row(self, sql, params=None):
        self._record("select_row", sql, params)
        return dict(self.row)

    def count(self, sql, params=None):
        self._record("count", sql, params)
        return self.count_result

    def insert(self, sql, params=None):
        self._record("insert", sql, params)
        new_id = self.next_id
        self.next_id += 1
        return new_id

    def update(self, sql, params=None):
        self._record("update", sql, params)
        return self.affected

    def delete(self, sql, params=None):
        self._record("delete", sql, params)
        return self.affected

    def get_errors(self):
        return [dict(error) for error in self._errors]

    def get_last_error(self):
        return dict(self._errors[-1]) if self._errors else None


@pytest.fixture
def crud_model_cls():
    """Model covering every field kind used by the CRUD tests."""

    class CrudModel(Model):
        table = "crud_table"
        parameters_to_remove = ("param_to_remove",)

        id = Field("int", ["pk", "unsigned", "not_null"])
        title = Field("varchar", ["max:5"])
        date_start = Field("datetime", ["not_null"])
        year_start = Field("year")
        hour_start = Field("time", [], "00:00:00")
        hour_stop = Field("time", [], None)
        is_visible = Field("enum:yes,no", ["not_null"], "yes")
        email = Field("varchar", ["email"])
        nomaxlimit = Field("varchar", ["max:"])
        external_id = Field("int", ["fk", "unsigned"])

    return CrudModel


@pytest.fixture
def recording_database():
    """Fake client for checking the statements a model builds."""
    return RecordingDatabase()


@pytest.fixture
def recording_model(crud_model_cls, recording_database):
    """CrudModel bound to the recording client."""
    return crud_model_cls(recording_database)


@pytest.fixture
def sqlite_database(tmp_path):
    """SQLAlchemy client on a temporary SQLite file."""
    database = SQLAlchemyDatabase(f"sqlite:///{tmp_path / 'test_database.db'}")
    yield database
    database.disconnect()


@pytest.fixture
def crud_model(crud_model_cls, sqlite_database):
    """CrudModel on SQLite with its table created."""
    metadata = MetaData()
    crud_model_cls.to_sqlalchemy(metadata=metadata)
    metadata.create_all(sqlite_database.engine)
    return crud_model_cls(sqlite_database)


@pytest.fixture
def sample_rows():
    """Rows as stored by three creates on the CRUD table."""
    return [
        {
            "id": index,
            "title": title,
            "date_start": "2018-08-07 20:06:23",
            "year_start": None,
            "hour_start": "00:00:00",
            "hour_stop": None,
            "is_visible": "yes",
            "email": None,
            "nomaxlimit": None,
            "external_id": None,
        }
        for index, title in enumerate(["first", "secon", "third"], start=1)
    ]
