"""Tests for the SQLAlchemy database client."""

import pytest
from sqlalchemy.exc import SQLAlchemyError

from kestrel import Database, DatabaseError, SQLAlchemyDatabase


@pytest.fixture
def items_database(sqlite_database):
    """SQLite client with a small items table."""
    sqlite_database.execute(
        "CREATE TABLE items (id INTEGER PRIMARY KEY, name TEXT NOT NULL)"
    )
    return sqlite_database


class TestSQLAlchemyDatabase:
    """Test statements against SQLite."""

    def test_implements_protocol(self, sqlite_database):
        """The client satisfies the Database protocol."""
        assert isinstance(sqlite_database, Database)

    def test_insert_returns_id(self, items_database):
        """Inserts return the generated key."""
        assert items_database.insert("INSERT INTO items (name) VALUES (:name)", {"name": "a"}) == 1
        assert items_database.insert("INSERT INTO items (name) VALUES (:name)", {"name": "b"}) == 2

    def test_insert_returning(self, items_database):
        """A RETURNING clause provides the id."""
        new_id = items_database.insert(
            "INSERT INTO items (name) VALUES (:name) RETURNING id", {"name": "a"}
        )
        assert new_id == 1

    def test_selects(self, items_database):
        """Rows come back as plain dicts."""
        for name in ("a", "b"):
            items_database.insert("INSERT INTO items (name) VALUES (:name)", {"name": name})

        assert items_database.select_all("SELECT * FROM items ORDER BY id") == [
            {"id": 1, "name": "a"},
            {"id": 2, "name": "b"},
        ]
        assert items_database.select_row(
            "SELECT * FROM items WHERE id = :id", {"id": 2}
        ) == {"id": 2, "name": "b"}
        assert items_database.select_row("SELECT * FROM items WHERE id = :id", {"id": 9}) == {}
        assert items_database.count("SELECT count(*) FROM items") == 2

    def test_update_and_delete_return_rowcount(self, items_database):
        """Updates and deletes report affected rows."""
        items_database.insert("INSERT INTO items (name) VALUES (:name)", {"name": "a"})

        assert items_database.update(
            "UPDATE items SET name = :name WHERE id = :id", {"name": "z", "id": 1}
        ) == 1
        assert items_database.delete("DELETE FROM items WHERE id = :id", {"id": 5}) == 0
        assert items_database.delete("DELETE FROM items WHERE id = :id", {"id": 1}) == 1

    def test_errors_are_recorded(self, items_database):
        """Failures raise DatabaseError and stay queryable."""
        assert items_database.get_last_error() is None

        with pytest.raises(DatabaseError) as exc_info:
            items_database.select_all("sql query invalid")

        assert isinstance(exc_info.value.__cause__, SQLAlchemyError)
        assert exc_info.value.query == "sql query invalid"

        last_error = items_database.get_last_error()
        assert last_error["query"] == "sql query invalid"
        assert last_error["params"] == {}
        assert last_error["message"]

        with pytest.raises(DatabaseError):
            items_database.insert("INSERT INTO items (name) VALUES (:name)", {"name": None})

        errors = items_database.get_errors()
        assert len(errors) == 2
        assert errors[1]["params"] == {"name": None}

    def test_engine_or_url(self, sqlite_database):
        """An existing engine can be wrapped as well."""
        wrapped = SQLAlchemyDatabase(sqlite_database.engine)
        assert wrapped.engine is sqlite_database.engine
        assert wrapped.count("SELECT 1") == 1
