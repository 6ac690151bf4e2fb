"""JSON export mixin."""

from typing import Any

from pydantic import TypeAdapter

from .config import get_settings

_JSON_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


class JsonOutput:
    """
    Adds `get_json` to a class that can fetch one record or all of them.

    Override `get_one_json` and `get_all_json` to choose what is exported.
    Mixed into a `Model`, they default to ``one(id)`` and an unpaginated
    ``all()``.

    Examples
    --------
        >>> class ArticleModel(JsonOutput, Model):
        ...     id = Field("int", ["pk", "unsigned", "not_null"])
        ...     title = Field("varchar", ["max:255"])
        >>> ArticleModel(database).get_json(1)
        '{"id":1,"title":"first"}'
    """

    def get_json(self, id: Any = None) -> str:
        """Serialise the record `id`, or every record when `id` is None."""
        if id is not None:
            data = self.get_one_json(id)
        else:
            data = self.get_all_json()

        return _JSON_ADAPTER.dump_json(data).decode()

    def get_one_json(self, id: Any) -> Any:
        """
        Return the record exported for `id`.

        Defaults to ``self.one(id)``. Hosts without a `one` method must
        override this, otherwise `NotImplementedError` is raised.
        """
        one = getattr(self, "one", None)
        if one is None:
            raise NotImplementedError(f"{type(self).__name__} must implement get_one_json")
        return one(id)

    def get_all_json(self) -> Any:
        """
        Return every record to export.

        Defaults to an unpaginated ``self.all()``. Hosts without an `all`
        method must override this, otherwise `NotImplementedError` is raised.
        """
        list_all = getattr(self, "all", None)
        if list_all is None:
            raise NotImplementedError(f"{type(self).__name__} must implement get_all_json")
        settings = getattr(self, "settings", None) or get_settings()
        return list_all({settings.NO_LIMIT_KEY: 1})
