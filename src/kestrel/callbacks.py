"""Named before/after callbacks around create, update and delete."""

from enum import Enum
from typing import Any, Callable, Mapping

BeforeCallback = Callable[[str, dict[str, Any]], Any]
AfterCallback = Callable[..., Any]


class Hook(str, Enum):
    """Lifecycle points a callback can be attached to."""

    BEFORE_CREATE = "before_create"
    AFTER_CREATE = "after_create"
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    BEFORE_DELETE = "before_delete"
    AFTER_DELETE = "after_delete"

    @property
    def is_before(self) -> bool:
        return self.value.startswith("before_")


class CallbackRegistry:
    """
    Ordered, named callbacks per `Hook`.

    Callbacks run in registration order. Adding under an existing name
    replaces that callback in place, and removing an unknown name does
    nothing. Pass the same registry to several models to share callbacks
    between them. The registry is not synchronised, so do not mutate it
    while another thread runs an operation.

    Examples
    --------
        >>> registry = CallbackRegistry()
        >>> registry.add(Hook.BEFORE_CREATE, "audit", lambda sql, params: None)
        >>> registry.names(Hook.BEFORE_CREATE)
        ['audit']
    """

    def __init__(self):
        self._callbacks: dict[Hook, dict[str, Callable[..., Any]]] = {
            hook: {} for hook in Hook
        }

    def add(self, hook: Hook, name: str, callback: Callable[..., Any]) -> None:
        hook = Hook(hook)
        if not callable(callback):
            raise TypeError(f"Callback '{name}' for {hook.value} is not callable")
        self._callbacks[hook][name] = callback

    def remove(self, hook: Hook, name: str) -> None:
        self._callbacks[Hook(hook)].pop(name, None)

    def get(self, hook: Hook) -> list[Callable[..., Any]]:
        return list(self._callbacks[Hook(hook)].values())

    def names(self, hook: Hook) -> list[str]:
        return list(self._callbacks[Hook(hook)])

    def clear(self, hook: Hook | None = None) -> None:
        hooks = [Hook(hook)] if hook is not None else list(Hook)
        for item in hooks:
            self._callbacks[item] = {}

    def run_before(
        self, hook: Hook, sql: str, params: Mapping[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        """
        Thread ``(sql, params)`` through the before-callbacks of `hook`.

        A callback returning a two-item tuple or list replaces the pair for
        the next callback; any other return value leaves it unchanged.
        """
        params = dict(params)
        for callback in self.get(hook):
            result = callback(sql, dict(params))
            if isinstance(result, (tuple, list)) and len(result) == 2:
                sql, params = result[0], dict(result[1])
        return sql, params

    def run_after(
        self, hook: Hook, params: Mapping[str, Any], *leading: Any
    ) -> dict[str, Any]:
        """
        Run the after-callbacks of `hook` as ``callback(*leading, params)``.

        A callback returning a mapping replaces `params` for the callbacks
        that follow it.
        """
        params = dict(params)
        for callback in self.get(hook):
            result = callback(*leading, dict(params))
            if isinstance(result, Mapping):
                params = dict(result)
        return params
