"""Hook dispatcher for post lifecycle observers.

Two kinds of hooks:
- actions: ``notify(event, subject, payload)``; fire-and-forget. A failing
  observer is logged and reported back, never allowed to abort the save.
- filters: ``filter(event, value, subject)``; an ordered chain of
  transformers, each receiving the previous one's output.

Callbacks may be plain functions or coroutines. Lower priority runs first;
equal priorities run in registration order.

Usage:
    hooks = HookDispatcher()
    hooks.add_action("update_post_status", audit_status_change)
    hooks.add_filter("post_permalink", lambda url, post: url + "?ref=feed")
"""

import inspect
import itertools
from collections import defaultdict
from typing import Any, Awaitable, Callable, Union

import logfire

Action = Callable[[Any, Any], Union[None, Awaitable[None]]]
Filter = Callable[[Any, Any], Any]

DEFAULT_PRIORITY = 8


class HookDispatcher:
    """Registry and dispatcher of actions and filters."""

    def __init__(self) -> None:
        self._actions: dict[str, list[tuple[int, int, Action]]] = defaultdict(list)
        self._filters: dict[str, list[tuple[int, int, Filter]]] = defaultdict(list)
        self._order = itertools.count()

    def add_action(
        self, event: str, callback: Action, priority: int = DEFAULT_PRIORITY
    ) -> None:
        self._actions[event].append((priority, next(self._order), callback))
        self._actions[event].sort(key=lambda entry: entry[:2])

    def add_filter(
        self, event: str, transformer: Filter, priority: int = DEFAULT_PRIORITY
    ) -> None:
        self._filters[event].append((priority, next(self._order), transformer))
        self._filters[event].sort(key=lambda entry: entry[:2])

    def remove_action(self, event: str, callback: Action) -> None:
        self._actions[event] = [e for e in self._actions[event] if e[2] is not callback]

    def remove_filter(self, event: str, transformer: Filter) -> None:
        self._filters[event] = [
            e for e in self._filters[event] if e[2] is not transformer
        ]

    async def notify(
        self, event: str, subject: Any, payload: Any = None
    ) -> list[Exception]:
        """Run every action registered for ``event``.

        Args:
            event: Event name, e.g. 'update_post_status' or 'post_delete'
            subject: The object the event is about (the post record)
            payload: Event data, e.g. the new field value

        Returns:
            Exceptions raised by failing observers (empty when all succeeded)
        """
        failures: list[Exception] = []
        for _, _, callback in list(self._actions.get(event, ())):
            try:
                result = callback(subject, payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logfire.exception(
                    "Hook observer failed",
                    hook_event=event,
                    observer=getattr(callback, "__qualname__", repr(callback)),
                )
                failures.append(e)
        return failures

    async def filter(self, event: str, value: Any, subject: Any = None) -> Any:
        """Pass ``value`` through every filter registered for ``event``."""
        for _, _, transformer in list(self._filters.get(event, ())):
            value = transformer(value, subject)
            if inspect.isawaitable(value):
                value = await value
        return value
