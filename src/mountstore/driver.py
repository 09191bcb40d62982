"""Driver capability interface.

A driver is any object providing the three required methods of
:class:`Driver`.  Every other capability is optional and detected by
attribute presence, never by type:

=============  ==========================================================
capability     when absent
=============  ==========================================================
``set_item``   driver is read-only; writes are ignored
``remove_item`` driver is read-only; removals are ignored
``clear``      router falls back to ``get_keys`` + ``remove_item``
``get_meta``   only shadow metadata is available
``watch``      router emits synthetic change events on its own writes
``dispose``    nothing to release
=============  ==========================================================

Any driver method may be a plain function or a coroutine function.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")

DriverWatchCallback = Callable[[str, str], Any]
"""Callback handed to ``Driver.watch``: ``(event, relative_key)``."""

OPTIONAL_CAPABILITIES: tuple[str, ...] = (
    "set_item",
    "remove_item",
    "clear",
    "get_meta",
    "watch",
    "dispose",
)


@runtime_checkable
class Driver(Protocol):
    """Structural interface every mounted backing store satisfies."""

    def has_item(self, key: str) -> bool | Awaitable[bool]:
        ...

    def get_item(self, key: str) -> Any:
        ...

    def get_keys(self, base: str | None = None) -> Iterable[str] | Awaitable[Iterable[str]]:
        ...


def capability(driver: Any, name: str) -> Callable[..., Any] | None:
    """Return the bound capability *name* of *driver*, or ``None``."""
    method = getattr(driver, name, None)
    return method if callable(method) else None


def capabilities(driver: Any) -> frozenset[str]:
    """Names of the optional capabilities *driver* implements."""
    return frozenset(name for name in OPTIONAL_CAPABILITIES if capability(driver, name) is not None)


async def maybe_await(value: T | Awaitable[T]) -> T:
    """Await *value* if it is awaitable, otherwise return it."""
    if inspect.isawaitable(value):
        return await value
    return value


async def call(method: Callable[..., Any], *args: Any) -> Any:
    """Invoke a driver method that may be sync or async."""
    return await maybe_await(method(*args))
