"""Change notification aggregation for Storage.

Owns:
- the one-way ``IDLE`` → ``WATCHING`` activation
- subscribing to the native ``watch`` capability of mounted drivers
- translating driver-relative keys into absolute keys
- fan-out of every event to the registered listeners
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterable
from enum import StrEnum
from typing import Any

from mountstore._keys import normalize_key
from mountstore.driver import DriverWatchCallback, call, capability

_logger = logging.getLogger(__name__)


class WatchEvent(StrEnum):
    UPDATE = "update"
    REMOVE = "remove"


class WatchState(StrEnum):
    IDLE = "idle"
    WATCHING = "watching"


WatchCallback = Callable[[WatchEvent | str, str], Any]
"""Listener signature: ``(event, absolute_key)``.

Event names outside :class:`WatchEvent` reported by a driver are passed
through as plain strings.
"""


class ChangeAggregator:
    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._logger = logger or _logger
        self._state = WatchState.IDLE
        self._listeners: list[WatchCallback] = []
        # Strong references to in-flight late subscriptions.
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def state(self) -> WatchState:
        return self._state

    @property
    def watching(self) -> bool:
        return self._state is WatchState.WATCHING

    def emit(self, event: WatchEvent | str, key: str) -> None:
        """Deliver an event to every listener; no-op until watching starts."""
        if self._state is not WatchState.WATCHING:
            return
        try:
            event = WatchEvent(event)
        except ValueError:
            self._logger.debug("Forwarding unknown watch event=%r key=%s as-is", event, key)
        key = normalize_key(key)
        for listener in list(self._listeners):
            try:
                listener(event, key)
            except Exception:
                self._logger.warning("Watch listener failed event=%s key=%s", event, key, exc_info=True)

    async def add_listener(self, callback: WatchCallback, mounts: Iterable[tuple[str, Any]]) -> None:
        """Register *callback*, activating watching on first use."""
        await self._start(mounts)
        self._listeners.append(callback)

    async def _start(self, mounts: Iterable[tuple[str, Any]]) -> None:
        if self._state is WatchState.WATCHING:
            return
        self._state = WatchState.WATCHING
        self._logger.debug("Change watching activated")
        for mountpoint, driver in list(mounts):
            await self.subscribe(mountpoint, driver)

    def _forwarder(self, mountpoint: str) -> DriverWatchCallback:
        def forward(event: str, key: str) -> None:
            self.emit(event, f"{mountpoint}{key}")

        return forward

    async def subscribe(self, mountpoint: str, driver: Any) -> None:
        """Subscribe to *driver*'s native watch, if it has one."""
        watch = capability(driver, "watch")
        if watch is None:
            return
        await call(watch, self._forwarder(mountpoint))
        self._logger.debug("Watching driver mounted at %r", mountpoint)

    def subscribe_late(self, mountpoint: str, driver: Any) -> None:
        """Subscribe a driver mounted after watching started.

        The mount has already been committed, so failures are logged
        instead of raised.  Async ``watch`` implementations are scheduled
        on the running loop.
        """
        if self._state is not WatchState.WATCHING:
            return
        watch = capability(driver, "watch")
        if watch is None:
            return
        try:
            result = watch(self._forwarder(mountpoint))
        except Exception:
            self._logger.warning("Failed to watch driver mounted at %r", mountpoint, exc_info=True)
            return
        if not inspect.isawaitable(result):
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(result):
                result.close()
            self._logger.warning("No running event loop to watch driver mounted at %r", mountpoint)
            return
        future = asyncio.ensure_future(result, loop=loop)
        self._pending.add(future)
        future.add_done_callback(lambda fut: self._on_late_subscribed(mountpoint, fut))

    def _on_late_subscribed(self, mountpoint: str, future: asyncio.Future[Any]) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            self._logger.warning("Failed to watch driver mounted at %r", mountpoint, exc_info=exc)

    async def wait_pending(self) -> None:
        """Wait for late subscriptions still in flight."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
