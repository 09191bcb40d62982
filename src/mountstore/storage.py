"""Async key-value storage routed across mounted drivers."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from mountstore._keys import normalize_base, normalize_key
from mountstore._mounts import MountInfo, MountTable
from mountstore._redact import redact_for_log
from mountstore._watch import ChangeAggregator, WatchCallback, WatchEvent
from mountstore.config import StorageConfig
from mountstore.driver import call, capabilities, capability
from mountstore.drivers.memory import MemoryDriver
from mountstore.exceptions import StorageDisposeError
from mountstore.models import StorageMeta
from mountstore.serialization import deserialize, serialize

_logger = logging.getLogger(__name__)


async def _dispose(driver: Any) -> None:
    dispose = capability(driver, "dispose")
    if dispose is not None:
        await call(dispose)


class Storage:
    """One flat key space over drivers mounted at key prefixes.

    Keys resolve to the driver with the longest matching mountpoint.
    A root mount always exists and defaults to :class:`MemoryDriver`.

    Usage::

        async with Storage() as storage:
            storage.mount("cache/", MemoryDriver())
            await storage.set_item("cache/user/1", {"name": "Ada"})
            keys = await storage.get_keys("cache/")
    """

    def __init__(self, driver: Any | None = None, *, config: StorageConfig | None = None) -> None:
        self._config = config or StorageConfig()
        self._mounts = MountTable(driver if driver is not None else MemoryDriver())
        self._watcher = ChangeAggregator(logger=_logger)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> Storage:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.dispose()

    @property
    def config(self) -> StorageConfig:
        return self._config

    @property
    def mounts(self) -> MountTable:
        return self._mounts

    @property
    def watching(self) -> bool:
        return self._watcher.watching

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _meta_key(self, key: str) -> str:
        return f"{key}{self._config.meta_suffix}"

    def _trace(self, operation: str, key: str, value: Any = None) -> None:
        if not self._config.trace_enabled:
            return
        _logger.debug(
            "%s key=%s value=%s",
            operation,
            key,
            redact_for_log(
                value,
                sensitive_keys=self._config.redact_keys,
                max_string=self._config.trace_max_string,
            ),
        )

    def _notify(self, driver: Any, event: WatchEvent, key: str) -> None:
        # Drivers with native watch report their own changes.
        if capability(driver, "watch") is None:
            self._watcher.emit(event, key)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def has_item(self, key: str) -> bool:
        resolved = self._mounts.resolve(normalize_key(key))
        return bool(await call(resolved.driver.has_item, resolved.relative_key))

    async def get_item(self, key: str) -> Any:
        resolved = self._mounts.resolve(normalize_key(key))
        raw = await call(resolved.driver.get_item, resolved.relative_key)
        return deserialize(raw)

    async def set_item(self, key: str, value: Any) -> None:
        """Write *value* at *key*; ``None`` removes the key instead."""
        if value is None:
            await self.remove_item(key)
            return
        key = normalize_key(key)
        resolved = self._mounts.resolve(key)
        set_item = capability(resolved.driver, "set_item")
        if set_item is None:
            _logger.debug("Ignoring write to read-only mount %r key=%s", resolved.mountpoint, key)
            return
        self._trace("set_item", key, value)
        await call(set_item, resolved.relative_key, serialize(value))
        self._notify(resolved.driver, WatchEvent.UPDATE, key)

    async def remove_item(self, key: str, remove_meta: bool = True) -> None:
        """Remove *key* and, unless *remove_meta* is false, its shadow metadata."""
        key = normalize_key(key)
        resolved = self._mounts.resolve(key)
        remove_item = capability(resolved.driver, "remove_item")
        if remove_item is None:
            _logger.debug("Ignoring removal on read-only mount %r key=%s", resolved.mountpoint, key)
            return
        self._trace("remove_item", key)
        await call(remove_item, resolved.relative_key)
        if remove_meta:
            try:
                await call(remove_item, self._meta_key(resolved.relative_key))
            except Exception:
                _logger.debug("Shadow metadata removal failed key=%s", key, exc_info=True)
        self._notify(resolved.driver, WatchEvent.REMOVE, key)

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    async def get_meta(self, key: str, native_only: bool = False) -> dict[str, Any]:
        """Return the metadata record of *key*.

        Native driver metadata is merged first, then the shadow record
        (unless *native_only*), whose values win on conflict.
        """
        resolved = self._mounts.resolve(normalize_key(key))
        meta: dict[str, Any] = {}

        get_meta = capability(resolved.driver, "get_meta")
        if get_meta is not None:
            native = await call(get_meta, resolved.relative_key)
            if native:
                meta.update(native)

        if not native_only:
            raw = await call(resolved.driver.get_item, self._meta_key(resolved.relative_key))
            shadow = deserialize(raw)
            if isinstance(shadow, dict):
                meta.update(StorageMeta.from_record(shadow, self._config.meta_timestamp_fields))
        return meta

    async def set_meta(self, key: str, value: Any) -> None:
        await self.set_item(self._meta_key(normalize_key(key)), value)

    async def remove_meta(self, key: str) -> None:
        await self.remove_item(self._meta_key(normalize_key(key)), remove_meta=False)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    async def _mount_keys(self, mount: MountInfo) -> list[str]:
        raw_keys = await call(mount.driver.get_keys, mount.relative_base)
        return [f"{mount.mountpoint}{normalize_key(key)}" for key in raw_keys]

    async def get_keys(self, base: str = "") -> list[str]:
        """List absolute keys under *base* across every overlapping mount."""
        base = normalize_base(base)
        groups = await asyncio.gather(*(self._mount_keys(m) for m in self._mounts.resolve_overlapping(base)))
        suffix = self._config.meta_suffix
        return [key for keys in groups for key in keys if key.startswith(base) and not key.endswith(suffix)]

    # ------------------------------------------------------------------
    # Utils
    # ------------------------------------------------------------------

    async def _clear_mount(self, mount: MountInfo) -> None:
        clear = capability(mount.driver, "clear")
        if clear is not None:
            await call(clear, mount.relative_base)
            return

        remove_item = capability(mount.driver, "remove_item")
        if remove_item is None:
            return

        scope = mount.relative_base or ""
        keys = await call(mount.driver.get_keys, mount.relative_base)
        await asyncio.gather(*(call(remove_item, key) for key in keys if normalize_key(key).startswith(scope)))

    async def clear(self, base: str = "") -> None:
        """Remove every key under *base* from every overlapping mount."""
        base = normalize_base(base)
        self._trace("clear", base)
        await asyncio.gather(*(self._clear_mount(m) for m in self._mounts.resolve_overlapping(base)))

    async def dispose(self) -> None:
        """Dispose every mounted driver.

        Raises
        ------
        StorageDisposeError
            After all drivers were attempted, if any of them failed.
        """
        entries = list(self._mounts)
        results = await asyncio.gather(*(_dispose(driver) for _, driver in entries), return_exceptions=True)

        errors: list[BaseException] = []
        failed: list[str] = []
        for (mountpoint, _driver), result in zip(entries, results, strict=True):
            if isinstance(result, BaseException):
                _logger.warning("Driver mounted at %r failed to dispose", mountpoint, exc_info=result)
                errors.append(result)
                failed.append(mountpoint)
        if errors:
            raise StorageDisposeError(
                f"{len(errors)} of {len(entries)} drivers failed to dispose",
                errors=errors,
                mountpoints=failed,
            )

    async def watch(self, callback: WatchCallback) -> None:
        """Register *callback* for change events ``(event, key)``.

        The first registration starts watching every mounted driver;
        watching stays active for the lifetime of the storage.
        """
        await self._watcher.add_listener(callback, self._mounts)

    # ------------------------------------------------------------------
    # Mount
    # ------------------------------------------------------------------

    def mount(self, base: str, driver: Any) -> Storage:
        """Mount *driver* at *base* and return the storage for chaining.

        Raises
        ------
        MountConflictError
            If a driver is already mounted at a non-root *base*.
        """
        base = normalize_base(base)
        self._mounts.add(base, driver)
        _logger.debug(
            "Mounted %s at %r capabilities=%s",
            type(driver).__name__,
            base,
            sorted(capabilities(driver)),
        )
        if self._watcher.watching:
            self._watcher.subscribe_late(base, driver)
        return self

    async def unmount(self, base: str, dispose: bool = True) -> None:
        """Unmount the driver at *base*, disposing it unless told not to.

        Unknown bases and the root are ignored.
        """
        base = normalize_base(base)
        if not base or base not in self._mounts:
            return
        if dispose:
            await _dispose(self._mounts.get(base))
        self._mounts.remove(base)
        _logger.debug("Unmounted %r", base)


def create_storage(driver: Any | None = None, *, config: StorageConfig | None = None) -> Storage:
    """Create a :class:`Storage` with *driver* (default in-memory) at the root."""
    return Storage(driver, config=config)
