"""Mount table: longest-prefix resolution of keys to drivers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from mountstore.exceptions import MountConflictError

_logger = logging.getLogger(__name__)

ROOT = ""


@dataclass(frozen=True, slots=True)
class ResolvedKey:
    """A key resolved to the driver that owns it."""

    mountpoint: str
    driver: Any
    relative_key: str


@dataclass(frozen=True, slots=True)
class MountInfo:
    """A mount whose key space overlaps a base.

    ``relative_base`` is the base expressed inside the driver when the
    base descends below the mountpoint, or ``None`` when the whole
    driver is in scope.
    """

    mountpoint: str
    driver: Any
    relative_base: str | None = None


class MountTable:
    """Mountpoint → driver mapping, always holding a root mount.

    Mountpoints are expected in canonical base form (see
    :func:`mountstore._keys.normalize_base`).  Resolution scans
    mountpoints longest first; equal lengths keep insertion order.
    """

    def __init__(self, root_driver: Any) -> None:
        self._mounts: dict[str, Any] = {ROOT: root_driver}
        self._mountpoints: list[str] = [ROOT]

    def __contains__(self, mountpoint: object) -> bool:
        return mountpoint in self._mounts

    def __len__(self) -> int:
        return len(self._mounts)

    def __iter__(self) -> Iterator[tuple[str, Any]]:
        for mountpoint in list(self._mountpoints):
            yield mountpoint, self._mounts[mountpoint]

    @property
    def mountpoints(self) -> tuple[str, ...]:
        """Mountpoints in resolution order (longest first)."""
        return tuple(self._mountpoints)

    def get(self, mountpoint: str) -> Any | None:
        return self._mounts.get(mountpoint)

    def resolve(self, key: str) -> ResolvedKey:
        """Return the driver owning *key* and the key relative to its mount."""
        for mountpoint in self._mountpoints:
            if key.startswith(mountpoint):
                return ResolvedKey(
                    mountpoint=mountpoint,
                    driver=self._mounts[mountpoint],
                    relative_key=key[len(mountpoint) :],
                )
        # Unreachable: the root mountpoint prefixes every key.
        return ResolvedKey(mountpoint=ROOT, driver=self._mounts[ROOT], relative_key=key)

    def resolve_overlapping(self, base: str) -> list[MountInfo]:
        """Return every mount whose key space may hold keys under *base*.

        That is each ancestor mount (``base`` starts with the mountpoint)
        and each descendant mount (the mountpoint starts with ``base``).
        """
        return [
            MountInfo(
                mountpoint=mountpoint,
                driver=self._mounts[mountpoint],
                relative_base=base[len(mountpoint) :] if len(base) > len(mountpoint) else None,
            )
            for mountpoint in self._mountpoints
            if mountpoint.startswith(base) or base.startswith(mountpoint)
        ]

    def add(self, mountpoint: str, driver: Any) -> None:
        """Register *driver* at *mountpoint*.

        Re-mounting the root replaces the root driver.  Any other
        mountpoint may only be registered once.
        """
        if mountpoint and mountpoint in self._mounts:
            raise MountConflictError(f"already mounted at {mountpoint!r}", mountpoint=mountpoint)
        if mountpoint:
            self._mountpoints.append(mountpoint)
            self._mountpoints.sort(key=len, reverse=True)
        else:
            _logger.debug("Replacing root driver with %s", type(driver).__name__)
        self._mounts[mountpoint] = driver

    def remove(self, mountpoint: str) -> Any | None:
        """Unregister *mountpoint* and return its driver.

        The root and unknown mountpoints are ignored and return ``None``.
        """
        if not mountpoint or mountpoint not in self._mounts:
            return None
        self._mountpoints.remove(mountpoint)
        return self._mounts.pop(mountpoint)
