"""In-memory driver, used as the default root mount."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class MemoryDriver:
    """Dict-backed driver with synchronous methods.

    Implements every capability except ``watch`` and ``get_meta``, so
    change events and metadata for it come from the router.
    """

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def has_item(self, key: str) -> bool:
        return key in self._data

    def get_item(self, key: str) -> Any:
        return self._data.get(key)

    def set_item(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def get_keys(self, base: str | None = None) -> list[str]:
        if not base:
            return list(self._data)
        return [key for key in self._data if key.startswith(base)]

    def clear(self, base: str | None = None) -> None:
        if not base:
            self._data.clear()
            return
        for key in self.get_keys(base):
            del self._data[key]

    def dispose(self) -> None:
        self._data.clear()
