"""Bulk export and import of a key space."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from mountstore._keys import normalize_base
from mountstore.storage import Storage

Snapshot = dict[str, Any]
"""Flat mapping of base-relative key to value."""


async def snapshot(storage: Storage, base: str = "") -> Snapshot:
    """Read every key under *base* concurrently.

    Keys in the result have *base* stripped.
    """
    base = normalize_base(base)
    keys = await storage.get_keys(base)
    values = await asyncio.gather(*(storage.get_item(key) for key in keys))
    return {key[len(base) :]: value for key, value in zip(keys, values, strict=True)}


async def restore_snapshot(storage: Storage, data: Mapping[str, Any], base: str = "") -> None:
    """Write every entry of *data* under *base* concurrently.

    Not atomic: a failing write leaves the entries already written.
    """
    base = normalize_base(base)
    await asyncio.gather(*(storage.set_item(f"{base}{key}", value) for key, value in data.items()))
