from __future__ import annotations

import pytest

from mountstore.drivers.memory import MemoryDriver
from mountstore.snapshot import restore_snapshot, snapshot
from mountstore.storage import create_storage


@pytest.mark.asyncio
async def test_snapshot_strips_base_and_deserializes() -> None:
    storage = create_storage().mount("app/cache/", MemoryDriver())
    await storage.set_item("app/config", {"debug": True})
    await storage.set_item("app/cache/hits", 3)
    await storage.set_item("other", "x")
    await storage.set_meta("app/config", {"owner": "ada"})

    data = await snapshot(storage, "app")

    assert data == {"config": {"debug": True}, "cache/hits": 3}


@pytest.mark.asyncio
async def test_snapshot_restore_round_trip() -> None:
    source = create_storage()
    await source.set_item("s/a", "text")
    await source.set_item("s/b/c", [1, 2, 3])
    await source.set_item("s/d", False)

    data = await snapshot(source, "s/")

    target = create_storage()
    await restore_snapshot(target, data, "s/")

    assert sorted(await target.get_keys()) == ["s/a", "s/b/c", "s/d"]
    assert await snapshot(target, "s/") == data


@pytest.mark.asyncio
async def test_restore_snapshot_defaults_to_root() -> None:
    storage = create_storage()
    await restore_snapshot(storage, {"x": 1, "y/z": "two"})

    assert await storage.get_item("x") == 1
    assert await storage.get_item("y/z") == "two"
