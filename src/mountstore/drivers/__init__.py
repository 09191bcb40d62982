"""Bundled drivers."""

from mountstore.drivers.memory import MemoryDriver

__all__ = ["MemoryDriver"]
