"""mountstore - Async key-value storage over drivers mounted at key prefixes."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mountstore")
except PackageNotFoundError:
    __version__ = "0+local"
from mountstore._keys import normalize_base, normalize_key
from mountstore._mounts import MountInfo, MountTable, ResolvedKey
from mountstore._watch import WatchCallback, WatchEvent, WatchState
from mountstore.config import StorageConfig
from mountstore.driver import Driver, capabilities
from mountstore.drivers import MemoryDriver
from mountstore.exceptions import MountConflictError, StorageDisposeError, StorageError
from mountstore.models import StorageMeta
from mountstore.serialization import deserialize, serialize
from mountstore.snapshot import Snapshot, restore_snapshot, snapshot
from mountstore.storage import Storage, create_storage

__all__ = [
    "__version__",
    "Driver",
    "MemoryDriver",
    "MountConflictError",
    "MountInfo",
    "MountTable",
    "ResolvedKey",
    "Snapshot",
    "Storage",
    "StorageConfig",
    "StorageDisposeError",
    "StorageError",
    "StorageMeta",
    "WatchCallback",
    "WatchEvent",
    "WatchState",
    "capabilities",
    "create_storage",
    "deserialize",
    "normalize_base",
    "normalize_key",
    "restore_snapshot",
    "serialize",
    "snapshot",
]
