"""Custom exception hierarchy for mountstore."""

from __future__ import annotations

from collections.abc import Sequence


class StorageError(Exception):
    """Base exception for all mountstore errors."""


class MountConflictError(StorageError):
    """A driver is already mounted at the requested base."""

    def __init__(self, message: str, *, mountpoint: str = "") -> None:
        self.mountpoint = mountpoint
        super().__init__(message)


class StorageDisposeError(StorageError):
    """One or more drivers failed to dispose.

    Raised by :meth:`mountstore.Storage.dispose` only after disposal was
    attempted on every mounted driver.  ``errors`` and ``mountpoints``
    are parallel sequences.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: Sequence[BaseException] = (),
        mountpoints: Sequence[str] = (),
    ) -> None:
        self.errors = list(errors)
        self.mountpoints = list(mountpoints)
        super().__init__(message)
