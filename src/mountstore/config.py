"""Storage configuration for mountstore."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

DEFAULT_META_SUFFIX = "$"
DEFAULT_TIMESTAMP_FIELDS: tuple[str, ...] = ("atime", "mtime")
DEFAULT_REDACT_KEYS: frozenset[str] = frozenset(
    {
        "password",
        "passwd",
        "secret",
        "token",
        "accesstoken",
        "refreshtoken",
        "apikey",
        "authorization",
        "cookie",
    }
)


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_list(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclasses.dataclass(frozen=True)
class StorageConfig:
    """Storage configuration.

    Parameters
    ----------
    meta_suffix : str
        Suffix appended to a key to form its shadow metadata key.
        Keys ending in this suffix are hidden from key listings.
    meta_timestamp_fields : tuple of str
        Shadow metadata fields reconstituted into ``datetime`` values
        by :meth:`mountstore.Storage.get_meta`.
    trace_enabled : bool
        Log every routed write at DEBUG level, with values redacted.
    redact_keys : frozenset of str
        Lower-cased field names whose values are hidden in trace logs.
    trace_max_string : int
        Strings longer than this are truncated in trace logs.
    """

    meta_suffix: str = DEFAULT_META_SUFFIX
    meta_timestamp_fields: tuple[str, ...] = DEFAULT_TIMESTAMP_FIELDS
    trace_enabled: bool = False
    redact_keys: frozenset[str] = DEFAULT_REDACT_KEYS
    trace_max_string: int = 256

    def __post_init__(self) -> None:
        if not self.meta_suffix:
            raise ValueError("meta_suffix must be non-empty")

    @classmethod
    def from_env(cls, **overrides: Any) -> StorageConfig:
        """Create configuration from ``MOUNTSTORE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        suffix = env.get("MOUNTSTORE_META_SUFFIX")
        if suffix is not None:
            config_kwargs["meta_suffix"] = suffix

        fields_env = env.get("MOUNTSTORE_META_TIMESTAMP_FIELDS")
        if fields_env is not None:
            config_kwargs["meta_timestamp_fields"] = _env_list(fields_env)

        if "trace_enabled" not in overrides:
            config_kwargs["trace_enabled"] = _env_bool(env.get("MOUNTSTORE_TRACE_ENABLED"), False)

        max_string_env = env.get("MOUNTSTORE_TRACE_MAX_STRING")
        if max_string_env is not None and "trace_max_string" not in overrides:
            config_kwargs["trace_max_string"] = int(max_string_env)

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
