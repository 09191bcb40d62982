from __future__ import annotations

import pytest

from mountstore.config import DEFAULT_META_SUFFIX, StorageConfig


def test_defaults() -> None:
    config = StorageConfig()
    assert config.meta_suffix == DEFAULT_META_SUFFIX
    assert config.meta_timestamp_fields == ("atime", "mtime")
    assert config.trace_enabled is False


def test_from_env(monkeypatch) -> None:
    monkeypatch.setenv("MOUNTSTORE_META_SUFFIX", "#meta")
    monkeypatch.setenv("MOUNTSTORE_META_TIMESTAMP_FIELDS", "atime, mtime ,ctime")
    monkeypatch.setenv("MOUNTSTORE_TRACE_ENABLED", "yes")
    monkeypatch.setenv("MOUNTSTORE_TRACE_MAX_STRING", "32")

    config = StorageConfig.from_env()

    assert config.meta_suffix == "#meta"
    assert config.meta_timestamp_fields == ("atime", "mtime", "ctime")
    assert config.trace_enabled is True
    assert config.trace_max_string == 32


def test_from_env_overrides_win(monkeypatch) -> None:
    monkeypatch.setenv("MOUNTSTORE_TRACE_ENABLED", "true")

    config = StorageConfig.from_env(trace_enabled=False)

    assert config.trace_enabled is False


def test_empty_meta_suffix_rejected() -> None:
    with pytest.raises(ValueError):
        StorageConfig(meta_suffix="")


def test_from_env_override_skips_malformed_env(monkeypatch) -> None:
    monkeypatch.setenv("MOUNTSTORE_TRACE_MAX_STRING", "abc")
    monkeypatch.setenv("MOUNTSTORE_TRACE_ENABLED", "yes")

    config = StorageConfig.from_env(trace_max_string=10, trace_enabled=False)

    assert config.trace_max_string == 10
    assert config.trace_enabled is False
