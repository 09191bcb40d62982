"""Redaction of stored values for trace logging.

Values written through the router may carry credentials.  Trace logs run
every value through :func:`redact_for_log` first.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping, Sequence
from typing import Any

from mountstore.config import DEFAULT_REDACT_KEYS

_MAX_DEPTH = 16


def redact_for_log(
    value: Any,
    *,
    sensitive_keys: Collection[str] = DEFAULT_REDACT_KEYS,
    max_string: int = 256,
    _depth: int = 0,
) -> Any:
    """Return a copy of *value* with sensitive fields hidden."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if isinstance(value, str):
        if len(value) <= max_string:
            return value
        return f"{value[:max_string]}…<truncated {len(value) - max_string} chars>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(k): (
                "<redacted>"
                if str(k).lower() in sensitive_keys
                else redact_for_log(v, sensitive_keys=sensitive_keys, max_string=max_string, _depth=_depth + 1)
            )
            for k, v in value.items()
        }

    if isinstance(value, Sequence):
        return [
            redact_for_log(v, sensitive_keys=sensitive_keys, max_string=max_string, _depth=_depth + 1)
            for v in value
        ]

    return repr(value)
