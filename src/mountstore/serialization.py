"""Value serialization at the driver boundary.

Drivers store strings.  Structured values are JSON-encoded on the way in
and recovered on the way out; plain strings are stored verbatim whenever
reading them back cannot mistake them for another type.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any

_LITERALS: dict[str, Any] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def deserialize(raw: Any) -> Any:
    """Recover a structured value from its stored form.

    Non-string input is returned unchanged.  Strings that do not parse
    as a literal or JSON document are returned as-is.
    """
    if not isinstance(raw, str):
        return raw

    text = raw.strip()
    literal = text.lower()
    if literal in _LITERALS:
        return _LITERALS[literal]
    if not text:
        return raw

    try:
        return json.loads(text)
    except ValueError:
        return raw


def serialize(value: Any) -> str:
    """Encode *value* into the string form handed to drivers."""
    if isinstance(value, str) and deserialize(value) == value:
        return value
    return json.dumps(value, default=_json_default, separators=(",", ":"))
