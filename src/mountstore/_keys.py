"""Key and base normalization.

Keys use ``/`` as their canonical separator.  ``\\`` and ``:`` are
accepted as aliases so Windows-style paths and colon-namespaced keys map
onto the same key space.
"""

from __future__ import annotations

import re

SEPARATOR = "/"

_ALIAS_RE = re.compile(r"[\\:]")
_REPEAT_RE = re.compile(r"/{2,}")


def normalize_key(key: str | None) -> str:
    """Return the canonical form of *key* (no leading/trailing separator)."""
    if not key:
        return ""
    key = _ALIAS_RE.sub(SEPARATOR, key)
    key = _REPEAT_RE.sub(SEPARATOR, key)
    return key.strip(SEPARATOR)


def normalize_base(base: str | None) -> str:
    """Return the canonical form of *base* (trailing separator unless root)."""
    key = normalize_key(base)
    return f"{key}{SEPARATOR}" if key else ""
