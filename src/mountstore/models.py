"""Metadata record model.

Shadow metadata is stored as JSON, so timestamps come back as strings.
:class:`StorageMeta` turns the recognised timestamp fields back into
``datetime`` values and keeps every other field untouched.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError, ValidationInfo, model_validator

from mountstore.config import DEFAULT_TIMESTAMP_FIELDS

_DATETIME = TypeAdapter(datetime)


def parse_timestamp(value: Any) -> Any:
    """Return *value* as a ``datetime`` when it is a timestamp string, else unchanged."""
    if not isinstance(value, str):
        return value
    try:
        return _DATETIME.validate_python(value.strip())
    except ValidationError:
        return value


class StorageMeta(BaseModel):
    """Per-key metadata record.

    Every field is an extra field; which ones hold timestamps is decided
    by the ``timestamp_fields`` validation context.
    """

    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _parse_timestamps(cls, values: Any, info: ValidationInfo) -> Any:
        if not isinstance(values, dict):
            return values
        context = info.context or {}
        fields = frozenset(context.get("timestamp_fields", DEFAULT_TIMESTAMP_FIELDS))
        return {key: parse_timestamp(value) if key in fields else value for key, value in values.items()}

    @classmethod
    def from_record(
        cls,
        record: Mapping[str, Any],
        timestamp_fields: Iterable[str] = DEFAULT_TIMESTAMP_FIELDS,
    ) -> dict[str, Any]:
        """Validate a raw shadow record and return it as a plain dict."""
        meta = cls.model_validate(
            {str(key): value for key, value in record.items()},
            context={"timestamp_fields": tuple(timestamp_fields)},
        )
        return meta.model_dump()
