from __future__ import annotations

from datetime import UTC, datetime

from mountstore.serialization import deserialize, serialize


def test_deserialize_literals_and_json() -> None:
    assert deserialize("true") is True
    assert deserialize("FALSE") is False
    assert deserialize("null") is None
    assert deserialize("undefined") is None
    assert deserialize("42") == 42
    assert deserialize("1.5") == 1.5
    assert deserialize('{"a": [1, 2]}') == {"a": [1, 2]}


def test_deserialize_passes_through_plain_values() -> None:
    assert deserialize("hello world") == "hello world"
    assert deserialize("") == ""
    assert deserialize(None) is None
    assert deserialize(7) == 7


def test_plain_strings_stored_verbatim() -> None:
    assert serialize("hello") == "hello"


def test_ambiguous_strings_are_json_encoded() -> None:
    for value in ("123", "true", "null", '{"a":1}', '"quoted"', " false "):
        encoded = serialize(value)
        assert encoded != value
        assert deserialize(encoded) == value


def test_serialize_datetime_as_iso_string() -> None:
    stamp = datetime(2026, 1, 1, 12, 30, tzinfo=UTC)
    assert deserialize(serialize({"mtime": stamp})) == {"mtime": "2026-01-01T12:30:00+00:00"}
