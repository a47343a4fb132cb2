"""Wire Codec tests — lossless encoding of values plain JSON cannot carry.

Tests cover:
    - Plain JSON values encode without a meta table
    - datetime/date/UUID/Decimal/bytes/set/tuple come back as the same type
    - Keys containing dots survive the path table
    - A top-level "" key is distinct from the root value
    - None stays None; omitted keys stay omitted
    - Unsupported values and malformed payloads raise TransportError
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from uuid import UUID

import pytest

from relay.core import wire_codec
from relay.core.domain_types import ProcedureMode
from relay.core.errors import TransportError

MOMENT = datetime(2026, 3, 1, 12, 30, 15, 250000, tzinfo=timezone.utc)
PROFILE_ID = UUID("00000000-0000-4000-8000-000000000001")


# -- encode ------------------------------------------------------------------

def test_plain_json_has_no_meta():
    encoded = wire_codec.encode({"a": 1, "b": [True, None, "x"], "c": 1.5})
    assert encoded == {"json": {"a": 1, "b": [True, None, "x"], "c": 1.5}}


def test_datetime_is_tagged_by_path():
    encoded = wire_codec.encode({"profile": {"created_at": MOMENT}})
    assert encoded["json"]["profile"]["created_at"] == MOMENT.isoformat()
    assert encoded["meta"]["values"] == {"profile.created_at": "datetime"}


def test_enum_is_sent_as_its_value():
    encoded = wire_codec.encode({"mode": ProcedureMode.MUTATION})
    assert encoded == {"json": {"mode": "mutation"}}


def test_dotted_keys_are_escaped():
    encoded = wire_codec.encode({"a.b": date(2026, 1, 1)})
    assert encoded["meta"]["values"] == {"a\\.b": "date"}


def test_root_tag_kept_apart_from_paths():
    encoded = wire_codec.encode((MOMENT,))
    assert encoded["meta"] == {"root": "tuple", "values": {"0": "datetime"}}


def test_non_string_key_rejected():
    with pytest.raises(TransportError):
        wire_codec.encode({1: "one"})


def test_unsupported_type_rejected():
    with pytest.raises(TransportError, match="object"):
        wire_codec.encode({"x": object()})


# -- decode ------------------------------------------------------------------

def test_round_trip_restores_rich_types():
    value = {
        "id": PROFILE_ID,
        "created_at": MOMENT,
        "birthday": date(1990, 5, 17),
        "balance": Decimal("10.25"),
        "avatar": b"\x89PNG",
        "tags": {"a", "b"},
        "pair": (1, MOMENT),
        "nested": [{"when": MOMENT}, None],
    }
    assert wire_codec.decode(wire_codec.encode(value)) == value


def test_round_trip_root_scalar():
    assert wire_codec.decode(wire_codec.encode(MOMENT)) == MOMENT
    assert wire_codec.decode(wire_codec.encode(None)) is None


def test_round_trip_root_tuple_of_dates():
    value = (date(2026, 1, 1), date(2026, 1, 2))
    decoded = wire_codec.decode(wire_codec.encode(value))
    assert decoded == value
    assert isinstance(decoded, tuple)


def test_dotted_key_round_trip():
    value = {"a.b": {"c\\d": MOMENT}}
    assert wire_codec.decode(wire_codec.encode(value)) == value


def test_empty_key_round_trip():
    value = {"": MOMENT, "a": {"": date(2026, 1, 1)}}
    encoded = wire_codec.encode(value)
    assert encoded["meta"] == {"values": {"": "datetime", "a.": "date"}}
    assert wire_codec.decode(encoded) == value


def test_empty_key_inside_root_tuple():
    value = ({"": PROFILE_ID},)
    assert wire_codec.decode(wire_codec.encode(value)) == value


def test_none_and_missing_keys_preserved():
    decoded = wire_codec.decode(wire_codec.encode({"nickname": None}))
    assert decoded == {"nickname": None}
    assert "bio" not in decoded


def test_decode_does_not_mutate_payload():
    payload = wire_codec.encode({"created_at": MOMENT})
    wire_codec.decode(payload)
    assert payload["json"]["created_at"] == MOMENT.isoformat()


def test_decode_rejects_missing_json_key():
    with pytest.raises(TransportError):
        wire_codec.decode({"data": 1})


def test_decode_rejects_non_object():
    with pytest.raises(TransportError):
        wire_codec.decode([1, 2])


def test_decode_rejects_unknown_tag():
    with pytest.raises(TransportError, match="Unknown type tag"):
        wire_codec.decode({"json": "x", "meta": {"root": "regex"}})


def test_decode_rejects_bad_root_value():
    with pytest.raises(TransportError, match="<root>"):
        wire_codec.decode({"json": "soon", "meta": {"root": "date"}})


def test_decode_rejects_bad_value_for_tag():
    with pytest.raises(TransportError):
        wire_codec.decode({"json": {"at": "yesterday"}, "meta": {"values": {"at": "datetime"}}})


def test_decode_rejects_path_that_does_not_exist():
    with pytest.raises(TransportError):
        wire_codec.decode({"json": {}, "meta": {"values": {"missing": "date"}}})
