"""Wire Codec — lossless JSON encoding for values plain JSON cannot carry.

Invariants:
    - decode(encode(v)) == v for any value built from JSON primitives, dict,
      list, datetime, date, UUID, Decimal, set, tuple and bytes
    - Encoded form is {"json": <plain JSON>, "meta": {"values": {path: tag}}};
      a tag on the top-level value itself goes in meta["root"]; "meta" is
      omitted when nothing needed tagging
    - Paths are dotted; literal dots/backslashes in keys are backslash-escaped.
      The empty path "" is the top-level key "", never the root
    - None stays None and omitted keys stay omitted
    - Malformed payloads raise TransportError, unsupported values raise TransportError

Design Decisions:
    - Side-table of type tags (not inline {"$date": ...} wrappers): the "json"
      half stays readable by any plain JSON consumer
    - pydantic models are dumped to dicts before walking; they arrive as dicts
"""

import base64
import copy
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from relay.core.errors import TransportError

_DATETIME = "datetime"
_DATE = "date"
_UUID = "uuid"
_DECIMAL = "decimal"
_SET = "set"
_TUPLE = "tuple"
_BYTES = "bytes"

_SCALAR_DECODERS = {
    _DATETIME: datetime.fromisoformat,
    _DATE: date.fromisoformat,
    _UUID: UUID,
    _DECIMAL: Decimal,
    _BYTES: base64.b64decode,
}


def _escape(key: str) -> str:
    return key.replace("\\", "\\\\").replace(".", "\\.")


def _split_path(path: str) -> list[str]:
    parts, current, escaped = [], [], False
    for ch in path:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == ".":
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return parts


def _join(prefix: str | None, key: str) -> str:
    return key if prefix is None else f"{prefix}.{key}"


def _where(path: str | None) -> str:
    return "<root>" if path is None else f"'{path}'"


def _walk(value: Any, path: str | None, tags: dict[str | None, str]) -> Any:
    if value is None or isinstance(value, (bool, int, float, str)):
        if isinstance(value, Enum):
            return value.value
        return value
    if isinstance(value, BaseModel):
        return _walk(value.model_dump(), path, tags)
    if isinstance(value, datetime):
        tags[path] = _DATETIME
        return value.isoformat()
    if isinstance(value, date):
        tags[path] = _DATE
        return value.isoformat()
    if isinstance(value, UUID):
        tags[path] = _UUID
        return str(value)
    if isinstance(value, Decimal):
        tags[path] = _DECIMAL
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        tags[path] = _BYTES
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Enum):
        return _walk(value.value, path, tags)
    if isinstance(value, dict):
        out = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TransportError(
                    f"Cannot encode non-string key {key!r} at {_where(path)}",
                )
            out[key] = _walk(item, _join(path, _escape(key)), tags)
        return out
    if isinstance(value, (list, tuple, set, frozenset)):
        if isinstance(value, tuple):
            tags[path] = _TUPLE
        elif isinstance(value, (set, frozenset)):
            tags[path] = _SET
        return [
            _walk(item, _join(path, str(i)), tags)
            for i, item in enumerate(value)
        ]
    raise TransportError(
        f"Cannot encode value of type {type(value).__name__} at {_where(path)}",
    )


def encode(value: Any) -> dict:
    """Encode value into {"json": ..., "meta": ...}."""
    tags: dict[str | None, str] = {}
    payload: dict[str, Any] = {"json": _walk(value, None, tags)}
    meta: dict[str, Any] = {}
    if None in tags:
        meta["root"] = tags.pop(None)
    if tags:
        meta["values"] = tags
    if meta:
        payload["meta"] = meta
    return payload


def _convert(node: Any, tag: str) -> Any:
    if tag == _SET:
        return set(node)
    if tag == _TUPLE:
        return tuple(node)
    decoder = _SCALAR_DECODERS.get(tag)
    if decoder is None:
        raise TransportError(f"Unknown type tag '{tag}'")
    return decoder(node)


def _apply(root: Any, parts: list[str], tag: str) -> Any:
    parent = root
    for part in parts[:-1]:
        parent = parent[int(part)] if isinstance(parent, list) else parent[part]
    last = parts[-1]
    if isinstance(parent, list):
        parent[int(last)] = _convert(parent[int(last)], tag)
    else:
        parent[last] = _convert(parent[last], tag)
    return root


def decode(payload: Any) -> Any:
    """Decode an encode()d payload back into Python values."""
    if not isinstance(payload, dict) or "json" not in payload:
        raise TransportError("Encoded value must be an object with a 'json' key")
    root = copy.deepcopy(payload["json"])
    meta = payload.get("meta") or {}
    tags = meta.get("values") or {} if isinstance(meta, dict) else None
    if not isinstance(tags, dict):
        raise TransportError("Encoded value has malformed 'meta'")
    root_tag = meta.get("root")
    # deepest first: set/tuple members are converted before their container
    ordered = sorted(
        ((_split_path(p), t) for p, t in tags.items()),
        key=lambda item: len(item[0]),
        reverse=True,
    )
    for parts, tag in ordered:
        try:
            root = _apply(root, parts, tag)
        except TransportError:
            raise
        except (KeyError, IndexError, ValueError, TypeError, InvalidOperation) as e:
            raise TransportError(
                f"Cannot decode '{'.'.join(parts)}' as {tag}: {e}",
            )
    if root_tag is None:
        return root
    try:
        return _convert(root, root_tag)
    except TransportError:
        raise
    except (ValueError, TypeError, InvalidOperation) as e:
        raise TransportError(f"Cannot decode <root> as {root_tag}: {e}")
