"""Encode/decode Python values to/from Firestore REST API 'fields' format.

Decoded documents are JSON-native (timestamps come back as ISO strings), so
a record read from Firestore equals the same record read back from the cache.
"""

import base64
import re
from datetime import UTC, datetime
from typing import Any

_SIMPLE_SEGMENT = re.compile(r"^[A-Za-z_][A-Za-z_0-9]*$")


def _encode_value(v: Any) -> dict:
    if v is None:
        return {"nullValue": None}
    if isinstance(v, bool):
        return {"booleanValue": v}
    if isinstance(v, int):
        return {"integerValue": str(v)}
    if isinstance(v, float):
        return {"doubleValue": v}
    if isinstance(v, datetime):
        return {"timestampValue": v.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.%fZ")}
    if isinstance(v, str):
        return {"stringValue": v}
    if isinstance(v, bytes):
        return {"bytesValue": base64.standard_b64encode(v).decode("ascii")}
    if isinstance(v, (list, tuple)):
        return {"arrayValue": {"values": [_encode_value(x) for x in v]}}
    if isinstance(v, dict):
        return {"mapValue": {"fields": {k: _encode_value(x) for k, x in v.items()}}}
    raise TypeError(f"Unsupported Firestore value type: {type(v)}")


def encode_document(data: dict[str, Any]) -> dict:
    """Convert a Python dict to a Firestore REST Document body ({"fields": ...})."""
    return {"fields": {k: _encode_value(v) for k, v in data.items()}}


def _decode_value(obj: dict) -> Any:
    if "nullValue" in obj:
        return None
    if "booleanValue" in obj:
        return obj["booleanValue"]
    if "integerValue" in obj:
        return int(obj["integerValue"])
    if "doubleValue" in obj:
        return float(obj["doubleValue"])
    if "timestampValue" in obj:
        ts = datetime.fromisoformat(obj["timestampValue"].replace("Z", "+00:00"))
        return ts.isoformat()
    if "stringValue" in obj:
        return obj["stringValue"]
    if "bytesValue" in obj:
        return base64.standard_b64decode(obj["bytesValue"]).decode("utf-8", errors="replace")
    if "arrayValue" in obj:
        vals = obj.get("arrayValue", {}).get("values") or []
        return [_decode_value(x) for x in vals]
    if "mapValue" in obj:
        fields = obj["mapValue"].get("fields") or {}
        return {k: _decode_value(x) for k, x in fields.items()}
    return None


def decode_fields(fields: dict | None) -> dict:
    """Convert a Firestore REST Document.fields map to a Python dict."""
    if not fields:
        return {}
    return {k: _decode_value(v) for k, v in fields.items()}


def decode_value(obj: dict | None) -> Any:
    """Decode a single REST value (e.g. an aggregation result)."""
    if not obj:
        return None
    return _decode_value(obj)


def field_path(path: str) -> str:
    """Return a Firestore field path, back-quoting segments that are not plain identifiers."""
    segments = []
    for segment in path.split("."):
        if _SIMPLE_SEGMENT.match(segment):
            segments.append(segment)
        else:
            escaped = segment.replace("\\", "\\\\").replace("`", "\\`")
            segments.append(f"`{escaped}`")
    return ".".join(segments)
