"""JSON encoder for frames."""

import json
import math
from collections.abc import Iterable
from typing import Any

from lineframes.core.frame import Field, FieldType, Frame

_NS_PER_MS = 1_000_000


def _encode_value(field_type: FieldType, value: Any) -> Any:
    if value is None:
        return None
    if field_type is FieldType.TIME:
        return value // _NS_PER_MS
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _field_schema(field: Field) -> dict[str, Any]:
    schema: dict[str, Any] = {
        "name": field.name,
        "type": "time" if field.type is FieldType.TIME else _json_type(field.type),
        "typeInfo": {
            "frame": field.type.item_type,
            "nullable": field.type.is_nullable,
        },
    }
    if field.labels:
        schema["labels"] = field.labels
    return schema


def _json_type(field_type: FieldType) -> str:
    item = field_type.item_type
    if item in ("float64", "int64"):
        return "number"
    if item == "bool":
        return "boolean"
    return item


def frame_to_dict(frame: Frame) -> dict[str, Any]:
    """Return the JSON-compatible representation of a frame.

    Args:
        frame: The frame to encode.

    Returns:
        Dict with a "schema" describing fields and a "data" holding
        one value list per field. Time values are epoch milliseconds.
    """
    return {
        "schema": {
            "name": frame.name,
            "fields": [_field_schema(f) for f in frame.fields],
        },
        "data": {
            "values": [[_encode_value(f.type, v) for v in f.values] for f in frame.fields]
        },
    }


def encode_frame(frame: Frame) -> str:
    """Encode a frame as a JSON string.

    Keys are sorted, so equal frames always encode to equal strings.
    """
    return json.dumps(frame_to_dict(frame), sort_keys=True)


def encode_frames(frames: Iterable[Frame]) -> str:
    """Encode frames to newline-delimited JSON.

    Args:
        frames: An iterable of Frame objects.

    Returns:
        NDJSON string with one JSON object per line.
        Empty string if no frames.
    """
    lines = [encode_frame(frame) for frame in frames]

    if not lines:
        return ""

    return "\n".join(lines) + "\n"
