"""Decoder for InfluxDB line protocol.

Each non-empty line holds one point:

    measurement[,tag=value...] field=value[,field=value...] [timestamp]

Lines end at "\n" (an optional trailing "\r" is dropped) and lines
starting with "#" are comments. Tags and fields are returned sorted
by key. Points without a timestamp share a single "now" captured once per
decode() call.
"""

import math
import re
import time

from lineframes.core.errors import ParseError
from lineframes.core.models import FieldValue, MetricRecord

PRECISIONS = {
    "ns": 1,
    "us": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
}

_INT_RE = re.compile(r"[+-]?\d+")
_UINT_RE = re.compile(r"\d+")
_FLOAT_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_TRUE = frozenset({"t", "T", "true", "True", "TRUE"})
_FALSE = frozenset({"f", "F", "false", "False", "FALSE"})

_MEASUREMENT_ESCAPES = ", "
_KEY_ESCAPES = ",= "


def _unescape(text: str, chars: str) -> str:
    return re.sub(r"\\([" + re.escape(chars) + r"])", r"\1", text)


def _split(text: str, sep: str, quoted: bool = False, maxsplit: int = -1) -> list[str]:
    """Split on unescaped separators, optionally ignoring quoted sections.

    Escape sequences are kept as-is; callers unescape each part.

    Raises:
        ValueError: If a quoted section is not terminated.
    """
    parts: list[str] = []
    buf: list[str] = []
    in_quotes = False
    i = 0
    while i < len(text):
        c = text[i]
        if c == "\\" and i + 1 < len(text):
            buf.append(text[i : i + 2])
            i += 2
            continue
        if quoted and c == '"':
            in_quotes = not in_quotes
        elif c == sep and not in_quotes and maxsplit != len(parts):
            parts.append("".join(buf))
            buf = []
            i += 1
            continue
        buf.append(c)
        i += 1
    if in_quotes:
        raise ValueError("unterminated string")
    parts.append("".join(buf))
    return parts


def _parse_field_value(raw: str) -> FieldValue:
    """Parse a single field value.

    Raises:
        ValueError: If the value is not a valid line-protocol value.
    """
    if len(raw) >= 2 and raw[0] == '"' and raw[-1] == '"':
        return re.sub(r'\\(["\\])', r"\1", raw[1:-1])
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    if raw.endswith("i") and _INT_RE.fullmatch(raw[:-1]):
        return int(raw[:-1])
    if raw.endswith("u") and _UINT_RE.fullmatch(raw[:-1]):
        return int(raw[:-1])
    if _FLOAT_RE.fullmatch(raw):
        value = float(raw)
        if not math.isfinite(value):
            raise ValueError(f"non-finite float {raw!r}")
        return value
    raise ValueError(f"invalid field value {raw!r}")


class LineProtocolDecoder:
    """Decodes line-protocol batches into MetricRecord objects.

    Instances are cheap; GroupingConverter creates one per batch.
    """

    def __init__(self, precision: str = "ns") -> None:
        """Initialize the decoder.

        Args:
            precision: Unit of explicit timestamps, one of "ns", "us",
                "ms" or "s" (default "ns").

        Raises:
            ValueError: If the precision is unknown.
        """
        if precision not in PRECISIONS:
            raise ValueError(f"unknown precision {precision!r}")
        self.precision = precision
        self._multiplier = PRECISIONS[precision]

    def decode(self, body: bytes) -> list[MetricRecord]:
        """Decode a batch of line-protocol points.

        Args:
            body: UTF-8 encoded line protocol.

        Returns:
            Records in input order.

        Raises:
            ParseError: If the body is not UTF-8 or any line is malformed.
                The whole batch is rejected.
        """
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"body is not valid UTF-8: {e}") from e

        now = time.time_ns()
        records = []
        for lineno, line in enumerate(text.split("\n"), start=1):
            line = line.removesuffix("\r").strip(" \t")
            if not line or line.startswith("#"):
                continue
            try:
                records.append(self._decode_line(line, now))
            except ValueError as e:
                raise ParseError(str(e), line=lineno) from e
        return records

    def _decode_line(self, line: str, now: int) -> MetricRecord:
        parts = _split(line, " ", maxsplit=1)
        if len(parts) != 2:
            raise ValueError("missing fields")
        series, rest = parts
        sections = [s for s in _split(rest, " ", quoted=True) if s]
        if not sections:
            raise ValueError("missing fields")
        if len(sections) > 2:
            raise ValueError("unexpected data after timestamp")

        name, tags = self._parse_series(series)
        fields = self._parse_fields(sections[0])
        timestamp = now
        if len(sections) == 2:
            if not _INT_RE.fullmatch(sections[1]):
                raise ValueError(f"invalid timestamp {sections[1]!r}")
            timestamp = int(sections[1]) * self._multiplier
        return MetricRecord(name=name, timestamp=timestamp, tags=tags, fields=fields)

    def _parse_series(self, series: str) -> tuple[str, dict[str, str]]:
        parts = _split(series, ",")
        name = _unescape(parts[0], _MEASUREMENT_ESCAPES)
        if not name:
            raise ValueError("missing measurement")
        tags: dict[str, str] = {}
        for pair in parts[1:]:
            kv = _split(pair, "=")
            if len(kv) != 2 or not kv[0] or not kv[1]:
                raise ValueError(f"invalid tag {pair!r}")
            tags[_unescape(kv[0], _KEY_ESCAPES)] = _unescape(kv[1], _KEY_ESCAPES)
        return name, dict(sorted(tags.items()))

    def _parse_fields(self, section: str) -> dict[str, FieldValue]:
        fields: dict[str, FieldValue] = {}
        for pair in _split(section, ",", quoted=True):
            kv = _split(pair, "=", quoted=True, maxsplit=1)
            if len(kv) != 2 or not kv[0] or not kv[1]:
                raise ValueError(f"invalid field {pair!r}")
            fields[_unescape(kv[0], _KEY_ESCAPES)] = _parse_field_value(kv[1])
        return dict(sorted(fields.items()))
