"""Grouping converter from metric batches to frames.

Records are grouped by key and folded into one in-progress frame per key.
Two grouping modes are supported:

- per-time (default): one frame per (measurement name, timestamp). Each
  field becomes a column carrying the record's tags as labels.
- labels column: one wide frame per measurement name. Each record becomes a
  row, tag keys become ordinary columns and a synthetic "labels" column keeps
  each row's full tag set.

Frames are returned in the order their key was first seen in the batch.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from lineframes.core.converters import CONVERTERS, field_type_for, kind_of
from lineframes.core.decoding.line_protocol import LineProtocolDecoder
from lineframes.core.errors import ConversionError, TypeConflictFault
from lineframes.core.frame import Field, FieldType, Frame, new_frame
from lineframes.core.models import MetricRecord
from lineframes.core.ports import MetricDecoderPort

logger = logging.getLogger(__name__)

TIME_FIELD = "time"
LABELS_FIELD = "labels"

GroupKey = str | tuple[str, int]
_ColumnKey = tuple[str, tuple[tuple[str, str], ...]]


@dataclass(frozen=True)
class ConverterConfig:
    """Options for GroupingConverter.

    Attributes:
        use_labels_column: Merge all records with the same name into one wide
            frame with a labels column instead of one frame per timestamp.
        float_numbers: Store integer fields as float64 columns.
    """

    use_labels_column: bool = False
    float_numbers: bool = False


def labels_string(tags: dict[str, str]) -> str:
    """Render a tag set as "key=value, key2=value2" sorted by key."""
    return ", ".join(f"{k}={v}" for k, v in sorted(tags.items()))


@dataclass
class _ColumnBuilder:
    name: str
    type: FieldType
    labels: dict[str, str]
    values: list[Any] = field(default_factory=list)

    def build(self) -> Field:
        return Field(self.name, self.type, tuple(self.values), dict(self.labels))


class _MetricFrame:
    """Mutable frame accumulating all records sharing one group key."""

    def __init__(self, name: str, config: ConverterConfig) -> None:
        self.name = name
        self._config = config
        self._time: list[int] = []
        self._row_tags: list[dict[str, str]] = []
        self._columns: list[_ColumnBuilder] = []
        self._index: dict[_ColumnKey, _ColumnBuilder] = {}
        self._types: dict[str, FieldType] = {}
        self._filled: set[_ColumnKey] = set()

    def extend(self, m: MetricRecord) -> None:
        """Fold a record into this frame.

        In labels-column mode every record is a new row. In per-time mode a
        record fills the current row unless one of its columns already holds
        a value there, in which case a new row is started.

        Raises:
            TypeConflictFault: If a field resolves to a different type than
                the one already established for its name.
            ConversionError: If a value cannot be converted.
        """
        labels = {} if self._config.use_labels_column else dict(m.tags)
        label_key = tuple(sorted(labels.items()))
        items = sorted(m.fields.items())
        keys = [(name, label_key) for name, _ in items]
        if (
            self._config.use_labels_column
            or not self._time
            or any(k in self._filled for k in keys)
        ):
            self._add_row(m)
        row = len(self._time) - 1

        for (name, value), column_key in zip(items, keys):
            ft = self._target_type(name, value)
            column = self._index.get(column_key)
            if column is None:
                column = _ColumnBuilder(name, ft, labels, [None] * len(self._time))
                self._index[column_key] = column
                self._columns.append(column)
            column.values[row] = self._convert(name, value, ft)
            self._filled.add(column_key)

    def _add_row(self, m: MetricRecord) -> None:
        self._time.append(m.timestamp)
        self._row_tags.append(dict(m.tags))
        for column in self._columns:
            column.values.append(None)
        self._filled = set()

    def _target_type(self, name: str, value: Any) -> FieldType:
        ft = field_type_for(value)
        if ft is None:
            raise ConversionError(name, value, kind_of(value))
        if ft is FieldType.INT64 and self._config.float_numbers:
            ft = FieldType.FLOAT64
        # All fields are nullable so rows missing a field hold null.
        ft = ft.nullable()

        if name == TIME_FIELD or (
            self._config.use_labels_column and name == LABELS_FIELD
        ):
            raise TypeConflictFault(name, "a reserved column", ft.value)
        established = self._types.setdefault(name, ft)
        if established is not ft:
            raise TypeConflictFault(name, established.value, ft.value)
        return ft

    def _convert(self, name: str, value: Any, ft: FieldType) -> Any:
        try:
            return CONVERTERS[ft](value)
        except (TypeError, ValueError) as e:
            raise ConversionError(name, value, kind_of(value)) from e

    def _tag_columns(self) -> list[Field]:
        tag_keys: list[str] = []
        for tags in self._row_tags:
            for key in tags:
                if key not in tag_keys:
                    tag_keys.append(key)

        columns = []
        for key in tag_keys:
            if key in self._types or key in (TIME_FIELD, LABELS_FIELD):
                established = self._types.get(key, FieldType.TIME)
                raise TypeConflictFault(key, established.value, "tag")
            values = tuple(tags.get(key) for tags in self._row_tags)
            columns.append(Field(key, FieldType.NULLABLE_STRING, values))
        return columns

    def frame(self) -> Frame:
        """Freeze the accumulated columns into a Frame."""
        fields = [Field(TIME_FIELD, FieldType.TIME, tuple(self._time))]
        fields.extend(column.build() for column in self._columns)
        if self._config.use_labels_column:
            fields.extend(self._tag_columns())
            labels = tuple(labels_string(tags) for tags in self._row_tags)
            fields.append(Field(LABELS_FIELD, FieldType.NULLABLE_STRING, labels))
        return new_frame(self.name, fields)


class GroupingConverter:
    """Converts line-protocol batches into frames.

    The converter holds only immutable configuration and creates a fresh
    decoder per call, so one instance can be shared between threads.

    Example:
        ```python
        converter = GroupingConverter(use_labels_column=True)
        frames = converter.convert(b"cpu,host=a usage=0.5 1700000000000000000")
        ```
    """

    def __init__(
        self,
        use_labels_column: bool = False,
        float_numbers: bool = False,
        decoder_factory: Callable[[], MetricDecoderPort] | None = None,
    ) -> None:
        """Initialize the converter.

        Args:
            use_labels_column: Produce one wide frame per measurement name.
            float_numbers: Store integer fields as float64 columns.
            decoder_factory: Zero-argument callable returning the decoder used
                by convert(). Defaults to LineProtocolDecoder.
        """
        self.config = ConverterConfig(
            use_labels_column=use_labels_column, float_numbers=float_numbers
        )
        self._decoder_factory = decoder_factory or LineProtocolDecoder

    @classmethod
    def from_config(
        cls,
        config: ConverterConfig,
        decoder_factory: Callable[[], MetricDecoderPort] | None = None,
    ) -> "GroupingConverter":
        """Create a converter from a ConverterConfig."""
        return cls(
            use_labels_column=config.use_labels_column,
            float_numbers=config.float_numbers,
            decoder_factory=decoder_factory,
        )

    def _frame_key(self, m: MetricRecord) -> GroupKey:
        if self.config.use_labels_column:
            return m.name
        return (m.name, m.timestamp)

    def convert(self, body: bytes) -> list[Frame]:
        """Decode a raw batch and convert it into frames.

        Args:
            body: Raw line-protocol bytes.

        Returns:
            Frames in the order their group key first appears.

        Raises:
            ParseError: If the batch cannot be decoded.
            ConversionError: If a field value cannot be converted.
            TypeConflictFault: If records under one key disagree on a
                field's type.
        """
        records = self._decoder_factory().decode(body)
        logger.debug("Decoded %d metric records", len(records))
        return self.convert_records(records)

    def convert_records(self, records: Iterable[MetricRecord]) -> list[Frame]:
        """Convert already decoded records into frames.

        Args:
            records: Metric records in input order.

        Returns:
            Frames in the order their group key first appears.
        """
        # Maintain the order of frames as they appear in input.
        frame_key_order: list[GroupKey] = []
        metric_frames: dict[GroupKey, _MetricFrame] = {}

        try:
            for m in records:
                key = self._frame_key(m)
                frame = metric_frames.get(key)
                if frame is None:
                    frame_key_order.append(key)
                    frame = _MetricFrame(m.name, self.config)
                    metric_frames[key] = frame
                frame.extend(m)
            frames = [metric_frames[key].frame() for key in frame_key_order]
        except TypeConflictFault as e:
            logger.error("Aborting batch on type conflict: %s", e)
            raise

        logger.debug("Converted batch into %d frames", len(frames))
        return frames
