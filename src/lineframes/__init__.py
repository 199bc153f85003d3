"""lineframes - convert line-protocol metric batches into columnar frames."""

from lineframes.adapters.storage.in_memory import InMemoryFrameStorage
from lineframes.core.converter import ConverterConfig, GroupingConverter
from lineframes.core.decoding.line_protocol import LineProtocolDecoder
from lineframes.core.encoding.frame_json import encode_frame, encode_frames
from lineframes.core.errors import (
    ConversionError,
    LineFramesError,
    ParseError,
    TypeConflictFault,
)
from lineframes.core.frame import Field, FieldType, Frame, new_frame
from lineframes.core.models import MetricRecord
from lineframes.core.ports import (
    FrameConverterPort,
    FrameStoragePort,
    MetricDecoderPort,
)

__all__ = [
    "ConversionError",
    "ConverterConfig",
    "Field",
    "FieldType",
    "Frame",
    "FrameConverterPort",
    "FrameStoragePort",
    "GroupingConverter",
    "InMemoryFrameStorage",
    "LineFramesError",
    "LineProtocolDecoder",
    "MetricDecoderPort",
    "MetricRecord",
    "ParseError",
    "TypeConflictFault",
    "encode_frame",
    "encode_frames",
    "new_frame",
]
