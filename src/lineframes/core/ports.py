"""Port interfaces for decoders, converters and frame storage.

These protocols define the contracts that adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from collections.abc import AsyncIterable, Iterable
from typing import Protocol, runtime_checkable

from lineframes.core.frame import Frame
from lineframes.core.models import MetricRecord


@runtime_checkable
class MetricDecoderPort(Protocol):
    """Port for decoding raw batches into metric records.

    Examples: LineProtocolDecoder.
    """

    def decode(self, body: bytes) -> list[MetricRecord]:
        """Decode a raw batch.

        Args:
            body: Raw bytes holding zero or more records.

        Returns:
            Records in input order.

        Raises:
            ParseError: If the batch is malformed.
        """
        ...


@runtime_checkable
class FrameConverterPort(Protocol):
    """Port for turning raw batches into frames.

    Examples: GroupingConverter.
    """

    def convert(self, body: bytes) -> list[Frame]:
        """Convert a raw batch into frames in first-seen order."""
        ...

    def convert_records(self, records: Iterable[MetricRecord]) -> list[Frame]:
        """Convert already decoded records into frames."""
        ...


@runtime_checkable
class FrameStoragePort(Protocol):
    """Port for frame storage operations.

    Adapters implementing this protocol keep the latest frame per key.
    Examples: InMemoryFrameStorage.
    """

    async def write(self, frame: Frame) -> None:
        """Store a frame, replacing any earlier frame with the same key."""
        ...

    def read(self, name: str | None = None) -> AsyncIterable[Frame]:
        """Read stored frames.

        Args:
            name: Only return the frame with this key. Default None
                  returns all frames.

        Returns:
            Async iterable of frames in first-write order.
        """
        ...
