"""In-memory storage adapter for frames."""

from collections.abc import AsyncIterable

from lineframes.core.frame import Frame


class InMemoryFrameStorage:
    """In-memory implementation of FrameStoragePort.

    Keeps the latest frame for each key in a dict. Suitable for testing and
    low-volume applications where persistence is not required.
    """

    def __init__(self) -> None:
        self._frames: dict[str, Frame] = {}

    async def write(self, frame: Frame) -> None:
        """Store a frame, replacing any earlier frame with the same key."""
        self._frames[frame.key()] = frame

    async def read(self, name: str | None = None) -> AsyncIterable[Frame]:
        """Read stored frames, optionally only the one with the given key."""
        for key, frame in list(self._frames.items()):
            if name is None or key == name:
                yield frame

    async def count(self) -> int:
        """Return the number of stored frames."""
        return len(self._frames)

    async def clear(self) -> None:
        """Remove all stored frames."""
        self._frames.clear()
