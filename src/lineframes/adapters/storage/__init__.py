"""Storage adapters implementing core ports."""

from lineframes.adapters.storage.in_memory import InMemoryFrameStorage

__all__ = ["InMemoryFrameStorage"]
