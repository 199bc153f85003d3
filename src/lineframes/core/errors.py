"""Exceptions raised while turning metric batches into frames."""

from typing import Any


class LineFramesError(Exception):
    """Base class for all lineframes errors."""


class ParseError(LineFramesError):
    """The input batch is not valid line protocol.

    The whole batch is rejected; no frames are produced.
    """

    def __init__(self, message: str, line: int | None = None) -> None:
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class ConversionError(LineFramesError):
    """A field value cannot be coerced into its column type."""

    def __init__(self, field: str, value: Any, kind: str) -> None:
        self.field = field
        self.value = value
        self.kind = kind
        super().__init__(f"cannot convert field {field!r}: {value!r} ({kind})")


class TypeConflictFault(LineFramesError):
    """Records sharing a group key disagree on the type of a field.

    This signals inconsistent input rather than bad data. It is not handled
    anywhere in the conversion pipeline: the batch is aborted and the caller
    must either enable float coercion or fix the source feed.
    """

    def __init__(self, field: str, established: str, incoming: str) -> None:
        self.field = field
        self.established = established
        self.incoming = incoming
        super().__init__(
            f"field {field!r} is {established} in this frame, got {incoming}"
        )
