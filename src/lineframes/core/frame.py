"""Columnar frame model built from converted metrics.

A Frame is an immutable, named sequence of equal-length Fields. Frames are
constructed with new_frame(), which enforces the length invariant.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class FieldType(Enum):
    """Semantic column types.

    The value is the item type name used in encoded frames.
    """

    TIME = "time"
    STRING = "string"
    FLOAT64 = "float64"
    INT64 = "int64"
    BOOL = "bool"
    NULLABLE_STRING = "nullable_string"
    NULLABLE_FLOAT64 = "nullable_float64"
    NULLABLE_INT64 = "nullable_int64"
    NULLABLE_BOOL = "nullable_bool"

    @property
    def is_nullable(self) -> bool:
        return self.value.startswith("nullable_")

    @property
    def item_type(self) -> str:
        """Item type name without the nullable prefix."""
        return self.value.removeprefix("nullable_")

    def nullable(self) -> "FieldType":
        """Return the nullable variant of this type.

        The time type has no nullable variant and is returned unchanged.
        """
        if self is FieldType.TIME or self.is_nullable:
            return self
        return FieldType(f"nullable_{self.value}")


@dataclass(frozen=True)
class Field:
    """A single named, typed column.

    Attributes:
        name: Column name.
        type: Semantic type of every value in the column.
        values: Row values; None marks a null in nullable columns.
        labels: Tag metadata attached to the column.
    """

    name: str
    type: FieldType
    values: tuple[Any, ...] = ()
    labels: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.values)


@dataclass(frozen=True)
class Frame:
    """An immutable table of equal-length fields."""

    name: str
    fields: tuple[Field, ...] = ()

    def key(self) -> str:
        """Return the key identifying this frame's channel."""
        return self.name

    @property
    def row_count(self) -> int:
        return len(self.fields[0]) if self.fields else 0

    def field_by_name(self, name: str) -> Field:
        """Return the first field with the given name.

        Raises:
            KeyError: If no field has that name.
        """
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(name)


def new_frame(name: str, fields: list[Field]) -> Frame:
    """Build a frame, checking that all fields have the same length.

    Args:
        name: Frame name.
        fields: Ordered columns.

    Returns:
        The frozen Frame.

    Raises:
        ValueError: If field lengths differ or a non-nullable field holds None.
    """
    lengths = {len(f) for f in fields}
    if len(lengths) > 1:
        raise ValueError(f"frame {name!r} has fields of unequal length: {lengths}")
    for f in fields:
        if not f.type.is_nullable and any(v is None for v in f.values):
            raise ValueError(f"field {f.name!r} of type {f.type.value} holds null")
    return Frame(name=name, fields=tuple(fields))
