"""Value converters from decoded field values to column representations.

Each nullable column type has exactly one converter. Converters raise
ValueError or TypeError on input they cannot represent; the grouping
converter wraps those into ConversionError with the field context.
"""

from collections.abc import Callable
from typing import Any

from lineframes.core.frame import FieldType

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def field_type_for(value: Any) -> FieldType | None:
    """Return the column type matching a decoded value, or None if unknown."""
    # bool is a subclass of int, so it must be checked first
    if isinstance(value, bool):
        return FieldType.BOOL
    if isinstance(value, int):
        return FieldType.INT64
    if isinstance(value, float):
        return FieldType.FLOAT64
    if isinstance(value, str):
        return FieldType.STRING
    return None


def kind_of(value: Any) -> str:
    """Describe the observed kind of a value for error messages."""
    ft = field_type_for(value)
    return ft.value if ft is not None else type(value).__name__


def to_nullable_string(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def to_nullable_float64(value: Any) -> float | None:
    """Convert a numeric value or numeric string to float."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return float(value.strip())
    raise TypeError(f"unsupported type {type(value).__name__}")


def to_nullable_int64(value: Any) -> int | None:
    """Convert an integer, integral float or integer string to int64."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError("float has a fractional part")
        result = int(value)
    elif isinstance(value, int):
        result = value
    elif isinstance(value, str):
        result = int(value.strip())
    else:
        raise TypeError(f"unsupported type {type(value).__name__}")
    if not INT64_MIN <= result <= INT64_MAX:
        raise ValueError("out of int64 range")
    return result


def to_nullable_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if not isinstance(value, bool):
        raise TypeError(f"unsupported type {type(value).__name__}")
    return value


CONVERTERS: dict[FieldType, Callable[[Any], Any]] = {
    FieldType.NULLABLE_STRING: to_nullable_string,
    FieldType.NULLABLE_FLOAT64: to_nullable_float64,
    FieldType.NULLABLE_INT64: to_nullable_int64,
    FieldType.NULLABLE_BOOL: to_nullable_bool,
}
