"""BDD step definitions for frame conversion features."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from lineframes.core.converter import GroupingConverter
from lineframes.core.errors import LineFramesError
from lineframes.core.frame import FieldType, Frame


@dataclass
class ConversionScenarioContext:
    """Shared state between steps in a conversion scenario."""

    lines: list[str] = field(default_factory=list)
    converter: GroupingConverter | None = None
    frames: list[Frame] = field(default_factory=list)
    error: LineFramesError | None = None


@pytest.fixture
def ctx() -> ConversionScenarioContext:
    """Fresh scenario context for each test."""
    return ConversionScenarioContext()


def _split_list(text: str) -> list[str]:
    return [item.strip() for item in text.split(",")]


def _parse_value(raw: str, field_type: FieldType) -> Any:
    if raw == "null":
        return None
    if field_type is FieldType.NULLABLE_FLOAT64:
        return float(raw)
    if field_type is FieldType.NULLABLE_INT64:
        return int(raw)
    if field_type is FieldType.NULLABLE_BOOL:
        return raw == "true"
    return raw


# === Background Steps ===
@given("a batch of line protocol")
def step_batch(ctx: ConversionScenarioContext) -> None:
    ctx.lines = []


@given(parsers.parse('the line "{line}"'))
def step_line(ctx: ConversionScenarioContext, line: str) -> None:
    ctx.lines.append(line)


@given(
    parsers.parse(
        "a converter with use_labels_column={labels} and float_numbers={floats}"
    )
)
def step_converter(ctx: ConversionScenarioContext, labels: str, floats: str) -> None:
    ctx.converter = GroupingConverter(
        use_labels_column=labels == "True", float_numbers=floats == "True"
    )


# === Conversion Steps ===
@when("the batch is converted")
def step_convert(ctx: ConversionScenarioContext) -> None:
    assert ctx.converter is not None
    body = "\n".join(ctx.lines).encode()
    try:
        ctx.frames = ctx.converter.convert(body)
    except LineFramesError as e:
        ctx.error = e


# === Assertion Steps ===
@then(parsers.parse("the conversion fails with {error_name}"))
def step_fails(ctx: ConversionScenarioContext, error_name: str) -> None:
    assert ctx.error is not None
    assert type(ctx.error).__name__ == error_name
    assert ctx.frames == []


@then(parsers.re(r"(?P<count>\d+) frames? (is|are) produced"))
def step_frame_count(ctx: ConversionScenarioContext, count: str) -> None:
    assert ctx.error is None
    assert len(ctx.frames) == int(count)


@then(parsers.parse("frame {index:d} has {rows:d} rows"))
def step_row_count(ctx: ConversionScenarioContext, index: int, rows: int) -> None:
    assert ctx.frames[index - 1].row_count == rows


@then(parsers.parse('frame {index:d} has columns "{names}"'))
def step_columns(ctx: ConversionScenarioContext, index: int, names: str) -> None:
    frame = ctx.frames[index - 1]
    assert [f.name for f in frame.fields] == _split_list(names)


@then(
    parsers.parse(
        'frame {index:d} column "{name}" is {type_name} with values "{values}"'
    )
)
def step_column_values(
    ctx: ConversionScenarioContext,
    index: int,
    name: str,
    type_name: str,
    values: str,
) -> None:
    column = ctx.frames[index - 1].field_by_name(name)
    field_type = FieldType(type_name)
    assert column.type is field_type
    expected = tuple(_parse_value(v, field_type) for v in _split_list(values))
    assert column.values == expected


@then(parsers.parse('the frame names are "{names}"'))
def step_frame_names(ctx: ConversionScenarioContext, names: str) -> None:
    assert [f.name for f in ctx.frames] == _split_list(names)
