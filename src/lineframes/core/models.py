"""Core domain models for decoded metric data."""

from dataclasses import dataclass, field

FieldValue = str | float | int | bool


@dataclass(frozen=True)
class MetricRecord:
    """A single decoded line-protocol observation.

    Attributes:
        name: Measurement name (e.g., cpu, http_requests).
        timestamp: Nanoseconds since the Unix epoch.
        tags: Key-value pairs identifying the series, sorted by key.
        fields: Observed values keyed by field name.
    """

    name: str
    timestamp: int
    tags: dict[str, str] = field(default_factory=dict)
    fields: dict[str, FieldValue] = field(default_factory=dict)
