"""Human-readable summary of a form's values.

Used to show an applicant what they submitted: one line per visible input
field, with values rendered for display rather than for storage.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List

from formguard.schema import FieldDescriptor, Schema
from formguard.types import FieldKind, FormValues
from formguard.visibility import ConditionalFieldResolver


@dataclass(frozen=True)
class SummaryLine:
    """One label/value pair of a summary."""
    key: str
    label: str
    display: str

    def __str__(self) -> str:
        return f"{self.label}: {self.display}"


def format_datetime(value: datetime) -> str:
    """Format in the en-US locale style, like ``3/5/2025, 2:30:00 PM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value.month}/{value.day}/{value.year}, {hour}:{value.minute:02d}:{value.second:02d} {meridiem}"


def format_value(descriptor: FieldDescriptor, value: Any) -> str:
    """Render one field value for display."""
    if value is None:
        return ""
    if descriptor.kind == FieldKind.CHECKBOX_GROUP:
        return ", ".join(member for member in descriptor.members if value.get(member))
    if descriptor.kind == FieldKind.BOOLEAN:
        return "Yes" if value else "No"
    if descriptor.kind == FieldKind.DATETIME:
        return format_datetime(value)
    if descriptor.unit and value != "":
        return f"{value} {descriptor.unit}"
    return str(value)


def summarize(values: FormValues, schema: Schema) -> List[SummaryLine]:
    """Summary lines for every visible input field, in schema order."""
    resolver = ConditionalFieldResolver(schema)
    visible = resolver.visible_fields(values)
    return [
        SummaryLine(
            key=descriptor.key,
            label=descriptor.display_label,
            display=format_value(descriptor, values.get(descriptor.key)),
        )
        for descriptor in schema
        if descriptor.key in visible and descriptor.kind != FieldKind.RULE
    ]


__all__ = [
    "SummaryLine",
    "format_datetime",
    "format_value",
    "summarize",
]
