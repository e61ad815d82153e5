"""FormValues handling: coercion at the boundary, freezing, serialization.

Every field value is one variant of a tagged union, and the variant is fixed
by the field's FieldKind. Values coming from the host are coerced into that
variant here, or rejected with a FieldTypeError, so the validation engine
never has to guess at types.
"""

from datetime import date, datetime, time
from types import MappingProxyType
from typing import Any, Dict, Mapping

from dateutil.parser import isoparse

from formguard.errors import FieldTypeError
from formguard.schema import FieldDescriptor, Schema
from formguard.types import FieldKind, FormValues, TEXT_KINDS


def coerce_value(descriptor: FieldDescriptor, value: Any) -> Any:
    """Coerce a whole-field value into the variant declared for the field.

    Args:
        descriptor: The field being assigned
        value: The raw value supplied by the host

    Returns:
        The normalized value

    Raises:
        FieldTypeError: If the value cannot represent this field's variant

    Examples:
        >>> from formguard.schema import FieldDescriptor
        >>> coerce_value(FieldDescriptor(key="age", kind=FieldKind.NUMBER), 30)
        '30'
    """
    kind = descriptor.kind
    key = descriptor.key

    if kind == FieldKind.RULE:
        raise FieldTypeError(key, value, "rule fields cannot be assigned")

    if kind in TEXT_KINDS:
        if value is None:
            return ""
        if kind == FieldKind.NUMBER and isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        if not isinstance(value, str):
            raise FieldTypeError(key, value, f"expected text, got {type(value).__name__}")
        if kind == FieldKind.SELECT and value and value not in descriptor.options:
            raise FieldTypeError(
                key, value, f"{value!r} is not one of: {', '.join(descriptor.options)}"
            )
        return value

    if kind == FieldKind.BOOLEAN:
        if not isinstance(value, bool):
            raise FieldTypeError(key, value, f"expected bool, got {type(value).__name__}")
        return value

    if kind == FieldKind.DATETIME:
        return _coerce_datetime(key, value)

    if kind == FieldKind.CHECKBOX_GROUP:
        if not isinstance(value, Mapping):
            raise FieldTypeError(key, value, f"expected a mapping of members, got {type(value).__name__}")
        unknown = set(value) - set(descriptor.members)
        if unknown:
            raise FieldTypeError(key, value, f"unknown member(s): {', '.join(sorted(map(str, unknown)))}")
        group = {}
        for member in descriptor.members:
            checked = value.get(member, False)
            if not isinstance(checked, bool):
                raise FieldTypeError(key, value, f"member '{member}' must be a bool")
            group[member] = checked
        return group

    raise FieldTypeError(key, value, f"unsupported field kind {kind!r}")


def coerce_member(descriptor: FieldDescriptor, member: str, checked: Any) -> bool:
    """Validate a single checkbox-group member assignment.

    Raises:
        FieldTypeError: If the field is not a group, the member is unknown,
            or ``checked`` is not a bool
    """
    key = descriptor.key
    if descriptor.kind != FieldKind.CHECKBOX_GROUP:
        raise FieldTypeError(key, checked, f"'{key}' is not a checkbox group")
    if member not in descriptor.members:
        raise FieldTypeError(key, checked, f"unknown member '{member}'")
    if not isinstance(checked, bool):
        raise FieldTypeError(key, checked, f"member '{member}' must be a bool")
    return checked


def _coerce_datetime(key: str, value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, str):
        try:
            return isoparse(value)
        except ValueError as exc:
            raise FieldTypeError(key, value, f"not an ISO 8601 date/time ({exc})") from exc
    raise FieldTypeError(key, value, f"expected datetime, got {type(value).__name__}")


def freeze_values(values: Mapping[str, Any]) -> FormValues:
    """Read-only copy of FormValues, including checkbox-group mappings.

    The result shares nothing mutable with ``values``, so later edits to the
    source cannot leak into it.
    """
    frozen = {}
    for key, value in values.items():
        if isinstance(value, Mapping):
            value = MappingProxyType(dict(value))
        frozen[key] = value
    return MappingProxyType(frozen)


def thaw_values(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Mutable deep-enough copy of FormValues for building the next state."""
    return {
        key: dict(value) if isinstance(value, Mapping) else value
        for key, value in values.items()
    }


def values_to_dict(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Convert FormValues to plain JSON-compatible data."""
    result: Dict[str, Any] = {}
    for key, value in values.items():
        if isinstance(value, datetime):
            value = value.isoformat()
        elif isinstance(value, Mapping):
            value = dict(value)
        result[key] = value
    return result


def values_from_dict(schema: Schema, data: Mapping[str, Any]) -> Dict[str, Any]:
    """Rebuild FormValues from ``values_to_dict`` output.

    Keys missing from ``data`` fall back to the schema defaults, so the
    result always covers every schema key.
    """
    values = schema.defaults()
    for key, raw in data.items():
        descriptor = schema[key]
        if descriptor.kind == FieldKind.RULE:
            continue
        values[key] = coerce_value(descriptor, raw)
    return values


__all__ = [
    "coerce_value",
    "coerce_member",
    "freeze_values",
    "thaw_values",
    "values_to_dict",
    "values_from_dict",
]
