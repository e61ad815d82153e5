"""Core type definitions for formguard.

This module defines the fundamental types used throughout the package:
- FieldKind: The value variant a field holds (text, boolean, datetime, ...)
- FormStatus: Lifecycle states of a form session
- FieldErrorCode: Validation error codes for individual fields
- EventType: Event types emitted by a form session
- FormValues / ErrorMap: The mappings passed between the engine and its host
"""

from enum import Enum
from typing import Any, Mapping

from typing_extensions import TypeAlias


class FieldKind(str, Enum):
    """Value variant of a form field.

    The kind fixes which Python type a field's value has:
    - TEXT, TEXTAREA, EMAIL, PHONE, URL, NUMBER, SELECT: str
    - BOOLEAN: bool
    - DATETIME: datetime or None
    - CHECKBOX_GROUP: mapping of member name to bool
    - RULE: no input of its own, carries a cross-field validator
    """
    TEXT = "text"
    TEXTAREA = "textarea"
    EMAIL = "email"
    PHONE = "phone"
    URL = "url"
    NUMBER = "number"
    SELECT = "select"
    BOOLEAN = "boolean"
    DATETIME = "datetime"
    CHECKBOX_GROUP = "checkbox_group"
    RULE = "rule"


# Kinds whose value is a string typed by the user
TEXT_KINDS = frozenset({
    FieldKind.TEXT,
    FieldKind.TEXTAREA,
    FieldKind.EMAIL,
    FieldKind.PHONE,
    FieldKind.URL,
    FieldKind.NUMBER,
    FieldKind.SELECT,
})


class FormStatus(str, Enum):
    """Form lifecycle states.

    EDITING is the initial state. SUBMITTED is terminal: the host owns any
    "edit again" behaviour by starting a fresh form.
    """
    EDITING = "editing"
    SUBMITTED = "submitted"


class FieldErrorCode(str, Enum):
    """Validation error codes for individual field failures."""
    REQUIRED = "required"
    INVALID_FORMAT = "invalid_format"
    INVALID_VALUE = "invalid_value"
    CUSTOM = "custom"


class EventType(str, Enum):
    """Event types emitted by a form session."""
    FORM_CREATED = "form.created"
    FIELD_CHANGED = "field.changed"
    VALIDATION_PASSED = "validation.passed"
    VALIDATION_FAILED = "validation.failed"
    FORM_SUBMITTED = "form.submitted"
    FORM_RESET = "form.reset"


FormValues: TypeAlias = Mapping[str, Any]
"""Current value of every field, keyed by field key."""

ErrorMap: TypeAlias = Mapping[str, str]
"""Failure message per field key. A missing key means the field is valid."""


__all__ = [
    "FieldKind",
    "TEXT_KINDS",
    "FormStatus",
    "FieldErrorCode",
    "EventType",
    "FormValues",
    "ErrorMap",
]
