"""Validation engine for formguard schemas.

This module provides a ValidationEngine that checks FormValues against a
Schema and produces structured validation results, plus the ``validate``
function that reduces a result to an ErrorMap for display.

Validation is a pure function of (values, schema): it has no side effects,
never raises for invalid input, and running it twice on the same values gives
the same answer. Failures are reported as data (FieldError records).

Rules, in schema order, for every field:
1. Hidden fields are skipped; their stored values are ignored.
2. A required field with an empty value gets the field's required message
   and no further checks.
3. Otherwise the field's validator (if any) runs on ``(value, values)``.
   Empty optional values are not passed to the validator, except for RULE
   fields, which have no value of their own.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional

from formguard.errors import FieldError
from formguard.rules import is_empty
from formguard.schema import FieldDescriptor, Schema
from formguard.types import ErrorMap, FieldErrorCode, FieldKind, FormValues
from formguard.visibility import ConditionalFieldResolver

logger = logging.getLogger(__name__)

_FORMAT_KINDS = frozenset({FieldKind.EMAIL, FieldKind.PHONE, FieldKind.URL})


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating FormValues against a Schema.

    Attributes:
        is_valid: Whether every visible field passed
        errors: Field-level validation errors in schema order (empty if valid)
        visible_fields: Keys that were visible, and therefore checked, in this run
        missing_fields: Keys of required fields that were empty
        invalid_fields: Keys of fields whose validator failed

    Examples:
        >>> from formguard.forms import event_registration_schema
        >>> engine = ValidationEngine(event_registration_schema())
        >>> result = engine.validate({"name": "", "email": "a@b.com", "age": "5",
        ...                           "attendingWithGuest": False, "guestName": ""})
        >>> result.error_map
        {'name': 'Name is required'}
    """
    is_valid: bool
    errors: List[FieldError]
    visible_fields: FrozenSet[str] = field(default_factory=frozenset)
    missing_fields: List[str] = field(default_factory=list)
    invalid_fields: List[str] = field(default_factory=list)

    @property
    def error_map(self) -> Dict[str, str]:
        """The errors as a key -> message mapping."""
        return {error.key: error.message for error in self.errors}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "isValid": self.is_valid,
            "errors": [e.to_dict() for e in self.errors],
            "visibleFields": sorted(self.visible_fields),
            "missingFields": list(self.missing_fields),
            "invalidFields": list(self.invalid_fields),
        }


class ValidationEngine:
    """Validation engine bound to one schema.

    Attributes:
        schema: The schema to validate against
        resolver: Resolver used to decide which fields are checked
    """

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self.resolver = ConditionalFieldResolver(schema)

    def validate(self, values: FormValues) -> ValidationResult:
        """Validate FormValues against the schema.

        Args:
            values: Current value of every field

        Returns:
            ValidationResult holding one FieldError per failing visible field
        """
        visible = self.resolver.visible_fields(values)

        errors: List[FieldError] = []
        missing_fields: List[str] = []
        invalid_fields: List[str] = []

        for descriptor in self.schema:
            if descriptor.key not in visible:
                continue

            error = self._check_field(descriptor, values)
            if error is None:
                continue

            errors.append(error)
            if error.code == FieldErrorCode.REQUIRED:
                missing_fields.append(error.key)
            else:
                invalid_fields.append(error.key)

        logger.debug(
            "Validated form %s: %d visible, %d failing",
            self.schema.form_id, len(visible), len(errors),
        )

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            visible_fields=visible,
            missing_fields=missing_fields,
            invalid_fields=invalid_fields,
        )

    def _check_field(self, descriptor: FieldDescriptor, values: FormValues) -> Optional[FieldError]:
        """Check one visible field; None means it passed."""
        value = values.get(descriptor.key)
        empty = descriptor.kind != FieldKind.RULE and is_empty(descriptor.kind, value)

        if empty and descriptor.is_required(values):
            return FieldError(
                key=descriptor.key,
                code=FieldErrorCode.REQUIRED,
                message=descriptor.missing_message,
            )

        if descriptor.validator is None or empty:
            return None

        message = descriptor.validator(value, values)
        if message is None:
            return None

        return FieldError(key=descriptor.key, code=self._failure_code(descriptor), message=message)

    @staticmethod
    def _failure_code(descriptor: FieldDescriptor) -> FieldErrorCode:
        if descriptor.kind in _FORMAT_KINDS:
            return FieldErrorCode.INVALID_FORMAT
        if descriptor.kind == FieldKind.NUMBER:
            return FieldErrorCode.INVALID_VALUE
        return FieldErrorCode.CUSTOM


def validate(values: FormValues, schema: Schema) -> ErrorMap:
    """Validate ``values`` against ``schema`` and return the ErrorMap.

    An empty mapping means the values are valid.
    """
    return ValidationEngine(schema).validate(values).error_map


__all__ = [
    "ValidationEngine",
    "ValidationResult",
    "validate",
]
