"""Explicit form state and its transition functions.

FormState is an immutable value. Transition functions take a state and
return a new one; they never mutate their input. The host keeps one FormState
per active form and replaces it after every transition.

Usage:
    >>> from formguard.forms import event_registration_schema
    >>> state = initial_state(event_registration_schema())
    >>> state = on_field_change(state, "name", "Ada")
    >>> state.values["name"]
    'Ada'
    >>> state = on_submit(state)
    >>> state.status
    <FormStatus.EDITING: 'editing'>
    >>> sorted(state.errors)
    ['age', 'email']
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from formguard.schema import Schema
from formguard.state_machine import check_transition
from formguard.types import ErrorMap, FormStatus, FormValues
from formguard.validation import ValidationEngine
from formguard.values import (
    coerce_member,
    coerce_value,
    freeze_values,
    thaw_values,
    values_from_dict,
    values_to_dict,
)

_NO_ERRORS: ErrorMap = MappingProxyType({})


@dataclass(frozen=True)
class Accepted:
    """A successful submission.

    Attributes:
        values: Read-only snapshot of FormValues at the moment of submit
    """
    values: FormValues

    @property
    def ok(self) -> bool:
        """Always returns True - the submission was accepted."""
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"ok": True, "values": values_to_dict(self.values)}


@dataclass(frozen=True)
class Rejected:
    """A failed submission.

    Attributes:
        errors: ErrorMap of every failing visible field
    """
    errors: ErrorMap

    @property
    def ok(self) -> bool:
        """Always returns False - nothing was accepted."""
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"ok": False, "errors": dict(self.errors)}


SubmissionResult = Union[Accepted, Rejected]


def evaluate_submission(values: FormValues, schema: Schema) -> SubmissionResult:
    """Validate ``values`` and wrap the outcome as Accepted or Rejected."""
    result = ValidationEngine(schema).validate(values)
    if result.is_valid:
        return Accepted(values=freeze_values(values))
    return Rejected(errors=MappingProxyType(result.error_map))


@dataclass(frozen=True)
class FormState:
    """State of one form session.

    Attributes:
        schema: Schema the form was mounted with
        values: Current value of every field (read-only)
        errors: ErrorMap from the last submit attempt (read-only)
        status: EDITING or SUBMITTED
        result: Outcome of the last submit attempt, if any
    """
    schema: Schema = field(repr=False, compare=False)
    values: FormValues
    errors: ErrorMap = field(default_factory=lambda: _NO_ERRORS)
    status: FormStatus = FormStatus.EDITING
    result: Optional[SubmissionResult] = None

    @property
    def is_submitted(self) -> bool:
        return self.status == FormStatus.SUBMITTED

    @property
    def snapshot(self) -> Optional[FormValues]:
        """The accepted values once submitted, else None."""
        if isinstance(self.result, Accepted):
            return self.result.values
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the state to a dictionary.

        The schema is not serialized; pass it again to ``from_dict``.
        """
        data: Dict[str, Any] = {
            "formId": self.schema.form_id,
            "status": self.status.value,
            "values": values_to_dict(self.values),
            "errors": dict(self.errors),
        }
        if self.result is not None:
            data["result"] = self.result.to_dict()
        return data

    @classmethod
    def from_dict(cls, schema: Schema, data: Mapping[str, Any]) -> "FormState":
        """Deserialize a state produced by ``to_dict``."""
        values = freeze_values(values_from_dict(schema, data["values"]))
        status = FormStatus(data["status"])

        result: Optional[SubmissionResult] = None
        if "result" in data:
            if data["result"]["ok"]:
                result = Accepted(values=freeze_values(values_from_dict(schema, data["result"]["values"])))
            else:
                result = Rejected(errors=MappingProxyType(dict(data["result"]["errors"])))

        return cls(
            schema=schema,
            values=values,
            errors=MappingProxyType(dict(data.get("errors", {}))),
            status=status,
            result=result,
        )


def initial_state(schema: Schema) -> FormState:
    """EDITING state holding the schema defaults and no errors."""
    return FormState(schema=schema, values=freeze_values(schema.defaults()))


def on_field_change(state: FormState, key: str, new_value: Any) -> FormState:
    """Replace one field's value.

    ``key`` is either a field key (whole-value replacement) or
    ``"<group>.<member>"`` to toggle a single checkbox-group member while
    preserving its siblings. Errors from the last submit stay attached until
    the next submit.

    Raises:
        UnknownFieldError: If the key is not declared by the schema
        FieldTypeError: If the value does not fit the field's variant
        InvalidStateTransitionError: If the form was already submitted
    """
    check_transition(state.status, FormStatus.EDITING)

    values = thaw_values(state.values)
    if "." in key:
        group, member = key.split(".", 1)
        descriptor = state.schema[group]
        values[group][member] = coerce_member(descriptor, member, new_value)
    else:
        descriptor = state.schema[key]
        values[key] = coerce_value(descriptor, new_value)

    return replace(state, values=freeze_values(values))


def on_submit(state: FormState, schema: Optional[Schema] = None) -> FormState:
    """Validate the current values and apply the submit transition.

    Valid values move the form to SUBMITTED with an Accepted snapshot.
    Otherwise the form stays EDITING with the new ErrorMap attached.

    Raises:
        InvalidStateTransitionError: If the form was already submitted
    """
    check_transition(state.status, FormStatus.SUBMITTED)
    if schema is None:
        schema = state.schema

    result = evaluate_submission(state.values, schema)
    if isinstance(result, Accepted):
        return replace(state, errors=_NO_ERRORS, status=FormStatus.SUBMITTED, result=result)
    return replace(state, errors=result.errors, result=result)


__all__ = [
    "Accepted",
    "Rejected",
    "SubmissionResult",
    "FormState",
    "evaluate_submission",
    "initial_state",
    "on_field_change",
    "on_submit",
]
