"""FormSession orchestrator.

This module provides the FormSession class that owns one FormState on behalf
of a host UI and coordinates the transition functions, the resolver and the
event system. The pure functions in ``formguard.state`` remain usable on their
own; FormSession adds the bookkeeping a host usually wants: a stable session
ID, an event log and listener dispatch.

Usage:
    >>> from formguard.forms import event_registration_schema
    >>> session = FormSession(event_registration_schema())
    >>> session.change("name", "Ada")
    >>> session.submit().ok
    False
    >>> sorted(session.errors)
    ['age', 'email']
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Optional

from formguard.events import EventEmitter, FormEvent
from formguard.schema import Schema
from formguard.state import (
    Accepted,
    FormState,
    SubmissionResult,
    initial_state,
    on_field_change,
    on_submit,
)
from formguard.summary import SummaryLine, summarize
from formguard.types import ErrorMap, EventType, FormStatus, FormValues
from formguard.values import values_to_dict
from formguard.visibility import ConditionalFieldResolver

logger = logging.getLogger(__name__)


class FormSession:
    """One active form, as seen by the host UI.

    Attributes:
        schema: Schema of the form
        form_id: Unique identifier of this session
        emitter: Event emitter notified of every event

    Examples:
        >>> from formguard.forms import event_registration_schema
        >>> session = FormSession(event_registration_schema())
        >>> session.form_id  # doctest: +ELLIPSIS
        'form_...'
        >>> session.status
        <FormStatus.EDITING: 'editing'>
    """

    def __init__(
        self,
        schema: Schema,
        form_id: Optional[str] = None,
        emitter: Optional[EventEmitter] = None,
    ):
        """Mount the form with the schema defaults.

        Args:
            schema: Schema of the form
            form_id: Optional session ID; generated when omitted
            emitter: Optional emitter to dispatch events through
        """
        self.schema = schema
        self.form_id = form_id or f"form_{uuid.uuid4().hex[:16]}"
        self.emitter = emitter or EventEmitter()
        self._resolver = ConditionalFieldResolver(schema)
        self._events: List[FormEvent] = []
        self._state = initial_state(schema)
        self._emit(EventType.FORM_CREATED, {"schemaId": schema.form_id})

    @property
    def state(self) -> FormState:
        return self._state

    @property
    def values(self) -> FormValues:
        return self._state.values

    @property
    def errors(self) -> ErrorMap:
        return self._state.errors

    @property
    def status(self) -> FormStatus:
        return self._state.status

    @property
    def result(self) -> Optional[SubmissionResult]:
        """Outcome of the last submit attempt, if any."""
        return self._state.result

    def visible_fields(self) -> FrozenSet[str]:
        """Keys the host should render right now."""
        return self._resolver.visible_fields(self._state.values)

    def ordered_visible_fields(self) -> List[str]:
        return self._resolver.ordered_visible_fields(self._state.values)

    def change(self, key: str, value: Any) -> None:
        """Apply a field change event.

        Raises:
            UnknownFieldError: If the key is not declared by the schema
            FieldTypeError: If the value does not fit the field's variant
            InvalidStateTransitionError: If the form was already submitted
        """
        self._state = on_field_change(self._state, key, value)
        self._emit(EventType.FIELD_CHANGED, {"key": key})

    def submit(self) -> SubmissionResult:
        """Validate and submit the form.

        Emits validation.passed followed by form.submitted (carrying the
        accepted values) on success, or validation.failed with the ErrorMap.

        Raises:
            InvalidStateTransitionError: If the form was already submitted
        """
        self._state = on_submit(self._state)
        result = self._state.result

        if isinstance(result, Accepted):
            logger.info("Form %s accepted", self.form_id)
            self._emit(EventType.VALIDATION_PASSED)
            self._emit(EventType.FORM_SUBMITTED, {"values": values_to_dict(result.values)})
        else:
            logger.info("Form %s rejected with %d error(s)", self.form_id, len(result.errors))
            self._emit(EventType.VALIDATION_FAILED, {"errors": dict(result.errors)})
        return result

    def reset(self) -> None:
        """Discard all values and errors and start over in EDITING."""
        self._state = initial_state(self.schema)
        self._emit(EventType.FORM_RESET)

    def summary(self) -> List[SummaryLine]:
        """Summary of the accepted values, or of the live values before submit."""
        values = self._state.snapshot
        if values is None:
            values = self._state.values
        return summarize(values, self.schema)

    def get_events(self) -> List[FormEvent]:
        """All events emitted by this session, in chronological order."""
        return list(self._events)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the session's current state."""
        data = self._state.to_dict()
        data["formId"] = self.form_id
        data["schemaId"] = self.schema.form_id
        return data

    def _emit(self, event_type: EventType, payload: Optional[Dict[str, Any]] = None) -> None:
        event = FormEvent(
            event_id=f"evt_{uuid.uuid4().hex[:16]}",
            type=event_type,
            form_id=self.form_id,
            ts=datetime.now(timezone.utc),
            status=self._state.status,
            payload=payload,
        )
        self._events.append(event)
        self.emitter.emit(event)


__all__ = [
    "FormSession",
]
