"""Event system for form sessions.

This module provides the event data structure and event emitter used by
FormSession. Every field change, validation run and submission emits a typed
FormEvent, which is how the host learns about an accepted submission and
hands it to whatever transport it uses.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import json
import logging

from dateutil.parser import isoparse

from .types import EventType, FormStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormEvent:
    """A single event in a form session.

    Attributes:
        event_id: Unique event identifier (e.g., "evt_3f2a...")
        type: Event type from EventType enum
        form_id: ID of the form session this event relates to
        ts: UTC timestamp when the event occurred
        status: Form status after this event
        payload: Optional event-specific data (changed key, error map, snapshot)

    Examples:
        >>> from datetime import datetime, timezone
        >>> event = FormEvent(
        ...     event_id="evt_001",
        ...     type=EventType.FORM_CREATED,
        ...     form_id="event_registration",
        ...     ts=datetime.now(timezone.utc),
        ...     status=FormStatus.EDITING,
        ... )
    """
    event_id: str
    type: EventType
    form_id: str
    ts: datetime
    status: FormStatus
    payload: Optional[Dict[str, Any]] = None

    def __post_init__(self):
        """Validate and normalize fields."""
        if isinstance(self.status, str):
            object.__setattr__(self, "status", FormStatus(self.status))
        if isinstance(self.type, str):
            object.__setattr__(self, "type", EventType(self.type))

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization.

        Timestamp is formatted as ISO 8601 string.
        """
        result: Dict[str, Any] = {
            "eventId": self.event_id,
            "type": self.type.value,
            "formId": self.form_id,
            "ts": self.ts.isoformat(),
            "status": self.status.value,
        }
        if self.payload is not None:
            result["payload"] = self.payload
        return result

    def to_jsonl(self) -> str:
        """Convert event to JSONL format (single-line JSON)."""
        return json.dumps(self.to_dict(), separators=(',', ':'))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormEvent":
        """Create FormEvent from dictionary (camelCase keys)."""
        return cls(
            event_id=data["eventId"],
            type=EventType(data["type"]),
            form_id=data["formId"],
            ts=isoparse(data["ts"]),
            status=FormStatus(data["status"]),
            payload=data.get("payload"),
        )


EventListener = Callable[[FormEvent], None]
"""Type alias for event listener callbacks.

Listeners are called synchronously when events are emitted.
"""


class EventEmitter:
    """Event emitter for managing event listeners and dispatching events.

    Features:
    - Type-specific subscriptions (listen to specific event types)
    - Wildcard subscriptions (listen to all events)
    - Synchronous dispatch (listeners called in registration order)
    - Error isolation (a failing listener is logged and does not affect others)

    Examples:
        >>> emitter = EventEmitter()
        >>> received = []
        >>> emitter.on(EventType.FORM_SUBMITTED, received.append)
        >>> emitter.listener_count(EventType.FORM_SUBMITTED)
        1
    """

    def __init__(self):
        """Initialize event emitter with empty listener registries."""
        self._listeners: Dict[EventType, List[EventListener]] = {}
        self._any_listeners: List[EventListener] = []

    def on(self, event_type: EventType, listener: EventListener) -> None:
        """Subscribe to a specific event type."""
        if event_type not in self._listeners:
            self._listeners[event_type] = []
        self._listeners[event_type].append(listener)

    def on_any(self, listener: EventListener) -> None:
        """Subscribe to all event types (wildcard subscription)."""
        self._any_listeners.append(listener)

    def off(self, event_type: EventType, listener: EventListener) -> None:
        """Unsubscribe from a specific event type.

        Removing a listener that was never registered is a no-op.
        """
        listeners = self._listeners.get(event_type, [])
        if listener in listeners:
            listeners.remove(listener)

    def off_any(self, listener: EventListener) -> None:
        """Unsubscribe from wildcard subscription."""
        if listener in self._any_listeners:
            self._any_listeners.remove(listener)

    def emit(self, event: FormEvent) -> None:
        """Dispatch an event to all registered listeners.

        Listeners are called synchronously in registration order:
        1. Type-specific listeners for this event type
        2. Wildcard listeners (subscribed to all events)

        A listener that raises is logged and skipped.
        """
        listeners = list(self._listeners.get(event.type, [])) + list(self._any_listeners)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "Event listener %r failed on %s for form %s",
                    listener, event.type.value, event.form_id,
                )

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners.clear()
        self._any_listeners.clear()

    def listener_count(self, event_type: Optional[EventType] = None) -> int:
        """Get count of registered listeners.

        Args:
            event_type: If provided, count listeners for this type only.
                        If None, count all listeners (including wildcard).
        """
        if event_type is not None:
            return len(self._listeners.get(event_type, []))
        total = len(self._any_listeners)
        for listeners in self._listeners.values():
            total += len(listeners)
        return total


__all__ = [
    "FormEvent",
    "EventListener",
    "EventEmitter",
]
