"""formguard: schema-driven form validation with conditional fields.

formguard provides:
- A validation engine that turns (values, schema) into an error map
- A resolver for fields that are only shown under conditions
- An explicit, immutable form state with EDITING/SUBMITTED transitions
- Declarative form definitions checked with JSON Schema
- A form session with an event stream for hosts that want one

Basic usage:
    >>> from formguard import initial_state, on_field_change, on_submit
    >>> from formguard.forms import event_registration_schema
    >>> schema = event_registration_schema()
    >>> state = initial_state(schema)
    >>> state = on_field_change(state, "email", "a@b.com")
    >>> dict(on_submit(state).errors)
    {'name': 'Name is required', 'age': 'Age is required'}
"""

__version__ = "0.1.0"
__author__ = "formguard developers"

# Version info
VERSION = (0, 1, 0)

# Core exports
from formguard.runtime import FormSession
from formguard.schema import FieldDescriptor, Schema, load_schema
from formguard.state import (
    Accepted,
    FormState,
    Rejected,
    initial_state,
    on_field_change,
    on_submit,
)
from formguard.validation import ValidationEngine, validate
from formguard.visibility import ConditionalFieldResolver, visible_fields

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "FormSession",
    "FieldDescriptor",
    "Schema",
    "load_schema",
    "Accepted",
    "Rejected",
    "FormState",
    "initial_state",
    "on_field_change",
    "on_submit",
    "ValidationEngine",
    "validate",
    "ConditionalFieldResolver",
    "visible_fields",
]
