"""Conditional field resolver.

Decides which fields are currently visible, by evaluating every descriptor's
``visible_when`` condition against the current FormValues. The host renders
exactly these fields, and the validation engine only checks these fields.

Nothing is cached between calls: visibility can depend on any other field, so
it must be recomputed after every change.
"""

from typing import FrozenSet, List

from formguard.schema import Schema
from formguard.types import FormValues


class ConditionalFieldResolver:
    """Resolves the visible fields of one schema.

    Examples:
        >>> from formguard.forms import event_registration_schema
        >>> resolver = ConditionalFieldResolver(event_registration_schema())
        >>> "guestName" in resolver.visible_fields({"attendingWithGuest": False})
        False
    """

    def __init__(self, schema: Schema) -> None:
        self.schema = schema

    def visible_fields(self, values: FormValues) -> FrozenSet[str]:
        """Keys of every field whose visibility condition currently holds."""
        return frozenset(self.ordered_visible_fields(values))

    def ordered_visible_fields(self, values: FormValues) -> List[str]:
        """Visible keys in schema order, for hosts that render in sequence."""
        return [d.key for d in self.schema if d.is_visible(values)]

    def hidden_fields(self, values: FormValues) -> FrozenSet[str]:
        return frozenset(self.schema.keys) - self.visible_fields(values)


def visible_fields(values: FormValues, schema: Schema) -> FrozenSet[str]:
    """Set of field keys currently visible for ``values``."""
    return ConditionalFieldResolver(schema).visible_fields(values)


__all__ = [
    "ConditionalFieldResolver",
    "visible_fields",
]
