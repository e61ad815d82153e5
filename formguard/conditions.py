"""Predicates over FormValues used for visibility and conditional requirement.

A condition is a callable ``(values) -> bool``. Conditions are plain
functions of the current values only, so they can be evaluated after every
change without carrying any history.

The declarative form (used in JSON/dict form definitions) is translated by
``condition_from_dict``::

    {"field": "position", "equals": "Designer"}
    {"field": "position", "in": ["Developer", "Designer"]}
    {"field": "attendingWithGuest", "isTrue": true}
    {"all": [<condition>, ...]}
    {"any": [<condition>, ...]}
"""

from typing import Any, Callable, Dict, Iterable, Set

from typing_extensions import TypeAlias

from formguard.errors import FormDefinitionError
from formguard.types import FormValues

Condition: TypeAlias = Callable[[FormValues], bool]


def always(values: FormValues) -> bool:
    """Condition that always holds."""
    return True


def never(values: FormValues) -> bool:
    """Condition that never holds."""
    return False


def equals(key: str, expected: Any) -> Condition:
    """Holds when field ``key`` currently equals ``expected``."""

    def check(values: FormValues) -> bool:
        return values.get(key) == expected

    return check


def one_of(key: str, choices: Iterable[Any]) -> Condition:
    """Holds when field ``key`` currently has one of ``choices``."""
    allowed = tuple(choices)

    def check(values: FormValues) -> bool:
        return values.get(key) in allowed

    return check


def is_true(key: str) -> Condition:
    """Holds when boolean field ``key`` is checked."""

    def check(values: FormValues) -> bool:
        return values.get(key) is True

    return check


def is_false(key: str) -> Condition:
    """Holds when boolean field ``key`` is not checked."""

    def check(values: FormValues) -> bool:
        return values.get(key) is not True

    return check


def all_of(*conditions: Condition) -> Condition:
    """Holds when every condition holds."""

    def check(values: FormValues) -> bool:
        return all(condition(values) for condition in conditions)

    return check


def any_of(*conditions: Condition) -> Condition:
    """Holds when at least one condition holds."""

    def check(values: FormValues) -> bool:
        return any(condition(values) for condition in conditions)

    return check


def referenced_fields(definition: Dict[str, Any]) -> Set[str]:
    """Collect every field key a declarative condition refers to."""
    if "all" in definition or "any" in definition:
        keys: Set[str] = set()
        for child in definition.get("all", definition.get("any", [])):
            keys |= referenced_fields(child)
        return keys
    return {definition["field"]}


def condition_from_dict(definition: Dict[str, Any], path: str = "") -> Condition:
    """Build a condition from its declarative dict form.

    Args:
        definition: The declarative condition
        path: Location in the enclosing form definition, for error messages

    Raises:
        FormDefinitionError: If the condition is not one of the known shapes
    """
    if "all" in definition:
        return all_of(*(
            condition_from_dict(child, f"{path}.all[{i}]")
            for i, child in enumerate(definition["all"])
        ))
    if "any" in definition:
        return any_of(*(
            condition_from_dict(child, f"{path}.any[{i}]")
            for i, child in enumerate(definition["any"])
        ))

    key = definition.get("field")
    if not isinstance(key, str):
        raise FormDefinitionError("condition needs a 'field' name", path=path)

    if "equals" in definition:
        return equals(key, definition["equals"])
    if "in" in definition:
        return one_of(key, definition["in"])
    if "isTrue" in definition:
        return is_true(key) if definition["isTrue"] else is_false(key)
    raise FormDefinitionError(
        "condition must use one of 'equals', 'in', 'isTrue', 'all', 'any'",
        path=path,
    )


__all__ = [
    "Condition",
    "always",
    "never",
    "equals",
    "one_of",
    "is_true",
    "is_false",
    "all_of",
    "any_of",
    "referenced_fields",
    "condition_from_dict",
]
