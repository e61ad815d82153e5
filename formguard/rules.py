"""Built-in validation rules for formguard fields.

Each validator is a callable with the signature::

    def rule(value, values) -> str | None:
        '''Return error message, or None if valid.'''

``value`` is the field's own value and ``values`` the whole FormValues
mapping, so a rule may look at other fields. The rules here are factories
that take the message to report, because each form words its errors
differently ("Email is not valid" vs "Email is invalid").

Custom validators follow the same protocol.
"""

import math
import re
from typing import Any, Callable, Iterable, Mapping, Optional

from typing_extensions import TypeAlias

from formguard.types import FieldKind, FormValues

Validator: TypeAlias = Callable[[Any, FormValues], Optional[str]]


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def is_empty(kind: FieldKind, value: Any) -> bool:
    """Whether a value counts as "not provided" for a required field.

    - None is always empty
    - strings are empty when blank after stripping whitespace
    - a boolean is empty when unchecked
    - a checkbox group is empty when no member is checked
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if kind == FieldKind.BOOLEAN:
        return value is not True
    if kind == FieldKind.CHECKBOX_GROUP:
        if not isinstance(value, Mapping):
            return True
        return not any(value.values())
    return False


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Structural check only: something@something.something
_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")

_PHONE_RE = re.compile(r"[0-9]{10}")

_URL_RE = re.compile(r'(?:ftp|http|https)://[^ "]+')

_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def email(message: str = "Email is not valid") -> Validator:
    """Value must look like an email address."""

    def check(value: Any, values: FormValues) -> Optional[str]:
        if not isinstance(value, str) or not _EMAIL_RE.search(value):
            return message
        return None

    return check


def phone(message: str = "Phone number must be 10 digits") -> Validator:
    """Value must be exactly ten decimal digits."""

    def check(value: Any, values: FormValues) -> Optional[str]:
        if not isinstance(value, str) or not _PHONE_RE.fullmatch(value):
            return message
        return None

    return check


def url(message: str = "Must be a valid URL") -> Validator:
    """Value must be an ftp, http or https URL without spaces or quotes."""

    def check(value: Any, values: FormValues) -> Optional[str]:
        if not isinstance(value, str) or not _URL_RE.fullmatch(value):
            return message
        return None

    return check


def parse_number(value: Any) -> Optional[float]:
    """Parse a number or numeric text, returning None when it is not a finite number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str) and _NUMBER_RE.fullmatch(value.strip()):
        number = float(value.strip())
    else:
        return None
    return number if math.isfinite(number) else None


def positive_number(message: str = "Must be a number greater than 0") -> Validator:
    """Value must parse as a number strictly greater than zero."""

    def check(value: Any, values: FormValues) -> Optional[str]:
        number = parse_number(value)
        if number is None or number <= 0:
            return message
        return None

    return check


# ---------------------------------------------------------------------------
# Cross-field
# ---------------------------------------------------------------------------


def at_least_one(keys: Iterable[str], message: str = "Select at least one option") -> Validator:
    """At least one of the named boolean fields must be checked.

    Meant for a RULE descriptor: the rule's own value is ignored.
    """
    names = tuple(keys)

    def check(value: Any, values: FormValues) -> Optional[str]:
        if not any(values.get(name) is True for name in names):
            return message
        return None

    return check


def format_validator(kind: FieldKind, message: Optional[str] = None) -> Optional[Validator]:
    """Return the built-in format rule for a field kind, if it has one."""
    factories = {
        FieldKind.EMAIL: email,
        FieldKind.PHONE: phone,
        FieldKind.URL: url,
        FieldKind.NUMBER: positive_number,
    }
    factory = factories.get(kind)
    if factory is None:
        return None
    return factory(message) if message else factory()


__all__ = [
    "Validator",
    "is_empty",
    "email",
    "phone",
    "url",
    "parse_number",
    "positive_number",
    "at_least_one",
    "format_validator",
]
