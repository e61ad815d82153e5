"""Error types for formguard.

Validation failures are data, not exceptions: each one is a FieldError record
that the host displays next to the offending field. A failed validation run is
always recoverable by further edits.

The exception classes below are reserved for programming errors in the host:
a malformed form definition, a change addressed to a field that does not
exist, or a value of the wrong variant for its field. These are meant to be
caught by tests, not handled at runtime.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from formguard.types import FieldErrorCode


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        key: Key of the failing field (or synthetic rule key)
        code: Specific validation error code
        message: Human-readable error description shown to the user

    Examples:
        >>> err = FieldError(
        ...     key="email",
        ...     code=FieldErrorCode.INVALID_FORMAT,
        ...     message="Email is not valid",
        ... )
        >>> err.key
        'email'
    """
    key: str
    code: FieldErrorCode
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "key": self.key,
            "code": self.code.value if isinstance(self.code, FieldErrorCode) else self.code,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = FieldErrorCode(code)
        return cls(key=data["key"], code=code, message=data["message"])


class FormDefinitionError(Exception):
    """Raised when a form schema or declarative definition is malformed.

    Attributes:
        path: Location of the problem inside the definition, if known
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class UnknownFieldError(KeyError):
    """Raised when a change addresses a field key the schema does not declare."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Unknown field '{self.key}'"


class FieldTypeError(TypeError):
    """Raised when a value does not match the variant declared for its field.

    Attributes:
        key: The field the value was assigned to
        value: The rejected value
    """

    def __init__(self, key: str, value: Any, message: str):
        self.key = key
        self.value = value
        super().__init__(f"Field '{key}': {message}")


__all__ = [
    "FieldError",
    "FormDefinitionError",
    "UnknownFieldError",
    "FieldTypeError",
]
