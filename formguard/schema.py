"""Form schema: the static declaration of a form's fields.

A Schema is an ordered sequence of FieldDescriptor objects. Each descriptor
fixes the field's value variant (FieldKind), whether it is required (always,
or only under a condition), when it is visible, and how its value is checked.

Schemas can be built directly in Python or loaded from a declarative
definition (a dict or JSON file). Declarative definitions are checked against
a JSON Schema with the jsonschema library before anything is built, so a
malformed definition fails fast with a FormDefinitionError.

Usage:
    >>> schema = Schema.from_dict({
    ...     "formId": "signup",
    ...     "fields": [
    ...         {"key": "name", "label": "Name", "required": True},
    ...         {"key": "email", "kind": "email", "label": "Email", "required": True},
    ...     ],
    ... })
    >>> schema.keys
    ('name', 'email')
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Tuple, Union

from jsonschema import Draft7Validator

from formguard import rules
from formguard.conditions import Condition, always, condition_from_dict, referenced_fields
from formguard.errors import FormDefinitionError, UnknownFieldError
from formguard.types import FieldKind, FormValues, TEXT_KINDS


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass(frozen=True)
class FieldDescriptor:
    """Declaration of a single form field.

    Attributes:
        key: Unique field key (may not contain ".")
        kind: Value variant of the field
        label: Display label, also used to build the default required message
        required: True/False, or a condition evaluated against current values
        validator: Optional rule ``(value, values) -> message | None``
        visible_when: Condition deciding whether the field is shown
        default: Initial value; derived from the kind when not given
        options: Allowed values of a SELECT field
        members: Member names of a CHECKBOX_GROUP field
        required_message: Message reported when a required field is empty
        unit: Suffix used when summarising numeric values (e.g. "years")

    Examples:
        >>> from formguard.conditions import is_true
        >>> guest = FieldDescriptor(
        ...     key="guestName",
        ...     label="Guest name",
        ...     required=True,
        ...     visible_when=is_true("attendingWithGuest"),
        ... )
        >>> guest.missing_message
        'Guest name is required'
    """
    key: str
    kind: FieldKind = FieldKind.TEXT
    label: Optional[str] = None
    required: Union[bool, Condition] = False
    validator: Optional[rules.Validator] = field(default=None, compare=False)
    visible_when: Condition = field(default=always, compare=False)
    default: Any = UNSET
    options: Tuple[str, ...] = ()
    members: Tuple[str, ...] = ()
    required_message: Optional[str] = None
    unit: Optional[str] = None

    def __post_init__(self):
        """Validate and normalize the declaration."""
        if isinstance(self.kind, str):
            object.__setattr__(self, "kind", FieldKind(self.kind))
        object.__setattr__(self, "options", tuple(self.options))
        object.__setattr__(self, "members", tuple(self.members))

        if not self.key or "." in self.key:
            raise FormDefinitionError(
                f"invalid field key {self.key!r}: keys must be non-empty and may not contain '.'"
            )
        if self.kind == FieldKind.CHECKBOX_GROUP and not self.members:
            raise FormDefinitionError("checkbox group needs at least one member", path=self.key)
        if self.kind != FieldKind.CHECKBOX_GROUP and self.members:
            raise FormDefinitionError("only checkbox groups have members", path=self.key)
        if self.kind == FieldKind.SELECT and not self.options:
            raise FormDefinitionError("select field needs at least one option", path=self.key)
        if len(set(self.members)) != len(self.members):
            raise FormDefinitionError("duplicate checkbox group member", path=self.key)
        if (
            self.kind == FieldKind.SELECT
            and self.default is not UNSET
            and self.default not in ("",) + self.options
        ):
            raise FormDefinitionError(
                f"default {self.default!r} is not one of the options", path=self.key
            )

    @property
    def display_label(self) -> str:
        return self.label or self.key

    @property
    def missing_message(self) -> str:
        """Message reported when this field is required but empty."""
        return self.required_message or f"{self.display_label} is required"

    def is_required(self, values: FormValues) -> bool:
        if callable(self.required):
            return bool(self.required(values))
        return bool(self.required)

    def is_visible(self, values: FormValues) -> bool:
        return bool(self.visible_when(values))

    def initial_value(self) -> Any:
        """Value this field holds when a form is mounted."""
        if self.kind == FieldKind.CHECKBOX_GROUP:
            defaults = self.default if self.default is not UNSET else {}
            return {member: bool(defaults.get(member, False)) for member in self.members}
        if self.default is not UNSET:
            return self.default
        if self.kind in TEXT_KINDS:
            return ""
        if self.kind == FieldKind.BOOLEAN:
            return False
        return None


class Schema:
    """Ordered, immutable collection of field descriptors.

    Attributes:
        form_id: Identifier of the form this schema describes
        fields: The descriptors in declaration order

    Examples:
        >>> schema = Schema([FieldDescriptor(key="name", required=True)], form_id="demo")
        >>> "name" in schema
        True
        >>> schema.defaults()
        {'name': ''}
    """

    def __init__(self, fields: Iterable[FieldDescriptor], form_id: str = "form") -> None:
        """Initialize the schema.

        Raises:
            FormDefinitionError: If two descriptors share a key or the schema is empty
        """
        self.form_id = form_id
        self.fields: Tuple[FieldDescriptor, ...] = tuple(fields)
        if not self.fields:
            raise FormDefinitionError("a form needs at least one field", path=form_id)

        self._by_key: Dict[str, FieldDescriptor] = {}
        for descriptor in self.fields:
            if descriptor.key in self._by_key:
                raise FormDefinitionError(f"duplicate field key '{descriptor.key}'", path=form_id)
            self._by_key[descriptor.key] = descriptor

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def __getitem__(self, key: str) -> FieldDescriptor:
        try:
            return self._by_key[key]
        except KeyError:
            raise UnknownFieldError(key) from None

    def __repr__(self) -> str:
        return f"Schema(form_id={self.form_id!r}, keys={list(self.keys)!r})"

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(descriptor.key for descriptor in self.fields)

    def defaults(self) -> Dict[str, Any]:
        """Fresh FormValues holding every field's initial value."""
        return {descriptor.key: descriptor.initial_value() for descriptor in self.fields}

    @classmethod
    def from_dict(cls, definition: Mapping[str, Any]) -> "Schema":
        """Build a schema from a declarative definition.

        Args:
            definition: Dict with "formId" and a "fields" list (see FORM_DEFINITION_SCHEMA)

        Returns:
            The built Schema

        Raises:
            FormDefinitionError: If the definition is malformed, or a condition refers to
                an unknown field or one declared after it
        """
        errors = sorted(_definition_validator.iter_errors(definition), key=lambda e: [str(p) for p in e.path])
        if errors:
            first = errors[0]
            path = ".".join(str(p) for p in first.path) or None
            raise FormDefinitionError(first.message, path=path)

        form_id = definition["formId"]
        field_defs: List[Dict[str, Any]] = definition["fields"]
        declared = {field_def["key"]: field_def.get("kind", "text") for field_def in field_defs}

        descriptors = []
        # Conditions may only look back at fields declared before them.
        earlier: Set[str] = set()
        for index, field_def in enumerate(field_defs):
            path = f"fields[{index}]"
            for condition_key in ("visibleWhen", "required"):
                condition = field_def.get(condition_key)
                if isinstance(condition, dict):
                    referenced = referenced_fields(condition)
                    unknown = referenced - set(declared)
                    if unknown:
                        raise FormDefinitionError(
                            f"{condition_key} refers to unknown field(s): {', '.join(sorted(unknown))}",
                            path=path,
                        )
                    later = referenced - earlier
                    if later:
                        raise FormDefinitionError(
                            f"{condition_key} refers to field(s) declared later: {', '.join(sorted(later))}",
                            path=path,
                        )
            descriptors.append(_descriptor_from_dict(field_def, declared, path))
            earlier.add(field_def["key"])

        return cls(descriptors, form_id=form_id)


def _descriptor_from_dict(
    field_def: Dict[str, Any],
    declared: Mapping[str, str],
    path: str,
) -> FieldDescriptor:
    kind = FieldKind(field_def.get("kind", "text"))

    required: Union[bool, Condition] = False
    if isinstance(field_def.get("required"), dict):
        required = condition_from_dict(field_def["required"], f"{path}.required")
    elif "required" in field_def:
        required = field_def["required"]

    visible_when: Condition = always
    if "visibleWhen" in field_def:
        visible_when = condition_from_dict(field_def["visibleWhen"], f"{path}.visibleWhen")

    validator: Optional[rules.Validator] = None
    if kind == FieldKind.RULE:
        group = field_def.get("atLeastOne")
        if not group:
            raise FormDefinitionError("rule fields need an 'atLeastOne' list", path=path)
        for name in group:
            if declared.get(name) != FieldKind.BOOLEAN.value:
                raise FormDefinitionError(
                    f"atLeastOne member '{name}' is not a boolean field", path=path
                )
        validator = rules.at_least_one(group, field_def.get("message", "Select at least one option"))
    else:
        validator = rules.format_validator(kind, field_def.get("message"))

    kwargs: Dict[str, Any] = {}
    if "default" in field_def:
        kwargs["default"] = field_def["default"]

    return FieldDescriptor(
        key=field_def["key"],
        kind=kind,
        label=field_def.get("label"),
        required=required,
        validator=validator,
        visible_when=visible_when,
        options=tuple(field_def.get("options", ())),
        members=tuple(field_def.get("members", ())),
        required_message=field_def.get("requiredMessage"),
        unit=field_def.get("unit"),
        **kwargs,
    )


def load_schema(source: Union[str, Path, Mapping[str, Any]]) -> Schema:
    """Load a schema from a definition dict or a path to a JSON file."""
    if isinstance(source, Mapping):
        return Schema.from_dict(source)
    with open(source, "r", encoding="utf-8") as fh:
        return Schema.from_dict(json.load(fh))


_CONDITION_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "oneOf": [
        {
            "properties": {"field": {"type": "string"}, "equals": {}},
            "required": ["field", "equals"],
            "additionalProperties": False,
        },
        {
            "properties": {"field": {"type": "string"}, "in": {"type": "array"}},
            "required": ["field", "in"],
            "additionalProperties": False,
        },
        {
            "properties": {"field": {"type": "string"}, "isTrue": {"type": "boolean"}},
            "required": ["field", "isTrue"],
            "additionalProperties": False,
        },
        {
            "properties": {"all": {"type": "array", "items": {"$ref": "#/definitions/condition"}}},
            "required": ["all"],
            "additionalProperties": False,
        },
        {
            "properties": {"any": {"type": "array", "items": {"$ref": "#/definitions/condition"}}},
            "required": ["any"],
            "additionalProperties": False,
        },
    ],
}

FORM_DEFINITION_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "definitions": {"condition": _CONDITION_SCHEMA},
    "properties": {
        "formId": {"type": "string", "minLength": 1},
        "fields": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "properties": {
                    "key": {"type": "string", "pattern": r"^[^.]+$"},
                    "kind": {"enum": [kind.value for kind in FieldKind]},
                    "label": {"type": "string"},
                    "required": {
                        "oneOf": [{"type": "boolean"}, {"$ref": "#/definitions/condition"}]
                    },
                    "visibleWhen": {"$ref": "#/definitions/condition"},
                    "default": {},
                    "options": {"type": "array", "items": {"type": "string"}},
                    "members": {"type": "array", "items": {"type": "string"}, "minItems": 1},
                    "message": {"type": "string"},
                    "requiredMessage": {"type": "string"},
                    "unit": {"type": "string"},
                    "atLeastOne": {"type": "array", "items": {"type": "string"}, "minItems": 1},
                },
                "required": ["key"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["formId", "fields"],
    "additionalProperties": False,
}

Draft7Validator.check_schema(FORM_DEFINITION_SCHEMA)
_definition_validator = Draft7Validator(FORM_DEFINITION_SCHEMA)


__all__ = [
    "UNSET",
    "FieldDescriptor",
    "Schema",
    "load_schema",
    "FORM_DEFINITION_SCHEMA",
]
