"""Unit tests for schema declarations and declarative form definitions.

Tests cover:
- FieldDescriptor defaults and declaration checks
- Schema lookup and defaults
- Loading definitions from dicts and JSON files
- Rejection of malformed definitions
"""

import json

import pytest

from formguard.errors import FormDefinitionError, UnknownFieldError
from formguard.forms import EVENT_REGISTRATION, JOB_APPLICATION
from formguard.schema import FieldDescriptor, Schema, load_schema
from formguard.types import FieldKind
from formguard.validation import validate


class TestFieldDescriptor:
    """Test FieldDescriptor declarations."""

    @pytest.mark.parametrize("kind, expected", [
        (FieldKind.TEXT, ""),
        (FieldKind.EMAIL, ""),
        (FieldKind.NUMBER, ""),
        (FieldKind.BOOLEAN, False),
        (FieldKind.DATETIME, None),
        (FieldKind.RULE, None),
    ])
    def test_initial_value_by_kind(self, kind, expected):
        """Should derive the initial value from the field kind."""
        assert FieldDescriptor(key="f", kind=kind).initial_value() == expected

    def test_checkbox_group_initial_value(self):
        """Should start every member unchecked unless a default says otherwise."""
        group = FieldDescriptor(
            key="skills",
            kind=FieldKind.CHECKBOX_GROUP,
            members=("Go", "Rust"),
            default={"Rust": True},
        )
        assert group.initial_value() == {"Go": False, "Rust": True}

    def test_explicit_default(self):
        """Should use an explicit default."""
        assert FieldDescriptor(key="country", default="NL").initial_value() == "NL"

    def test_kind_from_string(self):
        """Should accept the kind as a string."""
        assert FieldDescriptor(key="f", kind="email").kind == FieldKind.EMAIL

    def test_missing_message(self):
        """Should build the required message from the label."""
        assert FieldDescriptor(key="fullName", label="Full Name").missing_message == "Full Name is required"
        assert FieldDescriptor(key="fullName").missing_message == "fullName is required"
        assert FieldDescriptor(key="f", required_message="Pick one").missing_message == "Pick one"

    def test_callable_required(self):
        """Should evaluate a conditional requirement against values."""
        field = FieldDescriptor(key="f", required=lambda values: values.get("g") == 1)
        assert field.is_required({"g": 1}) is True
        assert field.is_required({"g": 2}) is False

    @pytest.mark.parametrize("kwargs", [
        {"key": ""},
        {"key": "a.b"},
        {"key": "g", "kind": FieldKind.CHECKBOX_GROUP},
        {"key": "g", "kind": FieldKind.CHECKBOX_GROUP, "members": ("a", "a")},
        {"key": "t", "members": ("a",)},
        {"key": "s", "kind": FieldKind.SELECT},
        {"key": "s", "kind": FieldKind.SELECT, "options": ("a",), "default": "b"},
    ])
    def test_malformed_declarations(self, kwargs):
        """Should reject malformed field declarations."""
        with pytest.raises(FormDefinitionError):
            FieldDescriptor(**kwargs)


class TestSchema:
    """Test Schema container behaviour."""

    def test_lookup(self):
        """Should look fields up by key and keep declaration order."""
        schema = Schema([FieldDescriptor(key="a"), FieldDescriptor(key="b")], form_id="demo")

        assert schema.keys == ("a", "b")
        assert schema["b"].key == "b"
        assert "a" in schema
        assert "z" not in schema
        assert len(schema) == 2
        assert [f.key for f in schema] == ["a", "b"]

    def test_unknown_key(self):
        """Should raise UnknownFieldError for unknown keys."""
        schema = Schema([FieldDescriptor(key="a")])
        with pytest.raises(UnknownFieldError) as exc_info:
            schema["z"]
        assert exc_info.value.key == "z"

    def test_duplicate_keys(self):
        """Should reject duplicate keys."""
        with pytest.raises(FormDefinitionError):
            Schema([FieldDescriptor(key="a"), FieldDescriptor(key="a")])

    def test_empty_schema(self):
        """Should reject a schema without fields."""
        with pytest.raises(FormDefinitionError):
            Schema([])

    def test_defaults_are_fresh(self):
        """Should return a new mapping each time."""
        schema = Schema([FieldDescriptor(key="g", kind=FieldKind.CHECKBOX_GROUP, members=("x",))])
        first = schema.defaults()
        first["g"]["x"] = True
        assert schema.defaults() == {"g": {"x": False}}


class TestDefinitions:
    """Test loading declarative definitions."""

    def test_builtin_definitions_load(self):
        """Should load both built-in forms."""
        assert Schema.from_dict(EVENT_REGISTRATION).form_id == "event_registration"
        assert Schema.from_dict(JOB_APPLICATION).keys[-1] == "preferredInterviewTime"

    def test_format_validator_from_kind(self):
        """Should attach the format rule matching the field kind."""
        schema = Schema.from_dict({
            "formId": "contact",
            "fields": [
                {"key": "email", "kind": "email", "message": "Bad email"},
                {"key": "phone", "kind": "phone"},
            ],
        })
        errors = validate({"email": "nope", "phone": "123"}, schema)
        assert errors == {"email": "Bad email", "phone": "Phone number must be 10 digits"}

    def test_conditional_required(self):
        """Should accept a condition as the required flag."""
        schema = Schema.from_dict({
            "formId": "contact",
            "fields": [
                {"key": "byPhone", "kind": "boolean"},
                {"key": "phone", "kind": "phone", "label": "Phone",
                 "required": {"field": "byPhone", "isTrue": True}},
            ],
        })
        assert validate({"byPhone": True, "phone": ""}, schema) == {"phone": "Phone is required"}
        assert validate({"byPhone": False, "phone": ""}, schema) == {}

    def test_rule_field(self):
        """Should build an at-least-one rule over boolean fields."""
        schema = Schema.from_dict({
            "formId": "prefs",
            "fields": [
                {"key": "sms", "kind": "boolean"},
                {"key": "mail", "kind": "boolean"},
                {"key": "channel", "kind": "rule", "atLeastOne": ["sms", "mail"],
                 "message": "Choose a channel"},
            ],
        })
        values = schema.defaults()
        assert validate(values, schema) == {"channel": "Choose a channel"}
        values["mail"] = True
        assert validate(values, schema) == {}

    @pytest.mark.parametrize("definition", [
        {"fields": [{"key": "a"}]},
        {"formId": "x", "fields": []},
        {"formId": "x", "fields": [{"key": "a", "kind": "colour"}]},
        {"formId": "x", "fields": [{"key": "a", "extra": 1}]},
        {"formId": "x", "fields": [{"key": "a.b"}]},
        {"formId": "x", "fields": [{"key": "a", "visibleWhen": {"field": "a", "startsWith": "x"}}]},
        {"formId": "x", "fields": [{"key": "a", "required": "yes"}]},
    ])
    def test_rejects_malformed_definitions(self, definition):
        """Should reject definitions that do not match the definition schema."""
        with pytest.raises(FormDefinitionError):
            Schema.from_dict(definition)

    def test_rejects_condition_on_unknown_field(self):
        """Should reject conditions referring to undeclared fields."""
        with pytest.raises(FormDefinitionError) as exc_info:
            Schema.from_dict({
                "formId": "x",
                "fields": [{"key": "a", "visibleWhen": {"field": "missing", "isTrue": True}}],
            })
        assert "missing" in str(exc_info.value)
        assert exc_info.value.path == "fields[0]"

    @pytest.mark.parametrize("condition_key", ["visibleWhen", "required"])
    def test_rejects_condition_on_later_field(self, condition_key):
        """Should reject conditions referring to fields declared after them."""
        with pytest.raises(FormDefinitionError) as exc_info:
            Schema.from_dict({
                "formId": "f",
                "fields": [
                    {"key": "b", condition_key: {"field": "a", "isTrue": True}},
                    {"key": "a", "kind": "boolean"},
                ],
            })
        assert "declared later" in str(exc_info.value)
        assert exc_info.value.path == "fields[0]"

    def test_rejects_condition_on_itself(self):
        """Should reject a field whose condition refers to itself."""
        with pytest.raises(FormDefinitionError):
            Schema.from_dict({
                "formId": "f",
                "fields": [{"key": "a", "kind": "boolean", "visibleWhen": {"field": "a", "isTrue": True}}],
            })

    def test_rejects_rule_over_non_boolean(self):
        """Should reject rule members that are not boolean fields."""
        with pytest.raises(FormDefinitionError):
            Schema.from_dict({
                "formId": "x",
                "fields": [
                    {"key": "name"},
                    {"key": "r", "kind": "rule", "atLeastOne": ["name"]},
                ],
            })

    def test_rejects_rule_without_members(self):
        """Should reject rule fields without an atLeastOne list."""
        with pytest.raises(FormDefinitionError):
            Schema.from_dict({"formId": "x", "fields": [{"key": "r", "kind": "rule"}]})

    def test_load_schema_from_json_file(self, tmp_path):
        """Should load a definition from a JSON file."""
        path = tmp_path / "registration.json"
        path.write_text(json.dumps(EVENT_REGISTRATION), encoding="utf-8")

        schema = load_schema(path)
        assert schema.form_id == "event_registration"
        assert schema.keys == ("name", "email", "age", "attendingWithGuest", "guestName")

    def test_load_schema_from_mapping(self):
        """Should load a definition passed as a mapping."""
        assert load_schema(JOB_APPLICATION).form_id == "job_application"
