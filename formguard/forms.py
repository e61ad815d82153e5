"""Built-in form definitions.

Two forms ship with the package, declared in the same dict format that
``load_schema`` accepts for JSON files:

- Event registration: name, email, age, and a guest name that only appears
  (and is only required) when attending with a guest.
- Job application: contact details, a position whose value reveals
  position-specific fields, a skills checkbox group and an interview time.
"""

from typing import Any, Dict

from formguard.schema import Schema

POSITIONS = ("Developer", "Designer", "Manager")
SKILLS = ("JavaScript", "CSS", "Python")

EVENT_REGISTRATION: Dict[str, Any] = {
    "formId": "event_registration",
    "fields": [
        {"key": "name", "label": "Name", "required": True},
        {
            "key": "email",
            "kind": "email",
            "label": "Email",
            "required": True,
            "message": "Email is not valid",
        },
        {
            "key": "age",
            "kind": "number",
            "label": "Age",
            "required": True,
            "message": "Age must be a number greater than 0",
        },
        {
            "key": "attendingWithGuest",
            "kind": "boolean",
            "label": "Are you attending with a guest?",
        },
        {
            "key": "guestName",
            "label": "Guest name",
            "required": True,
            "visibleWhen": {"field": "attendingWithGuest", "isTrue": True},
        },
    ],
}

JOB_APPLICATION: Dict[str, Any] = {
    "formId": "job_application",
    "fields": [
        {"key": "fullName", "label": "Full Name", "required": True},
        {
            "key": "email",
            "kind": "email",
            "label": "Email",
            "required": True,
            "message": "Email is invalid",
        },
        {
            "key": "phoneNumber",
            "kind": "phone",
            "label": "Phone Number",
            "required": True,
            "message": "Phone Number must be a valid number",
        },
        {
            "key": "position",
            "kind": "select",
            "label": "Position",
            "required": True,
            "options": list(POSITIONS),
        },
        {
            "key": "relevantExperience",
            "kind": "number",
            "label": "Relevant Experience",
            "required": True,
            "unit": "years",
            "visibleWhen": {"field": "position", "in": ["Developer", "Designer"]},
            "message": "Relevant Experience must be a number greater than 0",
            "requiredMessage": "Relevant Experience must be a number greater than 0",
        },
        {
            "key": "portfolioURL",
            "kind": "url",
            "label": "Portfolio URL",
            "required": True,
            "visibleWhen": {"field": "position", "equals": "Designer"},
            "message": "Portfolio URL must be a valid URL",
            "requiredMessage": "Portfolio URL must be a valid URL",
        },
        {
            "key": "managementExperience",
            "kind": "textarea",
            "label": "Management Experience",
            "required": True,
            "visibleWhen": {"field": "position", "equals": "Manager"},
        },
        {
            "key": "additionalSkills",
            "kind": "checkbox_group",
            "label": "Additional Skills",
            "required": True,
            "members": list(SKILLS),
            "requiredMessage": "At least one skill must be selected",
        },
        {
            "key": "preferredInterviewTime",
            "kind": "datetime",
            "label": "Preferred Interview Time",
            "required": True,
        },
    ],
}


def event_registration_schema() -> Schema:
    return Schema.from_dict(EVENT_REGISTRATION)


def job_application_schema() -> Schema:
    return Schema.from_dict(JOB_APPLICATION)


__all__ = [
    "POSITIONS",
    "SKILLS",
    "EVENT_REGISTRATION",
    "JOB_APPLICATION",
    "event_registration_schema",
    "job_application_schema",
]
