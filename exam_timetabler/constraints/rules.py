from typing import Any, Dict, Tuple

from exam_timetabler.models.schemas import TimetableRequest

# --- Constants for Readability ---
REQUIRED_FIELDS = (
    "subject_dependencies",
    "student_enrollment",
    "faculty_availability",
    "room_capacities",
    "exam_duration",
)

FIELD_MESSAGES: Dict[str, str] = {
    "subject_dependencies": "Please provide more details on subject dependencies.",
    "student_enrollment": "Please provide more details on student enrollment.",
    "faculty_availability": "Please provide more details on faculty availability.",
    "room_capacities": "Please provide more details on room capacities.",
    "exam_duration": "Please specify exam duration.",
    "additional_constraints": "Additional constraints must be text.",
}

# pydantic error type -> issue reason
_REASONS = {
    "missing": "missing",
    "string_too_short": "too_short",
}

# Both the python name and the camelCase alias resolve to the python name.
_FIELD_LOOKUP: Dict[str, str] = {}
for _name, _info in TimetableRequest.model_fields.items():
    _FIELD_LOOKUP[_name] = _name
    if _info.alias:
        _FIELD_LOOKUP[_info.alias] = _name


def min_length(field: str) -> int:
    """Minimum accepted length of a request field (0 when unconstrained)."""
    for meta in TimetableRequest.model_fields[field].metadata:
        value = getattr(meta, "min_length", None)
        if value is not None:
            return value
    return 0


def classify(error: Dict[str, Any]) -> Tuple[str, str, str]:
    """
    Turns one pydantic error entry into (field, reason, message).
    Errors not tied to a single field (e.g., the input is not a mapping)
    are reported against "request".
    """
    loc = error.get("loc") or ()
    field = _FIELD_LOOKUP.get(str(loc[0]), str(loc[0])) if loc else "request"
    reason = _REASONS.get(error.get("type"), "invalid_type")
    message = FIELD_MESSAGES.get(field, "Timetable request must be a mapping of text fields.")
    return field, reason, message
