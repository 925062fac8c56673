"""Declarative form validation for programme and speaker drafts."""
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from festival_admin.utils.exceptions import ValidationError


TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

TEXT = "text"
INTEGER = "integer"
DATE = "date"
TIME = "time"
ID_LIST = "id_list"
URL = "url"


@dataclass(frozen=True)
class FieldRule:
    """Constraint set for one form field."""

    name: str
    kind: str
    message: str
    required: bool = True
    min_length: int = 0
    min_value: Optional[int] = None


PROGRAMME_SCHEMA: List[FieldRule] = [
    FieldRule("name", TEXT, "Programme name must be at least 3 characters", min_length=3),
    FieldRule("day_number", INTEGER, "Day number must be positive", min_value=1),
    FieldRule("date", DATE, "Date is required"),
    FieldRule("start_datetime", TIME, "Start time is required"),
    FieldRule("end_datetime", TIME, "End time is required"),
    FieldRule("venue", TEXT, "Venue must be at least 2 characters", min_length=2),
]

SPEAKER_SCHEMA: List[FieldRule] = [
    FieldRule("name", TEXT, "Name is required", min_length=1),
    FieldRule("bio", TEXT, "Bio is required", min_length=1),
    FieldRule("programmes", ID_LIST, "At least one programme is required", min_length=1),
    FieldRule("imageUrl", URL, "Image URL must be a valid URL", required=False),
    FieldRule("priority", INTEGER, "Priority must be a whole number"),
]


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def check_field(rule: FieldRule, value: Any) -> Optional[str]:
    """
    Check one value against its rule.

    Args:
        rule: Field rule
        value: Draft value

    Returns:
        Error message, or None if the value is acceptable
    """
    if _is_blank(value):
        return rule.message if rule.required else None

    if rule.kind == TEXT:
        if not isinstance(value, str) or len(value) < rule.min_length:
            return rule.message

    elif rule.kind == INTEGER:
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            return rule.message
        if rule.min_value is not None and value < rule.min_value:
            return rule.message

    elif rule.kind == DATE:
        if not isinstance(value, date):
            return rule.message

    elif rule.kind == TIME:
        if not isinstance(value, str):
            return rule.message
        if not TIME_PATTERN.match(value.strip()):
            return "Time must be in HH:MM format"

    elif rule.kind == ID_LIST:
        if not isinstance(value, (list, tuple)) or len(value) < rule.min_length:
            return rule.message
        if not all(isinstance(item, str) and item.strip() for item in value):
            return rule.message

    elif rule.kind == URL:
        if not isinstance(value, str) or not URL_PATTERN.match(value.strip()):
            return rule.message

    return None


def validate_draft(schema: Sequence[FieldRule], values: Dict[str, Any]) -> Dict[str, str]:
    """
    Validate form values against a schema.

    Args:
        schema: Field rules, in display order
        values: Form values keyed by field name

    Returns:
        Dict of field name to error message; empty when the draft is valid
    """
    errors: Dict[str, str] = {}
    for rule in schema:
        message = check_field(rule, values.get(rule.name))
        if message:
            errors[rule.name] = message
    return errors


def ensure_valid(schema: Sequence[FieldRule], values: Dict[str, Any]) -> None:
    """
    Raise if the form values break any rule.

    Raises:
        ValidationError: With per-field messages
    """
    errors = validate_draft(schema, values)
    if errors:
        raise ValidationError(errors)


def validate_programme_draft(values: Dict[str, Any]) -> Dict[str, str]:
    return validate_draft(PROGRAMME_SCHEMA, values)


def validate_speaker_draft(values: Dict[str, Any]) -> Dict[str, str]:
    return validate_draft(SPEAKER_SCHEMA, values)


def normalize_search_term(term: str) -> str:
    """
    Normalize a search term for matching.

    Behavior:
        - Trims leading/trailing whitespace
        - Converts to lowercase
        - Example: " Key " → "key"
    """
    return (term or "").strip().lower()
