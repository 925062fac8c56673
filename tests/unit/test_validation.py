"""Unit tests for draft validation."""
import pytest
from datetime import date

from festival_admin.utils.exceptions import ValidationError
from festival_admin.utils.validation import (
    PROGRAMME_SCHEMA,
    SPEAKER_SCHEMA,
    ensure_valid,
    normalize_search_term,
    validate_programme_draft,
    validate_speaker_draft,
)


@pytest.fixture
def valid_programme_values():
    return {
        "name": "Keynote",
        "day_number": 1,
        "date": date(2025, 3, 10),
        "start_datetime": "09:00",
        "end_datetime": "10:30",
        "venue": "Main Hall",
    }


@pytest.fixture
def valid_speaker_values():
    return {
        "name": "Jane Doe",
        "bio": "Novelist",
        "programmes": ["p1"],
        "imageUrl": "https://img.example.com/jane.png",
        "priority": 1,
    }


class TestValidateProgrammeDraft:
    """Test programme schema."""

    def test_valid_draft_has_no_errors(self, valid_programme_values):
        assert validate_programme_draft(valid_programme_values) == {}

    def test_name_of_length_two_rejected(self, valid_programme_values):
        valid_programme_values["name"] = "AB"

        errors = validate_programme_draft(valid_programme_values)

        assert errors == {"name": "Programme name must be at least 3 characters"}

    def test_name_length_counts_raw_value(self, valid_programme_values):
        """Surrounding spaces count towards the minimum, as submitted."""
        valid_programme_values["name"] = " ab "
        assert validate_programme_draft(valid_programme_values) == {}

    def test_whitespace_only_name_rejected(self, valid_programme_values):
        valid_programme_values["name"] = "   "
        assert validate_programme_draft(valid_programme_values)["name"] == "Programme name must be at least 3 characters"

    def test_day_number_must_be_positive(self, valid_programme_values):
        valid_programme_values["day_number"] = 0

        errors = validate_programme_draft(valid_programme_values)

        assert errors["day_number"] == "Day number must be positive"

    def test_day_number_rejects_bool(self, valid_programme_values):
        valid_programme_values["day_number"] = True
        assert "day_number" in validate_programme_draft(valid_programme_values)

    def test_missing_times_are_required(self, valid_programme_values):
        valid_programme_values["start_datetime"] = ""
        valid_programme_values["end_datetime"] = "  "

        errors = validate_programme_draft(valid_programme_values)

        assert errors["start_datetime"] == "Start time is required"
        assert errors["end_datetime"] == "End time is required"

    def test_malformed_time(self, valid_programme_values):
        valid_programme_values["start_datetime"] = "9:00am"

        errors = validate_programme_draft(valid_programme_values)

        assert errors["start_datetime"] == "Time must be in HH:MM format"

    def test_missing_date(self, valid_programme_values):
        valid_programme_values["date"] = None
        assert validate_programme_draft(valid_programme_values)["date"] == "Date is required"

    def test_short_venue(self, valid_programme_values):
        valid_programme_values["venue"] = "A"
        assert validate_programme_draft(valid_programme_values)["venue"] == "Venue must be at least 2 characters"

    def test_errors_follow_schema_order(self):
        """Every field is reported for an empty draft, in schema order."""
        errors = validate_programme_draft({})
        assert list(errors) == [rule.name for rule in PROGRAMME_SCHEMA]


class TestValidateSpeakerDraft:
    """Test speaker schema."""

    def test_valid_draft_has_no_errors(self, valid_speaker_values):
        assert validate_speaker_draft(valid_speaker_values) == {}

    def test_empty_programmes_rejected_as_required(self, valid_speaker_values):
        valid_speaker_values["programmes"] = []

        errors = validate_speaker_draft(valid_speaker_values)

        assert errors == {"programmes": "At least one programme is required"}
        assert "required" in errors["programmes"]

    def test_image_url_optional(self, valid_speaker_values):
        valid_speaker_values["imageUrl"] = ""
        assert validate_speaker_draft(valid_speaker_values) == {}

    def test_image_url_must_be_url(self, valid_speaker_values):
        valid_speaker_values["imageUrl"] = "not a url"
        assert validate_speaker_draft(valid_speaker_values)["imageUrl"] == "Image URL must be a valid URL"

    def test_blank_name_and_bio(self, valid_speaker_values):
        valid_speaker_values["name"] = " "
        valid_speaker_values["bio"] = ""

        errors = validate_speaker_draft(valid_speaker_values)

        assert errors["name"] == "Name is required"
        assert errors["bio"] == "Bio is required"

    def test_priority_zero_is_valid(self, valid_speaker_values):
        valid_speaker_values["priority"] = 0
        assert validate_speaker_draft(valid_speaker_values) == {}

    def test_priority_must_be_integer(self, valid_speaker_values):
        valid_speaker_values["priority"] = "first"
        assert "priority" in validate_speaker_draft(valid_speaker_values)


class TestEnsureValid:
    """Test ensure_valid function."""

    def test_raises_with_field_errors(self, valid_speaker_values):
        valid_speaker_values["programmes"] = []

        with pytest.raises(ValidationError) as exc_info:
            ensure_valid(SPEAKER_SCHEMA, valid_speaker_values)

        assert exc_info.value.field_errors == {"programmes": "At least one programme is required"}

    def test_passes_silently_when_valid(self, valid_speaker_values):
        ensure_valid(SPEAKER_SCHEMA, valid_speaker_values)


class TestNormalizeSearchTerm:
    """Test normalize_search_term function."""

    def test_trims_and_lowercases(self):
        assert normalize_search_term("  KeY ") == "key"

    def test_none_becomes_empty(self):
        assert normalize_search_term(None) == ""
