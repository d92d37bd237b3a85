"""
Unit tests for the create/update payload validators
"""

import pytest

from app.models.account import UserCreate
from app.models.course import CourseCreate, CourseUpdate, EnrollmentUpdate, SectionCreate
from app.utils.validation import (
    PayloadValidationError,
    camel_to_snake,
    field_errors,
    validate_for_create,
    validate_for_update,
)

pytestmark = pytest.mark.unit


class TestValidateForCreate:
    def test_reports_every_missing_field(self):
        with pytest.raises(PayloadValidationError) as excinfo:
            validate_for_create(CourseCreate, {})
        fields = [e.field for e in excinfo.value.errors]
        assert sorted(fields) == ["category", "description", "slug", "title"]
        assert str(excinfo.value).startswith("Validation error: ")

    def test_fills_defaults_and_maps_columns(self):
        record = validate_for_create(
            CourseCreate,
            {
                "title": "Network Defense",
                "slug": "network-defense",
                "description": "Firewalls, IDS and segmentation.",
                "category": "network_security",
                "imageUrl": "https://cdn.example.com/nd.png",
            },
        )
        assert record["level"] == "beginner"
        assert record["is_featured"] is False
        assert record["duration"] == 0
        assert record["image_url"] == "https://cdn.example.com/nd.png"
        assert "imageUrl" not in record

    def test_column_alias(self):
        record = validate_for_create(SectionCreate, {"title": "Intro", "order": 3})
        assert record["position"] == 3
        assert "order" not in record

    def test_none_payload(self):
        with pytest.raises(PayloadValidationError):
            validate_for_create(UserCreate, None)

    def test_bad_enum_and_pattern(self):
        with pytest.raises(PayloadValidationError) as excinfo:
            validate_for_create(
                CourseCreate,
                {
                    "title": "Valid Title",
                    "slug": "Not A Slug",
                    "description": "Long enough description.",
                    "category": "gardening",
                },
            )
        assert {e.field for e in excinfo.value.errors} == {"slug", "category"}


class TestValidateForUpdate:
    def test_empty_payload_is_noop(self):
        assert validate_for_update(CourseUpdate, {}) == {}

    def test_only_supplied_fields(self):
        assert validate_for_update(CourseUpdate, {"isFeatured": True}) == {
            "is_featured": True
        }

    def test_null_rejected_for_required_columns(self):
        with pytest.raises(PayloadValidationError) as excinfo:
            validate_for_update(CourseUpdate, {"title": None})
        error = excinfo.value.errors[0]
        assert error.field == "title"
        assert error.message == "may not be null"

    def test_nullable_column_accepts_null(self):
        assert validate_for_update(CourseUpdate, {"instructor": None}) == {
            "instructor": None
        }

    def test_progress_bounds(self):
        with pytest.raises(PayloadValidationError):
            validate_for_update(EnrollmentUpdate, {"progress": 101})


class TestHelpers:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("imageUrl", "image_url"),
            ("isFeatured", "is_featured"),
            ("title", "title"),
            ("enrolledStudents", "enrolled_students"),
        ],
    )
    def test_camel_to_snake(self, name, expected):
        assert camel_to_snake(name) == expected

    def test_field_errors_strip_location(self):
        errors = field_errors(
            [
                {"loc": ("body", "title"), "msg": "Field required"},
                {"loc": ("path", "course_id"), "msg": "Input should be a valid integer"},
                {"loc": (), "msg": "Value error, bad"},
            ]
        )
        assert [(e.field, e.message) for e in errors] == [
            ("title", "Field required"),
            ("course_id", "Input should be a valid integer"),
            ("body", "bad"),
        ]
