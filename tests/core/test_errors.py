# tests/core/test_errors.py
import pytest

from categories.schemas import CategoryPayload
from core.errors import ValidationFailed, field_errors, validate_payload


def test_blank_fields_are_reported_as_required():
    with pytest.raises(ValidationFailed) as excinfo:
        validate_payload(CategoryPayload, {"name": "   ", "status": None})

    assert excinfo.value.errors == {
        "name": ["The name field is required."],
        "status": ["The status field is required."],
    }


def test_extra_errors_are_merged_with_model_errors():
    with pytest.raises(ValidationFailed) as excinfo:
        validate_payload(
            CategoryPayload,
            {"name": "Shoes"},
            extra_errors={"image": ["The image field is required."]},
        )

    assert set(excinfo.value.errors) == {"status", "image"}


def test_extra_errors_alone_still_fail():
    with pytest.raises(ValidationFailed) as excinfo:
        validate_payload(
            CategoryPayload,
            {"name": "Shoes", "status": "active"},
            extra_errors={"image": ["The image field is required."]},
        )

    assert excinfo.value.errors == {"image": ["The image field is required."]}


def test_valid_payload_is_returned():
    payload = validate_payload(CategoryPayload, {"name": "Shoes", "status": "inactive"})
    assert payload.status == "inactive"


def test_field_errors_strips_location_root_and_value_error_prefix():
    errors = field_errors(
        [
            {"loc": ("body", "slugs", 0), "type": "string_type", "msg": "Input should be a valid string"},
            {"loc": ("body", "price"), "type": "value_error", "msg": "Value error, Too low."},
        ]
    )

    assert errors == {"slugs.0": ["Input should be a valid string"], "price": ["Too low."]}


def test_string_emptied_by_stripping_reads_as_required():
    errors = field_errors(
        [
            {"loc": ("body", "name"), "type": "string_too_short", "msg": "String should have at least 1 character", "ctx": {"min_length": 1}},
            {"loc": ("body", "description"), "type": "string_too_short", "msg": "String should have at least 10 characters", "ctx": {"min_length": 10}},
        ]
    )

    assert errors == {
        "name": ["The name field is required."],
        "description": ["String should have at least 10 characters"],
    }
