"""
Postboard — Payload Validation Tests
======================================

What:  first_error_message() and the request schemas that feed it.
"""

import pydantic
import pytest

from postboard.schemas.post import PostCreate, PostUpdate
from postboard.schemas.validation import field_label, first_error_field, first_error_message


def _errors(model, data):
    with pytest.raises(pydantic.ValidationError) as exc_info:
        model.model_validate(data)
    return exc_info.value.errors()


class TestFirstErrorMessage:

    def test_no_errors(self):
        assert first_error_message([]) is None
        assert first_error_field([]) is None

    def test_strips_request_location(self):
        assert field_label(("body", "title")) == "title"
        assert field_label(("query", "pageNumber")) == "pageNumber"
        assert field_label(("body",)) == "body"

    def test_only_first_error_is_reported(self):
        errors = _errors(PostCreate, {"title": "x", "description": "short"})
        assert len(errors) == 2
        assert first_error_message(errors) == '"title" length must be at least 3 characters long'

    def test_too_long(self):
        errors = _errors(PostCreate, {"title": "t" * 201, "description": "long enough text"})
        assert first_error_message(errors) == (
            '"title" length must be less than or equal to 200 characters long'
        )

    def test_whitespace_is_stripped_before_length_check(self):
        errors = _errors(PostCreate, {"title": "   ab   ", "description": "long enough text"})
        assert first_error_field(errors) == "title"

    def test_unknown_field(self):
        errors = _errors(
            PostCreate, {"title": "Hello", "description": "long enough text", "likes": []}
        )
        assert first_error_message(errors) == '"likes" is not allowed'

    def test_missing(self):
        errors = _errors(PostCreate, {"description": "long enough text"})
        assert first_error_message(errors) == '"title" is required'

    def test_non_string(self):
        errors = _errors(PostCreate, {"title": 42, "description": "long enough text"})
        assert first_error_message(errors) == '"title" must be a string'

    def test_unmapped_type_falls_back_to_pydantic_message(self):
        message = first_error_message(
            [{"type": "something_new", "loc": ("body", "title"), "msg": "is odd"}]
        )
        assert message == '"title" is odd'


class TestPostUpdate:

    def test_everything_optional(self):
        update = PostUpdate.model_validate({})
        assert update.model_dump(exclude_unset=True) == {}

    def test_present_fields_are_validated(self):
        errors = _errors(PostUpdate, {"description": "short"})
        assert first_error_message(errors) == (
            '"description" length must be at least 10 characters long'
        )

    def test_null_description_rejected(self):
        errors = _errors(PostUpdate, {"description": None})
        assert first_error_message(errors) == '"description" must be a string'

    def test_null_category_allowed(self):
        update = PostUpdate.model_validate({"category": None})
        assert update.model_dump(exclude_unset=True) == {"category": None}
