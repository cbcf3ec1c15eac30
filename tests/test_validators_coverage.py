"""
Validators Tests

Tests for shared validators and the pydantic-to-domain error translation.
"""

import pytest
from pydantic import BaseModel

from coop_voting.domain.shared.exceptions import ValidationError
from coop_voting.domain.shared.validators import (
    IdentifierValidators,
    validate_model,
    validate_non_empty_string,
)


class TestValidateNonEmptyString:

    def test_strips_whitespace(self):
        assert validate_non_empty_string("  abc  ") == "abc"

    @pytest.mark.parametrize("value", ["", "   "])
    def test_rejects_blank(self, value):
        with pytest.raises(ValueError, match="user_id cannot be empty"):
            validate_non_empty_string(value, "user_id")


class _Ids(BaseModel):
    agenda_id: str
    user_id: str

    _validate_ids = IdentifierValidators.non_blank("agenda_id", "user_id")


class TestIdentifierValidators:

    def test_accepts_and_strips(self):
        model = _Ids(agenda_id=" a1 ", user_id="u1")

        assert model.agenda_id == "a1"

    def test_rejects_blank_identifier(self):
        with pytest.raises(ValueError, match="user_id cannot be empty"):
            _Ids(agenda_id="a1", user_id="  ")


class TestValidateModel:

    def test_returns_model(self):
        model = validate_model(_Ids, {"agenda_id": "a", "user_id": "u"})

        assert model.user_id == "u"

    def test_translates_to_domain_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_model(_Ids, {"agenda_id": "a"})

        assert exc_info.value.field == "user_id"
        assert exc_info.value.http_status == 400
        assert "user_id" in exc_info.value.message

    def test_blank_identifier_reports_field(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_model(_Ids, {"agenda_id": " ", "user_id": "u"})

        assert exc_info.value.field == "agenda_id"
