"""
Domain Exceptions Tests

Tests error codes, messages and HTTP status mapping of domain exceptions.
"""

import pytest

from coop_voting.domain.shared.enums import ErrorCode
from coop_voting.domain.shared.exceptions import (
    DomainError,
    DuplicateVoteError,
    EntityNotFoundError,
    InvalidStateError,
    ValidationError,
)


class TestDomainExceptionEdgeCases:
    """Tests for domain exception construction."""

    def test_domain_error_with_message(self):
        """Should create DomainError with message."""
        error = DomainError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "DomainError"
        assert error.http_status == 500

    def test_domain_error_with_custom_code(self):
        error = DomainError("Custom error", code="CUSTOM_CODE")

        assert error.code == "CUSTOM_CODE"

    def test_validation_error_with_field(self):
        """Should include field name in ValidationError."""
        error = ValidationError("vote is required", field="vote")

        assert error.message == "vote is required"
        assert error.field == "vote"
        assert error.code == "VALIDATION_ERROR"

    def test_entity_not_found_error_default_message(self):
        error = EntityNotFoundError("Agenda", "abc123")

        assert "Agenda" in str(error)
        assert "abc123" in str(error)
        assert "not found" in str(error)
        assert error.entity_type == "Agenda"
        assert error.identifier == "abc123"

    def test_entity_not_found_error_custom_message(self):
        error = EntityNotFoundError("Agenda", "abc123", message="gone")

        assert str(error) == "gone"

    def test_invalid_state_error(self):
        error = InvalidStateError("cast_vote", "FINISHED")

        assert "cast_vote" in str(error)
        assert "FINISHED" in str(error)
        assert error.operation == "cast_vote"
        assert error.current_state == "FINISHED"
        assert error.code == "INVALID_STATE"

    def test_duplicate_vote_error(self):
        error = DuplicateVoteError("user-1", "agenda-1")

        assert "user-1" in str(error)
        assert "agenda-1" in str(error)
        assert error.user_id == "user-1"
        assert error.agenda_id == "agenda-1"

    def test_all_errors_are_domain_errors(self):
        for error in (
            ValidationError("x"),
            EntityNotFoundError("Agenda", "a"),
            InvalidStateError("op", "s"),
            DuplicateVoteError("u", "a"),
        ):
            assert isinstance(error, DomainError)


class TestHttpStatusMapping:
    """Each error kind maps to one transport status."""

    @pytest.mark.parametrize(
        ("error", "status"),
        [
            (ValidationError("x"), 400),
            (EntityNotFoundError("Agenda", "a"), 404),
            (DuplicateVoteError("u", "a"), 409),
            (InvalidStateError("op", "s"), 422),
        ],
    )
    def test_http_status(self, error, status):
        assert error.http_status == status

    def test_error_code_values_are_strings(self):
        assert ErrorCode.NOT_FOUND == "NOT_FOUND"
        assert ErrorCode.GENERIC_ERROR.http_status == 500
