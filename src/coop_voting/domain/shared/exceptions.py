"""Base exception classes for domain-level errors."""

from __future__ import annotations

from coop_voting.domain.shared.enums import ErrorCode


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    error_code: ErrorCode = ErrorCode.GENERIC_ERROR

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__

    @property
    def http_status(self) -> int:
        return self.error_code.http_status


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    error_code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    error_code = ErrorCode.NOT_FOUND

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class InvalidStateError(DomainError):
    """Raised when an operation is not allowed in the agenda's current status."""

    error_code = ErrorCode.INVALID_STATE

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_STATE")
        self.operation = operation
        self.current_state = current_state


class DuplicateVoteError(DomainError):
    """Raised when a user has already voted on an agenda."""

    error_code = ErrorCode.DUPLICATE_VOTE

    def __init__(self, user_id: str, agenda_id: str, message: str | None = None) -> None:
        msg = message or f"User '{user_id}' has already voted on agenda '{agenda_id}'"
        super().__init__(msg, code="DUPLICATE_VOTE")
        self.user_id = user_id
        self.agenda_id = agenda_id
