"""Shared string enumerations for type-safe comparisons across layers."""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    """Error kinds surfaced to callers, each bound to the HTTP status a transport maps it to."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DUPLICATE_VOTE = "DUPLICATE_VOTE"
    INVALID_STATE = "INVALID_STATE"
    GENERIC_ERROR = "GENERIC_ERROR"

    @property
    def http_status(self) -> int:
        return {
            ErrorCode.VALIDATION_ERROR: 400,
            ErrorCode.NOT_FOUND: 404,
            ErrorCode.DUPLICATE_VOTE: 409,
            ErrorCode.INVALID_STATE: 422,
            ErrorCode.GENERIC_ERROR: 500,
        }[self]
