"""
Shared Domain Kernel

Contains types and exceptions shared across the domain.
"""

from coop_voting.domain.shared.exceptions import (
    DomainError,
    DuplicateVoteError,
    EntityNotFoundError,
    InvalidStateError,
    ValidationError,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "EntityNotFoundError",
    "InvalidStateError",
    "DuplicateVoteError",
]
