"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Cross-cutting types, events and exceptions
- voting/: Agendas, voting sessions and tally rules
"""

from coop_voting.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
