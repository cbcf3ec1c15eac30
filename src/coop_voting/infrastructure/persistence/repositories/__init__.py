"""SQLite repository implementations."""

from coop_voting.infrastructure.persistence.repositories.agenda_repository import (
    SQLiteAgendaRepository,
)
from coop_voting.infrastructure.persistence.repositories.vote_repository import (
    SQLiteVoteRepository,
)

__all__ = [
    "SQLiteAgendaRepository",
    "SQLiteVoteRepository",
]
