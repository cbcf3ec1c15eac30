"""
Voting Bounded Context

Domain logic for agendas, their timed voting sessions, and vote tallies.
"""

from coop_voting.domain.voting.entities import Agenda, Session, Tally, Vote
from coop_voting.domain.voting.repository import AgendaRepository, VoteRepository
from coop_voting.domain.voting.services import TallyEngine
from coop_voting.domain.voting.value_objects import (
    AgendaCategory,
    AgendaResult,
    AgendaStatus,
    VoteChoice,
)

__all__ = [
    # Entities
    "Agenda",
    "Session",
    "Vote",
    "Tally",
    # Value Objects
    "AgendaStatus",
    "AgendaResult",
    "AgendaCategory",
    "VoteChoice",
    # Repository
    "AgendaRepository",
    "VoteRepository",
    # Services
    "TallyEngine",
]
