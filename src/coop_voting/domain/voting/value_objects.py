"""
Voting Domain Value Objects

Immutable value objects for the voting bounded context.
"""

from enum import Enum
from typing import assert_never


class AgendaStatus(Enum):
    """Lifecycle states of an agenda.

    DRAFT -> OPEN -> IN_PROGRESS -> FINISHED, with CANCELLED reachable from
    any state before FINISHED. FINISHED and CANCELLED are terminal.
    """

    DRAFT = "DRAFT"
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"
    CANCELLED = "CANCELLED"

    @property
    def can_start_session(self) -> bool:
        """Check if a voting session may be opened from this status."""
        match self:
            case AgendaStatus.DRAFT | AgendaStatus.OPEN:
                return True
            case AgendaStatus.IN_PROGRESS | AgendaStatus.FINISHED | AgendaStatus.CANCELLED:
                return False
            case _:
                assert_never(self)

    @property
    def accepts_votes(self) -> bool:
        """Check if votes may be cast in this status.

        OPEN only accepts votes because the first vote opens a session.
        """
        match self:
            case AgendaStatus.OPEN | AgendaStatus.IN_PROGRESS:
                return True
            case AgendaStatus.DRAFT | AgendaStatus.FINISHED | AgendaStatus.CANCELLED:
                return False
            case _:
                assert_never(self)

    @property
    def is_terminal(self) -> bool:
        """Check if no transition can leave this status."""
        match self:
            case AgendaStatus.FINISHED | AgendaStatus.CANCELLED:
                return True
            case AgendaStatus.DRAFT | AgendaStatus.OPEN | AgendaStatus.IN_PROGRESS:
                return False
            case _:
                assert_never(self)

    @classmethod
    def startable(cls) -> frozenset["AgendaStatus"]:
        return frozenset(status for status in cls if status.can_start_session)

    @classmethod
    def voting(cls) -> frozenset["AgendaStatus"]:
        return frozenset(status for status in cls if status.accepts_votes)


class AgendaResult(Enum):
    """Outcome classification of an agenda."""

    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    TIE = "TIE"
    UNVOTED = "UNVOTED"


class AgendaCategory(Enum):
    """Category tag attached to an agenda."""

    PROJETOS = "PROJETOS"
    ADMINISTRATIVO = "ADMINISTRATIVO"
    ELEICOES = "ELEICOES"
    ESTATUTARIO = "ESTATUTARIO"
    FINANCEIRO = "FINANCEIRO"
    OUTROS = "OUTROS"


class VoteChoice(Enum):
    """Binary choice a member can cast."""

    YES = "YES"
    NO = "NO"

    @classmethod
    def parse(cls, value: "str | VoteChoice") -> "VoteChoice":
        """Parse a case-insensitive choice, raising ValueError for anything else."""
        if isinstance(value, VoteChoice):
            return value
        return cls(str(value).strip().upper())
