"""
Cast Vote Command

Command and handler for recording a member's vote on an agenda.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from coop_voting.domain.shared.messages import ErrorMessages
from coop_voting.domain.shared.types import EntityIdStr
from coop_voting.domain.shared.validators import IdentifierValidators, validate_model
from coop_voting.domain.voting.entities import Agenda, Session, Tally, Vote
from coop_voting.domain.voting.services import TallyEngine
from coop_voting.domain.voting.value_objects import VoteChoice

if TYPE_CHECKING:
    from ..services.voting_session_service import VotingSessionService


class CastVoteCommand(BaseModel):
    """Command to cast a YES/NO vote."""

    model_config = ConfigDict(
        frozen=True, strict=True, alias_generator=to_camel, populate_by_name=True
    )

    agenda_id: EntityIdStr
    user_id: EntityIdStr
    vote: VoteChoice

    _validate_ids = IdentifierValidators.non_blank("agenda_id", "user_id")

    @field_validator("vote", mode="before")
    @classmethod
    def parse_vote(cls, v: Any) -> VoteChoice:
        try:
            return VoteChoice.parse(v)
        except ValueError:
            choices = ", ".join(c.value for c in VoteChoice)
            raise ValueError(ErrorMessages.INVALID_VOTE_CHOICE.format(choices=choices)) from None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> CastVoteCommand:
        """Build from a ``{"agendaId": ..., "userId": ..., "vote": ...}`` request body."""
        return validate_model(cls, payload)


class CastVoteResult(BaseModel):
    """Result of a cast vote command."""

    model_config = ConfigDict(frozen=True)

    vote: Vote
    agenda: Agenda
    tally: Tally
    started_session: Session | None = None

    def to_payload(self) -> dict[str, Any]:
        """The persisted vote record."""
        return self.vote.model_dump(mode="json", by_alias=True)


class CastVoteHandler:
    """Handler for CastVoteCommand."""

    def __init__(self, voting_service: VotingSessionService) -> None:
        self._voting_service = voting_service

    async def handle(self, command: CastVoteCommand) -> CastVoteResult:
        receipt = await self._voting_service.cast_vote(
            command.agenda_id, command.user_id, command.vote
        )
        return CastVoteResult(
            vote=receipt.vote,
            agenda=receipt.agenda,
            tally=TallyEngine.tally(receipt.agenda),
            started_session=receipt.started_session,
        )
