"""Query for listing the voting sessions of an agenda."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from coop_voting.domain.shared.types import EntityIdStr
from coop_voting.domain.shared.validators import IdentifierValidators
from coop_voting.domain.voting.entities import Agenda, Session

if TYPE_CHECKING:
    from ..services.voting_session_service import VotingSessionService


class GetSessionsQuery(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True)

    agenda_id: EntityIdStr

    _validate_ids = IdentifierValidators.non_blank("agenda_id")


class AgendaSessions(BaseModel):

    agenda: Agenda
    sessions: list[Session] = Field(default_factory=list)
    active_session: Session | None = None

    @property
    def count(self) -> int:
        return len(self.sessions)


class GetSessionsHandler:

    def __init__(self, voting_service: VotingSessionService) -> None:
        self._voting_service = voting_service

    async def handle(self, query: GetSessionsQuery) -> AgendaSessions:
        agenda = await self._voting_service.get_agenda(query.agenda_id)
        sessions = await self._voting_service.list_sessions(query.agenda_id)
        active = await self._voting_service.get_active_session(query.agenda_id)
        return AgendaSessions(agenda=agenda, sessions=sessions, active_session=active)
