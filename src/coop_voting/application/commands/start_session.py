"""
Start Session Command

Command and handler for opening a timed voting window on an agenda.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from coop_voting.domain.shared.datetime_utils import UtcDateTime
from coop_voting.domain.shared.types import EntityIdStr, SessionMinutes
from coop_voting.domain.shared.validators import IdentifierValidators, validate_model
from coop_voting.domain.voting.entities import Agenda

if TYPE_CHECKING:
    from ..services.voting_models import SessionStart
    from ..services.voting_session_service import VotingSessionService


class StartSessionCommand(BaseModel):
    """Command to start a voting session on an agenda."""

    model_config = ConfigDict(
        frozen=True, strict=True, alias_generator=to_camel, populate_by_name=True
    )

    agenda_id: EntityIdStr
    duration_in_minutes: SessionMinutes

    _validate_ids = IdentifierValidators.non_blank("agenda_id")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> StartSessionCommand:
        """Build from a ``{"agendaId": ..., "durationInMinutes": ...}`` request body."""
        return validate_model(cls, payload)


class StartSessionResult(BaseModel):
    """Result of a start session command."""

    model_config = ConfigDict(frozen=True)

    agenda: Agenda
    start_date: datetime
    end_date: datetime

    @classmethod
    def from_session_start(cls, start: SessionStart) -> StartSessionResult:
        return cls(agenda=start.agenda, start_date=start.start_date, end_date=start.end_date)

    def to_payload(self) -> dict[str, Any]:
        """The agenda record with the session window attached."""
        payload = self.agenda.model_dump(mode="json", by_alias=True)
        payload["startDate"] = UtcDateTime(self.start_date).iso_z
        payload["endDate"] = UtcDateTime(self.end_date).iso_z
        return payload


class StartSessionHandler:
    """Handler for StartSessionCommand."""

    def __init__(self, voting_service: VotingSessionService) -> None:
        self._voting_service = voting_service

    async def handle(self, command: StartSessionCommand) -> StartSessionResult:
        start = await self._voting_service.start_session(
            command.agenda_id, command.duration_in_minutes
        )
        return StartSessionResult.from_session_start(start)
