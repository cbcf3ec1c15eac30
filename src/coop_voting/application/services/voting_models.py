"""DTOs for the voting session service."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from ...domain.voting.entities import Agenda, Session, Vote


class SessionStart(BaseModel):
    """An agenda that just entered IN_PROGRESS together with its new session."""

    model_config = ConfigDict(frozen=True)

    agenda: Agenda
    session: Session
    implicit: bool = False

    @property
    def start_date(self) -> datetime:
        return self.session.start_time

    @property
    def end_date(self) -> datetime:
        return self.session.end_time


class VoteReceipt(BaseModel):
    """A persisted vote with the agenda counters it produced."""

    model_config = ConfigDict(frozen=True)

    vote: Vote
    agenda: Agenda
    started_session: Session | None = None

    @property
    def opened_session(self) -> bool:
        return self.started_session is not None
