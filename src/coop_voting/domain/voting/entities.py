"""Core domain entities for the voting bounded context."""

from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from coop_voting.domain.shared.datetime_utils import UtcDateTime, utcnow
from coop_voting.domain.shared.messages import ErrorMessages
from coop_voting.domain.shared.types import (
    AgendaDescriptionStr,
    AgendaTitleStr,
    EntityIdStr,
    NonNegativeInt,
    PercentageInt,
    UtcDatetimeField,
)
from coop_voting.domain.voting.value_objects import (
    AgendaCategory,
    AgendaResult,
    AgendaStatus,
    VoteChoice,
)


def new_id() -> str:
    return str(uuid4())


class Agenda(BaseModel):
    """A proposal subject to a single yes/no vote.

    Snapshots are immutable; the agenda repository is the source of truth and
    hands back a fresh snapshot after every write.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: EntityIdStr = Field(default_factory=new_id)
    title: AgendaTitleStr
    description: AgendaDescriptionStr = ""
    category: AgendaCategory = AgendaCategory.OUTROS
    status: AgendaStatus = AgendaStatus.OPEN
    result: AgendaResult = AgendaResult.UNVOTED
    yes_votes: NonNegativeInt = 0
    no_votes: NonNegativeInt = 0
    total_votes: NonNegativeInt = 0
    is_active: bool = True
    created_at: UtcDatetimeField = Field(default_factory=utcnow)
    updated_at: UtcDatetimeField = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def _check_invariants(self) -> Agenda:
        if self.total_votes != self.yes_votes + self.no_votes:
            raise ValueError(ErrorMessages.TOTAL_VOTES_MISMATCH)
        if self.status is not AgendaStatus.FINISHED and self.result is not AgendaResult.UNVOTED:
            raise ValueError(ErrorMessages.RESULT_BEFORE_FINISH)
        return self

    @property
    def accepts_votes(self) -> bool:
        return self.status.accepts_votes

    @property
    def can_start_session(self) -> bool:
        return self.status.can_start_session

    @property
    def is_finished(self) -> bool:
        return self.status is AgendaStatus.FINISHED


class Session(BaseModel):
    """One timed voting window belonging to exactly one agenda."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: EntityIdStr = Field(default_factory=new_id)
    agenda_id: EntityIdStr
    start_time: UtcDatetimeField
    end_time: UtcDatetimeField

    @model_validator(mode="after")
    def _check_window(self) -> Session:
        if self.end_time <= self.start_time:
            raise ValueError(ErrorMessages.SESSION_END_BEFORE_START)
        return self

    @classmethod
    def open(cls, agenda_id: str, start_time: datetime, duration_minutes: int) -> Session:
        """Create a session starting at ``start_time`` lasting ``duration_minutes``."""
        return cls(
            agenda_id=agenda_id,
            start_time=start_time,
            end_time=UtcDateTime(start_time).plus_minutes(duration_minutes).dt,
        )

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def has_ended(self, now: datetime) -> bool:
        return now >= self.end_time

    def is_active_at(self, now: datetime) -> bool:
        return self.start_time <= now < self.end_time

    def remaining(self, now: datetime) -> timedelta:
        """Time left in the window, never negative."""
        return UtcDateTime(now).until(self.end_time)


class Vote(BaseModel):
    """Immutable record of one member's decision on one agenda."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: EntityIdStr = Field(default_factory=new_id)
    agenda_id: EntityIdStr
    user_id: EntityIdStr
    choice: VoteChoice
    created_at: UtcDatetimeField = Field(default_factory=utcnow)


class Tally(BaseModel):
    """Read-only projection of an agenda's vote counts and derived outcome."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    agenda_id: EntityIdStr
    yes_votes: NonNegativeInt
    no_votes: NonNegativeInt
    total_votes: NonNegativeInt
    yes_percentage: PercentageInt
    no_percentage: PercentageInt
    result: AgendaResult
    status: AgendaStatus

    @property
    def is_final(self) -> bool:
        return self.status is AgendaStatus.FINISHED
