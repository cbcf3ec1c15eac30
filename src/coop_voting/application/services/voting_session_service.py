"""Voting session orchestration: agenda lifecycle, vote intake and finalization."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from ...domain.shared.datetime_utils import Clock, UtcDateTime, utcnow
from ...domain.shared.events import (
    AgendaFinished,
    DomainEvent,
    EventBus,
    SessionStarted,
    VoteCast,
)
from ...domain.shared.exceptions import (
    DuplicateVoteError,
    EntityNotFoundError,
    InvalidStateError,
    ValidationError,
)
from ...domain.shared.messages import ErrorMessages, LogTemplates
from ...domain.voting.entities import Agenda, Session, Tally, Vote
from ...domain.voting.services import TallyEngine
from ...domain.voting.value_objects import AgendaCategory, AgendaStatus, VoteChoice
from .voting_models import SessionStart, VoteReceipt

if TYPE_CHECKING:
    from ...config.settings import VotingSettings
    from ...domain.voting.repository import AgendaRepository, VoteRepository
    from .session_timer import SessionTimer

logger = logging.getLogger(__name__)


class VotingSessionService:
    """Coordinates sessions, votes and the tally for agendas.

    Every mutation of one agenda runs under that agenda's lock, and the
    repository writes are additionally guarded by the expected status so
    writers outside this process cannot be overwritten. An IN_PROGRESS
    agenda whose latest session has ended is finalized on the next access,
    which covers timers lost to a restart.

    Domain events are collected while the lock is held and published once
    it is released, so handlers may call back into the service.
    """

    def __init__(
        self,
        *,
        agenda_repository: AgendaRepository,
        vote_repository: VoteRepository,
        session_timer: SessionTimer,
        settings: VotingSettings,
        event_bus: EventBus | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self._agenda_repo = agenda_repository
        self._vote_repo = vote_repository
        self._timer = session_timer
        self._settings = settings
        self._bus = event_bus or EventBus()
        self._clock = clock
        self._agenda_locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    @asynccontextmanager
    async def _agenda_lock(self, agenda_id: str) -> AsyncIterator[None]:
        """Hold ``agenda_id``'s lock; the lock is dropped once nobody holds or awaits it."""
        lock = self._agenda_locks.setdefault(agenda_id, asyncio.Lock())
        self._lock_users[agenda_id] = self._lock_users.get(agenda_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[agenda_id] -= 1
            if not self._lock_users[agenda_id]:
                del self._lock_users[agenda_id]
                del self._agenda_locks[agenda_id]

    @asynccontextmanager
    async def _mutating(self, agenda_id: str) -> AsyncIterator[list[DomainEvent]]:
        """Lock ``agenda_id`` and publish the collected events after releasing it."""
        events: list[DomainEvent] = []
        try:
            async with self._agenda_lock(agenda_id):
                yield events
        finally:
            for event in events:
                await self._bus.publish(event)

    # ── Agendas ─────────────────────────────────────────────────────

    async def create_agenda(
        self,
        title: str,
        description: str = "",
        category: AgendaCategory = AgendaCategory.OUTROS,
        status: AgendaStatus = AgendaStatus.OPEN,
    ) -> Agenda:
        if not status.can_start_session:
            raise ValidationError(
                ErrorMessages.SESSION_NOT_STARTABLE.format(status=status.value), field="status"
            )
        now = self._clock()
        agenda = Agenda(
            title=title,
            description=description,
            category=category,
            status=status,
            created_at=now,
            updated_at=now,
        )
        return await self._agenda_repo.create(agenda)

    async def get_agenda(self, agenda_id: str) -> Agenda:
        async with self._mutating(agenda_id) as events:
            return await self._reconcile(await self._load(agenda_id), events)

    async def list_sessions(self, agenda_id: str) -> list[Session]:
        await self._load(agenda_id)
        return await self._agenda_repo.list_sessions(agenda_id)

    async def get_active_session(self, agenda_id: str) -> Session | None:
        """Get the session currently accepting votes, if any."""
        agenda = await self.get_agenda(agenda_id)
        if agenda.status is not AgendaStatus.IN_PROGRESS:
            return None
        session = await self._agenda_repo.latest_session(agenda_id)
        if session is None or not session.is_active_at(self._clock()):
            return None
        return session

    # ── Sessions ────────────────────────────────────────────────────

    async def start_session(self, agenda_id: str, duration_minutes: int) -> SessionStart:
        """Open a voting window and move the agenda to IN_PROGRESS.

        Args:
            agenda_id: The agenda to open.
            duration_minutes: Window length, 1 to the configured maximum.

        Raises:
            ValidationError: If the duration is out of bounds.
            EntityNotFoundError: If the agenda does not exist.
            InvalidStateError: If the agenda is not DRAFT or OPEN.
        """
        self._check_duration(duration_minutes)
        async with self._mutating(agenda_id) as events:
            agenda = await self._reconcile(await self._load(agenda_id), events)
            if not agenda.can_start_session:
                raise InvalidStateError(
                    "start_session",
                    agenda.status.value,
                    ErrorMessages.SESSION_NOT_STARTABLE.format(status=agenda.status.value),
                )

            now = self._clock()
            # The session row and the status change commit together.
            session = await self._agenda_repo.create_session(
                agenda.id,
                now,
                UtcDateTime(now).plus_minutes(duration_minutes).dt,
                expected_statuses=AgendaStatus.startable(),
            )
            if session is None:
                current = await self._load(agenda.id)
                raise InvalidStateError(
                    "start_session",
                    current.status.value,
                    ErrorMessages.SESSION_NOT_STARTABLE.format(status=current.status.value),
                )
            events.append(self._session_opened(session, implicit=False))
            return SessionStart(agenda=await self._load(agenda.id), session=session)

    def _check_duration(self, duration_minutes: int) -> None:
        maximum = self._settings.max_session_minutes
        if (
            isinstance(duration_minutes, bool)
            or not isinstance(duration_minutes, int)
            or not 1 <= duration_minutes <= maximum
        ):
            raise ValidationError(
                ErrorMessages.SESSION_OUTSIDE_BOUNDS.format(minimum=1, maximum=maximum),
                field="duration_in_minutes",
            )

    def _session_opened(self, session: Session, *, implicit: bool) -> SessionStarted:
        """Arm the expiry timer for a stored session and describe it as an event."""
        self._timer.schedule(
            session.agenda_id, session.remaining(self._clock()), self._on_session_expired
        )
        minutes = int(session.duration.total_seconds() // 60)
        if implicit:
            logger.info(LogTemplates.SESSION_AUTO_STARTED, session.agenda_id, minutes)
        else:
            logger.info(
                LogTemplates.SESSION_STARTED,
                session.agenda_id,
                minutes,
                UtcDateTime(session.end_time).iso_z,
            )
        return SessionStarted(
            agenda_id=session.agenda_id,
            session_id=session.id,
            start_time=session.start_time,
            end_time=session.end_time,
            duration_minutes=minutes,
            implicit=implicit,
        )

    async def _on_session_expired(self, agenda_id: str) -> None:
        await self.finalize(agenda_id)

    # ── Votes ───────────────────────────────────────────────────────

    async def cast_vote(self, agenda_id: str, user_id: str, choice: VoteChoice | str) -> VoteReceipt:
        """Record one member's vote and bump the agenda counters.

        A vote on an OPEN agenda first opens a session of the default length
        when ``auto_start_on_vote`` is enabled. The session, the vote row and
        the counters are written in a single transaction.

        Raises:
            ValidationError: If the choice or user id is malformed.
            EntityNotFoundError: If the agenda does not exist.
            InvalidStateError: If the agenda does not accept votes.
            DuplicateVoteError: If the user already voted on the agenda.
        """
        parsed = self._parse_choice(choice)
        if not isinstance(user_id, str) or not user_id.strip():
            raise ValidationError(
                ErrorMessages.FIELD_CANNOT_BE_EMPTY.format(field_name="user_id"), field="user_id"
            )

        async with self._mutating(agenda_id) as events:
            agenda = await self._reconcile(await self._load(agenda_id), events)
            if not agenda.accepts_votes or (
                agenda.status is AgendaStatus.OPEN and not self._settings.auto_start_on_vote
            ):
                raise InvalidStateError(
                    "cast_vote",
                    agenda.status.value,
                    ErrorMessages.AGENDA_NOT_ACCEPTING_VOTES.format(status=agenda.status.value),
                )

            if await self._vote_repo.find_by_user_and_agenda(user_id, agenda_id) is not None:
                raise DuplicateVoteError(user_id, agenda_id)

            now = self._clock()
            opening: Session | None = None
            if agenda.status is AgendaStatus.OPEN:
                opening = Session.open(agenda_id, now, self._settings.default_session_minutes)

            vote = Vote(agenda_id=agenda_id, user_id=user_id, choice=parsed, created_at=now)
            updated = await self._agenda_repo.record_vote(
                vote, eligible_statuses=AgendaStatus.voting(), opening=opening
            )
            if updated is None:
                current = await self._load(agenda_id)
                raise InvalidStateError(
                    "cast_vote",
                    current.status.value,
                    ErrorMessages.AGENDA_NOT_ACCEPTING_VOTES.format(status=current.status.value),
                )

            if opening is not None:
                events.append(self._session_opened(opening, implicit=True))
            logger.info(
                LogTemplates.VOTE_RECORDED,
                agenda_id,
                parsed.value,
                updated.yes_votes,
                updated.no_votes,
                updated.total_votes,
            )
            events.append(
                VoteCast(
                    agenda_id=agenda_id,
                    user_id=user_id,
                    choice=parsed,
                    yes_votes=updated.yes_votes,
                    no_votes=updated.no_votes,
                    total_votes=updated.total_votes,
                )
            )
            return VoteReceipt(vote=vote, agenda=updated, started_session=opening)

    @staticmethod
    def _parse_choice(choice: VoteChoice | str) -> VoteChoice:
        try:
            return VoteChoice.parse(choice)
        except ValueError as exc:
            choices = ", ".join(c.value for c in VoteChoice)
            raise ValidationError(
                ErrorMessages.INVALID_VOTE_CHOICE.format(choices=choices), field="vote"
            ) from exc

    # ── Tally / finalization ────────────────────────────────────────

    async def query_tally(self, agenda_id: str) -> Tally:
        return TallyEngine.tally(await self.get_agenda(agenda_id))

    async def finalize(self, agenda_id: str) -> Agenda:
        """Close an IN_PROGRESS agenda and persist its result.

        Safe to call repeatedly: agendas that are not IN_PROGRESS are
        returned unchanged.
        """
        async with self._mutating(agenda_id) as events:
            return await self._finalize_locked(await self._load(agenda_id), events)

    async def _finalize_locked(self, agenda: Agenda, events: list[DomainEvent]) -> Agenda:
        if agenda.status is not AgendaStatus.IN_PROGRESS:
            logger.debug(LogTemplates.AGENDA_ALREADY_FINALIZED, agenda.id, agenda.status.value)
            return agenda

        result = TallyEngine.compute_result(agenda.yes_votes, agenda.no_votes, agenda.total_votes)
        updated = await self._agenda_repo.update(
            agenda.id,
            {"status": AgendaStatus.FINISHED, "result": result, "is_active": False},
            expected_statuses={AgendaStatus.IN_PROGRESS},
        )
        self._timer.cancel(agenda.id)
        if updated is None:
            current = await self._load(agenda.id)
            logger.debug(LogTemplates.AGENDA_ALREADY_FINALIZED, current.id, current.status.value)
            return current

        logger.info(
            LogTemplates.AGENDA_FINALIZED,
            updated.id,
            result.value,
            updated.yes_votes,
            updated.no_votes,
            updated.total_votes,
        )
        events.append(
            AgendaFinished(
                agenda_id=updated.id,
                result=result,
                yes_votes=updated.yes_votes,
                no_votes=updated.no_votes,
                total_votes=updated.total_votes,
            )
        )
        return updated

    # ── Recovery ────────────────────────────────────────────────────

    async def reconcile_expired(self) -> int:
        """Finalize every IN_PROGRESS agenda whose session has ended."""
        finalized = 0
        for candidate in await self._agenda_repo.list_by_status(AgendaStatus.IN_PROGRESS):
            async with self._mutating(candidate.id) as events:
                agenda = await self._agenda_repo.find_by_id(candidate.id)
                if agenda is None:
                    continue
                if (await self._reconcile(agenda, events)).status is not agenda.status:
                    finalized += 1
        return finalized

    async def resume_timers(self) -> int:
        """Re-arm timers for running sessions after a restart.

        Expired sessions are finalized instead. Returns the number of timers armed.
        """
        resumed = 0
        finalized = 0
        now = self._clock()
        for candidate in await self._agenda_repo.list_by_status(AgendaStatus.IN_PROGRESS):
            async with self._mutating(candidate.id) as events:
                agenda = await self._agenda_repo.find_by_id(candidate.id)
                if agenda is None or agenda.status is not AgendaStatus.IN_PROGRESS:
                    continue
                session = await self._agenda_repo.latest_session(agenda.id)
                if session is None:
                    continue
                if session.has_ended(now):
                    await self._finalize_locked(agenda, events)
                    finalized += 1
                    continue
                self._timer.schedule(agenda.id, session.remaining(now), self._on_session_expired)
                resumed += 1
        logger.info(LogTemplates.TIMERS_RESUMED, resumed, finalized)
        return resumed

    async def shutdown(self) -> None:
        """Cancel pending timers and wait for any that are already firing."""
        await self._timer.cancel_all()
        await self._timer.join()

    # ── Helpers ─────────────────────────────────────────────────────

    async def _load(self, agenda_id: str) -> Agenda:
        agenda = await self._agenda_repo.find_by_id(agenda_id)
        if agenda is None:
            raise EntityNotFoundError(
                "Agenda", agenda_id, ErrorMessages.AGENDA_NOT_FOUND.format(agenda_id=agenda_id)
            )
        return agenda

    async def _reconcile(self, agenda: Agenda, events: list[DomainEvent]) -> Agenda:
        """Finalize ``agenda`` if its latest session already ended. Caller holds the lock."""
        if agenda.status is not AgendaStatus.IN_PROGRESS:
            return agenda
        session = await self._agenda_repo.latest_session(agenda.id)
        if session is None or not session.has_ended(self._clock()):
            return agenda
        logger.info(LogTemplates.AGENDA_STALE_SESSION, agenda.id, UtcDateTime(session.end_time).iso_z)
        return await self._finalize_locked(agenda, events)
