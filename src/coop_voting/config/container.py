"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the database, repositories, services and handlers.
Components are created on-demand and cached for reuse throughout the application.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.datetime_utils import Clock, utcnow

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from ..application.commands.cast_vote import CastVoteHandler
    from ..application.commands.start_session import StartSessionHandler
    from ..application.queries.get_sessions import GetSessionsHandler
    from ..application.queries.get_tally import GetTallyHandler
    from ..application.services.session_timer import SessionTimer
    from ..application.services.voting_session_service import VotingSessionService
    from ..domain.shared.events import EventBus
    from ..domain.voting.repository import AgendaRepository, VoteRepository
    from ..infrastructure.persistence.database import Database
    from ..infrastructure.persistence.expiry_sweeper import ExpiredSessionSweeper
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    This container manages all application dependencies and their lifecycle.
    Components are lazily initialized when first accessed.
    """

    settings: Settings
    clock: Clock = utcnow

    # Persistence layer
    _database: Database | None = None
    _agenda_repository: AgendaRepository | None = None
    _vote_repository: VoteRepository | None = None

    # Application services
    _event_bus: EventBus | None = None
    _session_timer: SessionTimer | None = None
    _voting_service: VotingSessionService | None = None

    # Handlers
    _start_session_handler: StartSessionHandler | None = None
    _cast_vote_handler: CastVoteHandler | None = None
    _get_tally_handler: GetTallyHandler | None = None
    _get_sessions_handler: GetSessionsHandler | None = None

    # Background jobs
    _expiry_sweeper: ExpiredSessionSweeper | None = None

    # === Database ===

    @property
    def database(self) -> Database:
        """Get the database connection manager."""
        if self._database is None:
            from ..infrastructure.persistence.database import Database

            self._database = Database(self.settings.database.url, settings=self.settings.database)
        return self._database

    # === Repositories ===

    @property
    def agenda_repository(self) -> AgendaRepository:
        """Get the agenda repository."""
        if self._agenda_repository is None:
            from ..infrastructure.persistence.repositories.agenda_repository import (
                SQLiteAgendaRepository,
            )

            self._agenda_repository = SQLiteAgendaRepository(self.database, clock=self.clock)
        return self._agenda_repository

    @property
    def vote_repository(self) -> VoteRepository:
        """Get the vote repository."""
        if self._vote_repository is None:
            from ..infrastructure.persistence.repositories.vote_repository import (
                SQLiteVoteRepository,
            )

            self._vote_repository = SQLiteVoteRepository(self.database)
        return self._vote_repository

    # === Application Services ===

    @property
    def event_bus(self) -> EventBus:
        if self._event_bus is None:
            from ..domain.shared.events import EventBus

            self._event_bus = EventBus()
        return self._event_bus

    @property
    def session_timer(self) -> SessionTimer:
        if self._session_timer is None:
            from ..application.services.session_timer import SessionTimer

            self._session_timer = SessionTimer()
        return self._session_timer

    @property
    def voting_service(self) -> VotingSessionService:
        """Get the voting session service."""
        if self._voting_service is None:
            from ..application.services.voting_session_service import VotingSessionService

            self._voting_service = VotingSessionService(
                agenda_repository=self.agenda_repository,
                vote_repository=self.vote_repository,
                session_timer=self.session_timer,
                settings=self.settings.voting,
                event_bus=self.event_bus,
                clock=self.clock,
            )
        return self._voting_service

    # === Command / Query Handlers ===

    @property
    def start_session_handler(self) -> StartSessionHandler:
        if self._start_session_handler is None:
            from ..application.commands.start_session import StartSessionHandler

            self._start_session_handler = StartSessionHandler(self.voting_service)
        return self._start_session_handler

    @property
    def cast_vote_handler(self) -> CastVoteHandler:
        if self._cast_vote_handler is None:
            from ..application.commands.cast_vote import CastVoteHandler

            self._cast_vote_handler = CastVoteHandler(self.voting_service)
        return self._cast_vote_handler

    @property
    def get_tally_handler(self) -> GetTallyHandler:
        if self._get_tally_handler is None:
            from ..application.queries.get_tally import GetTallyHandler

            self._get_tally_handler = GetTallyHandler(self.voting_service)
        return self._get_tally_handler

    @property
    def get_sessions_handler(self) -> GetSessionsHandler:
        if self._get_sessions_handler is None:
            from ..application.queries.get_sessions import GetSessionsHandler

            self._get_sessions_handler = GetSessionsHandler(self.voting_service)
        return self._get_sessions_handler

    # === Background Jobs ===

    @property
    def expiry_sweeper(self) -> ExpiredSessionSweeper:
        """Get the expired session sweeper."""
        if self._expiry_sweeper is None:
            from ..infrastructure.persistence.expiry_sweeper import ExpiredSessionSweeper

            self._expiry_sweeper = ExpiredSessionSweeper(
                voting_service=self.voting_service,
                settings=self.settings.sweeper,
            )
        return self._expiry_sweeper

    # === Lifecycle ===

    async def initialize(self) -> None:
        """Initialize the database and re-arm timers of running sessions."""
        await self.database.initialize()
        await self.voting_service.resume_timers()

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._expiry_sweeper is not None and self._expiry_sweeper.is_running:
            await self._expiry_sweeper.stop()

        if self._voting_service is not None:
            await self._voting_service.shutdown()

        if self._database is not None:
            await self._database.close()


def create_container(settings: Settings, clock: Clock = utcnow) -> Container:
    """Create a new dependency injection container."""
    return Container(settings, clock=clock)
