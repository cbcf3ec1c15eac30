import asyncio
from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

# ============================================================================
# Time Fixtures
# ============================================================================


class FakeClock:
    """Settable clock returning timezone-aware UTC datetimes."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class ManualSleep:
    """Sleep replacement that records delays and blocks until released."""

    def __init__(self) -> None:
        self.calls: list[float] = []
        self._gate = asyncio.Event()

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await self._gate.wait()

    def release(self) -> None:
        self._gate.set()


@pytest.fixture
def fake_clock():
    """A clock frozen at 2024-03-01 12:00 UTC until advanced."""
    return FakeClock(datetime(2024, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def manual_sleep():
    return ManualSleep()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def in_memory_database():
    """Create an in-memory SQLite database for testing."""
    from coop_voting.infrastructure.persistence.database import Database

    db = Database(":memory:")
    await db.initialize()
    yield db
    await db.close()


@pytest_asyncio.fixture
async def agenda_repository(in_memory_database, fake_clock):
    """Create an agenda repository with in-memory database."""
    from coop_voting.infrastructure.persistence.repositories.agenda_repository import (
        SQLiteAgendaRepository,
    )

    return SQLiteAgendaRepository(in_memory_database, clock=fake_clock)


@pytest_asyncio.fixture
async def vote_repository(in_memory_database):
    """Create a vote repository with in-memory database."""
    from coop_voting.infrastructure.persistence.repositories.vote_repository import (
        SQLiteVoteRepository,
    )

    return SQLiteVoteRepository(in_memory_database)


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def voting_settings():
    from coop_voting.config.settings import VotingSettings

    return VotingSettings()


@pytest.fixture
def event_bus():
    from coop_voting.domain.shared.events import EventBus

    return EventBus()


@pytest_asyncio.fixture
async def session_timer(manual_sleep):
    from coop_voting.application.services.session_timer import SessionTimer

    timer = SessionTimer(sleep=manual_sleep)
    yield timer
    await timer.cancel_all()


@pytest_asyncio.fixture
async def voting_service(
    agenda_repository, vote_repository, session_timer, voting_settings, event_bus, fake_clock
):
    """Voting service wired to SQLite, a fake clock and timers that wait for release."""
    from coop_voting.application.services.voting_session_service import VotingSessionService

    service = VotingSessionService(
        agenda_repository=agenda_repository,
        vote_repository=vote_repository,
        session_timer=session_timer,
        settings=voting_settings,
        event_bus=event_bus,
        clock=fake_clock,
    )
    yield service
    await service.shutdown()


@pytest_asyncio.fixture
async def open_agenda(voting_service):
    return await voting_service.create_agenda("Approve the 2024 budget")
