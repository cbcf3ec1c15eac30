"""
Voting Domain Repository Interfaces

Abstract base classes defining the contracts for agenda, session and vote persistence.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping
from datetime import datetime
from typing import Any

from coop_voting.domain.voting.entities import Agenda, Session, Vote
from coop_voting.domain.voting.value_objects import AgendaStatus


class AgendaRepository(ABC):
    """Abstract repository for agendas and their session sub-records.

    Writes that the voting service relies on for consistency are conditional:
    they name the statuses the agenda must still be in and report a miss
    instead of overwriting a concurrent transition.
    """

    @abstractmethod
    async def create(self, agenda: Agenda) -> Agenda:
        """Persist a new agenda.

        Args:
            agenda: The agenda to store.

        Returns:
            The stored agenda.
        """
        ...

    @abstractmethod
    async def find_by_id(self, agenda_id: str) -> Agenda | None:
        """Retrieve an agenda.

        Args:
            agenda_id: The agenda ID.

        Returns:
            The agenda if found, None otherwise.
        """
        ...

    @abstractmethod
    async def list_by_status(self, status: AgendaStatus) -> list[Agenda]:
        """List all agendas in a given status, oldest first."""
        ...

    @abstractmethod
    async def update(
        self,
        agenda_id: str,
        changes: Mapping[str, Any],
        expected_statuses: Collection[AgendaStatus] | None = None,
    ) -> Agenda | None:
        """Apply a partial update.

        Args:
            agenda_id: The agenda ID.
            changes: Field name to new value. Supported fields are ``status``,
                ``result``, ``is_active``, ``title``, ``description`` and ``category``.
            expected_statuses: When given, the write only happens if the
                agenda's current status is one of these.

        Returns:
            The updated agenda, or None if the agenda is missing or the
            status guard did not match.
        """
        ...

    @abstractmethod
    async def record_vote(
        self,
        vote: Vote,
        eligible_statuses: Collection[AgendaStatus],
        opening: Session | None = None,
    ) -> Agenda | None:
        """Store a vote and bump its agenda's counters in one transaction.

        The matching counter and ``total_votes`` grow by one and the vote row
        is inserted; either both happen or neither does.

        Args:
            vote: The vote to store.
            eligible_statuses: The agenda must be in one of these statuses.
            opening: A session to open in the same transaction, moving an
                OPEN agenda to IN_PROGRESS before the vote is counted.

        Returns:
            The updated agenda, or None if a status guard did not match.

        Raises:
            DuplicateVoteError: If the user already voted on the agenda.
        """
        ...

    @abstractmethod
    async def create_session(
        self,
        agenda_id: str,
        start_time: datetime,
        end_time: datetime,
        expected_statuses: Collection[AgendaStatus] | None = None,
    ) -> Session | None:
        """Append a session record to an agenda.

        Args:
            agenda_id: The owning agenda ID.
            start_time: Window start (UTC).
            end_time: Window end (UTC), after ``start_time``.
            expected_statuses: When given, the agenda moves to IN_PROGRESS in
                the same transaction, provided its status is one of these.

        Returns:
            The stored session, or None if the status guard did not match.
        """
        ...

    @abstractmethod
    async def list_sessions(self, agenda_id: str) -> list[Session]:
        """List an agenda's sessions, newest first."""
        ...

    @abstractmethod
    async def latest_session(self, agenda_id: str) -> Session | None:
        """Get the most recently started session of an agenda."""
        ...


class VoteRepository(ABC):
    """Abstract repository for votes.

    Implementations must enforce uniqueness of ``(user_id, agenda_id)``
    themselves; the service-level lookup is only a fast path.
    """

    @abstractmethod
    async def find_by_user_and_agenda(self, user_id: str, agenda_id: str) -> Vote | None:
        """Retrieve a user's vote on an agenda.

        Args:
            user_id: The voting user ID.
            agenda_id: The agenda ID.

        Returns:
            The vote if found, None otherwise.
        """
        ...

    @abstractmethod
    async def insert(self, vote: Vote) -> Vote:
        """Persist a new vote.

        Args:
            vote: The vote to store.

        Returns:
            The stored vote.

        Raises:
            DuplicateVoteError: If the user already voted on the agenda.
        """
        ...

    @abstractmethod
    async def list_by_agenda(self, agenda_id: str) -> list[Vote]:
        """List the votes cast on an agenda, oldest first."""
        ...

    @abstractmethod
    async def list_by_user(self, user_id: str) -> list[Vote]:
        """List the votes cast by a user, oldest first."""
        ...
