"""SQLite implementation of the vote repository."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import aiosqlite

from coop_voting.domain.shared.datetime_utils import UtcDateTime
from coop_voting.domain.shared.exceptions import DuplicateVoteError
from coop_voting.domain.shared.messages import LogTemplates
from coop_voting.domain.voting.entities import Vote
from coop_voting.domain.voting.repository import VoteRepository
from coop_voting.domain.voting.value_objects import VoteChoice

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)


async def insert_vote_row(conn: aiosqlite.Connection, vote: Vote) -> None:
    """Insert ``vote`` on an open connection, mapping the unique index to DuplicateVoteError."""
    try:
        await conn.execute(
            """
            INSERT INTO votes (id, agenda_id, user_id, choice, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                vote.id,
                vote.agenda_id,
                vote.user_id,
                vote.choice.value,
                UtcDateTime(vote.created_at).db,
            ),
        )
    except aiosqlite.IntegrityError as e:
        if "UNIQUE" not in str(e).upper():
            raise
        logger.warning(LogTemplates.VOTE_UNIQUE_VIOLATION, vote.user_id, vote.agenda_id)
        raise DuplicateVoteError(vote.user_id, vote.agenda_id) from e
    logger.debug(LogTemplates.VOTE_PERSISTED, vote.id, vote.agenda_id)


class SQLiteVoteRepository(VoteRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    async def find_by_user_and_agenda(self, user_id: str, agenda_id: str) -> Vote | None:
        row = await self._db.fetch_one(
            "SELECT * FROM votes WHERE user_id = ? AND agenda_id = ?",
            (user_id, agenda_id),
        )
        return self._row_to_vote(row) if row else None

    async def insert(self, vote: Vote) -> Vote:
        async with self._db.transaction() as conn:
            await insert_vote_row(conn, vote)
        return vote

    async def list_by_agenda(self, agenda_id: str) -> list[Vote]:
        rows = await self._db.fetch_all(
            "SELECT * FROM votes WHERE agenda_id = ? ORDER BY created_at, rowid",
            (agenda_id,),
        )
        return [self._row_to_vote(row) for row in rows]

    async def list_by_user(self, user_id: str) -> list[Vote]:
        rows = await self._db.fetch_all(
            "SELECT * FROM votes WHERE user_id = ? ORDER BY created_at, rowid",
            (user_id,),
        )
        return [self._row_to_vote(row) for row in rows]

    @staticmethod
    def _row_to_vote(row: dict[str, Any]) -> Vote:
        return Vote(
            id=row["id"],
            agenda_id=row["agenda_id"],
            user_id=row["user_id"],
            choice=VoteChoice(row["choice"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
        )
