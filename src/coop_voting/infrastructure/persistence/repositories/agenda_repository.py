"""SQLite implementation of the agenda repository."""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

import aiosqlite

from coop_voting.domain.shared.datetime_utils import Clock, UtcDateTime, utcnow
from coop_voting.domain.shared.messages import LogTemplates
from coop_voting.domain.voting.entities import Agenda, Session, Vote
from coop_voting.domain.voting.repository import AgendaRepository
from coop_voting.domain.voting.value_objects import (
    AgendaCategory,
    AgendaResult,
    AgendaStatus,
    VoteChoice,
)

from .vote_repository import insert_vote_row

if TYPE_CHECKING:
    from ..database import Database

logger = logging.getLogger(__name__)

_UPDATABLE_COLUMNS = {
    "status": "status",
    "result": "result",
    "is_active": "is_active",
    "title": "title",
    "description": "description",
    "category": "category",
}

_VOTE_COLUMNS = {
    VoteChoice.YES: "yes_votes",
    VoteChoice.NO: "no_votes",
}


def _to_db_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, datetime):
        return UtcDateTime(value).db
    return value


def _status_filter(statuses: Collection[AgendaStatus]) -> tuple[str, list[str]]:
    values = sorted(status.value for status in statuses)
    placeholders = ", ".join("?" for _ in values)
    return f"status IN ({placeholders})", values


class SQLiteAgendaRepository(AgendaRepository):
    def __init__(self, database: Database, clock: Clock = utcnow) -> None:
        self._db = database
        self._clock = clock

    async def create(self, agenda: Agenda) -> Agenda:
        await self._db.execute(
            """
            INSERT INTO agendas (
                id, title, description, category, status, result,
                yes_votes, no_votes, total_votes, is_active, created_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                agenda.id,
                agenda.title,
                agenda.description,
                agenda.category.value,
                agenda.status.value,
                agenda.result.value,
                agenda.yes_votes,
                agenda.no_votes,
                agenda.total_votes,
                int(agenda.is_active),
                UtcDateTime(agenda.created_at).db,
                UtcDateTime(agenda.updated_at).db,
            ),
        )
        logger.info(LogTemplates.AGENDA_CREATED, agenda.id, agenda.status.value)
        return agenda

    async def find_by_id(self, agenda_id: str) -> Agenda | None:
        row = await self._db.fetch_one("SELECT * FROM agendas WHERE id = ?", (agenda_id,))
        return self._row_to_agenda(row) if row else None

    async def list_by_status(self, status: AgendaStatus) -> list[Agenda]:
        rows = await self._db.fetch_all(
            "SELECT * FROM agendas WHERE status = ? ORDER BY created_at, rowid",
            (status.value,),
        )
        return [self._row_to_agenda(row) for row in rows]

    async def update(
        self,
        agenda_id: str,
        changes: Mapping[str, Any],
        expected_statuses: Collection[AgendaStatus] | None = None,
    ) -> Agenda | None:
        assignments: list[str] = []
        params: list[Any] = []
        for field, value in changes.items():
            column = _UPDATABLE_COLUMNS.get(field)
            if column is None:
                raise ValueError(f"Unsupported agenda field: {field}")
            assignments.append(f"{column} = ?")
            params.append(_to_db_value(value))

        assignments.append("updated_at = ?")
        params.append(UtcDateTime(self._clock()).db)

        sql = f"UPDATE agendas SET {', '.join(assignments)} WHERE id = ?"  # noqa: S608
        params.append(agenda_id)
        if expected_statuses is not None:
            clause, values = _status_filter(expected_statuses)
            sql += f" AND {clause}"
            params.extend(values)

        async with self._db.transaction() as conn:
            cursor = await conn.execute(sql, tuple(params))
            if cursor.rowcount == 0:
                logger.debug(
                    LogTemplates.AGENDA_UPDATE_SKIPPED,
                    agenda_id,
                    sorted(s.value for s in expected_statuses or ()),
                )
                return None
            cursor = await conn.execute("SELECT * FROM agendas WHERE id = ?", (agenda_id,))
            row = await cursor.fetchone()

        logger.debug(LogTemplates.AGENDA_UPDATED, agenda_id, sorted(changes))
        return self._row_to_agenda(dict(row)) if row else None

    async def record_vote(
        self,
        vote: Vote,
        eligible_statuses: Collection[AgendaStatus],
        opening: Session | None = None,
    ) -> Agenda | None:
        column = _VOTE_COLUMNS[vote.choice]
        clause, values = _status_filter(eligible_statuses)

        async with self._db.transaction() as conn:
            if opening is not None:
                # Only an agenda that may both start a session and take votes (OPEN).
                opens_from = AgendaStatus.startable() & frozenset(eligible_statuses)
                if not await self._mark_in_progress(conn, vote.agenda_id, opens_from):
                    return None
                await self._insert_session(conn, opening)

            cursor = await conn.execute(
                f"""
                UPDATE agendas
                SET {column} = {column} + 1,
                    total_votes = total_votes + 1,
                    updated_at = ?
                WHERE id = ? AND {clause}
                """,  # noqa: S608
                (UtcDateTime(self._clock()).db, vote.agenda_id, *values),
            )
            if cursor.rowcount == 0:
                await conn.rollback()
                logger.debug(LogTemplates.AGENDA_UPDATE_SKIPPED, vote.agenda_id, values)
                return None

            await insert_vote_row(conn, vote)
            cursor = await conn.execute("SELECT * FROM agendas WHERE id = ?", (vote.agenda_id,))
            row = await cursor.fetchone()

        return self._row_to_agenda(dict(row)) if row else None

    async def create_session(
        self,
        agenda_id: str,
        start_time: datetime,
        end_time: datetime,
        expected_statuses: Collection[AgendaStatus] | None = None,
    ) -> Session | None:
        session = Session(agenda_id=agenda_id, start_time=start_time, end_time=end_time)
        async with self._db.transaction() as conn:
            if expected_statuses is not None and not await self._mark_in_progress(
                conn, agenda_id, expected_statuses
            ):
                return None
            await self._insert_session(conn, session)
        return session

    async def _mark_in_progress(
        self,
        conn: aiosqlite.Connection,
        agenda_id: str,
        expected_statuses: Collection[AgendaStatus],
    ) -> bool:
        clause, values = _status_filter(expected_statuses)
        cursor = await conn.execute(
            f"UPDATE agendas SET status = ?, is_active = 1, updated_at = ? WHERE id = ? AND {clause}",  # noqa: S608
            (AgendaStatus.IN_PROGRESS.value, UtcDateTime(self._clock()).db, agenda_id, *values),
        )
        if cursor.rowcount == 0:
            logger.debug(LogTemplates.AGENDA_UPDATE_SKIPPED, agenda_id, values)
            return False
        return True

    @staticmethod
    async def _insert_session(conn: aiosqlite.Connection, session: Session) -> None:
        await conn.execute(
            "INSERT INTO sessions (id, agenda_id, start_time, end_time) VALUES (?, ?, ?, ?)",
            (
                session.id,
                session.agenda_id,
                UtcDateTime(session.start_time).db,
                UtcDateTime(session.end_time).db,
            ),
        )
        logger.debug(
            LogTemplates.SESSION_PERSISTED,
            session.id,
            session.agenda_id,
            UtcDateTime(session.start_time).iso_z,
            UtcDateTime(session.end_time).iso_z,
        )

    async def list_sessions(self, agenda_id: str) -> list[Session]:
        rows = await self._db.fetch_all(
            "SELECT * FROM sessions WHERE agenda_id = ? ORDER BY start_time DESC, rowid DESC",
            (agenda_id,),
        )
        return [self._row_to_session(row) for row in rows]

    async def latest_session(self, agenda_id: str) -> Session | None:
        row = await self._db.fetch_one(
            """
            SELECT * FROM sessions WHERE agenda_id = ?
            ORDER BY start_time DESC, rowid DESC
            LIMIT 1
            """,
            (agenda_id,),
        )
        return self._row_to_session(row) if row else None

    @staticmethod
    def _row_to_agenda(row: dict[str, Any]) -> Agenda:
        return Agenda(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            category=AgendaCategory(row["category"]),
            status=AgendaStatus(row["status"]),
            result=AgendaResult(row["result"]),
            yes_votes=row["yes_votes"],
            no_votes=row["no_votes"],
            total_votes=row["total_votes"],
            is_active=bool(row["is_active"]),
            created_at=UtcDateTime.from_iso(row["created_at"]).dt,
            updated_at=UtcDateTime.from_iso(row["updated_at"]).dt,
        )

    @staticmethod
    def _row_to_session(row: dict[str, Any]) -> Session:
        return Session(
            id=row["id"],
            agenda_id=row["agenda_id"],
            start_time=UtcDateTime.from_iso(row["start_time"]).dt,
            end_time=UtcDateTime.from_iso(row["end_time"]).dt,
        )
