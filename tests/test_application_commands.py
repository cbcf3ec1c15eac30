"""
Unit Tests for Application Commands

Tests payload validation and handler delegation for StartSessionCommand
and CastVoteCommand.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from coop_voting.application.commands import (
    CastVoteCommand,
    CastVoteHandler,
    StartSessionCommand,
    StartSessionHandler,
)
from coop_voting.application.services.voting_models import SessionStart, VoteReceipt
from coop_voting.domain.shared.datetime_utils import UtcDateTime
from coop_voting.domain.shared.exceptions import ValidationError
from coop_voting.domain.voting.entities import Agenda, Session, Vote
from coop_voting.domain.voting.value_objects import AgendaResult, AgendaStatus, VoteChoice

NOON = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class TestStartSessionCommand:

    def test_from_camel_case_payload(self):
        command = StartSessionCommand.from_payload({"agendaId": "a-1", "durationInMinutes": 10})

        assert command.agenda_id == "a-1"
        assert command.duration_in_minutes == 10

    def test_accepts_field_names(self):
        command = StartSessionCommand(agenda_id="a-1", duration_in_minutes=1)

        assert command.duration_in_minutes == 1

    @pytest.mark.parametrize(
        "payload",
        [
            {"agendaId": "a-1"},
            {"agendaId": "a-1", "durationInMinutes": 0},
            {"agendaId": "a-1", "durationInMinutes": 1441},
            {"agendaId": "a-1", "durationInMinutes": "10"},
            {"agendaId": " ", "durationInMinutes": 10},
        ],
    )
    def test_invalid_payloads(self, payload):
        with pytest.raises(ValidationError):
            StartSessionCommand.from_payload(payload)

    def test_error_names_field(self):
        with pytest.raises(ValidationError) as exc_info:
            StartSessionCommand.from_payload({"agendaId": "a-1", "durationInMinutes": 0})

        assert exc_info.value.field == "durationInMinutes"


class TestStartSessionHandler:

    async def test_handle_returns_agenda_with_window(self):
        agenda = Agenda(title="x", status=AgendaStatus.IN_PROGRESS)
        session = Session.open(agenda.id, NOON, 10)
        service = AsyncMock()
        service.start_session.return_value = SessionStart(agenda=agenda, session=session)
        handler = StartSessionHandler(service)

        result = await handler.handle(StartSessionCommand(agenda_id=agenda.id, duration_in_minutes=10))

        service.start_session.assert_awaited_once_with(agenda.id, 10)
        payload = result.to_payload()
        assert payload["id"] == agenda.id
        assert payload["status"] == "IN_PROGRESS"
        assert payload["startDate"] == "2024-03-01T12:00:00Z"
        assert payload["endDate"] == "2024-03-01T12:10:00Z"

    async def test_handle_against_real_service(self, voting_service, open_agenda):
        handler = StartSessionHandler(voting_service)

        result = await handler.handle(
            StartSessionCommand.from_payload({"agendaId": open_agenda.id, "durationInMinutes": 3})
        )

        assert result.agenda.status is AgendaStatus.IN_PROGRESS
        assert result.end_date - result.start_date == timedelta(minutes=3)


class TestCastVoteCommand:

    @pytest.mark.parametrize(("raw", "expected"), [("YES", VoteChoice.YES), ("no", VoteChoice.NO)])
    def test_parses_vote(self, raw, expected):
        command = CastVoteCommand.from_payload({"agendaId": "a", "userId": "u", "vote": raw})

        assert command.vote is expected

    def test_rejects_unknown_vote(self):
        with pytest.raises(ValidationError, match="Vote must be one of"):
            CastVoteCommand.from_payload({"agendaId": "a", "userId": "u", "vote": "MAYBE"})

    def test_rejects_missing_user(self):
        with pytest.raises(ValidationError) as exc_info:
            CastVoteCommand.from_payload({"agendaId": "a", "vote": "YES"})

        assert exc_info.value.field == "userId"


class TestCastVoteHandler:

    async def test_handle_includes_tally(self):
        agenda = Agenda(
            title="x", status=AgendaStatus.IN_PROGRESS, yes_votes=1, no_votes=0, total_votes=1
        )
        vote = Vote(agenda_id=agenda.id, user_id="u", choice=VoteChoice.YES, created_at=NOON)
        service = AsyncMock()
        service.cast_vote.return_value = VoteReceipt(vote=vote, agenda=agenda)
        handler = CastVoteHandler(service)

        result = await handler.handle(CastVoteCommand(agenda_id=agenda.id, user_id="u", vote="YES"))

        service.cast_vote.assert_awaited_once_with(agenda.id, "u", VoteChoice.YES)
        assert result.tally.result is AgendaResult.APPROVED
        assert result.tally.yes_percentage == 100
        payload = result.to_payload()
        assert payload.keys() == {"id", "agendaId", "userId", "choice", "createdAt"}
        assert payload["choice"] == "YES"
        assert UtcDateTime.from_iso(payload["createdAt"]).dt == NOON

    async def test_handle_against_real_service(self, voting_service, open_agenda):
        handler = CastVoteHandler(voting_service)

        result = await handler.handle(
            CastVoteCommand.from_payload({"agendaId": open_agenda.id, "userId": "u1", "vote": "NO"})
        )

        assert result.started_session is not None
        assert result.tally.no_votes == 1
