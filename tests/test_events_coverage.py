"""
Events Tests

Tests domain event models and the in-memory EventBus.
"""

from coop_voting.domain.shared.events import (
    AgendaFinished,
    DomainEvent,
    EventBus,
    SessionStarted,
    VoteCast,
)
from coop_voting.domain.voting.value_objects import AgendaResult, VoteChoice


def _vote_cast() -> VoteCast:
    return VoteCast(
        agenda_id="agenda-1", user_id="user-1", choice=VoteChoice.YES, yes_votes=1, total_votes=1
    )


class TestDomainEvent:

    def test_domain_event_has_unique_ids(self):
        assert DomainEvent().event_id != DomainEvent().event_id

    def test_domain_event_has_occurred_at(self):
        assert DomainEvent().occurred_at.tzinfo is not None


class TestEventBus:
    """Tests for EventBus subscribe/publish semantics."""

    async def test_publish_with_no_handlers(self):
        """Should handle publishing event with no subscribers."""
        await EventBus().publish(_vote_cast())

    async def test_handler_receives_event(self):
        bus = EventBus()
        received = []

        async def handler(event: VoteCast):
            received.append(event)

        bus.subscribe(VoteCast, handler)
        event = _vote_cast()
        await bus.publish(event)

        assert received == [event]

    async def test_handlers_only_receive_subscribed_type(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(AgendaFinished, handler)
        await bus.publish(_vote_cast())
        await bus.publish(AgendaFinished(agenda_id="agenda-1", result=AgendaResult.TIE))

        assert [type(e) for e in received] == [AgendaFinished]

    async def test_unsubscribe_handler(self):
        bus = EventBus()
        received = []

        async def handler(event: VoteCast):
            received.append(event)

        bus.subscribe(VoteCast, handler)
        bus.unsubscribe(VoteCast, handler)
        await bus.publish(_vote_cast())

        assert received == []

    async def test_unsubscribe_nonexistent_handler(self):
        bus = EventBus()

        async def handler(event: VoteCast):
            pass

        bus.unsubscribe(VoteCast, handler)

    async def test_failing_handler_does_not_block_others(self, caplog):
        bus = EventBus()
        received = []

        async def failing(event):
            raise RuntimeError("boom")

        async def working(event):
            received.append(event)

        bus.subscribe(VoteCast, failing)
        bus.subscribe(VoteCast, working)
        await bus.publish(_vote_cast())

        assert len(received) == 1
        assert "Error in handler for VoteCast" in caplog.text

    async def test_clear_removes_all_handlers(self):
        bus = EventBus()
        received = []

        async def handler(event):
            received.append(event)

        bus.subscribe(SessionStarted, handler)
        bus.clear()
        await bus.publish(
            SessionStarted(
                agenda_id="a",
                session_id="s",
                start_time=DomainEvent().occurred_at,
                end_time=DomainEvent().occurred_at,
                duration_minutes=5,
            )
        )

        assert received == []
