"""
Unit Tests for SessionTimer

Tests scheduling, replacement, cancellation and callback failure handling.
"""

import asyncio
from datetime import timedelta

from coop_voting.application.services.session_timer import SessionTimer


class RecordingSleep:
    """Sleep replacement that returns immediately and records delays."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        await asyncio.sleep(0)


class TestSessionTimer:

    async def test_fires_callback_after_delay(self):
        sleep = RecordingSleep()
        timer = SessionTimer(sleep=sleep)
        fired = []

        async def callback(agenda_id):
            fired.append(agenda_id)

        timer.schedule("agenda-1", timedelta(minutes=5), callback)
        await timer.join()

        assert fired == ["agenda-1"]
        assert sleep.calls == [300.0]
        assert not timer.is_scheduled("agenda-1")

    async def test_negative_delay_clamped(self):
        sleep = RecordingSleep()
        timer = SessionTimer(sleep=sleep)

        async def callback(agenda_id):
            pass

        timer.schedule("agenda-1", -10, callback)
        await timer.join()

        assert sleep.calls == [0.0]

    async def test_reschedule_replaces_pending_timer(self, manual_sleep):
        timer = SessionTimer(sleep=manual_sleep)
        fired = []

        async def first(agenda_id):
            fired.append("first")

        async def second(agenda_id):
            fired.append("second")

        timer.schedule("agenda-1", 60, first)
        await asyncio.sleep(0)
        timer.schedule("agenda-1", 120, second)
        manual_sleep.release()
        await timer.join()

        assert fired == ["second"]

    async def test_cancel_prevents_callback(self, manual_sleep):
        timer = SessionTimer(sleep=manual_sleep)
        fired = []

        async def callback(agenda_id):
            fired.append(agenda_id)

        timer.schedule("agenda-1", 60, callback)
        assert timer.is_scheduled("agenda-1")
        assert timer.pending == {"agenda-1"}

        assert timer.cancel("agenda-1") is True
        assert timer.cancel("agenda-1") is False
        manual_sleep.release()
        await timer.join()

        assert fired == []
        assert timer.pending == frozenset()

    async def test_cancel_all(self, manual_sleep):
        timer = SessionTimer(sleep=manual_sleep)

        async def callback(agenda_id):
            pass

        timer.schedule("a", 60, callback)
        timer.schedule("b", 60, callback)

        assert await timer.cancel_all() == 2
        assert timer.pending == frozenset()

    async def test_callback_failure_is_logged(self, caplog):
        timer = SessionTimer(sleep=RecordingSleep())

        async def callback(agenda_id):
            raise RuntimeError("database unavailable")

        timer.schedule("agenda-1", 1, callback)
        await timer.join()

        assert "Timer callback failed for agenda agenda-1" in caplog.text

    async def test_callback_may_reschedule_same_agenda(self):
        timer = SessionTimer(sleep=RecordingSleep())
        fired = []

        async def callback(agenda_id):
            fired.append(agenda_id)
            if len(fired) == 1:
                timer.schedule(agenda_id, 1, callback)

        timer.schedule("agenda-1", 1, callback)
        await timer.join()

        assert fired == ["agenda-1", "agenda-1"]
