"""
Unit Tests for ExpiredSessionSweeper

Tests the sweep cycle, failure handling and start/stop lifecycle.
"""

import asyncio
from unittest.mock import AsyncMock

from coop_voting.config.settings import SweeperSettings
from coop_voting.domain.voting.value_objects import AgendaStatus
from coop_voting.infrastructure.persistence.expiry_sweeper import ExpiredSessionSweeper


class TestRunSweep:

    async def test_finalizes_expired_agendas(self, voting_service, fake_clock):
        agenda = await voting_service.create_agenda("x")
        await voting_service.start_session(agenda.id, 1)
        fake_clock.advance(minutes=1)
        sweeper = ExpiredSessionSweeper(voting_service=voting_service, settings=SweeperSettings())

        stats = await sweeper.run_sweep()

        assert stats.agendas_finalized == 1
        assert not stats.failed
        assert (await voting_service.get_agenda(agenda.id)).status is AgendaStatus.FINISHED

    async def test_nothing_to_do(self, voting_service):
        sweeper = ExpiredSessionSweeper(voting_service=voting_service, settings=SweeperSettings())

        stats = await sweeper.run_sweep()

        assert stats.agendas_finalized == 0

    async def test_failure_is_logged_not_raised(self, caplog):
        service = AsyncMock()
        service.reconcile_expired.side_effect = RuntimeError("disk I/O error")
        sweeper = ExpiredSessionSweeper(voting_service=service, settings=SweeperSettings())

        stats = await sweeper.run_sweep()

        assert stats.failed
        assert "Error during expired session sweep" in caplog.text


class TestLifecycle:

    async def test_start_runs_cycles_until_stopped(self):
        service = AsyncMock()
        service.reconcile_expired.return_value = 0
        cycles = asyncio.Event()
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)
            if len(delays) >= 2:
                cycles.set()
            await asyncio.sleep(0)

        sweeper = ExpiredSessionSweeper(
            voting_service=service,
            settings=SweeperSettings(interval_seconds=7),
            sleep=fake_sleep,
        )

        sweeper.start()
        assert sweeper.is_running
        await asyncio.wait_for(cycles.wait(), timeout=1)
        await sweeper.stop()

        assert not sweeper.is_running
        assert service.reconcile_expired.await_count >= 2
        assert set(delays) == {7}

    async def test_start_twice_warns(self, caplog):
        service = AsyncMock()
        service.reconcile_expired.return_value = 0
        gate = asyncio.Event()

        async def blocked_sleep(seconds):
            await gate.wait()

        sweeper = ExpiredSessionSweeper(
            voting_service=service, settings=SweeperSettings(), sleep=blocked_sleep
        )

        sweeper.start()
        sweeper.start()
        await sweeper.stop()

        assert "already running" in caplog.text

    async def test_stop_without_start(self):
        sweeper = ExpiredSessionSweeper(voting_service=AsyncMock(), settings=SweeperSettings())

        await sweeper.stop()

        assert not sweeper.is_running
