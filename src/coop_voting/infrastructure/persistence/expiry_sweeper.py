"""Periodic finalization of agendas whose voting session ended unnoticed."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from coop_voting.domain.shared.messages import LogTemplates
from coop_voting.domain.shared.types import NonNegativeInt

if TYPE_CHECKING:
    from ...application.services.voting_session_service import VotingSessionService
    from ...config.settings import SweeperSettings

logger = logging.getLogger(__name__)


class ExpiredSessionSweeper:
    """Backstop for lost session timers.

    Each cycle asks the voting service to finalize every IN_PROGRESS agenda
    whose latest session has already ended.
    """

    def __init__(
        self,
        *,
        voting_service: VotingSessionService,
        settings: SweeperSettings,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._voting_service = voting_service
        self._settings = settings
        self._sleep = sleep
        self._running = False
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        if self._running:
            logger.warning(LogTemplates.SWEEPER_ALREADY_RUNNING)
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info(LogTemplates.SWEEPER_STARTED, self._settings.interval_seconds)

    async def stop(self) -> None:
        self._running = False

        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(LogTemplates.SWEEPER_STOPPED)

    async def _run_loop(self) -> None:
        while self._running:
            await self.run_sweep()

            try:
                await self._sleep(self._settings.interval_seconds)
            except asyncio.CancelledError:
                break

    async def run_sweep(self) -> SweepStats:
        stats = SweepStats()

        logger.debug(LogTemplates.SWEEPER_CYCLE_RUNNING)
        try:
            stats.agendas_finalized = await self._voting_service.reconcile_expired()
        except Exception:
            logger.exception(LogTemplates.SWEEPER_FAILED)
            stats.failed = True

        if stats.agendas_finalized > 0:
            logger.info(LogTemplates.SWEEPER_PROCESSED, stats.agendas_finalized)

        return stats

    @property
    def is_running(self) -> bool:
        return self._running


class SweepStats(BaseModel):
    agendas_finalized: NonNegativeInt = 0
    failed: bool = False
