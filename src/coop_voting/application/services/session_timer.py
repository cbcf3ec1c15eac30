"""In-process timers that finalize agendas when their voting window closes."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any

from ...domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

TimerCallback = Callable[[str], Awaitable[Any]]
Sleeper = Callable[[float], Awaitable[Any]]


class SessionTimer:
    """Schedules one deferred callback per agenda id.

    Scheduling an agenda that already has a pending timer replaces it.
    Callbacks fire at most once per schedule call; pending timers do not
    survive a restart, so the voting service reconciles stale sessions on
    read and on startup.
    """

    def __init__(self, *, sleep: Sleeper = asyncio.sleep) -> None:
        self._sleep = sleep
        self._pending: dict[str, asyncio.Task[None]] = {}
        self._running: set[asyncio.Task[None]] = set()

    def schedule(self, agenda_id: str, delay: timedelta | float, callback: TimerCallback) -> None:
        seconds = delay.total_seconds() if isinstance(delay, timedelta) else float(delay)
        seconds = max(seconds, 0.0)

        existing = self._pending.get(agenda_id)
        if existing is not None and not existing.done():
            logger.debug(LogTemplates.TIMER_REPLACED, agenda_id)
            existing.cancel()

        task = asyncio.create_task(
            self._run(agenda_id, seconds, callback), name=f"session-timer:{agenda_id}"
        )
        self._pending[agenda_id] = task
        self._running.add(task)
        task.add_done_callback(self._running.discard)
        logger.debug(LogTemplates.TIMER_SCHEDULED, agenda_id, seconds)

    async def _run(self, agenda_id: str, seconds: float, callback: TimerCallback) -> None:
        await self._sleep(seconds)

        # Unregister before firing so the callback may reschedule this agenda.
        if self._pending.get(agenda_id) is asyncio.current_task():
            del self._pending[agenda_id]

        logger.info(LogTemplates.TIMER_FIRED, agenda_id)
        try:
            await callback(agenda_id)
        except Exception:
            logger.exception(LogTemplates.TIMER_CALLBACK_FAILED, agenda_id)

    def cancel(self, agenda_id: str) -> bool:
        """Cancel a pending timer. Returns True if one was pending."""
        task = self._pending.pop(agenda_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.debug(LogTemplates.TIMER_CANCELLED, agenda_id)
        return True

    def is_scheduled(self, agenda_id: str) -> bool:
        task = self._pending.get(agenda_id)
        return task is not None and not task.done()

    @property
    def pending(self) -> frozenset[str]:
        return frozenset(agenda_id for agenda_id, task in self._pending.items() if not task.done())

    async def cancel_all(self) -> int:
        """Cancel every pending timer and wait for them to unwind."""
        tasks = [task for task in self._pending.values() if not task.done()]
        self._pending.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        return len(tasks)

    async def join(self) -> None:
        """Wait until every scheduled or firing timer has completed."""
        while self._running:
            await asyncio.gather(*list(self._running), return_exceptions=True)
