"""Domain event bus for publishing and subscribing to voting events."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from coop_voting.domain.shared.datetime_utils import utcnow
from coop_voting.domain.shared.messages import LogTemplates
from coop_voting.domain.shared.types import (
    EntityIdStr,
    NonEmptyStr,
    NonNegativeInt,
    PositiveInt,
    UtcDatetimeField,
)
from coop_voting.domain.voting.value_objects import AgendaResult, VoteChoice

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: UtcDatetimeField = Field(default_factory=utcnow)


# === Voting Events ===


class SessionStarted(DomainEvent):
    agenda_id: EntityIdStr
    session_id: EntityIdStr
    start_time: UtcDatetimeField
    end_time: UtcDatetimeField
    duration_minutes: PositiveInt
    implicit: bool = False


class VoteCast(DomainEvent):
    agenda_id: EntityIdStr
    user_id: EntityIdStr
    choice: VoteChoice
    yes_votes: NonNegativeInt = 0
    no_votes: NonNegativeInt = 0
    total_votes: NonNegativeInt = 0


class AgendaFinished(DomainEvent):
    agenda_id: EntityIdStr
    result: AgendaResult
    yes_votes: NonNegativeInt = 0
    no_votes: NonNegativeInt = 0
    total_votes: NonNegativeInt = 0


# === Event Bus ===


class EventBus:
    """In-memory pub/sub event bus for domain events.

    Handlers are called concurrently. Exceptions in handlers are logged
    but do not prevent other handlers from running.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        self._handlers[event_type].append(handler)
        logger.debug("Subscribed handler to: %s", event_type.__name__)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers[event_type]
        if handler in handlers:
            handlers.remove(handler)
            logger.debug("Unsubscribed handler from %s", event_type.__name__)

    async def publish(self, event: DomainEvent) -> None:
        event_type = type(event)
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug("No handlers for %s", event_type.__name__)
            return

        logger.debug("Publishing %s to %d handlers", event_type.__name__, len(handlers))

        async def safe_call(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception(LogTemplates.EVENT_HANDLER_FAILED, event_type.__name__, e)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(safe_call(handler))

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        logger.debug("Cleared all event handlers")
