"""UTC timestamp helpers shared by the store, the service and the CLI.

Every timestamp in the system is timezone-aware UTC. Two text renderings exist:
``db`` (fixed-width, ``+00:00`` offset, sortable as text) for SQLite columns and
``iso_z`` for payloads, events and log lines.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from ...domain.shared.messages import ErrorMessages

Clock = Callable[[], datetime]
"""Zero-argument callable returning the current timezone-aware UTC time."""


@dataclass(frozen=True, slots=True)
class UtcDateTime:
    """Value wrapper normalizing an aware ``datetime`` to UTC."""

    dt: datetime

    def __post_init__(self) -> None:
        if self.dt.tzinfo is None:
            raise ValueError(ErrorMessages.TIMEZONE_REQUIRED_UTC_DATETIME)
        object.__setattr__(self, "dt", self.dt.astimezone(UTC))

    @classmethod
    def from_iso(cls, value: str) -> UtcDateTime:
        """Parse either a ``Z`` or an explicit-offset ISO-8601 string."""
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        return cls(datetime.fromisoformat(value))

    def plus_minutes(self, minutes: int) -> UtcDateTime:
        return UtcDateTime(self.dt + timedelta(minutes=minutes))

    def until(self, other: datetime) -> timedelta:
        """Non-negative time from this instant to ``other``."""
        return max(other - self.dt, timedelta(0))

    @property
    def iso(self) -> str:
        return self.dt.isoformat()

    @property
    def db(self) -> str:
        return self.dt.isoformat(timespec="microseconds")

    @property
    def iso_z(self) -> str:
        return self.dt.isoformat().replace("+00:00", "Z")


def utcnow() -> datetime:
    """Default ``Clock``: the current aware UTC time."""
    return datetime.now(UTC)
