"""Reusable Pydantic Annotated types for domain-wide validation.

Every constrained type used across layers is defined here once,
so models can simply annotate their fields::

    from coop_voting.domain.shared.types import EntityIdStr, NonNegativeInt

    class MyModel(BaseModel):
        agenda_id: EntityIdStr
        votes: NonNegativeInt
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from pydantic import BeforeValidator, Field

# ── Numeric constraints ─────────────────────────────────────────────

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveInt = Annotated[int, Field(gt=0)]
"""Integer > 0."""

PercentageInt = Annotated[int, Field(ge=0, le=100)]
"""Whole percentage point: 0 … 100."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

EntityIdStr = Annotated[str, Field(min_length=1, max_length=64)]
"""Opaque entity identifier (UUID text for rows created here)."""

AgendaTitleStr = Annotated[str, Field(min_length=1, max_length=255)]
"""Agenda title: 1-255 characters."""

AgendaDescriptionStr = Annotated[str, Field(max_length=5000)]
"""Agenda description: up to 5 000 characters."""


# ── Domain-specific numeric constraints ─────────────────────────────

SessionMinutes = Annotated[int, Field(ge=1, le=1440)]
"""Voting session length in minutes: 1 … 1 440 (24 hours)."""


# ── Settings-specific constraints ──────────────────────────────────

BusyTimeoutMs = Annotated[int, Field(ge=1000, le=30000)]
"""Database busy timeout in milliseconds: 1 000 … 30 000."""

ConnectionTimeoutS = Annotated[int, Field(ge=1, le=60)]
"""Database connection timeout in seconds: 1 … 60."""


# ── Datetime constraints ────────────────────────────────────────────

def _ensure_utc(v: datetime) -> datetime:
    """Validate that a datetime is timezone-aware and normalise to UTC."""
    if isinstance(v, datetime):
        if v.tzinfo is None:
            raise ValueError("datetime must be timezone-aware (UTC)")
        return v.astimezone(UTC)
    return v


UtcDatetimeField = Annotated[datetime, BeforeValidator(_ensure_utc)]
"""Timezone-aware datetime, normalised to UTC on input."""
