"""
Application Commands (CQRS Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from coop_voting.application.commands.cast_vote import (
    CastVoteCommand,
    CastVoteHandler,
    CastVoteResult,
)
from coop_voting.application.commands.start_session import (
    StartSessionCommand,
    StartSessionHandler,
    StartSessionResult,
)

__all__ = [
    # Session
    "StartSessionCommand",
    "StartSessionHandler",
    "StartSessionResult",
    # Vote
    "CastVoteCommand",
    "CastVoteHandler",
    "CastVoteResult",
]
