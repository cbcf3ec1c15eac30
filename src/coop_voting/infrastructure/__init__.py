"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Persistence (SQLite database and repositories)
- Background jobs (expired session sweeper)
"""

from coop_voting.infrastructure.persistence.database import Database

__all__ = [
    "Database",
]
