"""
Application Queries (CQRS Read Side)

Query objects and handlers for read operations.
Queries do not change agendas, apart from finalizing one whose session already ended.
"""

from coop_voting.application.queries.get_sessions import (
    AgendaSessions,
    GetSessionsHandler,
    GetSessionsQuery,
)
from coop_voting.application.queries.get_tally import GetTallyHandler, GetTallyQuery, tally_payload

__all__ = [
    "GetTallyQuery",
    "GetTallyHandler",
    "tally_payload",
    "GetSessionsQuery",
    "GetSessionsHandler",
    "AgendaSessions",
]
