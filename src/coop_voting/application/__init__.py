"""
Application Layer

Contains use cases, command/query handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: CQRS write operations (StartSessionCommand, CastVoteCommand)
- queries/: CQRS read operations (GetTallyQuery, GetSessionsQuery)
- services/: voting session orchestration and session timers
"""
