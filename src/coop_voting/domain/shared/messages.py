"""Centralized message constants for error messages, validation, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Agenda / Session Errors
    AGENDA_NOT_FOUND = "Agenda '{agenda_id}' not found"
    SESSION_NOT_STARTABLE = "Agenda must be DRAFT or OPEN to start a session (current: {status})"
    AGENDA_NOT_ACCEPTING_VOTES = "Agenda is not open for voting (current: {status})"
    SESSION_OUTSIDE_BOUNDS = "Session duration must be between {minimum} and {maximum} minutes"
    SESSION_END_BEFORE_START = "Session end time must be after its start time"

    # Vote Errors
    ALREADY_VOTED = "User '{user_id}' has already voted on agenda '{agenda_id}'"
    INVALID_VOTE_CHOICE = "Vote must be one of: {choices}"

    # Tally Invariants
    TOTAL_VOTES_MISMATCH = "total_votes must equal yes_votes + no_votes"
    RESULT_BEFORE_FINISH = "Agenda result must be UNVOTED until the agenda is FINISHED"

    # Time/Date Validation Errors
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"

    # Field Validation Errors (templates)
    FIELD_CANNOT_BE_EMPTY = "{field_name} cannot be empty"

    # Settings Validation Errors
    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    DEFAULT_EXCEEDS_MAXIMUM = "default_session_minutes cannot exceed max_session_minutes"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Application Lifecycle
    APP_STARTING = "Starting cooperative voting service ({environment})"
    APP_STOPPED = "Cooperative voting service stopped"
    APP_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down"
    APP_FATAL_ERROR = "Fatal error: %s"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Agenda Persistence
    AGENDA_CREATED = "Agenda %s created with status %s"
    AGENDA_UPDATED = "Agenda %s updated: %s"
    AGENDA_UPDATE_SKIPPED = "Conditional update of agenda %s skipped (expected status %s)"
    SESSION_PERSISTED = "Session %s persisted for agenda %s (%s -> %s)"
    VOTE_PERSISTED = "Vote %s persisted for agenda %s"
    VOTE_UNIQUE_VIOLATION = "Unique index rejected vote of user %s on agenda %s"

    # Voting Session Lifecycle
    SESSION_STARTED = "Session started for agenda %s: %d minutes (ends %s)"
    SESSION_AUTO_STARTED = "Vote on OPEN agenda %s implicitly started a %d minute session"
    VOTE_RECORDED = "Vote recorded on agenda %s: %s (yes=%d, no=%d, total=%d)"
    AGENDA_FINALIZED = "Agenda %s finalized with result %s (yes=%d, no=%d, total=%d)"
    AGENDA_ALREADY_FINALIZED = "Agenda %s already %s, finalize is a no-op"
    AGENDA_STALE_SESSION = "Agenda %s session ended at %s without finalization, finalizing now"
    TIMERS_RESUMED = "Resumed %d session timers, finalized %d expired agendas"

    # Session Timer
    TIMER_SCHEDULED = "Timer scheduled for agenda %s in %.1f seconds"
    TIMER_REPLACED = "Replacing pending timer for agenda %s"
    TIMER_FIRED = "Timer fired for agenda %s"
    TIMER_CANCELLED = "Timer cancelled for agenda %s"
    TIMER_CALLBACK_FAILED = "Timer callback failed for agenda %s"

    # Expiry Sweeper
    SWEEPER_STARTED = "Expired session sweeper started (every %d seconds)"
    SWEEPER_STOPPED = "Expired session sweeper stopped"
    SWEEPER_ALREADY_RUNNING = "Expired session sweeper is already running"
    SWEEPER_CYCLE_RUNNING = "Running expired session sweep"
    SWEEPER_PROCESSED = "Sweeper finalized %d expired agendas"
    SWEEPER_FAILED = "Error during expired session sweep"

    # Events
    EVENT_HANDLER_FAILED = "Error in handler for %s: %s"
