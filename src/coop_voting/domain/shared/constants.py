"""Centralized constants for database schema and other shared values.

This module provides reusable constants that reduce magic strings and improve maintainability.
"""

from __future__ import annotations


class SQLPragmas:
    """SQLite PRAGMA statements for database configuration.

    These pragmas are applied to each connection to ensure consistent behavior.
    """

    JOURNAL_MODE_WAL = "PRAGMA journal_mode=WAL"
    FOREIGN_KEYS_ON = "PRAGMA foreign_keys=ON"
    BUSY_TIMEOUT = "PRAGMA busy_timeout={timeout}"


class TimeConstants:
    """Time-related constants."""

    DEFAULT_SESSION_MINUTES = 5
    MAX_SESSION_MINUTES = 1440
    DEFAULT_SWEEP_INTERVAL_SECONDS = 30
