"""Environment configuration for the visitor access service."""

import os

DEFAULT_DATABASE_URL = 'sqlite+aiosqlite:///./visitor_access.db'
DEFAULT_RECENT_ACCESS_LOG_LIMIT = 5


def get_database_url() -> str:
    """Get the SQLAlchemy async database URL.

    Reads DATABASE_URL from environment. If not set or empty, returns a
    local SQLite database.
    """
    url = os.getenv('DATABASE_URL', '').strip()
    return url if url else DEFAULT_DATABASE_URL


def get_database_echo() -> bool:
    value = os.getenv('DATABASE_ECHO', '').strip().lower()
    return value in ('1', 'true', 'yes')


def get_log_level() -> str:
    level = os.getenv('LOG_LEVEL', '').strip().upper()
    return level if level else 'INFO'


def get_log_format() -> str:
    """Get the log output format, either 'text' or 'json'."""
    value = os.getenv('LOG_FORMAT', '').strip().lower()
    return 'json' if value == 'json' else 'text'


def get_recent_access_log_limit() -> int:
    """Get the default number of rows for recent access log queries.

    Reads RECENT_ACCESS_LOG_LIMIT from environment. If empty, unset, not an
    integer or not positive, returns the default (graceful fallback).
    """
    value = os.getenv('RECENT_ACCESS_LOG_LIMIT', '').strip()
    if not value:
        return DEFAULT_RECENT_ACCESS_LOG_LIMIT
    try:
        limit = int(value)
    except ValueError:
        return DEFAULT_RECENT_ACCESS_LOG_LIMIT
    return limit if limit > 0 else DEFAULT_RECENT_ACCESS_LOG_LIMIT
