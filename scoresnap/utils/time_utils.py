"""
Date and time helpers for the ScoreSnap scorebook application.

This module contains common formatting functions used by the models and the web API.
"""
from datetime import date, datetime, time
from typing import Optional


def fmt_medium_date(value: date) -> str:
    """
    Format a date in medium style.

    Args:
        value: Date to format

    Returns:
        Formatted string such as "Jun 18, 2025"

    Example:
        >>> fmt_medium_date(date(2025, 6, 8))
        'Jun 8, 2025'
    """
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse an ISO 8601 date string, returning None for empty input."""
    if not value:
        return None
    return date.fromisoformat(value)


def parse_time(value: Optional[str]) -> Optional[time]:
    """Parse an ISO 8601 time string, returning None for empty input."""
    if not value:
        return None
    return time.fromisoformat(value)


def parse_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp, returning None for empty input."""
    if not value:
        return None
    return datetime.fromisoformat(value)


def now() -> datetime:
    """
    Get the current local time.

    Returns:
        Current time as a naive datetime
    """
    return datetime.now()
