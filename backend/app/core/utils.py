"""
Utility functions for the application.
"""
from typing import Any, Dict
from datetime import date, timedelta


def parse_iso_date(value: Any) -> date:
    """Parse a YYYY-MM-DD string (or pass a date through). Raises ValueError."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Expected an ISO date string, got {type(value).__name__}")
    return date.fromisoformat(value.strip())


def add_days(day: date, days: int) -> date:
    """Return the calendar date `days` after `day`."""
    return day + timedelta(days=days)


def format_error(message: str, details: Any = None) -> Dict[str, Any]:
    """Format error response."""
    response = {"error": message}
    if details:
        response["details"] = details
    return response
