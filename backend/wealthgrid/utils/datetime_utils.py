"""DateTime utilities for timezone-aware timestamp handling.

Everything that defaults to "today" or "this month" goes through ``utc_now``
so that callers (and tests) can pass a fixed reference instead.
"""

from datetime import date, datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """
    Get current UTC datetime without timezone info (offset-naive).

    Returns:
        Current UTC datetime without timezone info

    Example:
        >>> now = utc_now()
        >>> print(now.tzinfo)
        None
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_now(now: Optional[datetime] = None) -> datetime:
    """Return ``now`` if given, otherwise the current UTC time."""
    return now if now is not None else utc_now()


def today(now: Optional[datetime] = None) -> date:
    """Calendar date of the reference time."""
    return resolve_now(now).date()
