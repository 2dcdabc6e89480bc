"""Helpers for ``YYYY-MM`` month keys.

Month keys are zero-padded strings, so lexicographic comparison and sorting
match chronological order. The timeline, heatmap and aggregation code all rely
on that.
"""

import re
from datetime import date, datetime
from typing import Optional, Union

from wealthgrid.utils.datetime_utils import resolve_now

MONTH_RE = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


def format_month(year: int, month: int) -> str:
    """Build a month key from numeric parts."""
    return f"{year:04d}-{month:02d}"


def month_of(value: Union[date, datetime, str]) -> str:
    """Month key of a date, datetime or ISO-8601 string."""
    if isinstance(value, str):
        return value[:7]
    return format_month(value.year, value.month)


def parse_month(month: str) -> tuple[int, int]:
    year, m = month.split("-")
    return int(year), int(m)


def is_valid_month(month: str) -> bool:
    return bool(MONTH_RE.match(month))


def previous_month(month: str) -> str:
    """
    Get the month before ``month``.

    Example:
        >>> previous_month("2024-01")
        '2023-12'
    """
    year, m = parse_month(month)
    if m == 1:
        return format_month(year - 1, 12)
    return format_month(year, m - 1)


def next_month(month: str) -> str:
    """
    Get the month after ``month``.

    Example:
        >>> next_month("2023-12")
        '2024-01'
    """
    year, m = parse_month(month)
    if m == 12:
        return format_month(year + 1, 1)
    return format_month(year, m + 1)


def shift_years(month: str, years: int) -> str:
    """Same calendar month ``years`` later (negative for earlier)."""
    year, m = parse_month(month)
    return format_month(year + years, m)


def generate_month_range(start: str, end: str) -> list[str]:
    """
    All months between ``start`` and ``end`` inclusive.

    Returns an empty list when ``start`` is after ``end``.
    """
    months = []
    current = start
    while current <= end:
        months.append(current)
        current = next_month(current)
    return months


def current_month(now: Optional[datetime] = None) -> str:
    """Month key of the reference time (defaults to the UTC clock)."""
    return month_of(resolve_now(now))


def is_first_month_of_year(month: str, index: int) -> bool:
    """True for January columns, except the first visible column."""
    if index == 0:
        return False
    return month.endswith("-01")
