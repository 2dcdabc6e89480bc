"""Shared month range validation for API endpoints."""

from datetime import date
from typing import Optional

from fastapi import HTTPException

from wealthgrid.utils.month_utils import is_valid_month

MIN_MONTH = "1900-01"
MAX_MONTH = "2100-12"


def validate_month(month: str, field: str) -> None:
    """Raise HTTPException(400) unless ``month`` is a ``YYYY-MM`` key in range."""
    if not is_valid_month(month):
        raise HTTPException(status_code=400, detail=f"{field} must be formatted as YYYY-MM")

    if month < MIN_MONTH:
        raise HTTPException(status_code=400, detail=f"{field} cannot be before {MIN_MONTH}")

    if month > MAX_MONTH:
        raise HTTPException(status_code=400, detail=f"{field} cannot be after {MAX_MONTH}")


def validate_month_range(range_start: Optional[str], range_end: Optional[str]) -> None:
    """Validate a visible heatmap range.

    Raises HTTPException(400) if:
      - either bound is not a ``YYYY-MM`` key
      - either bound falls outside 1900-01..2100-12
      - range_start is after range_end
    """
    if range_start is not None:
        validate_month(range_start, "range_start")
    if range_end is not None:
        validate_month(range_end, "range_end")

    if range_start is not None and range_end is not None and range_start > range_end:
        raise HTTPException(
            status_code=400, detail="range_start must be before or equal to range_end"
        )


def validate_custom_range(start: Optional[date], end: Optional[date]) -> None:
    """A custom worth range needs a start date that is not after its end date."""
    if start is None:
        raise HTTPException(status_code=400, detail="custom_start is required for a Custom range")

    if end is not None and start > end:
        raise HTTPException(
            status_code=400, detail="custom_start must be before or equal to custom_end"
        )
