"""Total worth series and portfolio summary.

The worth series samples the whole portfolio on every snapshot date: each
asset contributes its most recent snapshot on or before that date, together
with its running net invested amount.
"""

import bisect
from datetime import date, datetime, timedelta
from typing import Optional

from wealthgrid.services.performance.attribution import percent_of_positive
from wealthgrid.services.performance.records import (
    AssetInput,
    PortfolioStats,
    WorthPoint,
    WorthSummary,
)
from wealthgrid.services.performance.timeline import sort_snapshots
from wealthgrid.utils.datetime_utils import today

MAX_RANGE_START = date(2000, 1, 1)


def resolve_worth_window(
    time_range: str,
    now: Optional[datetime] = None,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> tuple[date, date]:
    """Start and end dates for a worth chart range."""
    end = today(now)
    start = MAX_RANGE_START

    if time_range == "1Y":
        start = end - timedelta(days=365)
    elif time_range == "5Y":
        start = end - timedelta(days=5 * 365)
    elif time_range == "YTD":
        start = date(end.year, 1, 1)
    elif time_range == "Custom" and custom_start:
        start = custom_start
        if custom_end:
            end = custom_end

    return start, end


class _RunningHistory:
    """One asset's snapshots with running invested totals, searchable by date."""

    __slots__ = ("dates", "values", "invested")

    def __init__(self, asset: AssetInput):
        self.dates: list[date] = []
        self.values: list[float] = []
        self.invested: list[float] = []

        running = 0.0
        for snapshot in sort_snapshots(asset.snapshots):
            running += snapshot.cash_flow or 0.0
            self.dates.append(snapshot.date)
            self.values.append(snapshot.value)
            self.invested.append(running)

    def as_of(self, when: date) -> Optional[tuple[float, float]]:
        # Last index whose date is <= when; same-day entries resolve to the latest
        index = bisect.bisect_right(self.dates, when) - 1
        if index < 0:
            return None
        return self.values[index], self.invested[index]


def build_worth_series(
    assets: list[AssetInput],
    time_range: str = "1Y",
    now: Optional[datetime] = None,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> WorthSummary:
    """
    Portfolio value and net invested over time, with the period gain.

    The period gain is the change in (value - invested) across the window and
    its percentage is measured against the start value plus the net new
    investment during the window.
    """
    if not assets:
        return WorthSummary(
            points=[],
            start_value=0.0,
            end_value=0.0,
            start_invested=0.0,
            end_invested=0.0,
            period_gain=0.0,
            period_gain_percent=0.0,
        )

    start, end = resolve_worth_window(time_range, now, custom_start, custom_end)

    histories = [_RunningHistory(asset) for asset in assets]

    all_dates = {today(now)}
    for history in histories:
        all_dates.update(history.dates)
    if time_range != "MAX":
        all_dates.add(start)

    points = []
    for when in sorted(d for d in all_dates if start <= d <= end):
        total_value = 0.0
        total_invested = 0.0
        for history in histories:
            found = history.as_of(when)
            if found is not None:
                value, invested = found
                total_value += value
                total_invested += invested
        points.append(WorthPoint(date=when, value=total_value, invested=total_invested))

    start_value = points[0].value if points else 0.0
    start_invested = points[0].invested if points else 0.0
    end_value = points[-1].value if points else 0.0
    end_invested = points[-1].invested if points else 0.0

    period_gain = (end_value - end_invested) - (start_value - start_invested)
    capital = start_value + (end_invested - start_invested)

    return WorthSummary(
        points=points,
        start_value=start_value,
        end_value=end_value,
        start_invested=start_invested,
        end_invested=end_invested,
        period_gain=period_gain,
        period_gain_percent=percent_of_positive(period_gain, capital),
    )


def calculate_portfolio_stats(assets: list[AssetInput]) -> PortfolioStats:
    """
    Current totals across assets, grouped by category and by owner.

    An asset's current value is its latest snapshot; its invested amount is the
    sum of all its cash flows. Owners are keyed by owner id.
    """
    stats = PortfolioStats(total_value=0.0, total_invested=0.0, total_gain=0.0, gain_percentage=0.0)

    for asset in assets:
        ordered = sort_snapshots(asset.snapshots)
        current_value = ordered[-1].value if ordered else 0.0
        invested = sum(s.cash_flow or 0.0 for s in ordered)

        stats.total_value += current_value
        stats.total_invested += invested

        stats.by_category[asset.category] = stats.by_category.get(asset.category, 0.0) + current_value
        stats.by_owner[asset.owner_id] = stats.by_owner.get(asset.owner_id, 0.0) + current_value

    stats.total_gain = stats.total_value - stats.total_invested
    stats.gain_percentage = percent_of_positive(stats.total_gain, stats.total_invested)
    return stats
