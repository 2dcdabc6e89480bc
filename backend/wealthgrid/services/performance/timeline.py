"""Monthly timeline builder.

Turns an asset's irregular snapshot list into a dense month-by-month series.
Months without a snapshot carry the last known value forward and never invent
a cash flow.
"""

import logging
from datetime import datetime
from typing import Iterable, Optional

from wealthgrid.services.performance.records import Snapshot, TimelineEntry
from wealthgrid.utils.month_utils import current_month, generate_month_range, month_of

logger = logging.getLogger(__name__)

AssetTimeline = dict[str, TimelineEntry]


def sort_snapshots(snapshots: Iterable[Snapshot]) -> list[Snapshot]:
    """Ascending by date. The sort is stable, so same-day ties keep insertion order."""
    return sorted(snapshots, key=lambda s: s.date)


def bucket_by_month(snapshots: list[Snapshot]) -> dict[str, tuple[float, float]]:
    """
    Collapse sorted snapshots into ``month -> (value, flow)``.

    The value is the last snapshot of the month; the flow is the sum of every
    snapshot's cash flow in that month.
    """
    buckets: dict[str, tuple[float, float]] = {}
    for snapshot in snapshots:
        month = month_of(snapshot.date)
        _, flow = buckets.get(month, (0.0, 0.0))
        buckets[month] = (snapshot.value, flow + (snapshot.cash_flow or 0.0))
    return buckets


def default_end_month(snapshots: list[Snapshot], now: Optional[datetime] = None) -> str:
    """Later of the latest snapshot month and the current month."""
    history_end = month_of(snapshots[-1].date)
    this_month = current_month(now)
    return history_end if history_end > this_month else this_month


def build_asset_timeline(
    snapshots: Iterable[Snapshot],
    end_month: Optional[str] = None,
    now: Optional[datetime] = None,
) -> AssetTimeline:
    """
    Build the forward-filled monthly timeline for one asset.

    Args:
        snapshots: The asset's snapshots in any order
        end_month: Last month to cover; defaults to max(latest snapshot month, current month)
        now: Reference time used for the default end month

    Returns:
        Ordered mapping from ``YYYY-MM`` to TimelineEntry covering
        [first snapshot month, max(end_month, first snapshot month)].
        Empty when there are no snapshots.
    """
    ordered = sort_snapshots(snapshots)
    if not ordered:
        return {}

    buckets = bucket_by_month(ordered)
    history_start = month_of(ordered[0].date)

    range_end = end_month or default_end_month(ordered, now)
    effective_end = range_end if range_end > history_start else history_start

    timeline: AssetTimeline = {}
    last_known_value = 0.0

    for month in generate_month_range(history_start, effective_end):
        if month in buckets:
            value, flow = buckets[month]
            timeline[month] = TimelineEntry(value=value, flow=flow, real_data_exists=True)
            last_known_value = value
        else:
            timeline[month] = TimelineEntry(
                value=last_known_value, flow=0.0, real_data_exists=False
            )

    logger.debug(
        "Built timeline: %s..%s (%d months, %d with data)",
        history_start,
        effective_end,
        len(timeline),
        len(buckets),
    )
    return timeline


def first_month(snapshots: Iterable[Snapshot]) -> Optional[str]:
    """Inception month of an asset, or None if it has no snapshots."""
    months = [month_of(s.date) for s in snapshots]
    return min(months) if months else None
