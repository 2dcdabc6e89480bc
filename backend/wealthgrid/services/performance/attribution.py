"""Gain/loss and return attribution.

Every period is measured against the same basis: the value carried over from
the previous period plus the cash injected during the period. Gain/loss is
the value minus that basis, and the percentage return is gain/loss over the
basis. A zero basis yields a 0% return (an asset that had nothing at risk has
no meaningful percentage), never inf or NaN.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from wealthgrid.services.performance.records import EnhancedSnapshot, Snapshot
from wealthgrid.services.performance.timeline import AssetTimeline, sort_snapshots
from wealthgrid.utils.month_utils import month_of


def percent_of(change: float, basis: float) -> float:
    """``change / basis`` as a percentage, 0 when the basis is exactly 0."""
    if basis != 0:
        return (change / basis) * 100
    return 0.0


def percent_of_positive(change: float, basis: float) -> float:
    """``change / basis`` as a percentage, 0 unless the basis is positive."""
    if basis > 0:
        return (change / basis) * 100
    return 0.0


@dataclass
class PeriodResult:
    basis: float
    change: float
    change_percent: float


def period_change(previous_value: float, flow: float, value: float) -> PeriodResult:
    """Cash-flow adjusted gain/loss for one period."""
    basis = previous_value + flow
    change = value - basis
    return PeriodResult(basis=basis, change=change, change_percent=percent_of(change, basis))


def monthly_changes(timeline: AssetTimeline) -> dict[str, PeriodResult]:
    """
    Per-month attribution over a whole timeline.

    The first month is the inception: its previous value is 0, so the whole
    starting contribution sits in the basis.
    """
    results: dict[str, PeriodResult] = {}
    previous_value = 0.0
    for month, entry in timeline.items():
        results[month] = period_change(previous_value, entry.flow, entry.value)
        previous_value = entry.value
    return results


@dataclass
class _YearStart:
    value: float
    invested: float


def enhance_snapshots(
    snapshots: Iterable[Snapshot],
    newest_first: bool = True,
) -> list[EnhancedSnapshot]:
    """
    Add period, cumulative and year-to-date metrics to each snapshot.

    The walk is always chronological; ``newest_first`` only controls the order
    of the returned list.

    Args:
        snapshots: Raw snapshots in any order
        newest_first: Reverse the output for table views

    Returns:
        One EnhancedSnapshot per input snapshot
    """
    ordered = sort_snapshots(snapshots)
    enhanced: list[EnhancedSnapshot] = []

    running_invested = 0.0
    previous_value = 0.0
    year_starts: dict[int, _YearStart] = {}

    for index, snapshot in enumerate(ordered):
        cash_flow = snapshot.cash_flow or 0.0

        # Baseline is captured before this year's first flow is applied
        year = snapshot.date.year
        if year not in year_starts:
            year_starts[year] = _YearStart(value=previous_value, invested=running_invested)
        year_start = year_starts[year]

        running_invested += cash_flow

        period_gl = (snapshot.value - previous_value) - cash_flow
        period_basis = previous_value + cash_flow

        cum_gl = snapshot.value - running_invested

        ytd_gl = cum_gl - (year_start.value - year_start.invested)
        ytd_basis = year_start.value + (running_invested - year_start.invested)

        enhanced.append(
            EnhancedSnapshot(
                date=snapshot.date,
                value=snapshot.value,
                cash_flow=cash_flow,
                notes=snapshot.notes,
                id=snapshot.id,
                cum_invested=running_invested,
                period_gl=period_gl,
                period_gl_percent=percent_of(period_gl, period_basis),
                cum_gl=cum_gl,
                roi=percent_of_positive(cum_gl, running_invested),
                ytd_gl=ytd_gl,
                ytd_roi=percent_of_positive(ytd_gl, ytd_basis),
                actual_index=index,
            )
        )
        previous_value = snapshot.value

    if newest_first:
        enhanced.reverse()
    return enhanced


def cumulative_gain(snapshots: Iterable[Snapshot]) -> float:
    """All-time gain/loss: latest value minus net cash invested."""
    ordered = sort_snapshots(snapshots)
    if not ordered:
        return 0.0
    invested = sum(s.cash_flow or 0.0 for s in ordered)
    return ordered[-1].value - invested


def cumulative_gain_as_of(
    history: list[EnhancedSnapshot], month: str
) -> Optional[float]:
    """
    Cumulative gain/loss of the last snapshot dated in or before ``month``.

    ``history`` may be in either order. Returns None before the first snapshot.
    """
    latest: Optional[EnhancedSnapshot] = None
    for entry in history:
        if month_of(entry.date) > month:
            continue
        if latest is None or entry.actual_index > latest.actual_index:
            latest = entry
    return latest.cum_gl if latest is not None else None
