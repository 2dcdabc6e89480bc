"""Heatmap rows, grid projection and calendar year rows.

An asset row lays the monthly attribution onto the visible month window. The
projector then classifies each cell for display: before inception the cell is
empty, the inception month is a marker rather than a colour, and forward-filled
months are coloured but flagged as carried.
"""

import logging
from datetime import datetime
from typing import Optional

from wealthgrid.services.performance.attribution import (
    percent_of,
    percent_of_positive,
    period_change,
)
from wealthgrid.services.performance.records import (
    AssetInput,
    DisplayCell,
    HeatmapCell,
    HeatmapRow,
    HeatmapYearRow,
)
from wealthgrid.services.performance.timeline import (
    AssetTimeline,
    build_asset_timeline,
    first_month,
)
from wealthgrid.utils.month_utils import (
    current_month,
    format_month,
    generate_month_range,
    is_first_month_of_year,
    month_of,
    parse_month,
    previous_month,
    shift_years,
)

logger = logging.getLogger(__name__)

# (lower bound on change percent, class), checked top to bottom
COLOR_THRESHOLDS = (
    (5.0, "gain-high"),
    (2.0, "gain-medium"),
    (0.5, "gain-low"),
    (-0.5, "neutral"),
    (-2.0, "loss-low"),
    (-5.0, "loss-medium"),
)
LOSS_HIGH = "loss-high"

STATE_NOT_EXISTS = "not-exists"
STATE_INCEPTION = "inception"
STATE_NO_DATA = "no-data"
STATE_NORMAL = "normal"


def get_color_class(change_percent: float) -> str:
    """Severity bucket for a monthly change percentage."""
    for threshold, color_class in COLOR_THRESHOLDS:
        if change_percent >= threshold:
            return color_class
    return LOSS_HIGH


def get_cell_state(cell: HeatmapCell) -> str:
    if not cell.exists:
        return STATE_NOT_EXISTS
    if cell.is_inception:
        return STATE_INCEPTION
    if not cell.has_data:
        return STATE_NO_DATA
    return STATE_NORMAL


def project_row(row: HeatmapRow) -> list[DisplayCell]:
    """Classify every cell of a row for rendering."""
    display = []
    for index, cell in enumerate(row.cells):
        state = get_cell_state(cell)
        color_class = None
        if state in (STATE_NO_DATA, STATE_NORMAL):
            color_class = get_color_class(cell.change_percent)
        display.append(
            DisplayCell(
                cell=cell,
                state=state,
                color_class=color_class,
                is_year_start=is_first_month_of_year(cell.month, index),
            )
        )
    return display


def _cells_for_window(
    timeline: AssetTimeline, inception: Optional[str], visible_months: list[str]
) -> list[HeatmapCell]:
    cells = []
    for month in visible_months:
        exists = inception is not None and month >= inception
        if not exists:
            cells.append(
                HeatmapCell(
                    month=month,
                    value=0.0,
                    previous_value=0.0,
                    change=0.0,
                    change_percent=0.0,
                    has_data=False,
                    exists=False,
                    is_inception=False,
                    monthly_flow=0.0,
                )
            )
            continue

        entry = timeline[month]
        is_inception = month == inception
        previous_value = 0.0 if is_inception else timeline[previous_month(month)].value
        result = period_change(previous_value, entry.flow, entry.value)

        cells.append(
            HeatmapCell(
                month=month,
                value=entry.value,
                previous_value=previous_value,
                change=result.change,
                change_percent=result.change_percent,
                has_data=entry.real_data_exists,
                exists=True,
                is_inception=is_inception,
                monthly_flow=entry.flow,
            )
        )
    return cells


def build_asset_row(
    asset: AssetInput,
    range_start: str,
    range_end: str,
    owner_name: str = "Unknown",
) -> HeatmapRow:
    """
    Heatmap row for one asset over ``[range_start, range_end]``.

    The timeline is always built from the asset's inception so the month
    before the window has its carried value.
    """
    visible_months = generate_month_range(range_start, range_end)
    inception = first_month(asset.snapshots)

    timeline = build_asset_timeline(asset.snapshots, end_month=range_end)
    cells = _cells_for_window(timeline, inception, visible_months)

    total_change = sum(c.change for c in cells)
    total_flow = sum(c.monthly_flow for c in cells)

    # An asset that starts inside the window has its starting capital in total_flow
    start_value_basis = cells[0].previous_value if cells and not cells[0].is_inception else 0.0
    basis = start_value_basis + total_flow

    return HeatmapRow(
        id=asset.id,
        name=asset.name,
        category=asset.category,
        owner_name=owner_name,
        cells=cells,
        total_change=total_change,
        total_change_percent=percent_of_positive(total_change, basis),
        start_value=cells[0].previous_value if cells else 0.0,
        end_value=cells[-1].value if cells else 0.0,
    )


def sort_rows(rows: list[HeatmapRow], direction: Optional[str] = None) -> list[HeatmapRow]:
    """Sort by range return (``asc``/``desc``), or alphabetically by name."""
    if direction == "asc":
        return sorted(rows, key=lambda r: r.total_change_percent)
    if direction == "desc":
        return sorted(rows, key=lambda r: r.total_change_percent, reverse=True)
    return sorted(rows, key=lambda r: r.name.lower())


def month_bounds(assets: list[AssetInput], now: Optional[datetime] = None) -> tuple[str, str]:
    """
    Earliest and latest snapshot month across all assets.

    Falls back to the current month for both when nobody has data.
    """
    months = [month_of(s.date) for asset in assets for s in asset.snapshots]
    if not months:
        month = current_month(now)
        return month, month
    return min(months), max(months)


def get_quick_filter_range(
    quick_filter: str,
    min_month: str,
    max_month: str,
    now: Optional[datetime] = None,
) -> tuple[str, str]:
    """
    Visible window for a quick filter.

    YTD starts in January of the current year; 1Y and 5Y start that many years
    before the current month, clamped to ``min_month``; MAX spans everything.
    """
    this_month = current_month(now)

    if quick_filter == "YTD":
        return f"{this_month[:4]}-01", max_month
    if quick_filter in ("1Y", "5Y"):
        start = shift_years(this_month, -1 if quick_filter == "1Y" else -5)
        return (start if start > min_month else min_month), max_month
    return min_month, max_month


def active_quick_filter(
    range_start: str,
    range_end: str,
    min_month: str,
    max_month: str,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """Which quick filter (if any) produces exactly this window. MAX wins ties."""
    for quick_filter in ("MAX", "YTD", "1Y", "5Y"):
        if get_quick_filter_range(quick_filter, min_month, max_month, now) == (
            range_start,
            range_end,
        ):
            return quick_filter
    return None


# ── calendar year rows (single asset view) ────────────────────────────────────

def build_year_rows(asset: AssetInput, now: Optional[datetime] = None) -> list[HeatmapYearRow]:
    """
    Per-year, twelve-column rows for one asset, newest year first.

    Cells outside the asset's life (or after the current month) are None.
    """
    if not asset.snapshots:
        return []

    this_month = current_month(now)
    timeline = build_asset_timeline(asset.snapshots, end_month=this_month, now=now)
    months = list(timeline)
    start_month, end_month = months[0], months[-1]
    start_year, _ = parse_month(start_month)
    end_year, _ = parse_month(end_month)
    this_year, this_month_num = parse_month(this_month)

    years = []
    for year in range(end_year, start_year - 1, -1):
        cells: list[Optional[HeatmapCell]] = []
        has_data_in_year = False

        for month_num in range(1, 13):
            month = format_month(year, month_num)
            if month < start_month or month > end_month:
                cells.append(None)
                continue

            entry = timeline[month]
            prev = timeline.get(previous_month(month))
            previous_value = prev.value if prev is not None else 0.0
            result = period_change(previous_value, entry.flow, entry.value)

            if entry.real_data_exists:
                has_data_in_year = True

            cells.append(
                HeatmapCell(
                    month=month,
                    value=entry.value,
                    previous_value=previous_value,
                    change=result.change,
                    change_percent=result.change_percent,
                    has_data=entry.real_data_exists,
                    exists=True,
                    is_inception=month == start_month,
                    monthly_flow=entry.flow,
                )
            )

        prior_december = timeline.get(format_month(year - 1, 12))
        year_start_value = prior_december.value if prior_december is not None else 0.0

        last_month_num = this_month_num if year == this_year else 12
        last_entry = timeline.get(format_month(year, last_month_num))
        year_end_value = last_entry.value if last_entry is not None else 0.0

        year_flow = 0.0
        for month_num in range(1, last_month_num + 1):
            entry = timeline.get(format_month(year, month_num))
            if entry is not None:
                year_flow += entry.flow

        year_basis = year_start_value + year_flow
        year_change = year_end_value - year_basis

        has_holding = year_start_value > 0 or year_end_value > 0 or year_flow != 0
        if has_holding or has_data_in_year:
            years.append(
                HeatmapYearRow(
                    year=year,
                    cells=cells,
                    total_return=percent_of(year_change, year_basis),
                    start_value=year_start_value,
                    end_value=year_end_value,
                    total_change=year_change,
                )
            )

    logger.debug("Built %d year rows for asset %s", len(years), asset.id)
    return years
