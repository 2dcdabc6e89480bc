"""Service for asset and portfolio performance views.

Wraps the valuation engine with the household concerns the engine does not
know about: owner filtering, person names, visible-window defaults, row
sorting and pagination.
"""

import math
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from wealthgrid.config import settings
from wealthgrid.core.logging_config import get_logger, log_computation
from wealthgrid.services.performance.attribution import enhance_snapshots
from wealthgrid.services.performance.heatmap import (
    active_quick_filter,
    build_asset_row,
    build_year_rows,
    get_quick_filter_range,
    month_bounds,
    project_row,
    sort_rows,
)
from wealthgrid.services.performance.portfolio import aggregate_portfolio
from wealthgrid.services.performance.records import (
    AssetInput,
    DisplayCell,
    EnhancedSnapshot,
    HeatmapRow,
    HeatmapStats,
    HeatmapYearRow,
    PortfolioStats,
    WorthSummary,
)
from wealthgrid.services.performance.stats import calculate_heatmap_stats
from wealthgrid.services.performance.timeline import AssetTimeline, build_asset_timeline
from wealthgrid.services.performance.worth import build_worth_series, calculate_portfolio_stats
from wealthgrid.utils.month_utils import generate_month_range

logger = get_logger(__name__)

UNKNOWN_OWNER = "Unknown"


@dataclass
class HeatmapView:
    min_month: str
    max_month: str
    range_start: str
    range_end: str
    active_quick_filter: Optional[str]
    months: list[str]
    rows: list[HeatmapRow]
    portfolio: HeatmapRow
    display: dict[str, list[DisplayCell]]
    stats: HeatmapStats


@dataclass
class HistoryPage:
    items: list[EnhancedSnapshot]
    total: int
    page: int
    page_size: int
    total_pages: int


def filter_by_owner(assets: list[AssetInput], owner_id: Optional[str]) -> list[AssetInput]:
    """All assets, or only those owned by ``owner_id``."""
    if not owner_id:
        return assets
    return [asset for asset in assets if asset.owner_id == owner_id]


class PerformanceService:
    """Builds timeline, history, heatmap, worth and summary views."""

    def __init__(self, now: Optional[datetime] = None):
        # Fixed reference time; None means read the clock on each call
        self.now = now

    def _elapsed_ms(self, started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    def get_timeline(self, asset: AssetInput, end_month: Optional[str] = None) -> AssetTimeline:
        """Forward-filled monthly timeline for one asset."""
        started = time.perf_counter()
        timeline = build_asset_timeline(asset.snapshots, end_month=end_month, now=self.now)
        log_computation(
            logger, "timeline", 1, self._elapsed_ms(started), months=len(timeline)
        )
        return timeline

    def get_history(
        self,
        asset: AssetInput,
        newest_first: bool = True,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> HistoryPage:
        """
        Enhanced snapshot history for the table view, one page at a time.

        Args:
            asset: Asset with its snapshots
            newest_first: Present newest snapshots first
            page: 1-based page number
            page_size: Rows per page (defaults to HISTORY_PAGE_SIZE, capped at MAX_PAGE_SIZE)

        Returns:
            HistoryPage with the requested slice and pagination totals
        """
        started = time.perf_counter()
        size = min(page_size or settings.HISTORY_PAGE_SIZE, settings.MAX_PAGE_SIZE)

        history = enhance_snapshots(asset.snapshots, newest_first=newest_first)
        total = len(history)
        offset = (page - 1) * size

        log_computation(
            logger, "history", 1, self._elapsed_ms(started), snapshots=total, page=page
        )
        return HistoryPage(
            items=history[offset:offset + size],
            total=total,
            page=page,
            page_size=size,
            total_pages=math.ceil(total / size) if total else 0,
        )

    def resolve_range(
        self,
        min_month: str,
        max_month: str,
        range_start: Optional[str] = None,
        range_end: Optional[str] = None,
        quick_range: Optional[str] = None,
    ) -> tuple[str, str]:
        """Explicit bounds win; otherwise the quick filter (or the configured default)."""
        if range_start or range_end:
            return range_start or min_month, range_end or max_month
        return get_quick_filter_range(
            quick_range or settings.DEFAULT_HEATMAP_RANGE, min_month, max_month, self.now
        )

    def get_heatmap(
        self,
        assets: list[AssetInput],
        person_names: Optional[dict[str, str]] = None,
        range_start: Optional[str] = None,
        range_end: Optional[str] = None,
        quick_range: Optional[str] = None,
        owner_id: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> HeatmapView:
        """
        Per-asset heatmap rows and the portfolio total row.

        The month bounds come from every asset so the grid does not jump when
        an owner filter is applied; the rows only cover the filtered assets.
        """
        started = time.perf_counter()
        person_names = person_names or {}

        min_month, max_month = month_bounds(assets, self.now)
        start, end = self.resolve_range(min_month, max_month, range_start, range_end, quick_range)
        months = generate_month_range(start, end)

        visible_assets = filter_by_owner(assets, owner_id)
        rows = [
            build_asset_row(
                asset,
                start,
                end,
                owner_name=person_names.get(asset.owner_id, UNKNOWN_OWNER),
            )
            for asset in visible_assets
        ]
        rows = sort_rows(rows, sort)

        portfolio = aggregate_portfolio(rows, months)
        display = {row.id: project_row(row) for row in rows}
        display[portfolio.id] = project_row(portfolio)

        log_computation(
            logger,
            "heatmap",
            len(visible_assets),
            self._elapsed_ms(started),
            range_start=start,
            range_end=end,
            months=len(months),
        )
        return HeatmapView(
            min_month=min_month,
            max_month=max_month,
            range_start=start,
            range_end=end,
            active_quick_filter=active_quick_filter(start, end, min_month, max_month, self.now),
            months=months,
            rows=rows,
            portfolio=portfolio,
            display=display,
            stats=calculate_heatmap_stats(portfolio),
        )

    def get_year_rows(self, asset: AssetInput) -> list[HeatmapYearRow]:
        """Calendar-year heatmap for a single asset."""
        started = time.perf_counter()
        years = build_year_rows(asset, now=self.now)
        log_computation(logger, "year_rows", 1, self._elapsed_ms(started), years=len(years))
        return years

    def get_worth(
        self,
        assets: list[AssetInput],
        time_range: Optional[str] = None,
        custom_start: Optional[date] = None,
        custom_end: Optional[date] = None,
        owner_id: Optional[str] = None,
    ) -> WorthSummary:
        """Total worth series for the chosen range."""
        started = time.perf_counter()
        visible_assets = filter_by_owner(assets, owner_id)
        summary = build_worth_series(
            visible_assets,
            time_range=time_range or settings.DEFAULT_WORTH_RANGE,
            now=self.now,
            custom_start=custom_start,
            custom_end=custom_end,
        )
        log_computation(
            logger, "worth", len(visible_assets), self._elapsed_ms(started), points=len(summary.points)
        )
        return summary

    def get_summary(self, assets: list[AssetInput], owner_id: Optional[str] = None) -> PortfolioStats:
        """Current portfolio totals by category and owner."""
        started = time.perf_counter()
        visible_assets = filter_by_owner(assets, owner_id)
        stats = calculate_portfolio_stats(visible_assets)
        log_computation(logger, "summary", len(visible_assets), self._elapsed_ms(started))
        return stats
