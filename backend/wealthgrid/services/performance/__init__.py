"""
Valuation & attribution engine.

Pure, synchronous transforms from snapshot lists to performance views:
- Monthly timeline (forward-filled month buckets)
- Per-snapshot and per-month gain/loss attribution
- Portfolio aggregation across assets
- Heatmap grid projection, year rows and statistics
- Total worth series and portfolio summary
"""

from .attribution import enhance_snapshots, monthly_changes, percent_of
from .heatmap import (
    build_asset_row,
    build_year_rows,
    get_color_class,
    get_quick_filter_range,
    project_row,
)
from .portfolio import aggregate_portfolio
from .records import AssetInput, Snapshot
from .stats import calculate_heatmap_stats
from .timeline import build_asset_timeline
from .worth import build_worth_series, calculate_portfolio_stats

__all__ = [
    "AssetInput",
    "Snapshot",
    "aggregate_portfolio",
    "build_asset_row",
    "build_asset_timeline",
    "build_worth_series",
    "build_year_rows",
    "calculate_heatmap_stats",
    "calculate_portfolio_stats",
    "enhance_snapshots",
    "get_color_class",
    "get_quick_filter_range",
    "monthly_changes",
    "percent_of",
    "project_row",
]
