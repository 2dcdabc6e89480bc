"""Summary statistics over a heatmap row."""

import math

from wealthgrid.services.performance.records import HeatmapRow, HeatmapStats


def calculate_volatility(monthly_returns: list[float]) -> float:
    """Population standard deviation of monthly returns (in percentage points)."""
    if not monthly_returns:
        return 0.0
    mean = sum(monthly_returns) / len(monthly_returns)
    variance = sum((r - mean) ** 2 for r in monthly_returns) / len(monthly_returns)
    return math.sqrt(variance)


def calculate_heatmap_stats(row: HeatmapRow) -> HeatmapStats:
    """Total return, volatility and best/worst month over the cells that exist."""
    monthly_returns = [c.change_percent for c in row.cells if c.exists]
    return HeatmapStats(
        total_return=row.total_change_percent,
        volatility=calculate_volatility(monthly_returns),
        best_month=max(monthly_returns) if monthly_returns else 0.0,
        worst_month=min(monthly_returns) if monthly_returns else 0.0,
    )
