"""Plain records consumed and produced by the valuation engine."""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


# ── inputs ────────────────────────────────────────────────────────────────────

@dataclass
class Snapshot:
    """One dated observation of an asset's value.

    ``cash_flow`` is the external contribution (+) or withdrawal (-) recorded
    with the observation.
    """

    date: date
    value: float
    cash_flow: float = 0.0
    notes: Optional[str] = None
    id: Optional[int] = None


@dataclass
class AssetInput:
    """An asset's identity plus its snapshot list (insertion order)."""

    id: str
    name: str
    category: str
    owner_id: str
    snapshots: list[Snapshot] = field(default_factory=list)


# ── monthly timeline ──────────────────────────────────────────────────────────

@dataclass
class TimelineEntry:
    value: float
    flow: float
    real_data_exists: bool


# ── per-snapshot attribution ──────────────────────────────────────────────────

@dataclass
class EnhancedSnapshot:
    date: date
    value: float
    cash_flow: float
    notes: Optional[str]
    id: Optional[int]
    cum_invested: float
    period_gl: float
    period_gl_percent: float
    cum_gl: float
    roi: float
    ytd_gl: float
    ytd_roi: float
    actual_index: int


# ── heatmap ───────────────────────────────────────────────────────────────────

@dataclass
class HeatmapCell:
    month: str
    value: float
    previous_value: float
    change: float
    change_percent: float
    has_data: bool
    exists: bool
    is_inception: bool
    monthly_flow: float = 0.0


@dataclass
class HeatmapRow:
    id: str
    name: str
    category: str
    owner_name: str
    cells: list[HeatmapCell]
    total_change: float
    total_change_percent: float
    start_value: float
    end_value: float


@dataclass
class DisplayCell:
    """A heatmap cell with its render classification."""

    cell: HeatmapCell
    state: str  # not-exists, inception, no-data, normal
    color_class: Optional[str]
    is_year_start: bool


@dataclass
class HeatmapYearRow:
    year: int
    cells: list[Optional[HeatmapCell]]
    total_return: float
    start_value: float
    end_value: float
    total_change: float


@dataclass
class HeatmapStats:
    total_return: float
    volatility: float
    best_month: float
    worst_month: float


# ── worth series & summary ────────────────────────────────────────────────────

@dataclass
class WorthPoint:
    date: date
    value: float
    invested: float


@dataclass
class WorthSummary:
    points: list[WorthPoint]
    start_value: float
    end_value: float
    start_invested: float
    end_invested: float
    period_gain: float
    period_gain_percent: float


@dataclass
class PortfolioStats:
    total_value: float
    total_invested: float
    total_gain: float
    gain_percentage: float
    by_category: dict[str, float] = field(default_factory=dict)
    by_owner: dict[str, float] = field(default_factory=dict)
