"""Performance request/response schemas.

Request bodies mirror the snapshot store's records, so both the store's
camelCase names (``investmentChange``, ``ownerId``, ``valueHistory``) and
snake_case names are accepted.
"""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wealthgrid.services.performance.records import AssetInput, Snapshot

QuickRange = Literal["YTD", "1Y", "5Y", "MAX"]
WorthRange = Literal["YTD", "1Y", "5Y", "MAX", "Custom"]
SortDirection = Literal["asc", "desc"]


# ── inputs ────────────────────────────────────────────────────────────────────

class SnapshotIn(BaseModel):
    """One value snapshot as stored for an asset."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    date: date
    value: float = Field(ge=0)
    investment_change: float = Field(default=0.0, alias="investmentChange")
    notes: Optional[str] = None

    @field_validator("date", mode="before")
    @classmethod
    def truncate_timestamp(cls, v):
        """Snapshots are bucketed by day; drop any time component."""
        if isinstance(v, datetime):
            return v.date()
        if isinstance(v, str) and len(v) > 10:
            return v[:10]
        return v

    @field_validator("investment_change", mode="before")
    @classmethod
    def default_missing_flow(cls, v):
        return 0.0 if v is None else v

    def to_snapshot(self) -> Snapshot:
        return Snapshot(
            date=self.date,
            value=self.value,
            cash_flow=self.investment_change,
            notes=self.notes,
            id=self.id,
        )


class PersonIn(BaseModel):
    """Household member used to label asset rows."""

    id: str
    name: str


class AssetIn(BaseModel):
    """Asset identity plus its full snapshot history."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    category: str = "other"
    owner_id: str = Field(default="", alias="ownerId")
    value_history: list[SnapshotIn] = Field(default_factory=list, alias="valueHistory")

    def to_asset_input(self) -> AssetInput:
        return AssetInput(
            id=self.id,
            name=self.name,
            category=self.category,
            owner_id=self.owner_id,
            snapshots=[s.to_snapshot() for s in self.value_history],
        )


class TimelineRequest(BaseModel):
    asset: AssetIn
    end_month: Optional[str] = None


class HistoryRequest(BaseModel):
    asset: AssetIn
    newest_first: bool = True
    page: int = Field(default=1, ge=1)
    page_size: Optional[int] = Field(default=None, ge=1)


class HeatmapRequest(BaseModel):
    assets: list[AssetIn]
    persons: list[PersonIn] = Field(default_factory=list)
    range_start: Optional[str] = None
    range_end: Optional[str] = None
    quick_range: Optional[QuickRange] = None
    owner_id: Optional[str] = None
    sort: Optional[SortDirection] = None


class YearRowsRequest(BaseModel):
    asset: AssetIn


class WorthRequest(BaseModel):
    assets: list[AssetIn]
    time_range: Optional[WorthRange] = None
    custom_start: Optional[date] = None
    custom_end: Optional[date] = None
    owner_id: Optional[str] = None


class SummaryRequest(BaseModel):
    assets: list[AssetIn]
    owner_id: Optional[str] = None


# ── outputs ───────────────────────────────────────────────────────────────────

class TimelineEntryOut(BaseModel):
    month: str
    value: float
    flow: float
    real_data_exists: bool


class TimelineResponse(BaseModel):
    asset_id: str
    entries: list[TimelineEntryOut]


class EnhancedSnapshotOut(BaseModel):
    """Snapshot with period, cumulative and year-to-date metrics."""

    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    date: date
    value: float
    cash_flow: float
    notes: Optional[str] = None
    cum_invested: float
    period_gl: float
    period_gl_percent: float
    cum_gl: float
    roi: float
    ytd_gl: float
    ytd_roi: float
    actual_index: int


class HistoryResponse(BaseModel):
    asset_id: str
    items: list[EnhancedSnapshotOut]
    total: int
    page: int
    page_size: int
    total_pages: int


class HeatmapCellOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    month: str
    value: float
    previous_value: float
    change: float
    change_percent: float
    has_data: bool
    exists: bool
    is_inception: bool
    monthly_flow: float


class DisplayCellOut(BaseModel):
    """Render classification for one heatmap cell."""

    month: str
    state: Literal["not-exists", "inception", "no-data", "normal"]
    color_class: Optional[str] = None
    is_year_start: bool


class HeatmapRowOut(BaseModel):
    id: str
    name: str
    category: str
    owner_name: str
    cells: list[HeatmapCellOut]
    display: list[DisplayCellOut]
    total_change: float
    total_change_percent: float
    start_value: float
    end_value: float


class HeatmapStatsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_return: float
    volatility: float
    best_month: float
    worst_month: float


class HeatmapResponse(BaseModel):
    """Asset rows plus the TOTAL PORTFOLIO row for the visible window."""

    min_month: str
    max_month: str
    range_start: str
    range_end: str
    active_quick_filter: Optional[QuickRange] = None
    months: list[str]
    rows: list[HeatmapRowOut]
    portfolio: HeatmapRowOut
    stats: HeatmapStatsOut


class HeatmapYearRowOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    year: int
    cells: list[Optional[HeatmapCellOut]]
    total_return: float
    start_value: float
    end_value: float
    total_change: float


class YearRowsResponse(BaseModel):
    asset_id: str
    years: list[HeatmapYearRowOut]


class WorthPointOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    value: float
    invested: float


class WorthResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    points: list[WorthPointOut]
    start_value: float
    end_value: float
    start_invested: float
    end_invested: float
    period_gain: float
    period_gain_percent: float


class PortfolioSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_value: float
    total_invested: float
    total_gain: float
    gain_percentage: float
    by_category: dict[str, float]
    by_owner: dict[str, float]
