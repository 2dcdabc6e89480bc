"""Performance API endpoints.

All endpoints are stateless: the caller posts assets with their snapshot
histories and receives computed views. Nothing is persisted.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from wealthgrid.schemas.performance import (
    DisplayCellOut,
    EnhancedSnapshotOut,
    HeatmapCellOut,
    HeatmapRequest,
    HeatmapResponse,
    HeatmapRowOut,
    HeatmapStatsOut,
    HeatmapYearRowOut,
    HistoryRequest,
    HistoryResponse,
    PortfolioSummaryResponse,
    SummaryRequest,
    TimelineEntryOut,
    TimelineRequest,
    TimelineResponse,
    WorthRequest,
    WorthResponse,
    YearRowsRequest,
    YearRowsResponse,
)
from wealthgrid.services.performance.records import DisplayCell, HeatmapRow
from wealthgrid.services.performance_service import PerformanceService
from wealthgrid.utils.month_validation import (
    validate_custom_range,
    validate_month,
    validate_month_range,
)

router = APIRouter()


def get_performance_service() -> PerformanceService:
    """Dependency so tests can pin the reference clock."""
    return PerformanceService()


def _row_out(row: HeatmapRow, display: Optional[list[DisplayCell]]) -> HeatmapRowOut:
    return HeatmapRowOut(
        id=row.id,
        name=row.name,
        category=row.category,
        owner_name=row.owner_name,
        cells=[HeatmapCellOut.model_validate(c) for c in row.cells],
        display=[
            DisplayCellOut(
                month=d.cell.month,
                state=d.state,
                color_class=d.color_class,
                is_year_start=d.is_year_start,
            )
            for d in (display or [])
        ],
        total_change=row.total_change,
        total_change_percent=row.total_change_percent,
        start_value=row.start_value,
        end_value=row.end_value,
    )


@router.post("/timeline", response_model=TimelineResponse)
async def get_timeline(
    request: TimelineRequest,
    service: PerformanceService = Depends(get_performance_service),
):
    """Forward-filled monthly timeline for one asset."""
    if request.end_month is not None:
        validate_month(request.end_month, "end_month")

    timeline = service.get_timeline(request.asset.to_asset_input(), request.end_month)
    return TimelineResponse(
        asset_id=request.asset.id,
        entries=[
            TimelineEntryOut(
                month=month,
                value=entry.value,
                flow=entry.flow,
                real_data_exists=entry.real_data_exists,
            )
            for month, entry in timeline.items()
        ],
    )


@router.post("/history", response_model=HistoryResponse)
async def get_history(
    request: HistoryRequest,
    service: PerformanceService = Depends(get_performance_service),
):
    """Snapshot history with period, cumulative and year-to-date metrics."""
    page = service.get_history(
        request.asset.to_asset_input(),
        newest_first=request.newest_first,
        page=request.page,
        page_size=request.page_size,
    )
    return HistoryResponse(
        asset_id=request.asset.id,
        items=[EnhancedSnapshotOut.model_validate(item) for item in page.items],
        total=page.total,
        page=page.page,
        page_size=page.page_size,
        total_pages=page.total_pages,
    )


@router.post("/heatmap", response_model=HeatmapResponse)
async def get_heatmap(
    request: HeatmapRequest,
    service: PerformanceService = Depends(get_performance_service),
):
    """Monthly heatmap rows per asset plus the portfolio total row."""
    validate_month_range(request.range_start, request.range_end)

    view = service.get_heatmap(
        [asset.to_asset_input() for asset in request.assets],
        person_names={person.id: person.name for person in request.persons},
        range_start=request.range_start,
        range_end=request.range_end,
        quick_range=request.quick_range,
        owner_id=request.owner_id,
        sort=request.sort,
    )
    return HeatmapResponse(
        min_month=view.min_month,
        max_month=view.max_month,
        range_start=view.range_start,
        range_end=view.range_end,
        active_quick_filter=view.active_quick_filter,
        months=view.months,
        rows=[_row_out(row, view.display.get(row.id)) for row in view.rows],
        portfolio=_row_out(view.portfolio, view.display.get(view.portfolio.id)),
        stats=HeatmapStatsOut.model_validate(view.stats),
    )


@router.post("/heatmap/years", response_model=YearRowsResponse)
async def get_year_rows(
    request: YearRowsRequest,
    service: PerformanceService = Depends(get_performance_service),
):
    """Calendar-year heatmap for one asset, newest year first."""
    years = service.get_year_rows(request.asset.to_asset_input())
    return YearRowsResponse(
        asset_id=request.asset.id,
        years=[HeatmapYearRowOut.model_validate(year) for year in years],
    )


@router.post("/worth", response_model=WorthResponse)
async def get_worth(
    request: WorthRequest,
    service: PerformanceService = Depends(get_performance_service),
):
    """Total worth and net invested over time."""
    if request.time_range == "Custom":
        validate_custom_range(request.custom_start, request.custom_end)

    summary = service.get_worth(
        [asset.to_asset_input() for asset in request.assets],
        time_range=request.time_range,
        custom_start=request.custom_start,
        custom_end=request.custom_end,
        owner_id=request.owner_id,
    )
    return WorthResponse.model_validate(summary)


@router.post("/summary", response_model=PortfolioSummaryResponse)
async def get_summary(
    request: SummaryRequest,
    service: PerformanceService = Depends(get_performance_service),
):
    """Current portfolio totals grouped by category and owner."""
    stats = service.get_summary(
        [asset.to_asset_input() for asset in request.assets], owner_id=request.owner_id
    )
    return PortfolioSummaryResponse.model_validate(stats)
