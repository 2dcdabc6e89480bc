"""Portfolio aggregation across asset heatmap rows.

Absolute amounts (value, previous value, flow, change) add up across assets;
percentages do not, because each asset has its own basis. Every portfolio
percentage is therefore recomputed from summed amounts and summed bases.
"""

import logging

from wealthgrid.services.performance.attribution import percent_of, percent_of_positive
from wealthgrid.services.performance.records import HeatmapCell, HeatmapRow

logger = logging.getLogger(__name__)

PORTFOLIO_ROW_ID = "portfolio-total"
PORTFOLIO_ROW_NAME = "TOTAL PORTFOLIO"


def aggregate_cells(rows: list[HeatmapRow], visible_months: list[str]) -> list[HeatmapCell]:
    """Sum every existing asset's cell month by month."""
    cells = []
    for index, month in enumerate(visible_months):
        total_value = 0.0
        total_previous_value = 0.0
        total_flow = 0.0
        total_change = 0.0
        has_any_data = False
        any_exists = False

        for row in rows:
            if index >= len(row.cells):
                continue
            cell = row.cells[index]
            if not cell.exists:
                continue
            any_exists = True
            total_value += cell.value
            total_previous_value += cell.previous_value
            total_flow += cell.monthly_flow
            total_change += cell.change
            if cell.has_data:
                has_any_data = True

        basis = total_previous_value + total_flow
        cells.append(
            HeatmapCell(
                month=month,
                value=total_value,
                previous_value=total_previous_value,
                change=total_change,
                change_percent=percent_of(total_change, basis),
                has_data=has_any_data,
                exists=any_exists,
                # The portfolio as a whole has no inception month
                is_inception=False,
                monthly_flow=total_flow,
            )
        )
    return cells


def aggregate_portfolio(rows: list[HeatmapRow], visible_months: list[str]) -> HeatmapRow:
    """
    Build the synthetic TOTAL PORTFOLIO row.

    The range basis is the carried value of assets that already existed when
    the window opens, plus every flow inside the window. Assets whose inception
    falls inside the window contribute only through their flows.

    Args:
        rows: Per-asset rows built over the same visible window
        visible_months: The window's month keys, in order

    Returns:
        HeatmapRow whose cells and totals cover the whole portfolio
    """
    cells = aggregate_cells(rows, visible_months)
    total_change = sum(c.change for c in cells)

    initial_portfolio_basis = 0.0
    total_flow_in_range = 0.0

    for row in rows:
        if not row.cells:
            continue
        first_cell = row.cells[0]
        if first_cell.exists and not first_cell.is_inception:
            initial_portfolio_basis += first_cell.previous_value
        total_flow_in_range += sum(c.monthly_flow for c in row.cells)

    basis = initial_portfolio_basis + total_flow_in_range

    logger.debug(
        "Aggregated %d rows over %d months: change=%.2f basis=%.2f",
        len(rows),
        len(visible_months),
        total_change,
        basis,
    )

    return HeatmapRow(
        id=PORTFOLIO_ROW_ID,
        name=PORTFOLIO_ROW_NAME,
        category="Total",
        owner_name="Portfolio",
        cells=cells,
        total_change=total_change,
        total_change_percent=percent_of_positive(total_change, basis),
        start_value=initial_portfolio_basis,
        end_value=cells[-1].value if cells else 0.0,
    )
