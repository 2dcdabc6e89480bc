"""Unit tests for PerformanceService."""

from unittest.mock import patch

import pytest

from factories import make_snapshot
from wealthgrid.config import settings
from wealthgrid.services.performance.portfolio import PORTFOLIO_ROW_ID
from wealthgrid.services.performance_service import UNKNOWN_OWNER, filter_by_owner


@pytest.mark.unit
class TestFilterByOwner:
    def test_no_owner_returns_everything(self, growth_asset, late_asset):
        assert filter_by_owner([growth_asset, late_asset], None) == [growth_asset, late_asset]
        assert filter_by_owner([growth_asset, late_asset], "") == [growth_asset, late_asset]

    def test_filters_by_owner_id(self, growth_asset, late_asset):
        assert filter_by_owner([growth_asset, late_asset], "p2") == [late_asset]


@pytest.mark.unit
class TestGetTimeline:
    def test_defaults_to_current_month(self, service, growth_asset):
        timeline = service.get_timeline(growth_asset)

        assert next(iter(timeline)) == "2023-01"
        assert list(timeline)[-1] == "2024-06"

    def test_explicit_end_month(self, service, growth_asset):
        assert list(service.get_timeline(growth_asset, "2023-02")) == ["2023-01", "2023-02"]


@pytest.mark.unit
class TestGetHistory:
    """Test paginated snapshot history."""

    @pytest.fixture
    def asset(self, growth_asset):
        growth_asset.snapshots.append(make_snapshot("2023-04-10", 1331))
        return growth_asset

    def test_pages(self, service, asset):
        first = service.get_history(asset, page=1, page_size=3)
        second = service.get_history(asset, page=2, page_size=3)

        assert first.total == 4
        assert first.total_pages == 2
        assert [h.actual_index for h in first.items] == [3, 2, 1]
        assert [h.actual_index for h in second.items] == [0]

    def test_default_page_size(self, service, asset):
        page = service.get_history(asset)
        assert page.page_size == settings.HISTORY_PAGE_SIZE
        assert len(page.items) == 4

    def test_page_size_is_capped(self, service, asset):
        page = service.get_history(asset, page_size=settings.MAX_PAGE_SIZE + 1)
        assert page.page_size == settings.MAX_PAGE_SIZE

    def test_oldest_first(self, service, asset):
        page = service.get_history(asset, newest_first=False)
        assert page.items[0].actual_index == 0

    def test_page_past_the_end_is_empty(self, service, asset):
        page = service.get_history(asset, page=5, page_size=3)
        assert page.items == []
        assert page.total == 4

    def test_empty_history(self, service, growth_asset):
        growth_asset.snapshots.clear()
        page = service.get_history(growth_asset)
        assert page.total == 0
        assert page.total_pages == 0


@pytest.mark.unit
class TestGetHeatmap:
    """Test the heatmap view."""

    def test_default_range_is_full_history(self, service, growth_asset, late_asset):
        view = service.get_heatmap([growth_asset, late_asset])

        assert (view.range_start, view.range_end) == ("2023-01", "2023-03")
        assert view.months == ["2023-01", "2023-02", "2023-03"]
        assert view.active_quick_filter == "MAX"
        assert view.portfolio.id == PORTFOLIO_ROW_ID

    def test_owner_filter_keeps_global_bounds(self, service, growth_asset, late_asset):
        view = service.get_heatmap([growth_asset, late_asset], owner_id="p2")

        assert (view.min_month, view.max_month) == ("2023-01", "2023-03")
        assert [r.id for r in view.rows] == ["late"]
        assert view.portfolio.total_change == pytest.approx(-50)

    def test_owner_names(self, service, growth_asset, late_asset):
        view = service.get_heatmap([growth_asset, late_asset], person_names={"p2": "Sam"})
        names = {r.id: r.owner_name for r in view.rows}

        assert names == {"growth": UNKNOWN_OWNER, "late": "Sam"}

    def test_explicit_bounds_win_over_quick_range(self, service, growth_asset, late_asset):
        view = service.get_heatmap(
            [growth_asset, late_asset], range_start="2023-02", quick_range="YTD"
        )

        assert (view.range_start, view.range_end) == ("2023-02", "2023-03")
        assert view.active_quick_filter is None

    def test_quick_range(self, service, growth_asset):
        growth_asset.snapshots.append(make_snapshot("2024-05-01", 1500))
        view = service.get_heatmap([growth_asset], quick_range="YTD")

        assert (view.range_start, view.range_end) == ("2024-01", "2024-05")
        assert view.active_quick_filter == "YTD"

    def test_sorting(self, service, growth_asset, late_asset):
        assert [r.id for r in service.get_heatmap([growth_asset, late_asset], sort="asc").rows] == [
            "late",
            "growth",
        ]
        assert [
            r.id for r in service.get_heatmap([growth_asset, late_asset], sort="desc").rows
        ] == ["growth", "late"]

    def test_display_covers_every_row(self, service, growth_asset, late_asset):
        view = service.get_heatmap([growth_asset, late_asset])

        assert set(view.display) == {"growth", "late", PORTFOLIO_ROW_ID}
        assert [d.state for d in view.display["late"]] == ["not-exists", "inception", "normal"]

    def test_stats_describe_the_portfolio(self, service, growth_asset, late_asset):
        view = service.get_heatmap([growth_asset, late_asset])
        assert view.stats.total_return == pytest.approx(view.portfolio.total_change_percent)

    def test_no_assets(self, service):
        view = service.get_heatmap([])

        assert view.months == ["2024-06"]
        assert view.rows == []
        assert view.portfolio.cells[0].exists is False

    def test_logs_computation(self, service, growth_asset):
        with patch("wealthgrid.services.performance_service.log_computation") as mock_log:
            service.get_heatmap([growth_asset])

        assert mock_log.called
        assert mock_log.call_args.args[1] == "heatmap"
        assert mock_log.call_args.args[2] == 1


@pytest.mark.unit
class TestWorthAndSummary:
    def test_worth_uses_configured_default_range(self, service, growth_asset):
        with patch("wealthgrid.services.performance_service.build_worth_series") as mock_build:
            service.get_worth([growth_asset])

        assert mock_build.call_args.kwargs["time_range"] == settings.DEFAULT_WORTH_RANGE

    def test_worth_owner_filter(self, service, growth_asset, late_asset):
        summary = service.get_worth([growth_asset, late_asset], time_range="MAX", owner_id="p1")
        assert summary.end_value == 1210

    def test_summary(self, service, growth_asset, late_asset):
        stats = service.get_summary([growth_asset, late_asset])

        assert stats.total_value == 1660
        assert stats.total_invested == 1500
        assert stats.by_owner == {"p1": 1210, "p2": 450}

    def test_summary_owner_filter(self, service, growth_asset, late_asset):
        stats = service.get_summary([growth_asset, late_asset], owner_id="p2")
        assert stats.total_value == 450
        assert stats.by_category == {"bonds": 450}

    def test_year_rows(self, service, growth_asset):
        years = service.get_year_rows(growth_asset)
        assert [y.year for y in years] == [2024, 2023]
