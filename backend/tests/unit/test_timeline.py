"""Unit tests for the monthly timeline builder."""

import pytest

from factories import FIXED_NOW, make_snapshot
from wealthgrid.services.performance.timeline import (
    bucket_by_month,
    build_asset_timeline,
    first_month,
    sort_snapshots,
)


@pytest.mark.unit
class TestBuildAssetTimeline:
    """Test build_asset_timeline."""

    def test_empty_snapshots_give_empty_timeline(self):
        assert build_asset_timeline([], end_month="2024-01") == {}

    def test_single_snapshot_forward_fills_to_end_month(self):
        """One snapshot viewed through two later months."""
        timeline = build_asset_timeline(
            [make_snapshot("2023-01-15", 1000, 1000)], end_month="2023-03"
        )

        assert list(timeline) == ["2023-01", "2023-02", "2023-03"]
        assert timeline["2023-01"].value == 1000
        assert timeline["2023-01"].flow == 1000
        assert timeline["2023-01"].real_data_exists is True
        for month in ("2023-02", "2023-03"):
            assert timeline[month].value == 1000
            assert timeline[month].flow == 0
            assert timeline[month].real_data_exists is False

    def test_last_snapshot_of_month_wins_and_flows_sum(self):
        timeline = build_asset_timeline(
            [
                make_snapshot("2023-01-05", 100, 100),
                make_snapshot("2023-01-20", 250, 150),
            ],
            end_month="2023-01",
        )

        assert timeline["2023-01"].value == 250
        assert timeline["2023-01"].flow == 250

    def test_input_order_does_not_matter(self):
        snapshots = [
            make_snapshot("2023-03-01", 1300, 100),
            make_snapshot("2023-01-01", 1000, 1000),
            make_snapshot("2023-02-01", 1100),
        ]
        timeline = build_asset_timeline(snapshots, end_month="2023-03")

        assert [e.value for e in timeline.values()] == [1000, 1100, 1300]
        assert [e.flow for e in timeline.values()] == [1000, 0, 100]

    def test_same_day_snapshots_keep_insertion_order(self):
        timeline = build_asset_timeline(
            [make_snapshot("2023-01-10", 500), make_snapshot("2023-01-10", 700)],
            end_month="2023-01",
        )
        assert timeline["2023-01"].value == 700

    def test_gap_months_never_get_flows(self):
        timeline = build_asset_timeline(
            [make_snapshot("2023-01-10", 1000, 1000), make_snapshot("2023-05-10", 1600, 500)],
            end_month="2023-05",
        )

        assert [timeline[m].flow for m in ("2023-02", "2023-03", "2023-04")] == [0, 0, 0]
        assert [timeline[m].value for m in ("2023-02", "2023-03", "2023-04")] == [1000] * 3
        assert timeline["2023-05"].flow == 500

    def test_end_month_before_inception_clamps_to_first_month(self):
        timeline = build_asset_timeline(
            [make_snapshot("2023-06-01", 1000, 1000)], end_month="2023-01"
        )
        assert list(timeline) == ["2023-06"]

    def test_default_end_month_is_current_month(self):
        timeline = build_asset_timeline([make_snapshot("2024-04-10", 200, 200)], now=FIXED_NOW)
        assert list(timeline) == ["2024-04", "2024-05", "2024-06"]

    def test_default_end_month_covers_future_snapshots(self):
        timeline = build_asset_timeline(
            [make_snapshot("2024-05-01", 100, 100), make_snapshot("2024-09-01", 120)],
            now=FIXED_NOW,
        )
        assert list(timeline)[-1] == "2024-09"
        assert len(timeline) == 5

    def test_timeline_is_contiguous(self):
        timeline = build_asset_timeline(
            [make_snapshot("2022-11-30", 10, 10), make_snapshot("2023-02-01", 12)],
            end_month="2023-04",
        )
        assert list(timeline) == [
            "2022-11",
            "2022-12",
            "2023-01",
            "2023-02",
            "2023-03",
            "2023-04",
        ]


@pytest.mark.unit
class TestTimelineHelpers:
    """Test snapshot ordering and bucketing helpers."""

    def test_sort_snapshots_ascending(self):
        ordered = sort_snapshots(
            [make_snapshot("2023-02-01", 2), make_snapshot("2023-01-01", 1)]
        )
        assert [s.value for s in ordered] == [1, 2]

    def test_bucket_by_month_treats_missing_flow_as_zero(self):
        snapshot = make_snapshot("2023-01-01", 10)
        snapshot.cash_flow = None
        assert bucket_by_month([snapshot]) == {"2023-01": (10, 0.0)}

    def test_first_month(self):
        assert first_month([]) is None
        assert first_month(
            [make_snapshot("2023-05-01", 1), make_snapshot("2022-12-31", 1)]
        ) == "2022-12"
