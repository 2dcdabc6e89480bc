"""Pytest configuration and shared fixtures."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from factories import FIXED_NOW, make_asset, make_snapshot
from wealthgrid.api.v1.performance import get_performance_service
from wealthgrid.main import app
from wealthgrid.services.performance.records import AssetInput
from wealthgrid.services.performance_service import PerformanceService


@pytest.fixture
def service() -> PerformanceService:
    """Service pinned to the fixed clock."""
    return PerformanceService(now=FIXED_NOW)


@pytest.fixture
def growth_asset() -> AssetInput:
    """Opened in Jan 2023 with 1000, grows 10% in Feb and again in Mar."""
    return make_asset(
        "growth",
        [
            make_snapshot("2023-01-10", 1000, 1000),
            make_snapshot("2023-02-10", 1100),
            make_snapshot("2023-03-10", 1210),
        ],
        name="Growth Fund",
        owner_id="p1",
    )


@pytest.fixture
def late_asset() -> AssetInput:
    """Opened in Feb 2023 with 500, loses 10% in Mar."""
    return make_asset(
        "late",
        [
            make_snapshot("2023-02-20", 500, 500),
            make_snapshot("2023-03-20", 450),
        ],
        name="Bond Ladder",
        category="bonds",
        owner_id="p2",
    )


@pytest.fixture
def asset_payload() -> dict:
    """Request body for one asset, using the store's camelCase field names."""
    return {
        "id": "growth",
        "name": "Growth Fund",
        "category": "investment",
        "ownerId": "p1",
        "valueHistory": [
            {"id": 1, "date": "2023-01-10", "value": 1000, "investmentChange": 1000},
            {"id": 2, "date": "2023-02-10", "value": 1100, "investmentChange": 0},
            {"id": 3, "date": "2023-03-10", "value": 1210},
        ],
    }


@pytest.fixture
def second_asset_payload() -> dict:
    return {
        "id": "late",
        "name": "Bond Ladder",
        "category": "bonds",
        "ownerId": "p2",
        "valueHistory": [
            {"date": "2023-02-20", "value": 500, "investmentChange": 500},
            {"date": "2023-03-20", "value": 450, "investmentChange": 0},
        ],
    }


@pytest_asyncio.fixture(scope="function")
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client pinned to the fixed clock."""
    app.dependency_overrides[get_performance_service] = lambda: PerformanceService(now=FIXED_NOW)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
