"""
Pytest configuration and common fixtures for caelus tests.

This module provides shared fixtures for testing the map layer, the weather
panel and the summary service. All fixtures follow camelCase naming convention.
"""

import datetime
from unittest.mock import AsyncMock, Mock

import pytest

from lib.overlays import TileSourceCatalog
from tests.fixtures import (
    FakeEngine,
    FakeGeolocator,
    createMockConfigManager,
    createMockSummaryResolver,
    createMockWeatherClient,
    createSamplePayload,
)

# ============================================================================
# Map Fixtures
# ============================================================================


@pytest.fixture
def referenceDate() -> datetime.date:
    """Fixed reference date for date-sensitive imagery"""
    return datetime.date(2024, 5, 1)


@pytest.fixture
def tileCatalog() -> TileSourceCatalog:
    return TileSourceCatalog(openWeatherMapKey="test_key")


@pytest.fixture
def fakeEngine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fakeGeolocator() -> FakeGeolocator:
    return FakeGeolocator(position=(48.8566, 2.3522))


# ============================================================================
# Service Fixtures
# ============================================================================


@pytest.fixture
def samplePayload():
    return createSamplePayload()


@pytest.fixture
def mockWeatherClient(samplePayload) -> AsyncMock:
    """
    Mock OpenWeatherMapClient returning samplePayload.

    Returns:
        AsyncMock: client with fetchWeather configured
    """
    return createMockWeatherClient(samplePayload)


@pytest.fixture
def mockSummaryResolver() -> AsyncMock:
    return createMockSummaryResolver()


@pytest.fixture
def mockConfigManager() -> Mock:
    return createMockConfigManager()
