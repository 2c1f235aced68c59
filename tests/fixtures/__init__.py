"""
Test fixtures package for caelus tests.

This package organizes test fixtures into logical modules:
- service_mocks: Mock service instances (weather client, resolver, config, LLM)
- surface_mocks: Rendering engine and geolocation doubles

All fixtures are also available through the main conftest.py file.
"""

from tests.fixtures.service_mocks import (
    createMockConfigManager,
    createMockLlmManager,
    createMockSummaryResolver,
    createMockWeatherClient,
    createSamplePayload,
)
from tests.fixtures.surface_mocks import FakeEngine, FakeGeolocator

__all__ = [
    # Service mocks
    "createSamplePayload",
    "createMockConfigManager",
    "createMockWeatherClient",
    "createMockSummaryResolver",
    "createMockLlmManager",
    # Surface doubles
    "FakeEngine",
    "FakeGeolocator",
]
