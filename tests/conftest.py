"""
Test configuration for GeoLink.

Provides configuration objects, an initialized HTTP client and mocked Google
Maps collaborators so tests never depend on the network or on the caller's
environment.
"""

# Standard library imports
from typing import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

# Third-party imports
import pytest
import pytest_asyncio

# Local imports
from geolink.client import HttpClient
from geolink.config import Config, GoogleMapsConfig

# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests for individual components")
    config.addinivalue_line("markers", "integration: Integration tests across modules")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep API keys and GEOLINK_* overrides from the developer's shell out of tests."""
    monkeypatch.delenv("GOOGLE_MAPS_API_KEY", raising=False)
    for name in ("GEOLINK_GOOGLE__API_KEY", "GEOLINK_CONFIG"):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config() -> Config:
    """Default configuration without an API key."""
    return Config(google=GoogleMapsConfig(api_key=None))


@pytest.fixture
def config_with_key() -> Config:
    """Configuration with a (fake) Google Maps API key."""
    return Config(google=GoogleMapsConfig(api_key="test-key"))


# ============================================================================
# Client Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def http_client() -> AsyncGenerator[HttpClient, None]:
    """Initialized HTTP client, closed after the test."""
    client = HttpClient(timeout=10.0)
    await client.initialize()
    yield client
    await client.close()


@pytest.fixture
def mock_maps_client() -> MagicMock:
    """Google Maps client double with an API key; every lookup finds nothing by default."""
    client = MagicMock()
    client.configured = True
    client.geocode = AsyncMock(return_value=None)
    client.place_details = AsyncMock(return_value=None)
    client.reverse_geocode = AsyncMock(return_value=None)
    return client
