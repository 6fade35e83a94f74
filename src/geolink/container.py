"""
Dependency container wiring the HTTP client, Google Maps client and resolver together.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Optional

import structlog

from geolink.client import GoogleMapsClient, HttpClient
from geolink.config import Config, load_config
from geolink.resolver import GeoLinkResolver, LinkExpander


class DependencyContainer:
    """
    Owns the process-wide aiohttp session and builds the resolver on top of it.

    ``api_key`` overrides the configured Google Maps key when given; pass an empty
    string to force the API-backed strategies off.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        *,
        config_path: Optional[Path] = None,
        api_key: Optional[str] = None,
    ) -> None:
        self.config_path = config_path
        self.config: Optional[Config] = config
        self.api_key = api_key
        self.logger = structlog.get_logger(self.__class__.__name__)

        self.http_client: Optional[HttpClient] = None
        self.maps_client: Optional[GoogleMapsClient] = None
        self.resolver: Optional[GeoLinkResolver] = None
        self.is_running = False

    async def initialize(self) -> None:
        """Load configuration and create instances."""
        if self.config is None:
            self.config = load_config(self.config_path)

        self.http_client = HttpClient(
            user_agent=self.config.expander.user_agent,
            timeout=self.config.google.timeout,
        )
        await self.http_client.initialize()

        self.maps_client = GoogleMapsClient(self.http_client, self.config.google, api_key=self.api_key)
        self.resolver = GeoLinkResolver(
            expander=LinkExpander(self.http_client, self.config.expander),
            maps_client=self.maps_client,
        )
        self.is_running = True

        self.logger.info(
            "Dependency container initialized",
            geocoding="configured" if self.maps_client.configured else "not_configured",
            config_path=str(self.config_path) if self.config_path else "default",
        )

    def get_resolver(self) -> GeoLinkResolver:
        if self.resolver is None:
            raise RuntimeError("Container not initialized. Call initialize() first.")
        return self.resolver

    @asynccontextmanager
    async def lifecycle(self) -> AsyncIterator[DependencyContainer]:
        """Initialize on entry and shut down on exit."""
        await self.initialize()
        try:
            yield self
        finally:
            await self.shutdown()

    async def shutdown(self) -> None:
        """Close the HTTP session."""
        if self.http_client is not None:
            await self.http_client.close()
        self.is_running = False
        self.logger.info("Dependency container shutdown complete")

    def get_health_status(self) -> Dict[str, Any]:
        return {
            "is_running": self.is_running,
            "config_loaded": self.config is not None,
            "geocoding": "configured" if self.maps_client and self.maps_client.configured else "not_configured",
        }
