"""
GeoLinkResolver: turns an arbitrary Google Maps link into coordinates and an address.

Resolution runs as a cascade, stopping at the first strategy that produces coordinates:

1. Normalize the URL and expand short links.
2. Ordered regex patterns over the URL text.
3. Forward geocoding of the ``q`` parameter (API key required).
4. Place details for a ``place_id`` (API key required, hex IDs skipped).

The address is resolved separately and is best effort: reverse geocoding first,
then address-like text from the URL.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Awaitable, Callable, List, Optional, Tuple

import structlog

from geolink.observability.metrics import METRICS

from .models import Coordinates, CoordinatesNotFoundError, ResolutionResult, UrlRequiredError
from .normalizer import SHORT_LINK_MARKERS, normalize_url
from .patterns import match_coordinates
from .url_text import extract_address_from_url, extract_place_id, extract_query_address, is_hex_place_id

if TYPE_CHECKING:
    from geolink.client.google_maps import GoogleMapsClient

    from .expander import LinkExpander

logger = structlog.get_logger(__name__)

FallbackStrategy = Tuple[str, Callable[[str], Awaitable[Optional[Coordinates]]]]


class GeoLinkResolver:
    """
    Stateless resolver; one instance can serve concurrent requests.

    Args:
        expander: Short-link expander (None disables expansion)
        maps_client: Google Maps API client (None disables all API strategies)
    """

    def __init__(
        self,
        expander: Optional[LinkExpander] = None,
        maps_client: Optional[GoogleMapsClient] = None,
    ) -> None:
        self.expander = expander
        self.maps_client = maps_client
        self.short_link_markers = (
            expander.config.short_link_markers if expander is not None else list(SHORT_LINK_MARKERS)
        )
        self.logger = logger.bind(component="GeoLinkResolver")

        # Fallbacks in priority order, only consulted when no pattern matches
        self._fallbacks: List[FallbackStrategy] = [
            ("query_geocode", self._coordinates_from_query),
            ("place_id", self._coordinates_from_place_id),
        ]

    @property
    def api_enabled(self) -> bool:
        return self.maps_client is not None and self.maps_client.configured

    async def resolve(self, url: Optional[str]) -> ResolutionResult:
        """
        Resolve ``url`` to coordinates and, where possible, an address.

        Raises:
            UrlRequiredError: ``url`` is missing or blank
            CoordinatesNotFoundError: every coordinate strategy came up empty
        """
        if not url or not url.strip():
            METRICS["resolutions_total"].labels(outcome="invalid_input").inc()
            raise UrlRequiredError()

        start_time = time.time()
        self.logger.info("Resolving URL", url=url)

        normalized = normalize_url(url, self.short_link_markers)
        final_url = await self.expander.expand(normalized) if self.expander is not None else normalized

        found = await self.resolve_coordinates(final_url)
        if found is None:
            METRICS["resolutions_total"].labels(outcome="not_found").inc()
            self.logger.warning("Could not extract coordinates from URL", url=final_url)
            raise CoordinatesNotFoundError()

        strategy, coordinates = found
        address = await self.resolve_address(coordinates, final_url)

        METRICS["strategy_hits_total"].labels(strategy=strategy).inc()
        METRICS["resolutions_total"].labels(outcome="success").inc()
        METRICS["resolution_duration_seconds"].observe(time.time() - start_time)
        self.logger.info(
            "URL resolved",
            strategy=strategy,
            lat=coordinates.latitude,
            lng=coordinates.longitude,
            address=address,
        )
        return ResolutionResult(
            coordinates=coordinates,
            address=address,
            source_url=url,
            resolved_url=final_url,
            strategy=strategy,
        )

    async def resolve_coordinates(self, url: str) -> Optional[Tuple[str, Coordinates]]:
        """Return ``(strategy_name, coordinates)`` from the first strategy that succeeds."""
        matched = match_coordinates(url)
        if matched is not None:
            return matched

        if not self.api_enabled:
            self.logger.info("No API key configured, skipping API fallbacks", url=url)
            return None

        for name, strategy in self._fallbacks:
            coordinates = await strategy(url)
            if coordinates is not None:
                return name, coordinates
        return None

    async def _coordinates_from_query(self, url: str) -> Optional[Coordinates]:
        address = extract_query_address(url)
        if address is None:
            return None
        assert self.maps_client is not None
        return await self.maps_client.geocode(address)

    async def _coordinates_from_place_id(self, url: str) -> Optional[Coordinates]:
        place_id = extract_place_id(url)
        if place_id is None:
            return None
        if is_hex_place_id(place_id):
            self.logger.info("Place ID is in hex format, not supported by the Places API", place_id=place_id)
            return None
        assert self.maps_client is not None
        return await self.maps_client.place_details(place_id)

    async def resolve_address(self, coordinates: Coordinates, url: str) -> Optional[str]:
        """Reverse geocode ``coordinates``; fall back to address text in ``url``."""
        if self.api_enabled:
            assert self.maps_client is not None
            address = await self.maps_client.reverse_geocode(coordinates)
            if address:
                return address
            self.logger.info("Reverse geocoding produced no address, falling back to URL text")
        else:
            self.logger.info("No API key configured, using URL text for the address")

        return extract_address_from_url(url)
