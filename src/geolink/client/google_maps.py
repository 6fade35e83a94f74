"""
Client for the Google Maps Geocoding and Places web services.

Every call is attempted once. Upstream failures (non-OK status, missing fields,
transport errors) are logged and reported as ``None`` so the resolver can move on
to its next strategy.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
import structlog

from geolink.config.config import GoogleMapsConfig
from geolink.observability.metrics import METRICS
from geolink.resolver.models import Coordinates

from .http_client import HttpClient

logger = structlog.get_logger(__name__)

# address_components type -> key used when assembling an address
_COMPONENT_TYPES = {
    "street_number": "street_number",
    "route": "route",
    "locality": "locality",
    "administrative_area_level_1": "admin_area_1",
    "administrative_area_level_2": "admin_area_2",
    "country": "country",
    "postal_code": "postal_code",
    "sublocality": "neighborhood",
    "neighborhood": "neighborhood",
}


def build_detailed_address(address_components: List[Dict[str, Any]]) -> str:
    """
    Assemble a one-line address from Geocoding API ``address_components``.

    Order: "street_number route" (or route), neighborhood, locality (or
    administrative_area_level_2), administrative_area_level_1, postal_code,
    country. Missing parts are left out.
    """
    components: Dict[str, str] = {}
    for component in address_components:
        if not isinstance(component, dict):
            continue
        types = component.get("types")
        long_name = component.get("long_name")
        if not long_name or not isinstance(long_name, str) or not isinstance(types, list):
            continue
        for component_type in types:
            key = _COMPONENT_TYPES.get(component_type)
            if key:
                components[key] = long_name

    parts: List[str] = []
    if components.get("street_number") and components.get("route"):
        parts.append(f"{components['street_number']} {components['route']}")
    elif components.get("route"):
        parts.append(components["route"])

    if components.get("neighborhood"):
        parts.append(components["neighborhood"])

    if components.get("locality"):
        parts.append(components["locality"])
    elif components.get("admin_area_2"):
        parts.append(components["admin_area_2"])

    for key in ("admin_area_1", "postal_code", "country"):
        if components.get(key):
            parts.append(components[key])

    return ", ".join(parts)


def _first_result(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """First entry of ``results`` if it is an object."""
    results = payload.get("results")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return None
    return results[0]


def _location(container: Any) -> Optional[Coordinates]:
    """Read ``geometry.location`` from a result object; malformed shapes give None."""
    if not isinstance(container, dict):
        return None
    geometry = container.get("geometry")
    if not isinstance(geometry, dict):
        return None
    location = geometry.get("location")
    if not isinstance(location, dict):
        return None
    lat, lng = location.get("lat"), location.get("lng")
    if lat is None or lng is None or isinstance(lat, bool) or isinstance(lng, bool):
        return None
    try:
        return Coordinates(latitude=float(lat), longitude=float(lng))
    except (TypeError, ValueError):
        return None


class GoogleMapsClient:
    """Forward geocoding, place details and reverse geocoding."""

    def __init__(self, http: HttpClient, config: GoogleMapsConfig, api_key: Optional[str] = None):
        self.http = http
        self.config = config
        self.api_key = api_key if api_key is not None else config.api_key
        self.logger = logger.bind(component="GoogleMapsClient")

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def _call(self, api: str, path: str, params: Dict[str, str]) -> Optional[Dict[str, Any]]:
        """GET a JSON endpoint; return the payload if its status is OK, else None."""
        if not self.configured:
            self.logger.warning("Google Maps API key is not configured", api=api)
            return None

        url = f"{self.config.base_url}/{path}"
        try:
            response = await self.http.get(
                url,
                params={**params, "key": self.api_key},  # type: ignore[dict-item]
                timeout=self.config.timeout,
            )
            payload = response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            METRICS["upstream_requests_total"].labels(api=api, status="transport_error").inc()
            self.logger.error("Google Maps request failed", api=api, error=str(e), error_type=type(e).__name__)
            return None
        except ValueError as e:
            METRICS["upstream_requests_total"].labels(api=api, status="invalid_response").inc()
            self.logger.error("Google Maps returned a non-JSON body", api=api, error=str(e))
            return None

        status = payload.get("status", "UNKNOWN") if isinstance(payload, dict) else "UNKNOWN"
        METRICS["upstream_requests_total"].labels(api=api, status=status).inc()
        if status != "OK":
            self.logger.warning(
                "Google Maps request unsuccessful",
                api=api,
                status=status,
                http_status=response.status,
                error_message=payload.get("error_message") if isinstance(payload, dict) else None,
            )
            return None
        return payload

    async def geocode(self, address: str) -> Optional[Coordinates]:
        """Forward-geocode free text; the first result's location wins."""
        self.logger.info("Geocoding address", address=address)
        payload = await self._call("geocode", "geocode/json", {"address": address})
        if payload is None:
            return None

        coordinates = _location(_first_result(payload))
        if coordinates is None:
            self.logger.warning("Geocoding result has no location", address=address)
            return None

        self.logger.info("Got coordinates from address", lat=coordinates.latitude, lng=coordinates.longitude)
        return coordinates

    async def place_details(self, place_id: str) -> Optional[Coordinates]:
        """Look up a place's location, requesting only the geometry field."""
        self.logger.info("Getting place details", place_id=place_id)
        payload = await self._call(
            "place_details", "place/details/json", {"place_id": place_id, "fields": "geometry"}
        )
        if payload is None:
            return None

        coordinates = _location(payload.get("result"))
        if coordinates is None:
            self.logger.warning("Place details have no location", place_id=place_id)
            return None

        self.logger.info("Got coordinates from place ID", lat=coordinates.latitude, lng=coordinates.longitude)
        return coordinates

    async def reverse_geocode(self, coordinates: Coordinates) -> Optional[str]:
        """Return a human-readable address for ``coordinates``, always in the configured language."""
        latlng = f"{coordinates.latitude},{coordinates.longitude}"
        self.logger.info("Reverse geocoding", latlng=latlng)
        payload = await self._call(
            "reverse_geocode", "geocode/json", {"latlng": latlng, "language": self.config.language}
        )
        if payload is None:
            return None

        result = _first_result(payload)
        if result is None:
            return None

        address = result.get("formatted_address")
        if not isinstance(address, str):
            address = None
        if not address and isinstance(result.get("address_components"), list):
            address = build_detailed_address(result["address_components"])
            self.logger.info("Built address from components", address=address)

        return address or None
