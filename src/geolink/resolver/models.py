"""
Value types and errors produced by the geo-link resolver.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(slots=True, frozen=True)
class Coordinates:
    """A latitude/longitude pair as found in the source URL or returned by an API.

    Values are not range-checked; a malformed link can yield out-of-range numbers.
    """

    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, float]:
        """Wire representation used by the HTTP API."""
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(slots=True, frozen=True)
class ResolutionResult:
    """Outcome of resolving one URL."""

    coordinates: Optional[Coordinates]
    address: Optional[str]
    source_url: str = ""
    resolved_url: str = ""
    strategy: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coordinates": self.coordinates.to_dict() if self.coordinates else None,
            "address": self.address,
        }


class ResolutionError(Exception):
    """Base class for failures that are reported to the caller as a client error."""

    message = "Failed to process URL"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class UrlRequiredError(ResolutionError):
    message = "URL is required"


class CoordinatesNotFoundError(ResolutionError):
    message = "Could not extract coordinates from URL. Please check the link format."
