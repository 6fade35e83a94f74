"""
GeoLink resolver: Google Maps link normalization, expansion and coordinate/address extraction.
"""

from .models import (
    Coordinates,
    CoordinatesNotFoundError,
    ResolutionError,
    ResolutionResult,
    UrlRequiredError,
)
from .normalizer import SHORT_LINK_MARKERS, is_short_link, normalize_url
from .patterns import COORDINATE_PATTERNS, CoordinatePattern, extract_coordinates, match_coordinates
from .url_text import extract_address_from_url, extract_place_id, extract_query_address, is_hex_place_id
from .expander import LinkExpander
from .resolver import GeoLinkResolver

__all__ = [
    "COORDINATE_PATTERNS",
    "SHORT_LINK_MARKERS",
    "CoordinatePattern",
    "Coordinates",
    "CoordinatesNotFoundError",
    "GeoLinkResolver",
    "LinkExpander",
    "ResolutionError",
    "ResolutionResult",
    "UrlRequiredError",
    "extract_address_from_url",
    "extract_coordinates",
    "extract_place_id",
    "extract_query_address",
    "is_hex_place_id",
    "is_short_link",
    "match_coordinates",
    "normalize_url",
]
