"""
Ordered coordinate patterns for Google Maps URLs.

Patterns are tried in list order and the first match wins. More specific
patterns come first because the looser ones further down can also match the
same URL with a different (wrong) pair of numbers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

import structlog

from .models import Coordinates

logger = structlog.get_logger(__name__)

_NUMBER = r"(-?\d+\.?\d*)"
_PAIR = rf"{_NUMBER},{_NUMBER}"

Matcher = Callable[[str], Optional[Tuple[str, str]]]


def _regex(pattern: str, flags: int = 0) -> Matcher:
    """Build a matcher returning the first two groups of ``pattern``."""
    compiled = re.compile(pattern, flags | re.ASCII)

    def _match(url: str) -> Optional[Tuple[str, str]]:
        match = compiled.search(url)
        if match:
            return match.group(1), match.group(2)
        return None

    return _match


_LAT_3D = re.compile(rf"!3d{_NUMBER}", re.ASCII)
_LNG_4D = re.compile(rf"!4d{_NUMBER}", re.ASCII)
_LEADING_PAIR = re.compile(rf"^{_PAIR}", re.ASCII)


def _data_markers(url: str) -> Optional[Tuple[str, str]]:
    """``!3d<lat>`` and ``!4d<lng>`` anywhere in the URL; both must be present."""
    lat = _LAT_3D.search(url)
    lng = _LNG_4D.search(url)
    if lat and lng:
        return lat.group(1), lng.group(1)
    return None


def _last_at_segment(url: str) -> Optional[Tuple[str, str]]:
    """Take whatever follows the last ``@`` and read a leading number pair."""
    match = _LEADING_PAIR.match(url.split("@")[-1])
    if match:
        return match.group(1), match.group(2)
    return None


@dataclass(frozen=True)
class CoordinatePattern:
    """A named rule that pulls a raw latitude/longitude pair out of a URL."""

    name: str
    matcher: Matcher

    def match(self, url: str) -> Optional[Coordinates]:
        pair = self.matcher(url)
        if pair is None:
            return None
        return Coordinates(latitude=float(pair[0]), longitude=float(pair[1]))


COORDINATE_PATTERNS: List[CoordinatePattern] = [
    # @7.998158,98.3251492,639m
    CoordinatePattern("at_zoom_marker", _regex(rf"@{_PAIR},\d+[a-z]", re.IGNORECASE)),
    # @7.998158,98.3251492,17.5z
    CoordinatePattern("at_zoom_level", _regex(rf"@{_PAIR},[\d.]+z", re.IGNORECASE)),
    CoordinatePattern("search_path", _regex(rf"/search/{_NUMBER},\s*\+?{_NUMBER}")),
    CoordinatePattern("at_trailing_comma", _regex(rf"@{_PAIR},")),
    CoordinatePattern("at_terminated", _regex(rf"@{_PAIR}(?:[,?&]|$)")),
    CoordinatePattern("query_q", _regex(rf"[?&]q={_PAIR}")),
    CoordinatePattern("place_at", _regex(rf"/place/[^/]*/@{_PAIR}")),
    CoordinatePattern("query_ll", _regex(rf"[?&]ll={_PAIR}")),
    CoordinatePattern("query_center", _regex(rf"[?&]center={_PAIR}")),
    CoordinatePattern("data_markers", _data_markers),
    CoordinatePattern("data_segment", _regex(rf"/data=[^!]*!3d{_NUMBER}[^!]*!4d{_NUMBER}")),
    CoordinatePattern("last_at_segment", _last_at_segment),
]


def match_coordinates(
    url: str, patterns: List[CoordinatePattern] = COORDINATE_PATTERNS
) -> Optional[Tuple[str, Coordinates]]:
    """Return ``(pattern_name, coordinates)`` for the first pattern matching ``url``."""
    for pattern in patterns:
        coordinates = pattern.match(url)
        if coordinates is not None:
            logger.debug("Coordinate pattern matched", pattern=pattern.name, url=url)
            return pattern.name, coordinates

    logger.info("No coordinate pattern matched", url=url)
    return None


def extract_coordinates(url: str) -> Optional[Coordinates]:
    """Extract coordinates from ``url`` using the ordered pattern list."""
    matched = match_coordinates(url)
    return matched[1] if matched else None
