"""
Free-text fields pulled out of Google Maps URLs: search queries, place IDs and
address-like path segments.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import unquote

import structlog

logger = structlog.get_logger(__name__)

# A value like "13.736717,100.523186" is a coordinate pair, not an address.
BARE_COORDINATES = re.compile(r"^-?\d+\.?\d*,\s*-?\d+\.?\d*$", re.ASCII)

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

_QUERY_PARAM = re.compile(r"[?&]q=([^&]+)")
_FTID_PARAM = re.compile(r"[?&]ftid=([^&]+)")
_PLACE_ID_PARAM = re.compile(r"[?&]place_id=([^&]+)")

_ADDRESS_PATTERNS = (
    ("place", re.compile(r"/place/([^/@?]+)(?:/|@)")),
    ("search", re.compile(r"/search/([^/@?]+)(?:/|@|\?|$)")),
    ("query", re.compile(r"[?&]q=([^&@]+)")),
)


def unquote_strict(encoded: str) -> Optional[str]:
    """Percent-decode ``encoded``; None if it has a broken escape or is not valid UTF-8."""
    if _MALFORMED_ESCAPE.search(encoded):
        return None
    try:
        return unquote(encoded, errors="strict")
    except UnicodeDecodeError:
        return None


def decode_text(encoded: str) -> Optional[str]:
    """Percent-decode a URL fragment, turn ``+`` into spaces and trim."""
    decoded = unquote_strict(encoded)
    if decoded is None:
        logger.info("Ignoring malformed URL text", text=encoded)
        return None
    return decoded.replace("+", " ").strip()


def looks_like_address(text: Optional[str]) -> bool:
    return bool(text) and not BARE_COORDINATES.match(text)


def extract_query_address(url: str) -> Optional[str]:
    """Return the decoded ``q`` parameter if it reads as free text rather than coordinates."""
    match = _QUERY_PARAM.search(url)
    if not match:
        return None

    address = decode_text(match.group(1))
    if looks_like_address(address):
        logger.info("Extracted address from q parameter", address=address)
        return address
    return None


def extract_place_id(url: str) -> Optional[str]:
    """Return the decoded ``ftid`` parameter, or failing that the ``place_id`` parameter."""
    for name, pattern in (("ftid", _FTID_PARAM), ("place_id", _PLACE_ID_PARAM)):
        match = pattern.search(url)
        if not match:
            continue
        place_id = unquote_strict(match.group(1))
        if place_id:
            logger.info("Extracted place identifier", param=name, place_id=place_id)
            return place_id
    return None


def is_hex_place_id(place_id: str) -> bool:
    """Hex-pair IDs (``0x...:0x...``) are internal to Google and unsupported by the Places API."""
    return place_id.startswith("0x")


def extract_address_from_url(url: str) -> Optional[str]:
    """
    Fallback address lookup that reads the URL itself.

    Tries a ``/place/<name>/`` segment, then ``/search/<name>``, then the ``q``
    parameter, and returns the first value that is not a bare coordinate pair.
    """
    for source, pattern in _ADDRESS_PATTERNS:
        match = pattern.search(url)
        if not match:
            continue
        text = decode_text(match.group(1))
        if looks_like_address(text):
            logger.info("Extracted address from URL", source=source, address=text)
            return text

    logger.info("URL contains no address text", url=url)
    return None
