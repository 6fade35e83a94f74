"""
Outbound HTTP: the shared aiohttp client and the Google Maps web services client.
"""

from .google_maps import GoogleMapsClient, build_detailed_address
from .http_client import FetchResponse, HttpClient

__all__ = [
    "FetchResponse",
    "GoogleMapsClient",
    "HttpClient",
    "build_detailed_address",
]
