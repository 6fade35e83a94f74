"""
Expansion of Google Maps short links by following their redirects.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Optional

import aiohttp
import structlog

from geolink.config.config import ExpanderConfig
from geolink.observability.metrics import METRICS

from .normalizer import is_short_link

if TYPE_CHECKING:
    from geolink.client.http_client import HttpClient

logger = structlog.get_logger(__name__)


class LinkExpander:
    """Follows short-link redirects to the canonical long URL.

    Any failure returns the URL it was given, so expansion can never abort a
    resolution.
    """

    def __init__(self, http: HttpClient, config: Optional[ExpanderConfig] = None):
        self.http = http
        self.config = config or ExpanderConfig()

    def should_expand(self, url: str) -> bool:
        return is_short_link(url, self.config.short_link_markers)

    async def expand(self, url: str) -> str:
        if not self.should_expand(url):
            return url

        try:
            response = await self.http.get(
                url,
                headers={"User-Agent": self.config.user_agent},
                allow_redirects=True,
                max_redirects=self.config.max_redirects,
                timeout=self.config.timeout,
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            METRICS["upstream_requests_total"].labels(api="expand", status="transport_error").inc()
            logger.warning(
                "Failed to expand URL, continuing with original",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            return url

        METRICS["upstream_requests_total"].labels(api="expand", status=str(response.status)).inc()
        expanded = response.final_url or response.url or url
        logger.info("URL expanded", url=url, expanded=expanded, status=response.status)
        return expanded
