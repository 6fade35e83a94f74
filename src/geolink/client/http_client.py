"""
Thin aiohttp client shared by the link expander and the Google Maps API client.
"""

from __future__ import annotations

import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import aiohttp
import structlog

from geolink.config.config import DEFAULT_USER_AGENT

logger = structlog.get_logger(__name__)


@dataclass
class FetchResponse:
    """Response from a single GET with timing information."""

    status: int
    url: str
    final_url: str
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)
    start_ts: float = 0.0
    end_ts: float = 0.0

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))

    @property
    def elapsed(self) -> float:
        return self.end_ts - self.start_ts


class HttpClient:
    """Owns one aiohttp session; each request carries its own timeout and redirect policy."""

    def __init__(self, *, user_agent: str = DEFAULT_USER_AGENT, timeout: float = 10.0):
        self.user_agent = user_agent
        self.timeout = timeout
        self.session: Optional[aiohttp.ClientSession] = None
        self._is_initialized = False

    async def initialize(self) -> None:
        """Initialize the HTTP client session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers={"User-Agent": self.user_agent},
            )
            self._is_initialized = True
            logger.info("HTTP client session initialized", timeout=self.timeout)

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self.session:
            await self.session.close()
            self.session = None
        self._is_initialized = False
        logger.info("HTTP client closed")

    async def __aenter__(self) -> "HttpClient":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    async def get(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
        allow_redirects: bool = True,
        max_redirects: int = 10,
        timeout: Optional[float] = None,
    ) -> FetchResponse:
        """
        Perform a single GET. Any status code is returned to the caller; transport
        errors (timeouts, DNS, TLS, too many redirects) propagate as aiohttp or
        asyncio exceptions.

        Args:
            url: URL to fetch
            params: Optional query parameters
            headers: Extra request headers
            allow_redirects: Follow redirects
            max_redirects: Redirect limit when following
            timeout: Request timeout in seconds (None = client default)

        Returns:
            FetchResponse with status, final URL and body
        """
        if not self._is_initialized or self.session is None:
            raise RuntimeError("HTTP client not initialized. Call initialize() first.")

        start_time = time.time()
        request_timeout = aiohttp.ClientTimeout(total=timeout if timeout is not None else self.timeout)

        async with self.session.get(
            url,
            params=params,
            headers=headers,
            allow_redirects=allow_redirects,
            max_redirects=max_redirects,
            timeout=request_timeout,
        ) as response:
            body = await response.read()
            final_url = str(response.url) if response.url else url
            return FetchResponse(
                status=response.status,
                url=url,
                final_url=final_url,
                body=body,
                headers=dict(response.headers),
                start_ts=start_time,
                end_ts=time.time(),
            )
