"""
Tests for the shared aiohttp client.
"""

import aiohttp
import pytest
from aioresponses import aioresponses

from geolink.client import FetchResponse, HttpClient


@pytest.mark.unit
class TestHttpClientLifecycle:
    @pytest.mark.asyncio
    async def test_get_before_initialize_raises(self):
        client = HttpClient()
        with pytest.raises(RuntimeError, match="not initialized"):
            await client.get("https://example.com")

    @pytest.mark.asyncio
    async def test_context_manager_opens_and_closes_session(self):
        async with HttpClient(user_agent="geolink-test") as client:
            assert client.is_initialized
            assert client.session is not None
        assert not client.is_initialized
        assert client.session is None

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self):
        client = HttpClient()
        await client.initialize()
        session = client.session
        await client.initialize()
        assert client.session is session
        await client.close()


@pytest.mark.unit
class TestHttpClientGet:
    @pytest.mark.asyncio
    async def test_get_returns_body_and_status(self, http_client):
        with aioresponses() as m:
            m.get("https://example.com/page", status=200, body="hello")
            response = await http_client.get("https://example.com/page")

        assert isinstance(response, FetchResponse)
        assert response.status == 200
        assert response.body == b"hello"
        assert response.final_url == "https://example.com/page"
        assert response.elapsed >= 0

    @pytest.mark.asyncio
    async def test_get_follows_redirects(self, http_client):
        with aioresponses() as m:
            m.get("https://example.com/short", status=302, headers={"Location": "https://example.com/long"})
            m.get("https://example.com/long", status=200, body="done")
            response = await http_client.get("https://example.com/short")

        assert response.url == "https://example.com/short"
        assert response.final_url == "https://example.com/long"

    @pytest.mark.asyncio
    async def test_non_success_status_is_returned(self, http_client):
        with aioresponses() as m:
            m.get("https://example.com/missing", status=404, body="")
            response = await http_client.get("https://example.com/missing")

        assert response.status == 404

    @pytest.mark.asyncio
    async def test_params_are_sent(self, http_client):
        with aioresponses() as m:
            m.get("https://example.com/api?a=1&b=two", status=200, payload={"status": "OK"})
            response = await http_client.get("https://example.com/api", params={"a": "1", "b": "two"})

        assert response.json() == {"status": "OK"}

    @pytest.mark.asyncio
    async def test_transport_errors_propagate(self, http_client):
        with aioresponses() as m:
            m.get("https://example.com/down", exception=aiohttp.ClientConnectionError("refused"))
            with pytest.raises(aiohttp.ClientConnectionError):
                await http_client.get("https://example.com/down")
