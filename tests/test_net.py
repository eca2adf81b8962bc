"""
Tests for the scraping gateway client, using httpx.MockTransport.
"""

import json

import httpx
import pytest

from job_retriever.core.net import ScrapeClient


def client_for(handler) -> ScrapeClient:
    return ScrapeClient(api_key="key-123", base_url="https://gateway.example/v1/", transport=httpx.MockTransport(handler))


class TestScrape:
    @pytest.mark.asyncio
    async def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"html": "<html>ok</html>", "metadata": {"status": 200}}})

        result = await client_for(handler).scrape("https://jobs.example/1", wait_for_selector="#job")

        assert result.success
        assert result.html == "<html>ok</html>"
        assert result.metadata == {"status": 200}
        assert seen["url"] == "https://gateway.example/v1/scrape"
        assert seen["auth"] == "Bearer key-123"
        assert seen["body"]["url"] == "https://jobs.example/1"
        assert seen["body"]["options"]["javascript"] is True
        assert seen["body"]["options"]["waitForSelector"] == "#job"

    @pytest.mark.asyncio
    async def test_flat_payload(self):
        result = await client_for(lambda request: httpx.Response(200, json={"html": "<p>flat</p>"})).scrape("https://x.example")
        assert result.success
        assert result.html == "<p>flat</p>"

    @pytest.mark.asyncio
    async def test_http_error(self):
        result = await client_for(lambda request: httpx.Response(402, text="quota exceeded")).scrape("https://x.example")
        assert not result.success
        assert result.error == "HTTP 402: quota exceeded"

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("read timed out", request=request)

        result = await client_for(handler).scrape("https://x.example")
        assert not result.success
        assert result.error.startswith("Timeout:")

    @pytest.mark.asyncio
    async def test_transport_error_never_raises(self):
        def handler(request):
            raise httpx.ConnectError("name resolution failed", request=request)

        result = await client_for(handler).scrape("https://x.example")
        assert not result.success
        assert "name resolution failed" in result.error


class TestBatchScrape:
    @pytest.mark.asyncio
    async def test_windows_and_partial_failure(self):
        requested = []

        def handler(request):
            url = json.loads(request.content)["url"]
            requested.append(url)
            if url.endswith("/bad"):
                return httpx.Response(500, text="boom")
            return httpx.Response(200, json={"data": {"html": f"<p>{url}</p>"}})

        urls = [f"https://x.example/{i}" for i in range(4)] + ["https://x.example/bad"]
        results = await client_for(handler).batch_scrape(urls, concurrent=2, delay_s=0)

        assert list(results) == urls
        assert sorted(requested) == sorted(urls)
        assert results["https://x.example/0"].html == "<p>https://x.example/0</p>"
        assert not results["https://x.example/bad"].success
        assert results["https://x.example/bad"].error == "HTTP 500: boom"
