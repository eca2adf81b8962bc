"""
HTTP client for the managed scraping gateway.

The gateway renders a page in a remote browser and returns its HTML. Calls
never raise: failures come back as an unsuccessful ScrapeResponse.
"""
import asyncio
import time
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from job_retriever.core.config import DEFAULT_GATEWAY_URL, DEFAULT_TIMEOUT_MS
from job_retriever.core.lexicons import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

CLIENT_UA = "job-retriever/1.0"
DEFAULT_WAIT_MS = 3000
DEFAULT_CONCURRENCY = 3


@dataclass
class ScrapeResponse:
    success: bool
    html: str = ""
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class ScrapeClient:
    """Gateway client with bearer auth and fixed-window batching."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_GATEWAY_URL,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_ms = timeout_ms
        self.user_agent = user_agent
        self.timeout = httpx.Timeout(timeout_ms / 1000.0)
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
            "User-Agent": CLIENT_UA,
        }

    def _build_body(
        self,
        url: str,
        wait_time_ms: int,
        javascript: bool,
        screenshots: bool,
        wait_for_selector: Optional[str],
        custom_headers: Optional[Dict[str, str]],
    ) -> Dict[str, Any]:
        options: Dict[str, Any] = {
            "userAgent": self.user_agent,
            "timeout": self.timeout_ms,
            "waitTime": wait_time_ms,
            "javascript": javascript,
            "screenshots": screenshots,
            "customHeaders": custom_headers or {},
        }
        if wait_for_selector:
            options["waitForSelector"] = wait_for_selector
        return {"url": url, "options": options}

    async def scrape(
        self,
        url: str,
        wait_time_ms: int = DEFAULT_WAIT_MS,
        javascript: bool = True,
        screenshots: bool = False,
        wait_for_selector: Optional[str] = None,
        custom_headers: Optional[Dict[str, str]] = None,
    ) -> ScrapeResponse:
        """
        Render one URL through the gateway.

        Args:
            url: Page to render
            wait_time_ms: Extra settle time after load
            javascript: Execute page scripts
            screenshots: Ask the gateway for a screenshot
            wait_for_selector: CSS selector to wait for before capture
            custom_headers: Extra request headers for the target page

        Returns:
            ScrapeResponse (success=False with an error message on any failure)
        """
        body = self._build_body(url, wait_time_ms, javascript, screenshots, wait_for_selector, custom_headers)
        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(f"{self.base_url}/scrape", headers=self._get_headers(), json=body)
            elapsed_ms = int((time.time() - start_time) * 1000)

            if response.status_code >= 400:
                logger.warning(f"[net] Gateway {response.status_code} for {url} ({elapsed_ms}ms)")
                return ScrapeResponse(success=False, error=f"HTTP {response.status_code}: {response.text}")

            payload = response.json()
            data = payload.get("data", payload) if isinstance(payload, dict) else {}
            if not isinstance(data, dict):
                data = {}
            html = data.get("html") or ""
            logger.info(f"[net] Gateway 200 {url} ({len(html)} chars, {elapsed_ms}ms)")
            return ScrapeResponse(success=True, html=html, metadata=data.get("metadata") or {})
        except httpx.TimeoutException as e:
            logger.error(f"[net] Timeout scraping {url}: {e}")
            return ScrapeResponse(success=False, error=f"Timeout: {e}")
        except Exception as e:
            logger.error(f"[net] Gateway error scraping {url}: {e}")
            return ScrapeResponse(success=False, error=str(e))

    async def batch_scrape(
        self,
        urls: List[str],
        concurrent: int = DEFAULT_CONCURRENCY,
        delay_s: float = 1.0,
        **options: Any,
    ) -> Dict[str, ScrapeResponse]:
        """
        Scrape URLs in fixed windows of `concurrent`, pausing between windows.

        Returns:
            Mapping of URL to ScrapeResponse
        """
        concurrent = max(1, concurrent)
        results: Dict[str, ScrapeResponse] = {}
        for start in range(0, len(urls), concurrent):
            window = urls[start:start + concurrent]
            responses = await asyncio.gather(*(self.scrape(url, **options) for url in window))
            results.update(zip(window, responses))
            if start + concurrent < len(urls) and delay_s > 0:
                await asyncio.sleep(delay_s)
        return results
