"""
Page fetchers.

One interface over the two transports: a CDP browser session driven by
Playwright, and the HTTP scraping gateway. Extraction and enrichment only ever
see rendered HTML strings, so both transports share the same rules.
"""
import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union

from tenacity import AsyncRetrying, stop_after_attempt, wait_incrementing

from job_retriever.core.config import TRANSPORT_GATEWAY, RetrieverConfig
from job_retriever.core.net import ScrapeClient
from job_retriever.crawler.browser_crawler import BrowserManager, RetrieverError

logger = logging.getLogger(__name__)

FetchResult = Union[str, Exception]


class PageFetchError(RetrieverError):
    """A page loaded but cannot be used (error status, unreadable content, gateway failure)."""


class PageFetcher(ABC):
    """Fetches rendered HTML for URLs."""

    agent: str = ""

    @abstractmethod
    async def fetch_html(self, url: str, max_retries: int = 3) -> str:
        """
        Rendered HTML of `url`.

        Raises:
            RetrieverError: the page could not be fetched
        """

    async def fetch_many(self, urls: List[str], max_retries: int = 1) -> Dict[str, FetchResult]:
        """
        Fetch several URLs; each maps to its HTML or the exception it raised.

        Sequential unless a transport offers something better.
        """
        results: Dict[str, FetchResult] = {}
        for url in urls:
            try:
                results[url] = await self.fetch_html(url, max_retries=max_retries)
            except Exception as e:
                results[url] = e
        return results

    async def close(self):
        """Release transport resources. Safe to call more than once."""


class BrowserPageFetcher(PageFetcher):
    """Fetches through a CDP browser: one fresh page per URL."""

    def __init__(self, manager: BrowserManager):
        self.manager = manager
        self.agent = manager.config.agent

    async def fetch_html(self, url: str, max_retries: int = 3) -> str:
        page = await self.manager.new_page()
        try:
            response = await self.manager.navigate_with_retry(page, url, max_retries=max_retries)
            if response is not None and response.status >= 400:
                raise PageFetchError(f"HTTP {response.status} for {url}")
            try:
                return await page.content()
            except Exception as e:
                raise PageFetchError(f"Could not read content of {url}: {e}") from e
        finally:
            try:
                await page.close()
            except Exception as e:
                logger.debug(f"[browser] Page close failed for {url}: {e}")

    async def close(self):
        await self.manager.close()


class GatewayPageFetcher(PageFetcher):
    """Fetches through the HTTP scraping gateway."""

    def __init__(self, client: ScrapeClient, retry_backoff_ms: int = 2000, batch_delay_s: float = 1.0, agent: str = ""):
        self.client = client
        self.retry_backoff_ms = retry_backoff_ms
        self.batch_delay_s = batch_delay_s
        self.agent = agent

    async def _scrape_once(self, url: str) -> str:
        result = await self.client.scrape(url)
        if not result.success:
            raise PageFetchError(result.error or f"Gateway returned no content for {url}")
        return result.html

    async def fetch_html(self, url: str, max_retries: int = 3) -> str:
        max_retries = max(1, max_retries)
        backoff_s = self.retry_backoff_ms / 1000.0
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_retries),
            wait=wait_incrementing(start=backoff_s, increment=backoff_s),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    html = await self._scrape_once(url)
        except Exception as e:
            raise PageFetchError(f"Failed to fetch {url} after {max_retries} attempts: {e}") from e
        return html

    async def fetch_many(self, urls: List[str], max_retries: int = 1) -> Dict[str, FetchResult]:
        """
        One batched pass, then the remaining attempts per failed URL.

        The batch counts as the first attempt, so every URL gets at most
        `max_retries` tries, as on the browser transport.
        """
        responses = await self.client.batch_scrape(urls, delay_s=self.batch_delay_s)
        results: Dict[str, FetchResult] = {}
        for url in urls:
            response = responses.get(url)
            if response is not None and response.success:
                results[url] = response.html
                continue
            message = response.error if response is not None else None
            error = PageFetchError(message or f"Gateway returned no content for {url}")
            if max_retries > 1:
                try:
                    results[url] = await self.fetch_html(url, max_retries=max_retries - 1)
                    continue
                except PageFetchError as e:
                    error = e
            results[url] = error
        return results


def build_fetcher(config: RetrieverConfig, client: Optional[ScrapeClient] = None) -> PageFetcher:
    """Fetcher for the configured transport."""
    if config.transport == TRANSPORT_GATEWAY:
        client = client or ScrapeClient(
            api_key=config.token or "",
            base_url=config.gateway_url,
            timeout_ms=config.timeout_ms,
            user_agent=config.user_agent,
        )
        return GatewayPageFetcher(
            client,
            retry_backoff_ms=config.retry_backoff_ms,
            batch_delay_s=config.batch_delay_s,
            agent=config.agent,
        )
    return BrowserPageFetcher(BrowserManager(config))
