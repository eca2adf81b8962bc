"""
Remote headless browser session over the Chrome DevTools Protocol.

Owns the connection to a CDP endpoint (self-hosted or managed cloud), hands out
pages configured for scraping, and navigates with retries.
"""
import asyncio
import json
import logging
from typing import Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, Response, Route, async_playwright
from tenacity import AsyncRetrying, stop_after_attempt, wait_incrementing

from job_retriever.core.config import RetrieverConfig
from job_retriever.core.lexicons import (
    BLOCKED_RESOURCE_TYPES,
    COOKIE_ACCEPT_WORDS,
    COOKIE_BANNER_SELECTORS,
    DEFAULT_VIEWPORT,
)

logger = logging.getLogger(__name__)

# Runs in every new document; tries to accept consent banners at +2s and +5s
COOKIE_DISMISS_SCRIPT = """
(() => {
  const selectors = %s;
  const words = %s;
  const dismiss = () => {
    for (const selector of selectors) {
      let elements = [];
      try { elements = document.querySelectorAll(selector); } catch (e) { continue; }
      for (const element of elements) {
        const text = (element.textContent || '').toLowerCase();
        if (words.some(word => text.includes(word))) {
          try { element.click(); return true; } catch (e) { return false; }
        }
      }
    }
    return false;
  };
  setTimeout(dismiss, 2000);
  setTimeout(dismiss, 5000);
})();
""" % (json.dumps(COOKIE_BANNER_SELECTORS), json.dumps(list(COOKIE_ACCEPT_WORDS)))


class RetrieverError(Exception):
    """Base class for retrieval transport errors."""


class BrowserConnectionError(RetrieverError):
    """The CDP endpoint is missing or unreachable."""


class NavigationError(RetrieverError):
    """A page could not be loaded within the retry budget."""


class BrowserManager:
    """Lazily connected CDP browser with scraping-friendly page defaults."""

    def __init__(self, config: RetrieverConfig):
        self.config = config
        self.ws_endpoint = config.resolve_ws_endpoint()
        self._playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> Browser:
        """
        Connect once; later calls return the same browser.

        Raises:
            BrowserConnectionError: no endpoint configured, or the connection failed
        """
        async with self._lock:
            if self.browser is not None:
                return self.browser

            if not self.ws_endpoint:
                raise BrowserConnectionError("LIGHTPANDA_WS environment variable is required")

            try:
                self._playwright = await async_playwright().start()
                self.browser = await self._playwright.chromium.connect_over_cdp(
                    self.ws_endpoint, timeout=self.config.timeout_ms
                )
            except Exception as e:
                await self._stop_driver()
                raise BrowserConnectionError(f"Failed to connect to Lightpanda browser: {e}") from e

            logger.info(f"[browser] Connected to CDP endpoint ({self.config.agent})")
            return self.browser

    async def _get_context(self) -> BrowserContext:
        browser = await self.connect()
        if self.context is None:
            options = {
                "user_agent": self.config.user_agent,
                "viewport": DEFAULT_VIEWPORT,
                "extra_http_headers": {"Accept-Language": "en-US,en;q=0.9"},
            }
            if self.config.browser_proxy:
                options["proxy"] = {"server": self.config.browser_proxy}
            self.context = await browser.new_context(**options)
        return self.context

    async def new_page(self) -> Page:
        """
        Open a page with UA, viewport, timeout, resource blocking and cookie-banner handling.

        The caller owns the page and must close it.
        """
        context = await self._get_context()
        page = await context.new_page()
        page.set_default_timeout(self.config.timeout_ms)
        await page.route("**/*", self._route_request)
        await page.add_init_script(script=COOKIE_DISMISS_SCRIPT)
        return page

    async def _route_request(self, route: Route):
        if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    async def _goto(self, page: Page, url: str) -> Optional[Response]:
        response = await page.goto(url, wait_until="domcontentloaded", timeout=self.config.timeout_ms)
        await page.wait_for_load_state("networkidle", timeout=self.config.timeout_ms)
        return response

    async def navigate_with_retry(self, page: Page, url: str, max_retries: int = 3) -> Optional[Response]:
        """
        Navigate with linear backoff (attempt * retry_backoff_ms between attempts).

        After a successful load, waits settle_ms and dismisses cookie banners.

        Raises:
            NavigationError: every attempt failed
        """
        max_retries = max(1, max_retries)
        backoff_s = self.config.retry_backoff_ms / 1000.0
        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_retries),
            wait=wait_incrementing(start=backoff_s, increment=backoff_s),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.info(f"[browser] Retrying {url} (attempt {attempt.retry_state.attempt_number}/{max_retries})")
                    response = await self._goto(page, url)
        except Exception as e:
            logger.warning(f"[browser] Navigation to {url} failed after {max_retries} attempts: {e}")
            raise NavigationError(f"Failed to navigate to {url} after {max_retries} attempts: {e}") from e

        if self.config.settle_ms > 0:
            await asyncio.sleep(self.config.settle_ms / 1000.0)
        await self.dismiss_cookie_banners(page)
        return response

    async def dismiss_cookie_banners(self, page: Page):
        """Click the first accept/agree/ok button per banner selector; failures are ignored."""
        for selector in COOKIE_BANNER_SELECTORS:
            try:
                buttons = await page.query_selector_all(selector)
                for button in buttons:
                    text = ((await button.text_content()) or "").lower()
                    if any(word in text for word in COOKIE_ACCEPT_WORDS):
                        await button.click()
                        logger.debug(f"[browser] Dismissed cookie banner via {selector}")
                        if self.config.click_settle_ms > 0:
                            await asyncio.sleep(self.config.click_settle_ms / 1000.0)
                        break
            except Exception as e:
                logger.debug(f"[browser] Cookie selector {selector} skipped: {e}")

    async def _stop_driver(self):
        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                logger.debug(f"[browser] Playwright stop failed: {e}")
            self._playwright = None

    async def close(self):
        """Close context, browser and driver. Safe to call more than once."""
        if self.context is not None:
            try:
                await self.context.close()
            except Exception as e:
                logger.debug(f"[browser] Context close failed: {e}")
            self.context = None
        if self.browser is not None:
            try:
                await self.browser.close()
            except Exception as e:
                logger.debug(f"[browser] Browser close failed: {e}")
            self.browser = None
        await self._stop_driver()
