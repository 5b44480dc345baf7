"""Browser session lifecycle around crawl4ai's AsyncWebCrawler."""

import logging
import uuid
from typing import Any, Optional

from crawl4ai import AsyncWebCrawler, CacheMode
from crawl4ai.async_configs import BrowserConfig, CrawlerRunConfig

from scraper.exceptions import PageLoadError, SessionNotOpenError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class BrowserSession:
    """
    One browser for the whole run.

    load() and run_js() share a single persistent tab (the search cursor),
    so they must be called sequentially. fetch() opens an isolated tab per
    call and is safe to run concurrently.

    Usage:
        async with BrowserSession(headless=True) as session:
            html = await session.load(url, wait_for="css:#countySelect")
    """

    def __init__(self, headless: bool = True, user_agent: str = USER_AGENT):
        self.headless = headless
        self.user_agent = user_agent
        self.session_id = f"tpad-{uuid.uuid4().hex[:8]}"
        self.current_url: Optional[str] = None
        self._crawler: Optional[AsyncWebCrawler] = None

    async def __aenter__(self) -> "BrowserSession":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def is_open(self) -> bool:
        return self._crawler is not None

    async def open(self) -> None:
        """Launch the browser."""
        if self._crawler is not None:
            return

        logger.info(f"Launching browser (headless: {self.headless})")
        browser_config = BrowserConfig(
            headless=self.headless,
            verbose=False,
            user_agent=self.user_agent,
            viewport_width=1920,
            viewport_height=1080,
            text_mode=True,
            extra_args=["--disable-blink-features=AutomationControlled"],
        )
        crawler = AsyncWebCrawler(config=browser_config)
        await crawler.start()
        self._crawler = crawler

    async def close(self) -> None:
        """Close the persistent tab and the browser. Safe to call twice."""
        if self._crawler is None:
            return

        crawler = self._crawler
        self._crawler = None
        try:
            if self.current_url is not None:
                await crawler.crawler_strategy.kill_session(self.session_id)
        finally:
            self.current_url = None
            await crawler.close()
            logger.info("Browser closed")

    def _require_crawler(self) -> AsyncWebCrawler:
        if self._crawler is None:
            raise SessionNotOpenError("Browser session is not open")
        return self._crawler

    async def _run(self, url: str, run_config: CrawlerRunConfig) -> str:
        crawler = self._require_crawler()
        result = await crawler.arun(url=url, config=run_config)

        if not result.success:
            raise PageLoadError(url, result.error_message or "unknown error")

        return result.html or ""

    async def load(self, url: str, **run_options: Any) -> str:
        """
        Navigate the persistent tab to url and return the rendered HTML.

        Args:
            url: Page to load
            **run_options: crawl4ai CrawlerRunConfig parameters
                (wait_for, page_timeout, delay_before_return_html, ...)

        Raises:
            PageLoadError: If the crawl did not succeed
        """
        run_config = CrawlerRunConfig(
            session_id=self.session_id,
            cache_mode=CacheMode.BYPASS,
            **run_options,
        )
        html = await self._run(url, run_config)
        self.current_url = url
        return html

    async def run_js(self, js_code: str, **run_options: Any) -> str:
        """
        Run JavaScript in the persistent tab without navigating.

        Returns:
            HTML after the script ran and wait_for (if any) was satisfied

        Raises:
            SessionNotOpenError: If load() has not been called yet
            PageLoadError: If the script or wait condition failed
        """
        if self.current_url is None:
            raise SessionNotOpenError("No page loaded in the browser session")

        run_config = CrawlerRunConfig(
            session_id=self.session_id,
            js_code=js_code,
            js_only=True,
            cache_mode=CacheMode.BYPASS,
            **run_options,
        )
        return await self._run(self.current_url, run_config)

    async def fetch(self, url: str, **run_options: Any) -> str:
        """Load url in a fresh tab and return its HTML."""
        run_config = CrawlerRunConfig(cache_mode=CacheMode.BYPASS, **run_options)
        return await self._run(url, run_config)

