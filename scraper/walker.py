"""Search and pagination walker."""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from models.parcel import DateRange, RawParcelRecord
from portals.base import PortalAdapter
from scraper.session import BrowserSession
from utils.retry import network_retry, with_retry

logger = logging.getLogger(__name__)

PAGE_SETTLE_DELAY = 0.5


@dataclass
class WalkResult:
    """Stubs and detail URLs collected from every results page."""

    stubs: List[RawParcelRecord] = field(default_factory=list)
    parcel_urls: Dict[str, str] = field(default_factory=dict)
    total_pages: int = 0
    estimated_count: Optional[int] = None


class SearchWalker:
    """
    Run one search and walk its result pages.

    Every page transition goes through the session's single persistent tab,
    so pages are visited strictly in order. Navigation, search submission
    and next-page transitions are retried on network errors and raise once
    retries run out.
    """

    def __init__(
        self,
        session: BrowserSession,
        adapter: PortalAdapter,
        config: Dict[str, Any],
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        scraping = config.get("scraping", {})
        self.session = session
        self.adapter = adapter
        self.max_retries = scraping.get("max_retries", 3)
        self.max_pages = scraping.get("max_pages")
        self.settle_delay = PAGE_SETTLE_DELAY
        self._sleep = sleep

    def _retry_options(self):
        return network_retry(max_retries=self.max_retries)

    async def _navigate(self) -> str:
        url = self.adapter.get_search_url()
        logger.info(f"Navigating to search page: {url}")
        return await with_retry(
            lambda: self.session.load(url, **self.adapter.get_search_crawler_config()),
            self._retry_options(),
            "navigate to search",
            sleep=self._sleep,
        )

    async def _search(self, date_range: DateRange) -> str:
        logger.info(
            f"Executing search: county {self.adapter.county_code}, {date_range.label}"
        )
        js_code = self.adapter.build_search_js(date_range)
        return await with_retry(
            lambda: self.session.run_js(js_code, **self.adapter.get_results_crawler_config()),
            self._retry_options(),
            "execute search",
            sleep=self._sleep,
        )

    async def _go_to_page(self, page: int) -> str:
        run_options = dict(self.adapter.get_results_crawler_config())
        wait_for = self.adapter.get_next_page_wait_for(page)
        if wait_for:
            run_options["wait_for"] = wait_for

        js_code = self.adapter.build_next_page_js(page)
        return await with_retry(
            lambda: self.session.run_js(js_code, **run_options),
            self._retry_options(),
            f"go to results page {page}",
            sleep=self._sleep,
        )

    def _collect(self, html: str, result: WalkResult) -> int:
        rows = self.adapter.parse_result_rows(html)
        for row in rows:
            result.stubs.append(self.adapter.row_to_raw_record(row))
            if row.parcel_id and row.view_url:
                result.parcel_urls[row.parcel_id] = self.adapter.resolve_url(row.view_url)
        return len(rows)

    async def walk(self, date_range: DateRange) -> WalkResult:
        """
        Search the date range and collect every result row.

        Returns:
            WalkResult; empty (total_pages 0) when the search has no results
        """
        result = WalkResult()

        await self._navigate()
        html = await self._search(date_range)

        if not self.adapter.has_results(html):
            logger.info("No results found for the specified criteria")
            return result

        result.estimated_count = self.adapter.get_result_count(html)
        logger.info(f"Found results (estimated count: {result.estimated_count})")

        page = 1
        while True:
            row_count = self._collect(html, result)
            logger.debug(f"Results page {page}: {row_count} rows")

            if self.max_pages and page >= self.max_pages:
                logger.info(f"Reached max page limit ({self.max_pages})")
                break

            if not self.adapter.has_next_page(html):
                break

            html = await self._go_to_page(page + 1)
            page += 1
            await self._sleep(self.settle_delay)

        result.total_pages = page
        logger.info(
            f"Search complete: {len(result.stubs)} results across {page} pages, "
            f"{len(result.parcel_urls)} unique parcels"
        )
        return result
