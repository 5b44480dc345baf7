"""TPAD client: walk the search results, then enrich from detail pages."""

import logging
from typing import Any, Dict, Optional

from models.metadata import ExtractionResult
from models.parcel import DateRange
from portals import get_adapter
from portals.base import PortalAdapter
from scraper.enrichment import DetailEnricher, ProgressCallback, log_progress
from scraper.session import BrowserSession
from scraper.walker import SearchWalker

logger = logging.getLogger(__name__)


class TpadClient:
    """
    Owns the browser session for one extraction run.

    Usage:
        async with TpadClient(config) as client:
            result = await client.extract(date_range)
    """

    def __init__(
        self,
        config: Dict[str, Any],
        session: Optional[BrowserSession] = None,
        adapter: Optional[PortalAdapter] = None,
        on_progress: ProgressCallback = log_progress,
    ):
        self.config = config
        self.adapter = adapter or get_adapter(config)
        self.session = session or BrowserSession(
            headless=config.get("scraping", {}).get("headless", True)
        )
        self.on_progress = on_progress

    async def __aenter__(self) -> "TpadClient":
        await self.session.open()
        logger.info("TPAD client initialized")
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.session.close()
        logger.info("TPAD client closed")

    async def extract(self, date_range: DateRange) -> ExtractionResult:
        """
        Run the full extraction for one date range.

        Raises:
            ScraperError: If the search page or a results page cannot be
                loaded after retries
        """
        logger.info(
            f"Starting TPAD extraction: {date_range.label}, "
            f"county {self.config.get('county_name')}"
        )

        walker = SearchWalker(self.session, self.adapter, self.config)
        walk = await walker.walk(date_range)

        if not walk.stubs:
            return ExtractionResult(raw_records=[])

        enricher = DetailEnricher(
            self.session, self.adapter, self.config, on_progress=self.on_progress
        )
        records, enrichments = await enricher.enrich(walk.stubs, walk.parcel_urls, date_range)

        parcel_details = [e.details for e in enrichments if e.details is not None]

        logger.info(
            f"Extraction complete: {len(walk.parcel_urls)} parcels, "
            f"{len(parcel_details)} details fetched, {len(records)} records"
        )

        return ExtractionResult(
            raw_records=records,
            parcel_details=parcel_details,
            enrichments=enrichments,
            total_parcels=len(walk.parcel_urls),
            total_pages=walk.total_pages,
        )
