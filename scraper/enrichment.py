"""Detail enrichment: fetch each parcel's detail page and reconcile its sales."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from models.constants import EnrichmentOutcome
from models.metadata import ParcelEnrichment
from models.parcel import DateRange, ParcelDetails, RawParcelRecord
from portals.base import PortalAdapter
from processors.normalize import parse_sale_date
from scraper.session import BrowserSession
from utils.date_range import is_date_in_range
from utils.retry import RateLimiter, network_retry, with_retry

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


def log_progress(processed: int, total: int) -> None:
    """Default progress callback."""
    percent = round(processed / total * 100) if total else 100
    logger.info(f"Processed {processed}/{total} parcels ({percent}%)")


class DetailEnricher:
    """
    Fetch parcel detail pages with bounded concurrency and merge their sales
    back into the record stream.

    Parcels are processed in fixed batches of `concurrency`; every fetch
    first waits on one shared RateLimiter, then retries network errors up to
    `detail_max_retries` times. A parcel whose fetch or parse still fails is
    never fatal: it falls back to its search-result stub.
    """

    def __init__(
        self,
        session: BrowserSession,
        adapter: PortalAdapter,
        config: Dict[str, Any],
        rate_limiter: Optional[RateLimiter] = None,
        on_progress: ProgressCallback = log_progress,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        scraping = config.get("scraping", {})
        self.session = session
        self.adapter = adapter
        self.concurrency = max(1, int(scraping.get("concurrency", 3)))
        self.max_retries = scraping.get("detail_max_retries", 2)
        self.rate_limiter = rate_limiter or RateLimiter(
            scraping.get("request_delay_ms", 1000) / 1000
        )
        self.on_progress = on_progress
        self._sleep = sleep

    async def fetch_details(self, parcel_id: str, url: str) -> ParcelDetails:
        """Rate-limited, retried fetch and parse of one detail page."""
        await self.rate_limiter.wait()

        async def attempt() -> ParcelDetails:
            html = await self.session.fetch(url, **self.adapter.get_crawler_config())
            return self.adapter.parse_parcel_details(html, url, parcel_id)

        return await with_retry(
            attempt,
            network_retry(max_retries=self.max_retries),
            f"parcel {parcel_id}",
            sleep=self._sleep,
        )

    @staticmethod
    def reconcile(
        parcel_id: str,
        outcome: Union[ParcelDetails, BaseException],
        stub: Optional[RawParcelRecord],
        date_range: DateRange,
    ) -> ParcelEnrichment:
        """
        Turn one fetch outcome into records.

        Args:
            parcel_id: Parcel being reconciled
            outcome: ParcelDetails on success, the exception on failure
            stub: First search-result stub for this parcel (if any)
            date_range: Sales outside this range are discarded

        Returns:
            ParcelEnrichment tagged with the path taken
        """
        if isinstance(outcome, BaseException):
            logger.warning(f"Failed to fetch details for parcel {parcel_id}: {outcome}")
            return ParcelEnrichment(
                parcel_id=parcel_id,
                outcome=EnrichmentOutcome.FALLBACK_FETCH_FAILED,
                records=[stub] if stub else [],
                error=str(outcome),
            )

        details: ParcelDetails = outcome

        if not details.sales:
            records = [stub.with_source_url(details.source_url)] if stub else []
            return ParcelEnrichment(
                parcel_id=parcel_id,
                outcome=EnrichmentOutcome.FALLBACK_NO_SALES,
                records=records,
                details=details,
            )

        in_range = [
            details.to_raw_record(sale)
            for sale in details.sales
            if is_date_in_range(parse_sale_date(sale.sale_date), date_range)
        ]
        return ParcelEnrichment(
            parcel_id=parcel_id,
            outcome=(
                EnrichmentOutcome.ENRICHED if in_range else EnrichmentOutcome.NO_SALES_IN_RANGE
            ),
            records=in_range,
            details=details,
        )

    async def enrich(
        self,
        stubs: List[RawParcelRecord],
        parcel_urls: Dict[str, str],
        date_range: DateRange,
    ) -> Tuple[List[RawParcelRecord], List[ParcelEnrichment]]:
        """
        Enrich every parcel in parcel_urls.

        Returns:
            (records, enrichments). records is the concatenation of every
            parcel's records, or the untouched stubs if that is empty.
        """
        first_stub: Dict[str, RawParcelRecord] = {}
        for stub in stubs:
            first_stub.setdefault(stub.parcel_id, stub)

        entries = list(parcel_urls.items())
        total = len(entries)
        enrichments: List[ParcelEnrichment] = []

        logger.info(
            f"Fetching details for {total} parcels "
            f"(concurrency: {self.concurrency}, delay: {self.rate_limiter.delay_seconds:.1f}s)"
        )

        for start in range(0, total, self.concurrency):
            batch = entries[start : start + self.concurrency]
            outcomes = await asyncio.gather(
                *(self.fetch_details(parcel_id, url) for parcel_id, url in batch),
                return_exceptions=True,
            )

            for (parcel_id, _url), outcome in zip(batch, outcomes):
                enrichments.append(
                    self.reconcile(parcel_id, outcome, first_stub.get(parcel_id), date_range)
                )

            self.on_progress(min(start + self.concurrency, total), total)

        records = [record for enrichment in enrichments for record in enrichment.records]
        if not records:
            if stubs:
                logger.warning("No records from detail pages, using search results")
            records = list(stubs)

        counts: Dict[str, int] = {}
        for enrichment in enrichments:
            counts[enrichment.outcome.value] = counts.get(enrichment.outcome.value, 0) + 1
        logger.info(f"Enrichment complete: {len(records)} records, outcomes {counts}")

        return records, enrichments
