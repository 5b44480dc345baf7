"""Result containers passed between pipeline stages."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import EnrichmentOutcome, FilterReason
from .parcel import CleanedSale, ParcelDetails, RawParcelRecord


def empty_filter_reasons() -> Dict[str, int]:
    """Reason -> count mapping with every reason present at zero."""
    return {reason.value: 0 for reason in FilterReason}


@dataclass
class FilterResult:
    """Outcome of running the filter engine over a batch of raw records."""

    passed: List[RawParcelRecord] = field(default_factory=list)
    filtered: List[RawParcelRecord] = field(default_factory=list)
    reasons: Dict[str, int] = field(default_factory=empty_filter_reasons)


@dataclass
class ParcelEnrichment:
    """
    Enrichment result for one parcel.

    outcome names the path taken so callers (and tests) can tell an enriched
    parcel from one that silently fell back to its search-result stub.
    """

    parcel_id: str
    outcome: EnrichmentOutcome
    records: List[RawParcelRecord] = field(default_factory=list)
    details: Optional[ParcelDetails] = None
    error: Optional[str] = None


@dataclass
class SalesStats:
    """Summary statistics over cleaned sale prices."""

    count: int = 0
    total_value: float = 0
    average_price: float = 0
    median_price: float = 0
    min_price: float = 0
    max_price: float = 0


@dataclass
class ExtractionResult:
    """Everything the scraping phase produced for one date range."""

    raw_records: List[RawParcelRecord]
    parcel_details: List[ParcelDetails] = field(default_factory=list)
    enrichments: List[ParcelEnrichment] = field(default_factory=list)
    total_parcels: int = 0
    total_pages: int = 0

    def outcome_counts(self) -> Dict[str, int]:
        """Count parcels per enrichment outcome."""
        counts = {outcome.value: 0 for outcome in EnrichmentOutcome}
        for enrichment in self.enrichments:
            counts[enrichment.outcome.value] += 1
        return counts


@dataclass
class PipelineResult:
    """Records at each stage of the post-scrape processing pipeline."""

    deduped_raw: List[RawParcelRecord]
    filter_result: FilterResult
    cleaned_sales: List[CleanedSale]
