"""Data models for parcel sale records."""

from .constants import (
    DEFAULT_INSTRUMENT_DENYLIST,
    EXTENDED_INSTRUMENT_DENYLIST,
    EnrichmentOutcome,
    FilterReason,
    NEGATIVE_QUALIFIED_TOKENS,
    RESIDENTIAL_TERMS,
)
from .metadata import (
    ExtractionResult,
    FilterResult,
    ParcelEnrichment,
    PipelineResult,
    SalesStats,
)
from .parcel import (
    CleanedSale,
    DateRange,
    ParcelDetails,
    RawParcelRecord,
    SaleRecord,
    SearchResultRow,
)

__all__ = [
    "RawParcelRecord",
    "SaleRecord",
    "SearchResultRow",
    "ParcelDetails",
    "CleanedSale",
    "DateRange",
    "FilterResult",
    "ParcelEnrichment",
    "SalesStats",
    "ExtractionResult",
    "PipelineResult",
    "FilterReason",
    "EnrichmentOutcome",
    "DEFAULT_INSTRUMENT_DENYLIST",
    "EXTENDED_INSTRUMENT_DENYLIST",
    "RESIDENTIAL_TERMS",
    "NEGATIVE_QUALIFIED_TOKENS",
]
