"""Record processing: normalization, filtering, deduplication and transformation."""

from .dedupe import (
    deduplicate_by_owner_address,
    deduplicate_by_parcel,
    deduplicate_cleaned_sales,
    deduplicate_raw_records,
    sort_by_sale_date,
)
from .filter import classify_record, filter_records, is_likely_arms_length
from .pipeline import run_pipeline
from .transform import get_sales_stats, transform_record, transform_records

__all__ = [
    "deduplicate_raw_records",
    "deduplicate_cleaned_sales",
    "deduplicate_by_owner_address",
    "deduplicate_by_parcel",
    "sort_by_sale_date",
    "filter_records",
    "classify_record",
    "is_likely_arms_length",
    "transform_record",
    "transform_records",
    "get_sales_stats",
    "run_pipeline",
]
