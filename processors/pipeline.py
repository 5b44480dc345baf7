"""Post-scrape processing: dedup, filter, transform, dedup again."""

import logging
from typing import Any, Dict, List

from models.metadata import PipelineResult
from models.parcel import DateRange, RawParcelRecord
from processors.dedupe import (
    deduplicate_by_owner_address,
    deduplicate_cleaned_sales,
    deduplicate_raw_records,
)
from processors.filter import filter_records
from processors.transform import transform_records

logger = logging.getLogger(__name__)


def run_pipeline(
    raw_records: List[RawParcelRecord],
    config: Dict[str, Any],
    date_range: DateRange,
) -> PipelineResult:
    """
    Run the fixed processing sequence over scraped records.

    Order matters: raw dedup, filter, transform, cleaned-sale dedup, then
    the owner+address pass so each owner/address is contacted once.
    """
    deduped = deduplicate_raw_records(raw_records)
    filter_result = filter_records(deduped, config, date_range)

    transformed = transform_records(filter_result.passed)
    deduped_sales = deduplicate_cleaned_sales(transformed)
    cleaned_sales = deduplicate_by_owner_address(deduped_sales)

    logger.info(
        f"Pipeline: {len(raw_records)} raw → {len(deduped)} unique → "
        f"{len(filter_result.passed)} passed → {len(cleaned_sales)} cleaned"
    )

    return PipelineResult(
        deduped_raw=deduped,
        filter_result=filter_result,
        cleaned_sales=cleaned_sales,
    )
