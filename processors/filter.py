"""Filter engine: keep arm's-length residential sales inside the target week."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from models.constants import (
    DEFAULT_INSTRUMENT_DENYLIST,
    NEGATIVE_QUALIFIED_TOKENS,
    RESIDENTIAL_CLASSIFICATION_CODE,
    RESIDENTIAL_TERMS,
    FilterReason,
)
from models.metadata import FilterResult
from models.parcel import DateRange, RawParcelRecord
from processors.normalize import parse_sale_date, parse_sale_price
from utils.date_range import is_date_in_range

logger = logging.getLogger(__name__)


def _denylist(config: Dict[str, Any]) -> List[str]:
    return config.get("filters", {}).get("instrument_denylist") or DEFAULT_INSTRUMENT_DENYLIST


def _min_sale_price(config: Dict[str, Any]) -> float:
    return config.get("filters", {}).get("min_sale_price", 0) or 0


def is_denied_instrument(instrument: str, denylist: Iterable[str]) -> bool:
    """True if the instrument text contains any denylisted term (case-insensitive)."""
    if not instrument:
        return False
    lowered = instrument.lower()
    return any(term.lower() in lowered for term in denylist)


def is_residential(record: RawParcelRecord) -> bool:
    """
    Residential check against the assessor classification and land use.

    Classification "00" (or any classification mentioning "residential")
    qualifies, as does land use containing one of RESIDENTIAL_TERMS.
    """
    classification = (record.classification or "").strip().lower()
    land_use = (record.land_use or "").lower()

    if classification == RESIDENTIAL_CLASSIFICATION_CODE or "residential" in classification:
        return True

    return any(term in land_use for term in RESIDENTIAL_TERMS)


def _qualified_failed(record: RawParcelRecord) -> bool:
    indicator = (record.qualified_sale or "").strip().lower()
    return bool(indicator) and indicator in NEGATIVE_QUALIFIED_TOKENS


def is_likely_arms_length(record: RawParcelRecord, config: Dict[str, Any]) -> bool:
    """Price, instrument and qualification checks only (no date or land use)."""
    if parse_sale_price(record.sale_price) < _min_sale_price(config):
        return False
    if is_denied_instrument(record.deed_instrument, _denylist(config)):
        return False
    return not _qualified_failed(record)


def classify_record(
    record: RawParcelRecord, config: Dict[str, Any], date_range: DateRange
) -> Optional[FilterReason]:
    """
    Return the first reason the record fails, or None if it passes.

    Predicates run in FilterReason order: date range, residential, price,
    instrument, qualified indicator. A blank sale date skips the date check.
    """
    sale_date = parse_sale_date(record.sale_date)
    if sale_date and not is_date_in_range(sale_date, date_range):
        return FilterReason.OUTSIDE_DATE_RANGE

    if not is_residential(record):
        return FilterReason.NON_RESIDENTIAL

    if parse_sale_price(record.sale_price) < _min_sale_price(config):
        return FilterReason.LOW_SALE_PRICE

    if is_denied_instrument(record.deed_instrument, _denylist(config)):
        return FilterReason.DENIED_INSTRUMENT

    if _qualified_failed(record):
        return FilterReason.QUALIFIED_SALE_FAILED

    return None


def filter_records(
    records: List[RawParcelRecord], config: Dict[str, Any], date_range: DateRange
) -> FilterResult:
    """
    Split records into passed and filtered, counting each rejection reason.

    Every record lands in exactly one of the two lists, and the reason
    counts sum to len(filtered).
    """
    result = FilterResult()

    for record in records:
        reason = classify_record(record, config, date_range)
        if reason is None:
            result.passed.append(record)
        else:
            result.filtered.append(record)
            result.reasons[reason.value] += 1

    logger.info(
        f"Filtering complete: {len(result.passed)} passed, {len(result.filtered)} filtered"
    )
    for reason, count in result.reasons.items():
        if count > 0:
            logger.info(f"  - {reason}: {count}")

    return result
