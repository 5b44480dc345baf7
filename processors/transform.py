"""Transform raw records into the canonical cleaned-sale schema."""

import logging
from typing import List

from models.constants import DEFAULT_STATE
from models.metadata import SalesStats
from models.parcel import CleanedSale, RawParcelRecord
from processors.normalize import (
    clean_address,
    clean_owner_name,
    parse_address,
    parse_sale_date,
    parse_sale_price,
)

logger = logging.getLogger(__name__)


def transform_record(record: RawParcelRecord) -> CleanedSale:
    """
    Convert one raw record to a CleanedSale.

    City and zip are parsed out of the address only when the record has no
    city and the address looks composite (contains a comma).
    """
    sale_price = int(round(parse_sale_price(record.sale_price)))
    sale_date = parse_sale_date(record.sale_date)
    situs_address = clean_address(record.property_address)

    city = (record.city or "").strip()
    zip_code = (record.zip or "").strip()

    if not city and "," in situs_address:
        parsed = parse_address(situs_address)
        city = parsed["city"]
        zip_code = zip_code or parsed["zip"]

    owner_name = clean_owner_name(record.owner_name)
    mailing_address = (record.owner_mailing_address or "").strip()

    return CleanedSale(
        parcel_id=record.parcel_id.strip(),
        situs_address=situs_address,
        city=city.upper(),
        state=DEFAULT_STATE,
        zip=zip_code,
        owner_name=owner_name or None,
        owner_mailing_address=mailing_address or None,
        sale_date=sale_date,
        sale_price=max(sale_price, 0),
        deed_instrument=(record.deed_instrument or "").strip(),
        land_use=(record.land_use or "").strip() or (record.classification or "").strip(),
        source_url=record.source_url or "",
    )


def transform_records(records: List[RawParcelRecord]) -> List[CleanedSale]:
    """Transform a batch of raw records."""
    transformed = [transform_record(record) for record in records]
    logger.debug(f"Transformed {len(records)} records")
    return transformed


def get_sales_stats(sales: List[CleanedSale]) -> SalesStats:
    """
    Count, total, average, median, min and max of sale prices.

    Returns all zeros for an empty list.
    """
    if not sales:
        return SalesStats()

    prices = sorted(sale.sale_price for sale in sales)
    total_value = sum(prices)

    middle = len(prices) // 2
    if len(prices) % 2 == 0:
        median_price = (prices[middle - 1] + prices[middle]) / 2
    else:
        median_price = prices[middle]

    return SalesStats(
        count=len(prices),
        total_value=total_value,
        average_price=total_value / len(prices),
        median_price=median_price,
        min_price=prices[0],
        max_price=prices[-1],
    )
