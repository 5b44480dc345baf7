"""Deduplication passes over raw and cleaned sale records."""

import logging
from typing import Dict, List, Set

from models.parcel import CleanedSale, RawParcelRecord
from processors.normalize import normalize_parcel_id, parse_sale_date, parse_sale_price

logger = logging.getLogger(__name__)


def _upper(value) -> str:
    return (value or "").strip().upper()


def generate_sale_key(record: RawParcelRecord) -> str:
    """parcel_id|sale_date|sale_price, with the id whitespace-normalized."""
    parcel_id = normalize_parcel_id(record.parcel_id)
    sale_date = parse_sale_date(record.sale_date)
    sale_price = parse_sale_price(record.sale_price)
    return f"{parcel_id}|{sale_date}|{sale_price}"


def generate_cleaned_sale_key(sale: CleanedSale) -> str:
    """parcel_id|ADDRESS|sale_date|sale_price for a cleaned sale."""
    parcel_id = normalize_parcel_id(sale.parcel_id)
    return f"{parcel_id}|{_upper(sale.situs_address)}|{sale.sale_date}|{sale.sale_price}"


def generate_address_key(sale: CleanedSale) -> str:
    """ADDRESS|CITY|sale_date|sale_price; catches parcel id formatting drift."""
    return f"{_upper(sale.situs_address)}|{_upper(sale.city)}|{sale.sale_date}|{sale.sale_price}"


def deduplicate_raw_records(records: List[RawParcelRecord]) -> List[RawParcelRecord]:
    """Drop repeated parcel/date/price combinations, keeping the first occurrence."""
    seen: Set[str] = set()
    unique: List[RawParcelRecord] = []

    for record in records:
        key = generate_sale_key(record)
        if key not in seen:
            seen.add(key)
            unique.append(record)

    removed = len(records) - len(unique)
    if removed > 0:
        logger.info(f"Removed {removed} duplicate raw records ({len(records)} → {len(unique)})")

    return unique


def deduplicate_cleaned_sales(sales: List[CleanedSale]) -> List[CleanedSale]:
    """
    Drop a sale when either its parcel key or its address key was already seen.

    Running this on its own output removes nothing further.
    """
    seen_by_key: Set[str] = set()
    seen_by_address: Set[str] = set()
    unique: List[CleanedSale] = []

    for sale in sales:
        primary_key = generate_cleaned_sale_key(sale)
        address_key = generate_address_key(sale)

        if primary_key in seen_by_key or address_key in seen_by_address:
            continue

        seen_by_key.add(primary_key)
        seen_by_address.add(address_key)
        unique.append(sale)

    removed = len(sales) - len(unique)
    if removed > 0:
        logger.info(f"Deduplicated cleaned sales: removed {removed} ({len(sales)} → {len(unique)})")

    return unique


def deduplicate_by_parcel(records: List[RawParcelRecord]) -> List[RawParcelRecord]:
    """Keep only the most recent sale per parcel."""
    by_parcel: Dict[str, RawParcelRecord] = {}

    for record in records:
        parcel_id = record.parcel_id.strip()
        existing = by_parcel.get(parcel_id)
        if existing is None:
            by_parcel[parcel_id] = record
        elif parse_sale_date(record.sale_date) > parse_sale_date(existing.sale_date):
            by_parcel[parcel_id] = record

    return list(by_parcel.values())


def sort_by_sale_date(
    records: List[RawParcelRecord], ascending: bool = False
) -> List[RawParcelRecord]:
    """Sort by parsed sale date, most recent first unless ascending."""
    return sorted(
        records,
        key=lambda record: parse_sale_date(record.sale_date),
        reverse=not ascending,
    )


def deduplicate_by_owner_address(sales: List[CleanedSale]) -> List[CleanedSale]:
    """
    Collapse sales sharing the same owner and situs address.

    The highest-priced sale survives (the house rather than an adjoining land
    parcel) in the position where that owner/address was first seen. Sales
    with neither owner nor address are dropped.
    """
    by_owner_address: Dict[str, CleanedSale] = {}

    for sale in sales:
        key = f"{_upper(sale.owner_name)}|{_upper(sale.situs_address)}"
        if key == "|":
            continue

        existing = by_owner_address.get(key)
        if existing is None or sale.sale_price > existing.sale_price:
            by_owner_address[key] = sale

    unique = list(by_owner_address.values())

    removed = len(sales) - len(unique)
    if removed > 0:
        logger.info(f"Deduplicated by owner+address: removed {removed} ({len(sales)} → {len(unique)})")

    return unique
