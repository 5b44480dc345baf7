"""Normalizers for free-text price, date, name and address fields."""

import re
from typing import Dict

from models.constants import DEFAULT_STATE

# "12/1/2025" or "12/01/2025"
US_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
ISO_DATE_PREFIX_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")

PRICE_STRIP_PATTERN = re.compile(r"[$,\s]")
WHITESPACE_PATTERN = re.compile(r"\s+")
OWNER_NAME_DISALLOWED = re.compile(r"[^A-Za-z0-9\s,.'&-]")

# Trailing "TN 38019" / "TN38019" / "TN 38019-1234" / "TN" on the last address segment.
# The state must stand alone so a city like "COVINGTON" is not read as "ON".
STATE_ZIP_PATTERN = re.compile(
    r"(?:^|\s)([A-Z]{2})(?:\s*(\d{5}(?:-\d{4})?))?$", re.IGNORECASE
)

# "WD - WARRANTY DEED" -> "WARRANTY DEED"
INSTRUMENT_CODE_PATTERN = re.compile(r"^[A-Z]+\s*-\s*(.+)$")


def parse_sale_price(price_str: str) -> float:
    """
    Parse a currency string to a number.

    Examples:
        "$1,250,000" → 1250000.0
        "500000" → 500000.0
        "" or "N/A" → 0
    """
    if not price_str:
        return 0

    cleaned = PRICE_STRIP_PATTERN.sub("", price_str)
    try:
        value = float(cleaned)
    except ValueError:
        return 0
    # float() accepts "nan" and "inf"; neither is a price
    if value != value or value in (float("inf"), float("-inf")):
        return 0
    return value


def parse_sale_date(date_str: str) -> str:
    """
    Normalize a sale date to YYYY-MM-DD.

    Accepts M/D/YYYY (zero-padded on output) or an ISO date, which is
    returned unchanged. Anything else is passed through as-is.
    """
    if not date_str:
        return ""

    match = US_DATE_PATTERN.match(date_str)
    if match:
        month, day, year = match.groups()
        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    return date_str


def normalize_parcel_id(parcel_id: str) -> str:
    """Collapse the site's inconsistent spacing ("067    05308 000")."""
    return WHITESPACE_PATTERN.sub(" ", (parcel_id or "").strip())


def clean_owner_name(name: str) -> str:
    """Collapse whitespace and drop characters that don't belong in a name."""
    if not name:
        return ""
    collapsed = WHITESPACE_PATTERN.sub(" ", name.strip())
    return OWNER_NAME_DISALLOWED.sub("", collapsed)


def clean_address(address: str) -> str:
    """Collapse whitespace and uppercase."""
    if not address:
        return ""
    return WHITESPACE_PATTERN.sub(" ", address.strip()).upper()


def parse_address(full_address: str) -> Dict[str, str]:
    """
    Split a composite "Street, City, ST ZIP" string into components.

    Only used as a fallback when city/zip are not otherwise known.

    Returns:
        Dict with street, city, state, zip (empty strings when unknown)
    """
    if not full_address:
        return {"street": "", "city": "", "state": "", "zip": ""}

    parts = [part.strip() for part in full_address.split(",")]

    if len(parts) < 2:
        return {"street": full_address, "city": "", "state": DEFAULT_STATE, "zip": ""}

    street = parts[0]
    last_part = parts[-1]

    match = STATE_ZIP_PATTERN.search(last_part)
    if match:
        state = match.group(1).upper()
        zip_code = match.group(2) or ""
        if len(parts) > 2:
            city = ", ".join(parts[1:-1])
        else:
            city = last_part[: match.start()].strip()
        return {"street": street, "city": city, "state": state, "zip": zip_code}

    return {"street": street, "city": parts[1], "state": DEFAULT_STATE, "zip": ""}


def format_sale_price(price: float) -> str:
    """Format as whole US dollars, e.g. 250000 → "$250,000"."""
    return f"${price:,.0f}"


def format_display_date(iso_date: str) -> str:
    """Format YYYY-MM-DD as MM/DD/YYYY; other strings are returned unchanged."""
    if not iso_date:
        return ""
    match = ISO_DATE_PREFIX_PATTERN.match(iso_date)
    if match:
        year, month, day = match.groups()
        return f"{month}/{day}/{year}"
    return iso_date


def parse_deed_instrument(instrument_str: str) -> str:
    """Strip a leading instrument code: "WD - WARRANTY DEED" → "WARRANTY DEED"."""
    if not instrument_str:
        return ""
    match = INSTRUMENT_CODE_PATTERN.match(instrument_str.strip())
    if match:
        return match.group(1).strip()
    return instrument_str.strip()


def is_qualified_sale(qualification_str: str) -> bool:
    """Qualification codes starting with A (ACCEPTED) mark a qualified sale."""
    code = (qualification_str or "").strip().upper()
    if "UNQUALIFIED" in code:
        return False
    return code.startswith("A") or "ACCEPTED" in code or "QUALIFIED" in code
