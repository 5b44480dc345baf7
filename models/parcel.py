"""Parcel and sale data models."""

from dataclasses import asdict, dataclass, field, replace
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class RawParcelRecord:
    """
    One scraped sale candidate, before filtering.

    Produced either from a search-result row (price and instrument still
    blank) or from one sale-history row of a parcel detail page. All fields
    are the site's text, untouched apart from whitespace trimming.
    """

    parcel_id: str
    owner_name: str = ""
    property_address: str = ""
    city: str = ""
    zip: str = ""
    classification: str = ""
    land_use: str = ""
    sale_date: str = ""
    sale_price: str = ""
    deed_instrument: str = ""
    qualified_sale: str = ""
    source_url: str = ""

    # Carried through from the detail page when available
    owner_mailing_address: str = ""
    acreage: str = ""
    assessed_value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    def with_source_url(self, source_url: str) -> "RawParcelRecord":
        """Copy of this record pointing at a different source URL."""
        return replace(self, source_url=source_url)


@dataclass(frozen=True)
class SearchResultRow:
    """One row of the search results table, as displayed."""

    parcel_id: str
    view_url: str = ""
    owner: str = ""
    property_address: str = ""
    control_map: str = ""
    group: str = ""
    parcel: str = ""
    special_interest: str = ""
    subdivision: str = ""
    lot: str = ""
    classification: str = ""
    sale_date: str = ""
    gis_map_url: str = ""


@dataclass(frozen=True)
class SaleRecord:
    """One historical transaction from a parcel's sales-history table."""

    sale_date: str
    sale_price: str
    deed_instrument: str = ""
    qualified_sale: str = ""
    book_page: str = ""
    grantor: str = ""
    grantee: str = ""


@dataclass(frozen=True)
class ParcelDetails:
    """Owner, location and sales history parsed from a parcel detail page."""

    parcel_id: str
    source_url: str
    owner_name: str = ""
    owner_mailing_address: str = ""
    property_address: str = ""
    city: str = ""
    zip: str = ""
    classification: str = ""
    land_use: str = ""
    sales: Tuple[SaleRecord, ...] = ()

    def to_raw_record(self, sale: SaleRecord) -> RawParcelRecord:
        """Build a raw record carrying this parcel's data and one specific sale."""
        return RawParcelRecord(
            parcel_id=self.parcel_id,
            owner_name=self.owner_name,
            property_address=self.property_address,
            city=self.city,
            zip=self.zip,
            classification=self.classification,
            land_use=self.land_use,
            sale_date=sale.sale_date,
            sale_price=sale.sale_price,
            deed_instrument=sale.deed_instrument,
            qualified_sale=sale.qualified_sale,
            source_url=self.source_url,
            owner_mailing_address=self.owner_mailing_address,
        )


@dataclass(frozen=True)
class CleanedSale:
    """
    Canonical output record.

    sale_price is whole dollars, sale_date is YYYY-MM-DD (or whatever the
    site gave us when it could not be parsed), and missing owner data is
    None rather than an empty string.
    """

    parcel_id: str
    situs_address: str
    city: str
    zip: str
    sale_date: str
    sale_price: int
    deed_instrument: str = ""
    land_use: str = ""
    source_url: str = ""
    owner_name: Optional[str] = None
    owner_mailing_address: Optional[str] = None
    state: str = "TN"
    extracted_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary in output column order."""
        return {name: getattr(self, name) for name in CLEANED_SALE_FIELDS}


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of sale dates with a display label."""

    start: date
    end: date
    label: str


# Output column order for cleaned sales
CLEANED_SALE_FIELDS: List[str] = [
    "parcel_id",
    "situs_address",
    "city",
    "state",
    "zip",
    "owner_name",
    "owner_mailing_address",
    "sale_date",
    "sale_price",
    "deed_instrument",
    "land_use",
    "source_url",
    "extracted_at",
]

# Output column order for raw records
RAW_RECORD_FIELDS: List[str] = [
    "parcel_id",
    "owner_name",
    "property_address",
    "city",
    "zip",
    "classification",
    "land_use",
    "acreage",
    "assessed_value",
    "sale_date",
    "sale_price",
    "deed_instrument",
    "qualified_sale",
    "source_url",
]
