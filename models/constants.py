"""Tennessee property-records constants and enums."""

from enum import Enum
from typing import List

# Instrument terms rejected by default (filters.instrument_denylist)
DEFAULT_INSTRUMENT_DENYLIST: List[str] = [
    "Quitclaim",
    "Deed of Trust",
    "Release",
    "Correction",
    "Trustee",
    "Executor",
    "Sheriff",
    "Tax Deed",
    "Affidavit",
]

# Broader non-arm's-length vocabulary, opt-in through the config.
# Substring matching makes short terms like "TOD" hit "CUSTODIAN".
EXTENDED_INSTRUMENT_DENYLIST: List[str] = [
    "Quitclaim",
    "Quit Claim",
    "QCD",
    "Deed of Trust",
    "Trust Deed",
    "Release",
    "Correction",
    "Corrective",
    "Trustee",
    "Executor",
    "Executrix",
    "Administrator",
    "Sheriff",
    "Sheriff's Deed",
    "Tax Deed",
    "Tax Sale",
    "Affidavit",
    "Transfer on Death",
    "TOD",
    "Gift Deed",
    "Love and Affection",
    "Partition",
    "Divorce",
    "Court Order",
    "Judgment",
    "Foreclosure",
]

# Residential vocabulary matched against free-text land use
RESIDENTIAL_CLASSIFICATION_CODE = "00"
RESIDENTIAL_TERMS: List[str] = [
    "residential",
    "single family",
    "sfr",
    "duplex",
    "townhouse",
    "condo",
]

# Qualified-sale indicator values that mark a sale as unqualified
NEGATIVE_QUALIFIED_TOKENS: List[str] = ["n", "no", "false", "0"]

DEFAULT_STATE = "TN"


class FilterReason(str, Enum):
    """Why a record was rejected, in the order the predicates are evaluated."""

    OUTSIDE_DATE_RANGE = "outside_date_range"
    NON_RESIDENTIAL = "non_residential"
    LOW_SALE_PRICE = "low_sale_price"
    DENIED_INSTRUMENT = "denied_instrument"
    QUALIFIED_SALE_FAILED = "qualified_sale_failed"
    OTHER = "other"


class EnrichmentOutcome(str, Enum):
    """Which reconciliation path a parcel took during detail enrichment."""

    ENRICHED = "enriched"
    NO_SALES_IN_RANGE = "no_sales_in_range"
    FALLBACK_NO_SALES = "fallback_no_sales"
    FALLBACK_FETCH_FAILED = "fallback_fetch_failed"
