"""Unit tests for field normalizers."""

import sys
from pathlib import Path

# Add parent directory to path to import project modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from processors.normalize import (
    clean_address,
    clean_owner_name,
    format_display_date,
    format_sale_price,
    is_qualified_sale,
    normalize_parcel_id,
    parse_address,
    parse_deed_instrument,
    parse_sale_date,
    parse_sale_price,
)


class TestParseSalePrice:
    """Test currency parsing."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("$1,250,000", 1250000),
            ("500000", 500000),
            ("$ 275,500.50", 275500.5),
            ("", 0),
            ("N/A", 0),
            ("nan", 0),
        ],
    )
    def test_parse(self, raw, expected):
        assert parse_sale_price(raw) == expected

    def test_none_is_zero(self):
        assert parse_sale_price(None) == 0


class TestParseSaleDate:
    """Test date normalization."""

    def test_zero_pads_us_date(self):
        assert parse_sale_date("1/8/2025") == "2025-01-08"

    def test_padded_us_date(self):
        assert parse_sale_date("12/31/2024") == "2024-12-31"

    def test_iso_passthrough(self):
        assert parse_sale_date("2025-01-08") == "2025-01-08"

    def test_garbage_passthrough(self):
        """Unrecognized strings come back unchanged, not validated."""
        assert parse_sale_date("January 8") == "January 8"
        assert parse_sale_date("13/45/2025") == "2025-13-45"

    def test_empty(self):
        assert parse_sale_date("") == ""


class TestNameAndAddressCleaning:
    """Test owner name, address and parcel id cleanup."""

    def test_owner_name_collapses_whitespace(self):
        assert clean_owner_name("  SMITH   JOHN  ") == "SMITH JOHN"

    def test_owner_name_strips_disallowed_characters(self):
        assert clean_owner_name("O'BRIEN   MARY & JOHN*") == "O'BRIEN MARY & JOHN"
        assert clean_owner_name("DOE, JANE (TRUSTEE)") == "DOE, JANE TRUSTEE"

    def test_owner_name_keeps_allowed_punctuation(self):
        assert clean_owner_name("SMITH-JONES, A. & B.") == "SMITH-JONES, A. & B."

    def test_address_upper_and_collapsed(self):
        assert clean_address(" 123  main\tst ") == "123 MAIN ST"

    def test_empty_values(self):
        assert clean_owner_name("") == ""
        assert clean_address("") == ""

    def test_parcel_id_spacing(self):
        assert normalize_parcel_id("  067    05308 000 ") == "067 05308 000"


class TestParseAddress:
    """Test composite address splitting."""

    def test_street_city_state_zip(self):
        parsed = parse_address("123 MAIN ST, COVINGTON, TN 38019")
        assert parsed == {
            "street": "123 MAIN ST",
            "city": "COVINGTON",
            "state": "TN",
            "zip": "38019",
        }

    def test_city_and_state_zip_in_one_segment(self):
        parsed = parse_address("123 MAIN ST, COVINGTON TN 38019-1234")
        assert parsed["city"] == "COVINGTON"
        assert parsed["state"] == "TN"
        assert parsed["zip"] == "38019-1234"

    def test_zip_without_space_after_state(self):
        parsed = parse_address("123 MAIN ST, COVINGTON TN38019")
        assert parsed == {
            "street": "123 MAIN ST",
            "city": "COVINGTON",
            "state": "TN",
            "zip": "38019",
        }

    def test_city_glued_to_zip_not_read_as_state(self):
        parsed = parse_address("123 MAIN ST, COVINGTON38019")
        assert parsed["city"] == "COVINGTON38019"
        assert parsed["state"] == "TN"
        assert parsed["zip"] == ""

    def test_city_not_mistaken_for_state(self):
        """The last two letters of a city name are not a state code."""
        parsed = parse_address("123 MAIN ST, COVINGTON")
        assert parsed == {"street": "123 MAIN ST", "city": "COVINGTON", "state": "TN", "zip": ""}

    def test_no_comma(self):
        parsed = parse_address("123 MAIN ST")
        assert parsed["street"] == "123 MAIN ST"
        assert parsed["city"] == ""
        assert parsed["state"] == "TN"

    def test_empty(self):
        assert parse_address("") == {"street": "", "city": "", "state": "", "zip": ""}


class TestDisplayHelpers:
    """Test formatting helpers used in reports."""

    def test_format_sale_price(self):
        assert format_sale_price(250000) == "$250,000"
        assert format_sale_price(199999.6) == "$200,000"

    def test_format_display_date(self):
        assert format_display_date("2025-01-08") == "01/08/2025"
        assert format_display_date("unknown") == "unknown"
        assert format_display_date("") == ""

    def test_parse_deed_instrument(self):
        assert parse_deed_instrument("WD - WARRANTY DEED") == "WARRANTY DEED"
        assert parse_deed_instrument("Quitclaim Deed") == "Quitclaim Deed"
        assert parse_deed_instrument("") == ""

    def test_is_qualified_sale(self):
        assert is_qualified_sale("A - ACCEPTED")
        assert is_qualified_sale("qualified")
        assert not is_qualified_sale("U - UNQUALIFIED")
        assert not is_qualified_sale("X - EXCLUDED")
        assert not is_qualified_sale("")
