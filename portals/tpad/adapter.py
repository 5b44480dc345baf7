"""TPAD (assessment.cot.tn.gov) portal adapter."""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from models.parcel import DateRange, ParcelDetails, RawParcelRecord, SaleRecord, SearchResultRow
from portals.base import PortalAdapter
from portals.tpad.constants import (
    ADVANCED_SEARCH_TOGGLE_TEXT,
    CLASS_SELECT,
    CLASSIFICATION_OPTIONS,
    COUNTY_SEATS,
    COUNTY_SELECT,
    CURRENT_PAGE_BUTTON,
    MIN_RESULT_CELLS,
    MIN_SALE_CELLS,
    NEXT_PAGE_BUTTON,
    RESULT_ROWS,
    RESULTS_INFO,
    RESULTS_TABLE,
    SALE_DATE_END_INPUT,
    SALE_DATE_START_INPUT,
    SALES_TABLE,
    SEARCH_BUTTON,
    TPAD_BASE_URL,
    get_county_name,
)
from utils.date_range import format_date

logger = logging.getLogger(__name__)

WHITESPACE_PATTERN = re.compile(r"\s+")
RESULT_COUNT_PATTERN = re.compile(r"of\s+([\d,]+)")

# Owner card, "Current Owner" section
CITY_STATE_ZIP_LINE = re.compile(r"^([A-Z\s]+)\s+([A-Z]{2})\s+(\d{5}(?:-\d{4})?)$")
STREET_LINE = re.compile(r"^\d+\s+\w|\d+$")
CURRENT_OWNER_SECTION = re.compile(r"Current Owner\s*(.*)$", re.IGNORECASE | re.DOTALL)
JANUARY_OWNER_SECTION = re.compile(
    r"January 1 Owner\s*(.*?)(?:Current Owner|$)", re.IGNORECASE | re.DOTALL
)

LOCATION_ADDRESS = re.compile(r"Address:\s*([A-Z0-9 ]+)")
CLASSIFICATION_TEXT = re.compile(r"(\d{2}\s*-\s*[A-Za-z]+)")

SEARCH_JS_TEMPLATE = """
(async () => {
  const sleep = (ms) => new Promise((resolve) => setTimeout(resolve, ms));

  const toggle = Array.from(document.querySelectorAll('button.accordion-button'))
    .find((button) => button.textContent.includes(%(toggle_text)s));
  if (toggle && toggle.getAttribute('aria-expanded') !== 'true') {
    toggle.click();
    await sleep(500);
  }

  const selectByLabel = (selector, label) => {
    const select = document.querySelector(selector);
    if (!select) throw new Error('Search form field not found: ' + selector);
    const option = Array.from(select.options).find((o) => o.textContent.trim() === label);
    if (!option) throw new Error('Option "' + label + '" not found in ' + selector);
    select.value = option.value;
    select.dispatchEvent(new Event('change', { bubbles: true }));
  };

  const fill = (selector, value) => {
    const input = document.querySelector(selector);
    if (!input) throw new Error('Search form field not found: ' + selector);
    input.value = value;
    input.dispatchEvent(new Event('input', { bubbles: true }));
    input.dispatchEvent(new Event('change', { bubbles: true }));
  };

  selectByLabel(%(county_select)s, %(county_name)s);
  await sleep(300);
  selectByLabel(%(class_select)s, %(class_label)s);
  await sleep(300);
  fill(%(start_input)s, %(start_date)s);
  fill(%(end_input)s, %(end_date)s);
  await sleep(300);

  // The second search button belongs to the advanced search form
  const buttons = document.querySelectorAll(%(search_button)s);
  const button = buttons.length > 1 ? buttons[1] : buttons[0];
  if (!button) throw new Error('Search button not found');
  button.click();
})();
"""

NEXT_PAGE_JS = """
(() => {
  // No-op when the target page is already showing
  const current = document.querySelector(%(current_button)s);
  if (current && current.textContent.trim() === %(target_page)s) return;
  const next = document.querySelector(%(next_button)s);
  if (next && !next.classList.contains('disabled')) next.click();
})();
"""


def _text(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return element.get_text(strip=True)


def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]


class TpadAdapter(PortalAdapter):
    """Adapter for the Tennessee Property Assessment Data site."""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self.county_name = config.get("county_name") or get_county_name(self.county_code)
        self.default_city = COUNTY_SEATS.get(self.county_code, "")
        self.classification = config.get("classification", "00")

    def get_portal_name(self) -> str:
        """Return portal identifier."""
        return "tpad"

    def get_search_url(self) -> str:
        return TPAD_BASE_URL

    def build_search_js(self, date_range: DateRange) -> str:
        """Fill county, classification and sale date range, then submit."""
        class_label = CLASSIFICATION_OPTIONS.get(self.classification, self.classification)
        values = {
            "toggle_text": ADVANCED_SEARCH_TOGGLE_TEXT,
            "county_select": COUNTY_SELECT,
            "county_name": self.county_name,
            "class_select": CLASS_SELECT,
            "class_label": class_label,
            "start_input": SALE_DATE_START_INPUT,
            "start_date": format_date(date_range.start),
            "end_input": SALE_DATE_END_INPUT,
            "end_date": format_date(date_range.end),
            "search_button": SEARCH_BUTTON,
        }
        return SEARCH_JS_TEMPLATE % {key: json.dumps(value) for key, value in values.items()}

    def build_next_page_js(self, target_page: int) -> str:
        return NEXT_PAGE_JS % {
            "current_button": json.dumps(CURRENT_PAGE_BUTTON),
            "target_page": json.dumps(str(target_page)),
            "next_button": json.dumps(NEXT_PAGE_BUTTON),
        }

    def get_search_crawler_config(self) -> Dict[str, Any]:
        return {
            "wait_for": f"css:{COUNTY_SELECT}",
            "page_timeout": 60000,
            "delay_before_return_html": 1.0,
        }

    def get_results_crawler_config(self) -> Dict[str, Any]:
        # DataTables renders rows after an XHR; "No matching records" is also a row
        return {
            "wait_for": (
                "js:() => document.querySelectorAll("
                f"{json.dumps(RESULT_ROWS)}).length > 0"
            ),
            "page_timeout": 30000,
            "delay_before_return_html": 3.0,
        }

    def get_next_page_wait_for(self, page_number: int) -> Optional[str]:
        return (
            "js:() => { const current = document.querySelector("
            f"{json.dumps(CURRENT_PAGE_BUTTON)}); "
            f"return !!current && current.textContent.trim() === '{page_number}'; }}"
        )

    def get_crawler_config(self) -> Dict[str, Any]:
        return {
            "wait_for": "css:.card",
            "page_timeout": 30000,
            "delay_before_return_html": 1.0,
        }

    def resolve_url(self, href: str) -> str:
        if not href:
            return ""
        if href.startswith("http"):
            return href
        if href.startswith("/"):
            return urljoin(TPAD_BASE_URL, href)
        if href.startswith("./"):
            return f"{TPAD_BASE_URL}{href[1:]}"
        return f"{TPAD_BASE_URL}/{href}"

    # ---- Search results ----

    def parse_result_rows(self, html: str) -> List[SearchResultRow]:
        """
        Extract rows from the results table.

        Column layout: 0 view link, 1 owner, 2 property address, 3 control
        map, 4 group, 5 parcel, 6 special interest, 7 parcel ID,
        8 subdivision, 9 lot, 10 class, 11 sale date, 12 GIS map link.
        """
        soup = BeautifulSoup(html, "html.parser")
        rows: List[SearchResultRow] = []

        for tr in soup.select(RESULT_ROWS):
            cells = tr.find_all("td")
            if len(cells) < MIN_RESULT_CELLS:
                logger.debug(f"Skipping row with only {len(cells)} cells")
                continue

            view_link = cells[0].find("a")
            gis_link = cells[12].find("a") if len(cells) > 12 else None

            row = SearchResultRow(
                parcel_id=_text(cells[7]),
                view_url=view_link.get("href", "") if view_link else "",
                owner=_text(cells[1]),
                property_address=_text(cells[2]),
                control_map=_text(cells[3]),
                group=_text(cells[4]),
                parcel=_text(cells[5]),
                special_interest=_text(cells[6]),
                subdivision=_text(cells[8]),
                lot=_text(cells[9]),
                classification=_text(cells[10]),
                sale_date=_text(cells[11]),
                gis_map_url=gis_link.get("href", "") if gis_link else "",
            )
            rows.append(row)
            logger.debug(f"Extracted result: {row.parcel_id} - {row.owner[:30]}")

        return rows

    def has_results(self, html: str) -> bool:
        soup = BeautifulSoup(html, "html.parser")
        if soup.select_one(RESULTS_TABLE) is None:
            return False
        return any(
            len(tr.find_all("td")) >= MIN_RESULT_CELLS for tr in soup.select(RESULT_ROWS)
        )

    def get_result_count(self, html: str) -> Optional[int]:
        """Read "Showing 1 to 10 of 70 entries"; fall back to counting rows."""
        soup = BeautifulSoup(html, "html.parser")
        info = soup.select_one(RESULTS_INFO)
        if info is not None:
            match = RESULT_COUNT_PATTERN.search(info.get_text(" ", strip=True))
            if match:
                return int(match.group(1).replace(",", ""))

        rows = soup.select(RESULT_ROWS)
        return len(rows) if rows else None

    def has_next_page(self, html: str) -> bool:
        soup = BeautifulSoup(html, "html.parser")
        button = soup.select_one(NEXT_PAGE_BUTTON)
        if button is None:
            return False

        disabled = (
            "disabled" in (button.get("class") or [])
            or button.has_attr("disabled")
            or button.get("aria-disabled") == "true"
        )
        return not disabled

    def get_current_page(self, html: str) -> int:
        soup = BeautifulSoup(html, "html.parser")
        current = _text(soup.select_one(CURRENT_PAGE_BUTTON))
        return int(current) if current.isdigit() else 1

    def row_to_raw_record(self, row: SearchResultRow) -> RawParcelRecord:
        return RawParcelRecord(
            parcel_id=row.parcel_id,
            owner_name=row.owner,
            property_address=WHITESPACE_PATTERN.sub(" ", row.property_address).strip(),
            city=self.default_city,
            classification=row.classification,
            land_use=row.classification,
            sale_date=row.sale_date,
            source_url=self.resolve_url(row.view_url),
        )

    # ---- Parcel detail page ----

    def parse_parcel_details(self, html: str, url: str, parcel_id: str) -> ParcelDetails:
        """
        Parse owner, location, classification and sales history.

        The "Current Owner" block is preferred for owner name, street, city
        and zip since it is who would be contacted; the "January 1 Owner"
        block supplies the mailing address.
        """
        soup = BeautifulSoup(html, "html.parser")

        owner = self._parse_owner_card(soup)

        property_address = owner["current_address"]
        if not property_address:
            property_address = self._parse_location_address(soup)

        classification = self._parse_classification(soup)
        sales = self._parse_sales_history(soup)

        details = ParcelDetails(
            parcel_id=parcel_id,
            source_url=url,
            owner_name=owner["current_owner"] or owner["january_owner"],
            owner_mailing_address=owner["january_address"],
            property_address=property_address,
            city=owner["current_city"],
            zip=owner["current_zip"],
            classification=classification,
            land_use=classification,
            sales=tuple(sales),
        )

        logger.debug(
            f"Parsed parcel {parcel_id}: {len(sales)} sales, owner {details.owner_name[:30]!r}"
        )
        return details

    def _find_card_body(self, soup: BeautifulSoup, heading: str) -> Optional[Tag]:
        for card in soup.select(".card"):
            if heading in card.get_text():
                return card.select_one(".card-body") or card
        return None

    def _parse_owner_card(self, soup: BeautifulSoup) -> Dict[str, str]:
        result = {
            "january_owner": "",
            "january_address": "",
            "current_owner": "",
            "current_address": "",
            "current_city": "",
            "current_zip": "",
        }

        body = self._find_card_body(soup, "Property Owner")
        if body is None:
            return result

        text = body.get_text("\n")

        current = CURRENT_OWNER_SECTION.search(text)
        if current:
            for line in _lines(current.group(1)):
                city_state_zip = CITY_STATE_ZIP_LINE.match(line)
                if city_state_zip:
                    result["current_city"] = city_state_zip.group(1).strip()
                    result["current_zip"] = city_state_zip.group(3)
                elif STREET_LINE.search(line):
                    result["current_address"] = line
                elif not result["current_owner"] and "Current Owner" not in line:
                    result["current_owner"] = line

        january = JANUARY_OWNER_SECTION.search(text)
        if january:
            owner_lines, address_lines = self._split_owner_lines(_lines(january.group(1)))
            result["january_owner"] = " ".join(owner_lines).strip()
            result["january_address"] = ", ".join(address_lines).strip()

        return result

    @staticmethod
    def _split_owner_lines(lines: List[str]) -> Tuple[List[str], List[str]]:
        """Lines before the first one containing a digit are the name."""
        for index, line in enumerate(lines):
            if any(char.isdigit() for char in line):
                return lines[:index], lines[index:]
        return lines, []

    def _parse_location_address(self, soup: BeautifulSoup) -> str:
        body = self._find_card_body(soup, "Property Location")
        if body is None:
            return ""
        match = LOCATION_ADDRESS.search(body.get_text("\n"))
        return WHITESPACE_PATTERN.sub(" ", match.group(1)).strip() if match else ""

    def _parse_classification(self, soup: BeautifulSoup) -> str:
        body = self._find_card_body(soup, "General Information")
        if body is None:
            return ""
        match = CLASSIFICATION_TEXT.search(body.get_text(" "))
        return match.group(1).strip() if match else ""

    def _parse_sales_history(self, soup: BeautifulSoup) -> List[SaleRecord]:
        """
        Read the sales table.

        Columns: Sale Date | Price | Book | Page | Vacant/Improved |
        Type Instrument | Qualification
        """
        for table in soup.select(SALES_TABLE):
            headers = [th.get_text(strip=True).lower() for th in table.find_all("th")]
            if "sale date" not in headers or "price" not in headers:
                continue

            sales: List[SaleRecord] = []
            for tr in table.find_all("tr"):
                cells = tr.find_all("td")
                if len(cells) < MIN_SALE_CELLS:
                    continue

                sale = SaleRecord(
                    sale_date=_text(cells[0]),
                    sale_price=_text(cells[1]),
                    book_page=f"{_text(cells[2])}-{_text(cells[3])}",
                    deed_instrument=_text(cells[5]),
                    qualified_sale=_text(cells[6]),
                )
                if sale.sale_date or sale.sale_price:
                    sales.append(sale)

            return sales

        return []
