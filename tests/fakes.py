"""In-memory stand-ins for the browser session and TPAD page builders."""

import asyncio
import re
from typing import Dict, List, Optional, Sequence, Tuple, Union

TARGET_PAGE_PATTERN = re.compile(r'=== "(\d+)"')


def result_row(
    parcel_id: str,
    owner: str = "SMITH JOHN",
    address: str = "123 MAIN ST",
    classification: str = "00",
    sale_date: str = "1/8/2025",
    view_href: Optional[str] = None,
) -> str:
    """One 13-column row of the search results table."""
    href = view_href if view_href is not None else f"./Parcel/Details?parcelId={parcel_id.replace(' ', '')}"
    view_cell = f'<a href="{href}">View</a>' if href else ""
    return (
        "<tr>"
        f"<td>{view_cell}</td>"
        f"<td>{owner}</td>"
        f"<td>{address}</td>"
        "<td>067</td><td></td><td>053.08</td><td>000</td>"
        f"<td>{parcel_id}</td>"
        "<td>OAK HILL</td><td>12</td>"
        f"<td>{classification}</td>"
        f"<td>{sale_date}</td>"
        '<td><a href="https://gis.example/map">Map</a></td>'
        "</tr>"
    )


def results_page(
    rows: Sequence[str],
    current_page: int = 1,
    total: Optional[int] = None,
    has_next: bool = False,
) -> str:
    """Rendered results page with a DataTables pager."""
    next_class = "paginate_button next" if has_next else "paginate_button next disabled"
    info = (
        f'<div class="dataTables_info">Showing 1 to {len(rows)} of {total} entries</div>'
        if total is not None
        else ""
    )
    return (
        "<html><body>"
        '<table id="searchResultsTable"><thead><tr><th>View</th></tr></thead>'
        f"<tbody>{''.join(rows)}</tbody></table>"
        f"{info}"
        '<div class="dataTables_paginate">'
        '<a class="paginate_button previous">Previous</a>'
        f'<a class="paginate_button current">{current_page}</a>'
        f'<a class="{next_class}">Next</a>'
        "</div></body></html>"
    )


def empty_results_page() -> str:
    return results_page(
        ['<tr><td colspan="13" class="dataTables_empty">No matching records found</td></tr>']
    )


def sale_row(
    sale_date: str,
    price: str,
    instrument: str = "WD - WARRANTY DEED",
    qualification: str = "A - ACCEPTED",
) -> Tuple[str, str, str, str]:
    return (sale_date, price, instrument, qualification)


def detail_page(
    current_owner: str = "DOE JANE",
    current_street: str = "123 MAIN ST",
    current_city_line: str = "COVINGTON TN 38019",
    january_lines: Sequence[str] = ("SMITH JOHN &amp; JANE", "PO BOX 12", "COVINGTON, TN 38019"),
    location_address: str = "123 MAIN ST",
    classification: str = "00 - Residential",
    sales: Optional[Sequence[Tuple[str, str, str, str]]] = None,
) -> str:
    """Rendered parcel detail page. sales=None omits the sales table."""
    current_lines = [line for line in (current_owner, current_street, current_city_line) if line]

    sales_html = ""
    if sales is not None:
        body = "".join(
            f"<tr><td>{date}</td><td>{price}</td><td>123</td><td>456</td>"
            f"<td>I</td><td>{instrument}</td><td>{qualification}</td></tr>"
            for date, price, instrument, qualification in sales
        )
        sales_html = (
            '<div class="card"><div class="card-header">Sale Information</div>'
            '<div class="card-body"><table class="table table-striped">'
            "<thead><tr><th>Sale Date</th><th>Price</th><th>Book</th><th>Page</th>"
            "<th>Vacant/Improved</th><th>Type Instrument</th><th>Qualification</th></tr></thead>"
            f"<tbody>{body}</tbody></table></div></div>"
        )

    return (
        "<html><body>"
        '<div class="card"><div class="card-header">Property Owner</div>'
        '<div class="card-body">'
        "<p><strong>January 1 Owner</strong></p>"
        f"<p>{'<br>'.join(january_lines)}</p>"
        "<p><strong>Current Owner</strong></p>"
        f"<p>{'<br>'.join(current_lines)}</p>"
        "</div></div>"
        '<div class="card"><div class="card-header">Property Location</div>'
        f'<div class="card-body"><p>Address: {location_address}</p>'
        "<p>Control Map: 067</p></div></div>"
        '<div class="card"><div class="card-header">General Information</div>'
        f'<div class="card-body"><p>Class: {classification}</p></div></div>'
        f"{sales_html}"
        "</body></html>"
    )


SEARCH_FORM_HTML = '<html><body><select id="countySelect"></select></body></html>'

Scripted = Union[str, BaseException, List[Union[str, BaseException]]]


class FakeSession:
    """
    Scripted BrowserSession.

    search_pages[0] is returned after the search JS runs, search_pages[n]
    for a transition to page n + 1. details maps a detail URL to HTML, an
    exception, or a list of either consumed one per call.
    """

    def __init__(
        self,
        search_pages: Sequence[str] = (),
        details: Optional[Dict[str, Scripted]] = None,
        run_js_errors: Optional[List[BaseException]] = None,
        load_errors: Optional[List[BaseException]] = None,
    ):
        self.search_pages = list(search_pages)
        self.details = dict(details or {})
        self.run_js_errors = list(run_js_errors or [])
        self.load_errors = list(load_errors or [])
        self.current_url: Optional[str] = None
        self.opened = False
        self.closed = False
        self.loaded: List[str] = []
        self.page_requests: List[int] = []
        self.run_js_calls: List[Dict] = []
        self.fetched: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def open(self) -> None:
        self.opened = True

    async def close(self) -> None:
        self.closed = True

    async def load(self, url: str, **run_options) -> str:
        self.loaded.append(url)
        if self.load_errors:
            raise self.load_errors.pop(0)
        self.current_url = url
        return SEARCH_FORM_HTML

    async def run_js(self, js_code: str, **run_options) -> str:
        self.run_js_calls.append(run_options)
        if self.run_js_errors:
            raise self.run_js_errors.pop(0)

        match = TARGET_PAGE_PATTERN.search(js_code)
        page = int(match.group(1)) if match else 1
        if match:
            self.page_requests.append(page)
        return self.search_pages[page - 1]

    async def fetch(self, url: str, **run_options) -> str:
        self.fetched.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            scripted = self.details.get(url)
            if isinstance(scripted, list):
                scripted = scripted.pop(0) if len(scripted) > 1 else scripted[0]
            if scripted is None:
                raise AssertionError(f"Unexpected fetch: {url}")
            if isinstance(scripted, BaseException):
                raise scripted
            return scripted
        finally:
            self.in_flight -= 1


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
