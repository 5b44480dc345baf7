"""Unit tests for the search/pagination walker."""

import asyncio
import sys
from datetime import date
from pathlib import Path

# Add parent directory to path to import project modules
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from fakes import FakeSession, RecordingSleep, empty_results_page, result_row, results_page
from models.parcel import DateRange
from portals.tpad.adapter import TpadAdapter
from scraper.exceptions import PageLoadError
from scraper.walker import SearchWalker

SEARCH_URL = "https://assessment.cot.tn.gov/TPAD"


@pytest.fixture
def date_range():
    return DateRange(start=date(2025, 1, 6), end=date(2025, 1, 12), label="Week of 2025-01-06")


@pytest.fixture
def config():
    return {
        "portal": "tpad",
        "county_code": "084",
        "county_name": "Tipton",
        "scraping": {"max_retries": 2, "max_pages": None},
    }


def three_pages():
    return [
        results_page([result_row("A1"), result_row("A2")], current_page=1, total=5, has_next=True),
        results_page([result_row("B1"), result_row("B2")], current_page=2, total=5, has_next=True),
        results_page([result_row("C1")], current_page=3, total=5, has_next=False),
    ]


def walk(session, config, date_range, sleep=None):
    walker = SearchWalker(session, TpadAdapter(config), config, sleep=sleep or RecordingSleep())
    return asyncio.run(walker.walk(date_range))


class TestWalk:
    """Test the navigate, search, paginate loop."""

    def test_walks_every_page_in_order(self, config, date_range):
        session = FakeSession(three_pages())

        result = walk(session, config, date_range)

        assert session.loaded == [SEARCH_URL]
        assert session.page_requests == [2, 3]
        assert [stub.parcel_id for stub in result.stubs] == ["A1", "A2", "B1", "B2", "C1"]
        assert result.total_pages == 3
        assert result.estimated_count == 5
        assert result.parcel_urls["B2"] == (
            "https://assessment.cot.tn.gov/TPAD/Parcel/Details?parcelId=B2"
        )

    def test_stubs_have_blank_price_and_instrument(self, config, date_range):
        result = walk(FakeSession(three_pages()), config, date_range)

        for stub in result.stubs:
            assert stub.sale_price == ""
            assert stub.deed_instrument == ""
            assert stub.source_url.startswith("https://assessment.cot.tn.gov/TPAD/")

    def test_zero_results_skip_pagination(self, config, date_range):
        session = FakeSession([empty_results_page()])

        result = walk(session, config, date_range)

        assert result.stubs == []
        assert result.parcel_urls == {}
        assert result.total_pages == 0
        assert session.page_requests == []

    def test_disabled_next_button_ends_walk(self, config, date_range):
        pages = three_pages()
        pages[0] = results_page([result_row("A1")], current_page=1, has_next=False)
        session = FakeSession(pages)

        result = walk(session, config, date_range)

        assert result.total_pages == 1
        assert session.page_requests == []

    def test_max_pages(self, config, date_range):
        config["scraping"]["max_pages"] = 2
        session = FakeSession(three_pages())

        result = walk(session, config, date_range)

        assert result.total_pages == 2
        assert session.page_requests == [2]
        assert len(result.stubs) == 4

    def test_row_without_link_kept_as_stub_only(self, config, date_range):
        page = results_page([result_row("A1"), result_row("A2", view_href="")])

        result = walk(FakeSession([page]), config, date_range)

        assert len(result.stubs) == 2
        assert list(result.parcel_urls) == ["A1"]

    def test_settles_after_page_transitions(self, config, date_range):
        sleep = RecordingSleep()

        walk(FakeSession(three_pages()), config, date_range, sleep=sleep)

        assert sleep.delays == [0.5, 0.5]


class TestWalkErrors:
    """Test retry and failure behavior."""

    def test_transient_page_error_retried_without_skipping(self, config, date_range):
        session = FakeSession(three_pages())
        original_run_js = session.run_js
        failures = [PageLoadError(SEARCH_URL, "Timeout 30000ms exceeded")]

        async def flaky_run_js(js_code, **run_options):
            if '=== "2"' in js_code and failures:
                raise failures.pop(0)
            return await original_run_js(js_code, **run_options)

        session.run_js = flaky_run_js
        sleep = RecordingSleep()

        result = walk(session, config, date_range, sleep=sleep)

        assert session.page_requests == [2, 3]
        assert [stub.parcel_id for stub in result.stubs] == ["A1", "A2", "B1", "B2", "C1"]
        assert len(sleep.delays) == 3

    def test_navigation_retried(self, config, date_range):
        session = FakeSession(
            three_pages(), load_errors=[PageLoadError(SEARCH_URL, "net::ERR_CONNECTION_RESET (ECONNRESET)")]
        )

        result = walk(session, config, date_range)

        assert session.loaded == [SEARCH_URL, SEARCH_URL]
        assert result.total_pages == 3

    def test_navigation_failure_fatal_after_retries(self, config, date_range):
        errors = [PageLoadError(SEARCH_URL, "Timeout exceeded") for _ in range(3)]
        session = FakeSession(three_pages(), load_errors=errors)

        with pytest.raises(PageLoadError):
            walk(session, config, date_range)

        assert len(session.loaded) == 3

    def test_non_network_error_not_retried(self, config, date_range):
        session = FakeSession(three_pages(), run_js_errors=[RuntimeError("Search form field not found")])

        with pytest.raises(RuntimeError, match="Search form field"):
            walk(session, config, date_range)

        assert len(session.run_js_calls) == 1
