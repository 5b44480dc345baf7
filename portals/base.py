"""Abstract base class for property-records site adapters."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from models.parcel import DateRange, ParcelDetails, RawParcelRecord, SearchResultRow


class PortalAdapter(ABC):
    """
    Abstract base class for property-records site adapters.

    An adapter knows one site's markup: the JavaScript that drives its search
    form and pager, how to read result rows and pager state out of rendered
    HTML, and how to parse a parcel detail page. It never touches the browser
    itself; the walker and enricher feed it HTML from a BrowserSession.

    Site-agnostic logic (filtering, deduplication, normalization, output)
    lives in the processors and utils packages.
    """

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize adapter with configuration.

        Args:
            config: Full configuration dictionary (see utils.config)
        """
        self.config = config
        self.county_code = str(config.get("county_code", ""))

    @abstractmethod
    def get_portal_name(self) -> str:
        """
        Return portal identifier.

        Returns:
            Portal name (e.g., "tpad")
        """
        pass

    @abstractmethod
    def get_search_url(self) -> str:
        """Return the URL of the search page."""
        pass

    @abstractmethod
    def build_search_js(self, date_range: DateRange) -> str:
        """
        Build the JavaScript that fills and submits the search form.

        Args:
            date_range: Sale date range to search for

        Returns:
            JavaScript source to run on the loaded search page
        """
        pass

    @abstractmethod
    def parse_result_rows(self, html: str) -> List[SearchResultRow]:
        """
        Extract result rows from the current results page.

        Rows without the full set of columns (e.g. "no matching records")
        are skipped.
        """
        pass

    @abstractmethod
    def has_results(self, html: str) -> bool:
        """True if the results table contains at least one real result row."""
        pass

    @abstractmethod
    def get_result_count(self, html: str) -> Optional[int]:
        """Total result count as reported by the pager, if available."""
        pass

    @abstractmethod
    def has_next_page(self, html: str) -> bool:
        """True if the pager's next control exists and is enabled."""
        pass

    @abstractmethod
    def get_current_page(self, html: str) -> int:
        """Current page number shown by the pager (1 when unknown)."""
        pass

    @abstractmethod
    def build_next_page_js(self, target_page: int) -> str:
        """
        JavaScript that advances the pager to target_page.

        Must do nothing if target_page is already showing, so that a
        retried transition does not skip a page.
        """
        pass

    @abstractmethod
    def resolve_url(self, href: str) -> str:
        """
        Turn a link from the site into an absolute URL.

        Example:
            "./Parcel/Details?id=1" → "https://.../TPAD/Parcel/Details?id=1"
        """
        pass

    @abstractmethod
    def row_to_raw_record(self, row: SearchResultRow) -> RawParcelRecord:
        """
        Convert a search result row into a raw record stub.

        Sale price and instrument are blank; they only exist on the detail page.
        """
        pass

    @abstractmethod
    def parse_parcel_details(self, html: str, url: str, parcel_id: str) -> ParcelDetails:
        """
        Parse a parcel detail page.

        This is the only place that knows the detail page layout.

        Args:
            html: Rendered detail page HTML
            url: Absolute URL the page was loaded from
            parcel_id: Parcel ID from the search results

        Returns:
            ParcelDetails (fields the page lacks are empty strings)
        """
        pass

    def get_search_crawler_config(self) -> Dict[str, Any]:
        """
        Get crawler configuration for loading the search page.

        Returns:
            Dict of crawl4ai CrawlerRunConfig parameters
        """
        return {
            "wait_for": "css:body",
            "page_timeout": 60000,
            "delay_before_return_html": 1.0,
        }

    def get_results_crawler_config(self) -> Dict[str, Any]:
        """Crawler configuration after submitting the search or paging."""
        return {
            "page_timeout": 30000,
            "delay_before_return_html": 1.0,
        }

    def get_next_page_wait_for(self, page_number: int) -> Optional[str]:
        """
        crawl4ai wait_for condition that holds once the given page is shown.

        Default: no condition, rely on delay_before_return_html.
        """
        return None

    def get_crawler_config(self) -> Dict[str, Any]:
        """
        Get crawler configuration for parcel detail pages.

        Returns:
            Dict of crawl4ai CrawlerRunConfig parameters
        """
        return {
            "wait_for": "css:main",
            "page_timeout": 30000,
            "delay_before_return_html": 1.0,
        }
