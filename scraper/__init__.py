"""Browser-driven scraping of the TPAD property-records site."""

from .client import TpadClient
from .enrichment import DetailEnricher
from .exceptions import PageLoadError, ScraperError, SessionNotOpenError
from .session import BrowserSession
from .walker import SearchWalker, WalkResult

__all__ = [
    "TpadClient",
    "BrowserSession",
    "SearchWalker",
    "WalkResult",
    "DetailEnricher",
    "ScraperError",
    "PageLoadError",
    "SessionNotOpenError",
]
