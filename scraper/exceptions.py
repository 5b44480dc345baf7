"""Scraper exceptions."""


class ScraperError(Exception):
    """Base class for scraping failures."""


class PageLoadError(ScraperError):
    """
    A crawl did not succeed.

    The message includes crawl4ai's error text so retry classification can
    spot timeouts and dropped connections.
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason}")


class SessionNotOpenError(ScraperError):
    """The browser session was used before open() or after close()."""
