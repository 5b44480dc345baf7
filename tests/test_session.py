"""Unit tests for the browser session wrapper, with crawl4ai's crawler faked."""

import asyncio
import sys
from pathlib import Path
from types import SimpleNamespace

# Add parent directory to path to import project modules
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from scraper import session as session_module
from scraper.exceptions import PageLoadError, SessionNotOpenError
from scraper.session import BrowserSession


class FakeCrawler:
    """Stand-in for AsyncWebCrawler recording every arun call."""

    created = []

    def __init__(self, config=None):
        self.config = config
        self.started = False
        self.closed = False
        self.killed = []
        self.calls = []
        self.results = []
        self.crawler_strategy = SimpleNamespace(kill_session=self._kill_session)
        FakeCrawler.created.append(self)

    async def _kill_session(self, session_id):
        self.killed.append(session_id)

    async def start(self):
        self.started = True

    async def close(self):
        self.closed = True

    async def arun(self, url, config):
        self.calls.append((url, config))
        if self.results:
            return self.results.pop(0)
        return SimpleNamespace(success=True, html=f"<html>{url}</html>", error_message=None)


@pytest.fixture(autouse=True)
def fake_crawler(monkeypatch):
    FakeCrawler.created = []
    monkeypatch.setattr(session_module, "AsyncWebCrawler", FakeCrawler)
    return FakeCrawler


class TestBrowserSession:
    """Test session lifecycle and crawl calls."""

    def test_open_and_close(self):
        async def run():
            async with BrowserSession(headless=True) as session:
                assert session.is_open
                await session.load("https://example.test/search")
            return session

        session = asyncio.run(run())
        crawler = FakeCrawler.created[0]

        assert not session.is_open
        assert crawler.started and crawler.closed
        assert crawler.killed == [session.session_id]
        assert crawler.config.headless is True

    def test_close_without_page_skips_kill(self):
        async def run():
            async with BrowserSession():
                pass

        asyncio.run(run())

        assert FakeCrawler.created[0].killed == []

    def test_load_and_run_js_share_session(self):
        async def run():
            async with BrowserSession() as session:
                await session.load("https://example.test/search", wait_for="css:#countySelect")
                html = await session.run_js("document.title", delay_before_return_html=0.1)
                return session, html

        session, html = asyncio.run(run())
        calls = FakeCrawler.created[0].calls

        assert html == "<html>https://example.test/search</html>"
        load_config, js_config = calls[0][1], calls[1][1]
        assert load_config.session_id == session.session_id
        assert load_config.wait_for == "css:#countySelect"
        assert js_config.session_id == session.session_id
        assert js_config.js_only is True
        assert js_config.js_code == "document.title"
        assert calls[1][0] == "https://example.test/search"

    def test_fetch_uses_isolated_tab(self):
        async def run():
            async with BrowserSession() as session:
                await session.fetch("https://example.test/parcel/1")

        asyncio.run(run())
        _, config = FakeCrawler.created[0].calls[0]

        assert config.session_id is None

    def test_failed_crawl_raises_page_load_error(self):
        async def run():
            async with BrowserSession() as session:
                FakeCrawler.created[0].results.append(
                    SimpleNamespace(success=False, html="", error_message="Timeout 30000ms exceeded")
                )
                await session.fetch("https://example.test/parcel/1")

        with pytest.raises(PageLoadError, match="Timeout 30000ms exceeded"):
            asyncio.run(run())

    def test_run_js_before_load(self):
        async def run():
            async with BrowserSession() as session:
                await session.run_js("1 + 1")

        with pytest.raises(SessionNotOpenError):
            asyncio.run(run())

    def test_use_before_open(self):
        with pytest.raises(SessionNotOpenError):
            asyncio.run(BrowserSession().fetch("https://example.test"))
