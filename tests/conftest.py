"""Shared fakes for network-free crawler tests."""

from typing import Dict, Iterable, List, Sequence

import pytest

from wikirank.crawler.fetcher import FetchResult
from wikirank.crawler.parser import ContentMatcher, LinkExtractor


class FakeLinkExtractor(LinkExtractor):
    """Serves links from an in-memory adjacency map and records every call."""

    def __init__(self, links: Dict[str, List[str]]):
        self._links = links
        self.calls: List[str] = []

    async def links(self, page: str) -> List[str]:
        self.calls.append(page)
        return list(self._links.get(page, []))


class FakeContentMatcher(ContentMatcher):
    """Matches a fixed set of pages and records every call."""

    def __init__(self, matching: Iterable[str]):
        self._matching = {p.lower() for p in matching}
        self.calls: List[str] = []

    async def matches_all(self, page: str, keywords: Sequence[str]) -> bool:
        self.calls.append(page)
        return page.lower() in self._matching


class StubFetcher:
    """Stands in for WikiFetcher, returning canned bodies keyed by page."""

    def __init__(self, html: Dict[str, str] = None, raw: Dict[str, str] = None):
        self.html = html or {}
        self.raw = raw or {}

    async def fetch_html(self, page: str) -> FetchResult:
        return self._result(page, self.html)

    async def fetch_raw(self, page: str) -> FetchResult:
        return self._result(page, self.raw)

    def _result(self, page: str, bodies: Dict[str, str]) -> FetchResult:
        if page not in bodies:
            return FetchResult(url=page, status_code=0, error="Client error: unreachable")
        return FetchResult(url=page, status_code=200, content=bodies[page])


@pytest.fixture
def edge_file(tmp_path):
    """Write an edge list (header plus lines) and return its path."""
    def _write(lines: Sequence[str], header: str = "3"):
        path = tmp_path / "graph.txt"
        path.write_text("\n".join([header, *lines]) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def no_sleep(monkeypatch):
    """Replace asyncio.sleep in the crawler with a recorder."""
    pauses: List[float] = []

    async def fake_sleep(seconds):
        pauses.append(seconds)

    monkeypatch.setattr("wikirank.crawler.graph_crawler.asyncio.sleep", fake_sleep)
    return pauses
