"""
Wiki page fetcher with robots.txt support.

Fetch failures never raise: they come back as a FetchResult with ``error`` set
so the crawl can treat the page as unproductive and move on.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import quote, unquote, urljoin, urlparse
from urllib.robotparser import RobotFileParser

import aiohttp
from aiohttp import ClientError, ClientSession, ClientTimeout


@dataclass
class FetchResult:
    """Result of a fetch operation."""
    url: str
    status_code: int
    content: Optional[str] = None
    error: Optional[str] = None
    fetch_time: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None and self.content is not None


class RobotsChecker:
    """Caches robots.txt rules per host."""

    def __init__(self, user_agent: str, cache_ttl: float = 3600):
        self.user_agent = user_agent
        self.cache_ttl = cache_ttl
        self.robots_cache: Dict[str, RobotFileParser] = {}
        self.robots_check_time: Dict[str, float] = {}
        self.logger = logging.getLogger(__name__)

    def _get_host(self, url: str) -> str:
        parsed = urlparse(url)
        return f"{parsed.scheme}://{parsed.netloc}"

    async def can_fetch(self, url: str, session: ClientSession) -> bool:
        """Check if URL can be fetched according to robots.txt."""
        host = self._get_host(url)
        current_time = time.time()

        if (host in self.robots_cache and
                current_time - self.robots_check_time.get(host, 0) < self.cache_ttl):
            return self.robots_cache[host].can_fetch(self.user_agent, url)

        robots_url = urljoin(host, '/robots.txt')
        rp = RobotFileParser()
        rp.set_url(robots_url)
        try:
            async with session.get(robots_url) as response:
                if response.status == 200:
                    rp.parse((await response.text()).splitlines())
                else:
                    rp.parse([])
        except (ClientError, asyncio.TimeoutError) as e:
            # Unreachable robots.txt allows everything
            self.logger.warning(f"Could not fetch robots.txt for {host}: {e}")
            return True

        self.robots_cache[host] = rp
        self.robots_check_time[host] = current_time
        return rp.can_fetch(self.user_agent, url)


class WikiFetcher:
    """
    Fetches article HTML and raw wikitext from a single wiki site.
    """

    def __init__(self, base_url: str, user_agent: str, request_timeout: int = 30,
                 respect_robots_txt: bool = True):
        self.base_url = base_url.rstrip('/')
        self.user_agent = user_agent
        self.request_timeout = request_timeout
        self.respect_robots_txt = respect_robots_txt

        self.logger = logging.getLogger(__name__)
        self.robots_checker = RobotsChecker(user_agent) if respect_robots_txt else None
        self.session: Optional[ClientSession] = None

        self.stats = {
            'total_requests': 0,
            'successful_requests': 0,
            'failed_requests': 0,
            'robots_blocked': 0,
            'total_bytes_downloaded': 0
        }

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Open the HTTP session."""
        if self.session is None:
            self.session = aiohttp.ClientSession(
                timeout=ClientTimeout(total=self.request_timeout),
                headers={'User-Agent': self.user_agent}
            )
            self.logger.info(f"WikiFetcher session started for {self.base_url}")

    async def close(self):
        """Close the HTTP session."""
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.info("WikiFetcher session closed")

    def page_url(self, page: str) -> str:
        """Full URL of an article given its relative path (``/wiki/Title``)."""
        return self.base_url + page

    def raw_url(self, page: str) -> str:
        """
        URL of the raw wikitext of an article.

        Hrefs taken from article HTML are already percent-encoded, so the title
        is decoded before being encoded once for the query string.
        """
        title = page[len('/wiki/'):] if page.startswith('/wiki/') else page.lstrip('/')
        title = quote(unquote(title), safe='/_()')
        return f"{self.base_url}/w/index.php?title={title}&action=raw"

    async def fetch_html(self, page: str) -> FetchResult:
        return await self.fetch(self.page_url(page))

    async def fetch_raw(self, page: str) -> FetchResult:
        return await self.fetch(self.raw_url(page))

    async def fetch(self, url: str) -> FetchResult:
        """
        Fetch a single URL.

        Args:
            url: The URL to fetch

        Returns:
            FetchResult containing the body or error information
        """
        start_time = time.time()

        if self.session is None:
            await self.start()

        if self.robots_checker and not await self.robots_checker.can_fetch(url, self.session):
            self.stats['robots_blocked'] += 1
            self.logger.info(f"Robots.txt blocks access to: {url}")
            return FetchResult(
                url=url,
                status_code=403,
                error="Blocked by robots.txt",
                fetch_time=time.time() - start_time
            )

        self.stats['total_requests'] += 1
        try:
            async with self.session.get(url) as response:
                if response.status != 200:
                    self.stats['failed_requests'] += 1
                    self.logger.warning(f"HTTP {response.status} fetching {url}")
                    return FetchResult(
                        url=url,
                        status_code=response.status,
                        error=f"HTTP {response.status}",
                        fetch_time=time.time() - start_time
                    )

                content = await response.text(errors='replace')
                self.stats['successful_requests'] += 1
                self.stats['total_bytes_downloaded'] += len(content)
                self.logger.debug(f"Fetched {url}: {response.status} ({len(content)} chars)")
                return FetchResult(
                    url=url,
                    status_code=response.status,
                    content=content,
                    fetch_time=time.time() - start_time
                )

        except asyncio.TimeoutError:
            error_msg = "Request timeout"
            self.logger.warning(f"Timeout fetching {url}")

        except ClientError as e:
            error_msg = f"Client error: {e}"
            self.logger.warning(f"Client error fetching {url}: {e}")

        self.stats['failed_requests'] += 1
        return FetchResult(
            url=url,
            status_code=0,
            error=error_msg,
            fetch_time=time.time() - start_time
        )

    def get_stats(self) -> Dict[str, int]:
        """Get fetcher statistics."""
        return self.stats.copy()
