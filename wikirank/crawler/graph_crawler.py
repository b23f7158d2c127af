"""
Bounded breadth-first crawler that builds a topic graph.

Starting at a seed page, the crawler expands pages in FIFO order and admits a
linked page into the graph only if it contains every keyword. At most
``max_pages`` pages are ever admitted. Once that budget is spent, the remaining
frontier is still drained, but only edges between pages that are already known
to be useful are recorded, so the edge list never points at a page that was not
crawled.
"""

import asyncio
import logging
import os
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from .frontier import Frontier, PageTask, VisitedTracker, canonical_page_id
from .parser import ContentMatcher, LinkExtractor
from ..storage.edge_list import Edge, EdgeListStore
from ..utils.logger import get_crawler_logger
from ..utils.monitoring import CrawlerMonitor


@dataclass
class CrawlStats:
    """Statistics for a crawl."""
    start_time: float
    pages_expanded: int = 0
    pages_admitted: int = 0
    pages_rejected: int = 0
    links_seen: int = 0
    links_skipped_budget: int = 0
    throttle_pauses: int = 0
    edges_emitted: int = 0
    max_depth: int = 0

    @property
    def elapsed_time(self) -> float:
        return time.time() - self.start_time


class GraphCrawler:
    """
    Crawls from a seed page and writes the discovered graph as an edge list.

    Args:
        seed: Relative path of the start page (``/wiki/Title``)
        keywords: Terms every admitted page must contain
        max_pages: Maximum number of matching pages admitted to the graph
        output: Path of the edge list file written by ``crawl()``
        link_extractor: Source of a page's out-links
        content_matcher: Keyword test for a page
        throttle_every: Pause after this many page requests
        throttle_pause: Length of each pause in seconds
        monitor: Optional metrics sink
    """

    def __init__(self, seed: str, keywords: Sequence[str], max_pages: int,
                 output: Union[str, os.PathLike],
                 link_extractor: LinkExtractor, content_matcher: ContentMatcher,
                 throttle_every: int = 200, throttle_pause: float = 2.0,
                 monitor: Optional[CrawlerMonitor] = None):
        if not keywords:
            raise ValueError("At least one keyword is required")
        if max_pages < 1:
            raise ValueError("max_pages must be at least 1")
        if throttle_every < 1:
            raise ValueError("throttle_every must be at least 1")

        self.seed = seed
        self.keywords = list(keywords)
        self.max_pages = max_pages
        self.store = EdgeListStore(output)
        self.link_extractor = link_extractor
        self.content_matcher = content_matcher
        self.throttle_every = throttle_every
        self.throttle_pause = throttle_pause
        self.monitor = monitor

        self.logger = get_crawler_logger(__name__, seed=seed)

        self.frontier = Frontier()
        self.visited = VisitedTracker()
        self.edges: List[Edge] = []
        self.num_crawled = 0
        self.pages_requested = 0
        self.stats = CrawlStats(start_time=time.time())
        self._seeded = False
        self._stop_requested = False

    async def crawl(self) -> CrawlStats:
        """
        Run the crawl to completion and write the edge list.

        Raises:
            EdgeListError: If the output file cannot be written
        """
        self.logger.info(f"Starting crawl from {self.seed} "
                         f"(keywords={self.keywords}, max_pages={self.max_pages})")

        while await self.crawl_next():
            if self._stop_requested:
                self.logger.info(f"Stop requested, {len(self.frontier)} pages left unexpanded")
                break

        self.store.write(self.edges, header=self.max_pages)
        self._log_final_stats()
        return self.stats

    def stop(self):
        """Ask a running crawl() to finish after the page currently being expanded."""
        self._stop_requested = True

    async def crawl_next(self) -> bool:
        """
        Expand exactly one page from the frontier.

        The seed is checked on the first call. Returns False without doing any
        work when the frontier is empty, otherwise True if pages remain queued
        after this one.
        """
        if not self._seeded:
            await self._add_seed()

        task = self.frontier.pop()
        if task is None:
            return False

        await self._expand(task)
        self.stats.pages_expanded += 1
        self.stats.max_depth = max(self.stats.max_depth, task.depth)
        if self.monitor:
            self.monitor.update_frontier_size(len(self.frontier))
        return not self.frontier.is_empty()

    async def _add_seed(self):
        self._seeded = True
        await self._before_request('content')
        if await self.content_matcher.matches_all(self.seed, self.keywords):
            self.frontier.push(PageTask(page=self.seed))
            self._count_admitted(self.seed)
        else:
            self.logger.warning(f"Seed page {self.seed} does not contain all keywords")

        # the seed is known even when it does not match, so links back to it become edges
        self.visited.mark_useful(self.seed)

    async def _expand(self, task: PageTask):
        """Fetch the links of one page and classify each of them."""
        await self._before_request('links')
        links = await self.link_extractor.links(task.page)
        self.logger.log_page_event(
            logging.DEBUG, task.page,
            f"Expanding {task.page}: {len(links)} links, "
            f"collected={self.num_crawled}, queued={len(self.frontier)}"
        )

        source = task.key
        for link in links:
            self.stats.links_seen += 1
            target = canonical_page_id(link)

            if target == source:
                continue

            if self.visited.is_useful(target):
                self._emit(source, target)
            elif self.visited.is_known(target):
                continue
            elif self.num_crawled < self.max_pages:
                await self._before_request('content')
                if await self.content_matcher.matches_all(link, self.keywords):
                    self.frontier.push(PageTask(page=link, depth=task.depth + 1))
                    self._emit(source, target)
                    self.visited.mark_useful(target)
                    self._count_admitted(link)
                else:
                    self.visited.mark_useless(target)
                    self.stats.pages_rejected += 1
                    if self.monitor:
                        self.monitor.record_page_rejected(link)
            else:
                self.stats.links_skipped_budget += 1

    async def _before_request(self, kind: str):
        """Count a page request, pausing first on every ``throttle_every``-th one."""
        if self.pages_requested and self.pages_requested % self.throttle_every == 0:
            self.logger.info(f"Pausing {self.throttle_pause}s after "
                             f"{self.pages_requested} requests")
            self.stats.throttle_pauses += 1
            if self.monitor:
                self.monitor.record_throttle_pause()
            await asyncio.sleep(self.throttle_pause)

        self.pages_requested += 1
        if self.monitor:
            self.monitor.record_page_request(kind)

    def _emit(self, source: str, target: str):
        self.edges.append(Edge(source, target))
        self.stats.edges_emitted += 1
        if self.monitor:
            self.monitor.record_edge()

    def _count_admitted(self, page: str):
        self.num_crawled += 1
        self.stats.pages_admitted += 1
        if self.monitor:
            self.monitor.record_page_admitted(page)
        if self.num_crawled == self.max_pages:
            self.logger.info(f"Reached max pages limit: {self.max_pages}")

    def _log_final_stats(self):
        self.logger.info("=== CRAWL COMPLETED ===")
        self.logger.log_crawler_stat('pages_admitted', self.stats.pages_admitted)
        self.logger.log_crawler_stat('pages_rejected', self.stats.pages_rejected)
        self.logger.log_crawler_stat('pages_expanded', self.stats.pages_expanded)
        self.logger.log_crawler_stat('pages_requested', self.pages_requested)
        self.logger.log_crawler_stat('edges_emitted', self.stats.edges_emitted)
        self.logger.log_crawler_stat('links_skipped_budget', self.stats.links_skipped_budget)
        self.logger.log_crawler_stat('max_depth', self.stats.max_depth)
        self.logger.info(f"Total time: {self.stats.elapsed_time:.2f} seconds")

    def get_stats(self) -> Dict:
        """Get current crawl statistics."""
        return {
            'num_crawled': self.num_crawled,
            'pages_requested': self.pages_requested,
            'edges': len(self.edges),
            'max_depth': self.stats.max_depth,
            'elapsed_time': self.stats.elapsed_time,
            **{f"frontier_{k}": v for k, v in self.frontier.get_stats().items()},
            **{f"visited_{k}": v for k, v in self.visited.get_stats().items()},
        }
