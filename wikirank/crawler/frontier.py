"""
Crawl frontier and visited-page bookkeeping.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, Iterator, Optional, Set


def canonical_page_id(page: str) -> str:
    """Return the canonical form of a page identifier (trimmed, lower-cased)."""
    return page.strip().lower()


@dataclass
class PageTask:
    """A page waiting to have its links expanded."""
    page: str
    depth: int = 0

    @property
    def key(self) -> str:
        return canonical_page_id(self.page)


class Frontier:
    """
    FIFO queue of pages awaiting link expansion.

    Only pages that passed the content check are ever pushed, so the queue
    order is the breadth-first visitation order of the crawl.
    """

    def __init__(self):
        self._queue: Deque[PageTask] = deque()
        self.total_enqueued = 0
        self.logger = logging.getLogger(__name__)

    def push(self, task: PageTask):
        self._queue.append(task)
        self.total_enqueued += 1
        self.logger.debug(f"Queued page: {task.page} (depth {task.depth})")

    def pop(self) -> Optional[PageTask]:
        """Remove and return the oldest task, or None if the queue is empty."""
        if not self._queue:
            return None
        return self._queue.popleft()

    def is_empty(self) -> bool:
        return not self._queue

    def __len__(self) -> int:
        return len(self._queue)

    def __iter__(self) -> Iterator[PageTask]:
        return iter(self._queue)

    def get_stats(self) -> Dict[str, int]:
        return {
            'queued': len(self._queue),
            'total_enqueued': self.total_enqueued
        }


class VisitedTracker:
    """
    Classifies every page the crawl has seen as useful or useless.

    Pages are keyed by their canonical identifier. A page is never in both
    sets: marking a page moves it out of the opposite set.
    """

    def __init__(self):
        self.useful: Set[str] = set()
        self.useless: Set[str] = set()

    def mark_useful(self, page: str):
        key = canonical_page_id(page)
        self.useless.discard(key)
        self.useful.add(key)

    def mark_useless(self, page: str):
        key = canonical_page_id(page)
        self.useful.discard(key)
        self.useless.add(key)

    def is_useful(self, page: str) -> bool:
        return canonical_page_id(page) in self.useful

    def is_useless(self, page: str) -> bool:
        return canonical_page_id(page) in self.useless

    def is_known(self, page: str) -> bool:
        key = canonical_page_id(page)
        return key in self.useful or key in self.useless

    def get_stats(self) -> Dict[str, int]:
        return {
            'useful': len(self.useful),
            'useless': len(self.useless)
        }
