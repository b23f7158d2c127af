"""
Crawler components.
"""

from .frontier import Frontier, PageTask, VisitedTracker, canonical_page_id
from .fetcher import WikiFetcher, FetchResult
from .parser import ContentMatcher, LinkExtractor, WikiContentMatcher, WikiLinkExtractor
from .graph_crawler import GraphCrawler, CrawlStats

__all__ = [
    'Frontier', 'PageTask', 'VisitedTracker', 'canonical_page_id',
    'WikiFetcher', 'FetchResult',
    'ContentMatcher', 'LinkExtractor', 'WikiContentMatcher', 'WikiLinkExtractor',
    'GraphCrawler', 'CrawlStats'
]
