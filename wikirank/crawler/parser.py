"""
Link extraction and keyword matching for wiki articles.

``LinkExtractor`` and ``ContentMatcher`` are the two capabilities the graph
crawler depends on. The wiki implementations below fetch through a shared
``WikiFetcher`` and never raise: a failed fetch or parse yields no links and
no match.
"""

import logging
import unicodedata
from typing import List, Sequence

from bs4 import BeautifulSoup

from .fetcher import WikiFetcher


# hrefs containing any of these are never followed
RESTRICTED_LINK_FRAGMENTS = [
    'trap',
    '/wiki/Special',
    '/wiki/Wikipedia:Articles_for_deletion',
    '/wiki/Wikipedia:Votes_for_deletion',
    '/wiki/Wikipedia:Pages_for_deletion',
    '/wiki/Wikipedia:Miscellany_for_deletion',
    '/wiki/Wikipedia:Miscellaneous_deletion',
    '/wiki/Wikipedia:Copyright_problems',
    '/wiki/Wikipedia:Protected_titles',
    '/wiki/Wikipedia:WikiProject_Spam',
    '/wiki/MediaWiki:Spam-blacklist',
    '/wiki/MediaWiki_talk:Spam-blacklist',
    '/wiki/Portal:Prepared_stories',
    '/wiki/Wikibooks:Votes_for_deletion',
    '/wiki/Wikipedia:Requests_for_arbitration',
    'redlink=1',
    '/wiki/Main_Page',
    '.org', '.net', '.com',
    '#', ':', '&',
]

ARTICLE_PREFIX = '/wiki/'


class LinkExtractor:
    """Returns the in-text article links of a page."""

    async def links(self, page: str) -> List[str]:
        """
        Ordered, de-duplicated links found on ``page``.
        Returns an empty list if the page cannot be fetched or parsed.
        """
        raise NotImplementedError


class ContentMatcher:
    """Decides whether a page is about the crawl's topic."""

    async def matches_all(self, page: str, keywords: Sequence[str]) -> bool:
        """
        True if the page text contains every keyword.
        Returns False if the page cannot be fetched.
        """
        raise NotImplementedError


def normalize_text(text: str) -> str:
    """Lower-case ``text`` and replace every punctuation character with a space."""
    return ''.join(
        ' ' if unicodedata.category(ch).startswith('P') else ch
        for ch in text.lower()
    )


def contains_all_keywords(text: str, keywords: Sequence[str]) -> bool:
    normalized = normalize_text(text)
    return all(keyword.lower() in normalized for keyword in keywords)


class WikiLinkExtractor(LinkExtractor):
    """
    Extracts in-text article links from a wiki page's HTML.

    Only anchors inside paragraphs are considered, which leaves out navigation
    boxes, sidebars and reference lists. Red links and anything matching
    ``RESTRICTED_LINK_FRAGMENTS`` are dropped.
    """

    def __init__(self, fetcher: WikiFetcher):
        self.fetcher = fetcher
        self.logger = logging.getLogger(__name__)

    async def links(self, page: str) -> List[str]:
        result = await self.fetcher.fetch_html(page)
        if not result.ok:
            self.logger.warning(f"No links for {page}: {result.error}")
            return []

        try:
            return self.extract_links(result.content)
        except Exception as e:
            self.logger.error(f"Error parsing links from {page}: {e}")
            return []

    def extract_links(self, html_content: str) -> List[str]:
        """Parse HTML and return allowed article links in order of appearance."""
        soup = BeautifulSoup(html_content, 'lxml')

        content_root = soup.select_one('#mw-content-text') or soup
        seen = set()
        links: List[str] = []
        for paragraph in content_root.find_all('p'):
            for anchor in paragraph.find_all('a', href=True):
                href = anchor['href'].strip()
                if not self._is_allowed(href, anchor.get('class') or []):
                    continue
                if href not in seen:
                    seen.add(href)
                    links.append(href)

        self.logger.debug(f"Extracted {len(links)} links")
        return links

    def _is_allowed(self, href: str, css_classes: List[str]) -> bool:
        if not href.startswith(ARTICLE_PREFIX):
            return False
        if 'new' in css_classes:
            return False
        return not any(fragment in href for fragment in RESTRICTED_LINK_FRAGMENTS)


class WikiContentMatcher(ContentMatcher):
    """
    Matches keywords against the raw wikitext of an article.

    Matching is case-insensitive substring containment, so "text" matches
    "Textbook".
    """

    def __init__(self, fetcher: WikiFetcher):
        self.fetcher = fetcher
        self.logger = logging.getLogger(__name__)

    async def matches_all(self, page: str, keywords: Sequence[str]) -> bool:
        result = await self.fetcher.fetch_raw(page)
        if not result.ok:
            self.logger.warning(f"No content for {page}: {result.error}")
            return False
        return contains_all_keywords(result.content, keywords)
