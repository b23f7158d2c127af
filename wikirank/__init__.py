"""
wikirank

Crawls a keyword-bounded subgraph of a wiki and ranks its pages with PageRank.
"""

__version__ = "1.0.0"
__description__ = "Topic-bounded wiki crawler with PageRank scoring"
