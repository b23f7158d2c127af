"""
PageRank computation and ranking queries.
"""

from .pagerank import BETA, PageRankEngine
from .query import RankMetric, RankQuery

__all__ = ['BETA', 'PageRankEngine', 'RankMetric', 'RankQuery']
