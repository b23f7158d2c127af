"""
Top-K queries over a computed PageRank graph.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Tuple

from .pagerank import PageRankEngine


class RankMetric(Enum):
    """Metrics a page can be ranked by."""
    PAGE_RANK = 'pagerank'
    IN_DEGREE = 'in_degree'
    OUT_DEGREE = 'out_degree'


class RankQuery:
    """
    Read-only top-K extraction over rank, in-degree and out-degree.

    Each metric ranks its own candidate set: PageRank ranks every vertex,
    in-degree ranks the vertices that have out-links and out-degree ranks the
    vertices that have in-links. Ties are broken arbitrarily.
    """

    def __init__(self, engine: PageRankEngine):
        self.engine = engine

    def _candidates(self, metric: RankMetric) -> Tuple[Iterable[str], Callable[[str], float]]:
        if metric is RankMetric.PAGE_RANK:
            return self.engine.vertices, self.engine.page_rank_of
        if metric is RankMetric.IN_DEGREE:
            return self.engine.a2b, self.engine.in_degree_of
        if metric is RankMetric.OUT_DEGREE:
            return self.engine.b2a, self.engine.out_degree_of
        raise ValueError(f"Unknown metric: {metric}")

    def top_k(self, metric: RankMetric, k: int) -> List[str]:
        """
        The ``k`` pages with the highest ``metric``, best first.

        Raises:
            ValueError: If ``k`` is negative
            IndexError: If ``k`` exceeds the number of candidate pages
        """
        if k < 0:
            raise ValueError("k must be non-negative")

        candidates, score = self._candidates(metric)
        ranked = sorted(candidates, key=score, reverse=True)
        if k > len(ranked):
            raise IndexError(
                f"Requested top {k} by {metric.value} but only {len(ranked)} pages qualify"
            )
        return ranked[:k]

    def top_k_page_rank(self, k: int) -> List[str]:
        return self.top_k(RankMetric.PAGE_RANK, k)

    def top_k_in_degree(self, k: int) -> List[str]:
        return self.top_k(RankMetric.IN_DEGREE, k)

    def top_k_out_degree(self, k: int) -> List[str]:
        return self.top_k(RankMetric.OUT_DEGREE, k)

    def report(self, k: int) -> Dict[RankMetric, List[Tuple[str, float]]]:
        """Top pages with their scores for every metric, capped at each candidate count."""
        rows = {}
        for metric in RankMetric:
            candidates, score = self._candidates(metric)
            limit = min(k, len(candidates))
            rows[metric] = [(page, score(page)) for page in self.top_k(metric, limit)]
        return rows
