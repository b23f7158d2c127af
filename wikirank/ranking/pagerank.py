"""
PageRank over a directed graph loaded from an edge list.

The rank vector is computed by damped power iteration when the engine is
constructed. Vertices without out-links spread their mass uniformly over the
whole graph (themselves included), so no rank is lost.
"""

import logging
import math
import os
import time
from typing import Dict, Iterable, List, Optional, Union

from ..crawler.frontier import canonical_page_id
from ..storage.edge_list import Edge, EdgeListStore
from ..utils.monitoring import CrawlerMonitor


BETA = 0.85


class PageRankEngine:
    """
    Builds adjacency lists from edges and computes PageRank to convergence.

    Args:
        edges: Directed edges; duplicates count as separate links
        epsilon: Convergence threshold, must be positive
        max_iterations: Optional stop after this many iterations
        monitor: Optional metrics sink
    """

    def __init__(self, edges: Iterable[Edge], epsilon: float,
                 max_iterations: Optional[int] = None,
                 monitor: Optional[CrawlerMonitor] = None):
        if epsilon <= 0:
            raise ValueError("epsilon must be positive")

        self.epsilon = epsilon
        self.max_iterations = max_iterations
        self.logger = logging.getLogger(__name__)

        # out-neighbours and in-neighbours, in edge order
        self.a2b: Dict[str, List[str]] = {}
        self.b2a: Dict[str, List[str]] = {}
        # insertion-ordered vertex set
        self.vertices: Dict[str, None] = {}
        self._num_edges = 0
        self._num_iterations = 0

        self._build_graph(edges)

        start_time = time.time()
        self.page_ranks = self._calc_page_rank()
        elapsed = time.time() - start_time

        self.logger.info(
            f"PageRank converged in {self._num_iterations} iterations "
            f"({self.num_vertices()} vertices, {self._num_edges} edges, {elapsed:.3f}s)"
        )
        if monitor:
            monitor.record_pagerank(self._num_iterations, elapsed)

    @classmethod
    def from_file(cls, path: Union[str, os.PathLike], epsilon: float,
                  max_iterations: Optional[int] = None,
                  monitor: Optional[CrawlerMonitor] = None) -> 'PageRankEngine':
        """
        Load an edge list file and compute its PageRank.

        Raises:
            EdgeListError: If the file cannot be read or contains a malformed line
        """
        edges = EdgeListStore(path).read()
        return cls(edges, epsilon, max_iterations=max_iterations, monitor=monitor)

    def _build_graph(self, edges: Iterable[Edge]):
        for source, target in edges:
            source = canonical_page_id(source)
            target = canonical_page_id(target)

            self.a2b.setdefault(source, []).append(target)
            self.b2a.setdefault(target, []).append(source)
            self.vertices.setdefault(source)
            self.vertices.setdefault(target)
            self._num_edges += 1

    def _calc_page_rank(self) -> Dict[str, float]:
        """Run power iteration until the difference between iterations is within epsilon."""
        n = len(self.vertices)
        if n == 0:
            return {}

        pr = {v: 1.0 / n for v in self.vertices}
        diff = math.inf
        while diff > self.epsilon:
            if self.max_iterations is not None and self._num_iterations >= self.max_iterations:
                self.logger.warning(
                    f"Stopped after {self._num_iterations} iterations without converging "
                    f"(diff={diff:.3e}, epsilon={self.epsilon:.3e})"
                )
                break

            next_pr = self._single_iteration(pr)
            diff = self._diff(next_pr, pr)
            pr = next_pr
            self._num_iterations += 1
            self.logger.debug(f"Iteration {self._num_iterations}: diff={diff:.3e}")

        return pr

    def _single_iteration(self, pr: Dict[str, float]) -> Dict[str, float]:
        """One damped step; returns a new vector and leaves ``pr`` untouched."""
        n = len(self.vertices)
        next_pr = {v: (1 - BETA) / n for v in self.vertices}

        dangling_mass = 0.0
        for s in self.vertices:
            out = self.a2b.get(s)
            if not out:
                dangling_mass += pr[s]
                continue
            share = BETA * pr[s] / len(out)
            for t in out:
                next_pr[t] += share

        if dangling_mass:
            spread = BETA * dangling_mass / n
            for t in self.vertices:
                next_pr[t] += spread

        return next_pr

    def _diff(self, next_pr: Dict[str, float], prev_pr: Dict[str, float]) -> float:
        """Square root of the summed absolute per-vertex differences."""
        total = sum(abs(next_pr[v] - prev_pr[v]) for v in self.vertices)
        return math.sqrt(total)

    def page_rank_of(self, vertex: str) -> float:
        """PageRank of ``vertex``; 0.0 if it is not in the graph."""
        return self.page_ranks.get(canonical_page_id(vertex), 0.0)

    def out_degree_of(self, vertex: str) -> int:
        """Number of links from ``vertex``."""
        return len(self.a2b.get(canonical_page_id(vertex), ()))

    def in_degree_of(self, vertex: str) -> int:
        """Number of links to ``vertex``."""
        return len(self.b2a.get(canonical_page_id(vertex), ()))

    def num_edges(self) -> int:
        return self._num_edges

    def num_vertices(self) -> int:
        return len(self.vertices)

    def num_iterations(self) -> int:
        return self._num_iterations
