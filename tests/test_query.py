"""RankQuery tests."""

import pytest

from wikirank.ranking import PageRankEngine, RankMetric, RankQuery
from wikirank.storage.edge_list import Edge


@pytest.fixture
def query():
    # hub receives from everyone, spoke1 links out the most
    edges = [
        Edge("spoke1", "hub"), Edge("spoke1", "spoke2"), Edge("spoke1", "spoke3"),
        Edge("spoke2", "hub"), Edge("spoke3", "hub"), Edge("hub", "spoke1"),
    ]
    return RankQuery(PageRankEngine(edges, 1e-6))


def test_top_page_rank(query):
    assert query.top_k(RankMetric.PAGE_RANK, 1) == ["hub"]
    assert query.top_k_page_rank(2) == ["hub", "spoke1"]


def test_top_in_degree(query):
    assert query.top_k_in_degree(1) == ["hub"]


def test_top_out_degree(query):
    assert query.top_k_out_degree(1) == ["spoke1"]


def test_results_are_in_descending_order(query):
    engine = query.engine
    ranked = query.top_k_page_rank(4)
    scores = [engine.page_rank_of(v) for v in ranked]
    assert scores == sorted(scores, reverse=True)
    assert set(ranked) == {"hub", "spoke1", "spoke2", "spoke3"}


def test_k_zero_returns_empty(query):
    assert query.top_k_page_rank(0) == []


def test_k_larger_than_vertex_count_fails(query):
    with pytest.raises(IndexError):
        query.top_k(RankMetric.PAGE_RANK, query.engine.num_vertices() + 1)


def test_negative_k_fails(query):
    with pytest.raises(ValueError):
        query.top_k_in_degree(-1)


def test_candidate_sets_differ_by_metric():
    # c has no out-links, a has no in-links
    query = RankQuery(PageRankEngine([Edge("a", "b"), Edge("b", "c")], 1e-6))

    assert set(query.top_k_page_rank(3)) == {"a", "b", "c"}
    # in-degree ranks pages that link out
    assert set(query.top_k_in_degree(2)) == {"a", "b"}
    with pytest.raises(IndexError):
        query.top_k_in_degree(3)
    # out-degree ranks pages that are linked to
    assert set(query.top_k_out_degree(2)) == {"b", "c"}
    with pytest.raises(IndexError):
        query.top_k_out_degree(3)


def test_report_caps_each_metric():
    query = RankQuery(PageRankEngine([Edge("a", "b"), Edge("b", "c")], 1e-6))

    report = query.report(10)

    assert len(report[RankMetric.PAGE_RANK]) == 3
    assert len(report[RankMetric.IN_DEGREE]) == 2
    assert len(report[RankMetric.OUT_DEGREE]) == 2
    page, score = report[RankMetric.PAGE_RANK][0]
    assert score == query.engine.page_rank_of(page)
