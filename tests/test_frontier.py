"""Frontier and VisitedTracker tests."""

from wikirank.crawler.frontier import Frontier, PageTask, VisitedTracker, canonical_page_id


def test_canonical_page_id():
    assert canonical_page_id("/wiki/Tennis") == "/wiki/tennis"
    assert canonical_page_id("  /WIKI/Ball\n") == "/wiki/ball"
    assert canonical_page_id(canonical_page_id("/wiki/X")) == "/wiki/x"


def test_frontier_is_fifo():
    frontier = Frontier()
    for name in ("/wiki/A", "/wiki/B", "/wiki/C"):
        frontier.push(PageTask(page=name))

    assert len(frontier) == 3
    assert [frontier.pop().page for _ in range(3)] == ["/wiki/A", "/wiki/B", "/wiki/C"]
    assert frontier.pop() is None
    assert frontier.is_empty()
    assert frontier.get_stats() == {'queued': 0, 'total_enqueued': 3}


def test_page_task_key_is_canonical():
    assert PageTask(page="/wiki/Tennis").key == "/wiki/tennis"


def test_visited_sets_are_disjoint():
    visited = VisitedTracker()

    visited.mark_useless("/wiki/A")
    visited.mark_useful("/wiki/a")

    assert visited.is_useful("/wiki/A")
    assert not visited.is_useless("/wiki/A")
    assert visited.useful.isdisjoint(visited.useless)


def test_visited_lookups_ignore_case():
    visited = VisitedTracker()
    visited.mark_useless("/wiki/Golf")

    assert visited.is_useless("/WIKI/GOLF")
    assert visited.is_known("/wiki/golf")
    assert not visited.is_known("/wiki/Tennis")
    assert visited.get_stats() == {'useful': 0, 'useless': 1}
