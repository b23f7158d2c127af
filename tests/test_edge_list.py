"""EdgeListStore tests."""

import pytest

from wikirank.storage.edge_list import Edge, EdgeListError, EdgeListStore


def test_write_puts_header_first(tmp_path):
    store = EdgeListStore(tmp_path / "out" / "graph.txt")

    count = store.write([Edge("/wiki/a", "/wiki/b"), Edge("/wiki/b", "/wiki/c")], header=50)

    assert count == 2
    assert (tmp_path / "out" / "graph.txt").read_text() == (
        "50\n/wiki/a /wiki/b\n/wiki/b /wiki/c\n"
    )


def test_read_lowercases_and_keeps_order_and_duplicates(edge_file):
    store = EdgeListStore(edge_file(["/wiki/Tennis /wiki/Ball", "A B", "a b"]))

    assert store.read() == [
        Edge("/wiki/tennis", "/wiki/ball"),
        Edge("a", "b"),
        Edge("a", "b"),
    ]


def test_read_accepts_crlf_line_endings(tmp_path):
    path = tmp_path / "graph.txt"
    path.write_bytes(b"2\r\na b\r\nb a\r\n")

    assert EdgeListStore(path).read() == [Edge("a", "b"), Edge("b", "a")]


@pytest.mark.parametrize("line", ["a", "a b c", "a  b", "", " a b"])
def test_malformed_lines_are_fatal(edge_file, line):
    store = EdgeListStore(edge_file(["x y", line]))

    with pytest.raises(EdgeListError, match="line 3"):
        store.read()


def test_header_only_file_has_no_edges(edge_file):
    assert EdgeListStore(edge_file([], header="100")).read() == []


def test_missing_file(tmp_path):
    with pytest.raises(EdgeListError):
        EdgeListStore(tmp_path / "nope.txt").read()


def test_read_undecodable_bytes_raises(tmp_path):
    path = tmp_path / "graph.txt"
    path.write_bytes(b"1\n\xff\xfe b\n")

    with pytest.raises(EdgeListError, match="Failed to read"):
        EdgeListStore(path).read()
