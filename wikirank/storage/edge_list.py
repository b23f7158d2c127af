"""
Edge list storage for crawled graphs.

The file format is a header line holding the crawl's vertex budget followed by
one ``source target`` line per edge, in emission order. Readers skip the header
without looking at its value.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, List, NamedTuple, Union


class EdgeListError(Exception):
    """Raised when an edge list cannot be written, opened or parsed."""
    pass


class Edge(NamedTuple):
    """A directed link: ``source`` links to ``target``."""
    source: str
    target: str

    def to_line(self) -> str:
        return f"{self.source} {self.target}"


class EdgeListStore:
    """
    Reads and writes edge list files.
    """

    def __init__(self, path: Union[str, os.PathLike]):
        self.path = Path(path)
        self.logger = logging.getLogger(__name__)

    def write(self, edges: Iterable[Edge], header: int) -> int:
        """
        Write the header and all edges to the file.

        Args:
            edges: Edges in emission order
            header: Value recorded on the first line (the crawl's vertex budget)

        Returns:
            Number of edges written

        Raises:
            EdgeListError: If the file cannot be created or written
        """
        count = 0
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            with open(self.path, 'w', encoding='utf-8', newline='\n') as f:
                f.write(f"{header}\n")
                for edge in edges:
                    f.write(edge.to_line() + '\n')
                    count += 1
        except OSError as e:
            raise EdgeListError(f"Failed to write edge list {self.path}: {e}") from e

        self.logger.info(f"Wrote {count} edges to {self.path}")
        return count

    def read(self) -> List[Edge]:
        """
        Read every edge from the file.

        The header line is skipped unconditionally. Each remaining line is
        lower-cased and split on a single space; anything other than exactly
        two non-empty tokens is a fatal parse error.

        Raises:
            EdgeListError: If the file cannot be read or decoded, or a line is malformed
        """
        edges: List[Edge] = []
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                f.readline()
                for line_number, line in enumerate(f, start=2):
                    edges.append(self._parse_line(line, line_number))
        except (OSError, UnicodeDecodeError) as e:
            raise EdgeListError(f"Failed to read edge list {self.path}: {e}") from e

        self.logger.info(f"Read {len(edges)} edges from {self.path}")
        return edges

    def _parse_line(self, line: str, line_number: int) -> Edge:
        tokens = line.rstrip('\r\n').lower().split(' ')
        if len(tokens) != 2 or not tokens[0] or not tokens[1]:
            raise EdgeListError(
                f"Malformed edge on line {line_number} of {self.path}: {line.rstrip()!r}"
            )
        return Edge(tokens[0], tokens[1])
