"""
Storage layer for crawled graphs.
"""

from .edge_list import Edge, EdgeListError, EdgeListStore

__all__ = ['Edge', 'EdgeListError', 'EdgeListStore']
