"""Graph traversal over the triple store.

Provides:
- ``NeighborLookup`` — best-effort neighbor primitive.
- ``GraphTraversal`` — BFS ``traverse``, DFS ``find_paths`` and helpers.
"""

from .neighbors import DIRECTIONS, NeighborLookup
from .traversal import GraphTraversal

__all__ = ["DIRECTIONS", "GraphTraversal", "NeighborLookup"]
