"""Breadth-first neighbourhood expansion and depth-first path enumeration."""

from __future__ import annotations

import logging
from collections import deque
from typing import Optional

from ..config import EngineConfig
from ..exceptions import ValidationError
from ..models import Direction, GraphEdge, GraphNode, GraphResult, Neighbor, Path
from ..store.base import split_node_id
from .neighbors import DIRECTIONS, NeighborLookup

logger = logging.getLogger(__name__)


def _label(node_id: str) -> str:
    _, local_id = split_node_id(node_id)
    return local_id or node_id


def _edge(node_id: str, neighbor: Neighbor) -> GraphEdge:
    # forward hits are objects (node → neighbor), backward hits are subjects (neighbor → node)
    if neighbor.role == "object":
        return GraphEdge(from_=node_id, to=neighbor.node_id, predicate=neighbor.predicate)
    return GraphEdge(from_=neighbor.node_id, to=node_id, predicate=neighbor.predicate)


class GraphTraversal:
    """Traversal engine over a :class:`NeighborLookup`.

    Depth arguments above the configured ceilings are clamped, negative
    ones are treated as 0.
    """

    def __init__(self, lookup: NeighborLookup, config: Optional[EngineConfig] = None) -> None:
        self._lookup = lookup
        self._config = config or EngineConfig()

    @staticmethod
    def _clamp(value: int, ceiling: int, name: str) -> int:
        if value > ceiling:
            logger.warning("%s=%d exceeds ceiling %d, clamping", name, value, ceiling)
            return ceiling
        return max(value, 0)

    async def traverse(self, start: str, depth: int = 2, direction: Direction = "forward") -> GraphResult:
        """Expand the neighbourhood of ``start`` up to ``depth`` hops.

        Every node appears once, and so does every ``(from, to, predicate)``
        edge: with ``direction="both"`` a triple reached from both ends is
        reported once. Nodes at the depth limit are kept but not expanded,
        so edges among them are not reported. An unknown start
        yields a single node and no edges.
        """
        if direction not in DIRECTIONS:
            raise ValidationError(f"Unknown direction {direction!r}, expected one of {DIRECTIONS}")
        depth = self._clamp(depth, self._config.max_traverse_depth, "depth")

        start_type = "object" if direction == "backward" else "subject"
        nodes: dict[str, GraphNode] = {start: GraphNode(id=start, type=start_type, label=_label(start))}
        edges: list[GraphEdge] = []
        seen_edges: set[tuple[str, str, str]] = set()
        visited = {start}
        queue: deque[tuple[str, int]] = deque([(start, 0)])

        while queue:
            node_id, current = queue.popleft()
            if current >= depth:
                continue

            for neighbor in await self._lookup.get_neighbors(node_id, direction):
                if neighbor.node_id not in nodes:
                    nodes[neighbor.node_id] = GraphNode(
                        id=neighbor.node_id,
                        type=neighbor.role,
                        label=_label(neighbor.node_id),
                    )

                edge = _edge(node_id, neighbor)
                key = (edge.from_, edge.to, edge.predicate)
                if key not in seen_edges:
                    seen_edges.add(key)
                    edges.append(edge)

                if neighbor.node_id not in visited:
                    visited.add(neighbor.node_id)
                    queue.append((neighbor.node_id, current + 1))

        logger.debug("Traversed from %s: %d nodes, %d edges (depth=%d, %s)", start, len(nodes), len(edges), depth, direction)
        return GraphResult(nodes=list(nodes.values()), edges=edges, depth=depth)

    async def find_paths(self, source: str, target: str, max_depth: Optional[int] = None) -> list[Path]:
        """All simple forward paths from ``source`` to ``target``.

        A path has at most ``max_depth`` edges and never repeats a node.
        Results are ordered by length; equal lengths keep discovery order.
        ``source == target`` yields the single length-0 path.
        """
        if max_depth is None:
            max_depth = self._config.default_path_depth
        max_depth = self._clamp(max_depth, self._config.max_path_depth, "max_depth")

        paths: list[Path] = []
        nodes: list[str] = [source]
        predicates: list[str] = []
        visited: set[str] = {source}

        async def walk(node_id: str) -> None:
            if node_id == target:
                paths.append(Path(nodes=list(nodes), edges=list(predicates), length=len(predicates)))
                return
            if len(predicates) >= max_depth:
                return

            for neighbor in await self._lookup.get_neighbors(node_id, "forward"):
                if neighbor.node_id in visited:
                    continue
                visited.add(neighbor.node_id)
                nodes.append(neighbor.node_id)
                predicates.append(neighbor.predicate)

                await walk(neighbor.node_id)

                predicates.pop()
                nodes.pop()
                visited.discard(neighbor.node_id)

        await walk(source)
        paths.sort(key=lambda p: p.length)
        return paths

    async def shortest_path(self, source: str, target: str, max_depth: Optional[int] = None) -> Optional[Path]:
        paths = await self.find_paths(source, target, max_depth)
        return paths[0] if paths else None

    async def common_neighbors(self, first: str, second: str) -> list[str]:
        """Nodes both point at, plus nodes pointing at both."""
        out_a = {n.node_id for n in await self._lookup.get_neighbors(first, "forward")}
        out_b = {n.node_id for n in await self._lookup.get_neighbors(second, "forward")}
        in_a = {n.node_id for n in await self._lookup.get_neighbors(first, "backward")}
        in_b = {n.node_id for n in await self._lookup.get_neighbors(second, "backward")}
        return sorted((out_a & out_b) | (in_a & in_b))


__all__ = ["GraphTraversal"]
