"""Neighbor lookup primitive used by traversal and path finding."""

from __future__ import annotations

import logging

from ..exceptions import ValidationError
from ..models import Direction, Neighbor
from ..store.base import BaseTripleStore, split_node_id

logger = logging.getLogger(__name__)

DIRECTIONS: tuple[str, ...] = ("forward", "backward", "both")


class NeighborLookup:
    """Fetch a node's neighbors from the store.

    Lookups are best effort: a store failure is logged and treated as
    "no neighbors" so one bad node does not abort a whole traversal.
    Pass ``strict=True`` to re-raise instead.
    """

    def __init__(self, store: BaseTripleStore, *, strict: bool = False) -> None:
        self._store = store
        self.strict = strict

    async def get_neighbors(self, node_id: str, direction: Direction = "both") -> list[Neighbor]:
        """Neighbors of ``node_id``.

        ``forward`` yields objects of triples where the node is subject,
        ``backward`` yields subjects of triples where the node is object,
        ``both`` yields forward results followed by backward ones.
        """
        if direction not in DIRECTIONS:
            raise ValidationError(f"Unknown direction {direction!r}, expected one of {DIRECTIONS}")

        namespace, local_id = split_node_id(node_id)
        neighbors: list[Neighbor] = []
        if direction in ("forward", "both"):
            neighbors.extend(await self._outgoing(node_id, namespace, local_id))
        if direction in ("backward", "both"):
            neighbors.extend(await self._incoming(node_id, namespace, local_id))
        return neighbors

    async def _outgoing(self, node_id: str, namespace: str, local_id: str) -> list[Neighbor]:
        try:
            relationships = await self._store.get_outgoing_relationships(namespace, local_id)
        except Exception as e:
            if self.strict:
                raise
            logger.warning("Outgoing neighbor lookup for %s failed: %s", node_id, e)
            return []

        neighbors = []
        for predicate, targets in relationships.items():
            for target in targets if isinstance(targets, list) else [targets]:
                neighbors.append(Neighbor(node_id=target, predicate=predicate, role="object"))
        return neighbors

    async def _incoming(self, node_id: str, namespace: str, local_id: str) -> list[Neighbor]:
        try:
            relationships = await self._store.get_incoming_relationships(namespace, local_id)
        except Exception as e:
            if self.strict:
                raise
            logger.warning("Incoming neighbor lookup for %s failed: %s", node_id, e)
            return []

        return [
            Neighbor(node_id=rel["subject"], predicate=rel["predicate"], role="subject")
            for rel in relationships
        ]


__all__ = ["DIRECTIONS", "NeighborLookup"]
