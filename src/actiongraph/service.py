"""Transport-agnostic facade over registries, resolver, traversal and queries.

Each ``ActionGraphService`` owns its own verb and role registries.

Example::

    store = InMemoryTripleStore()
    service = ActionGraphService(store)
    await service.check_capability("accountant", "invoicing")
    await service.traverse("role:accountant", depth=2)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .capabilities import ApprovalPolicy, CapabilityResolver, check_action
from .config import EngineConfig, load_config_from_env
from .graph import GraphTraversal, NeighborLookup
from .logging import get_graph_logger
from .models import (
    CapabilityCheck,
    Direction,
    GraphResult,
    NodeDegree,
    Path,
    RoleDefinition,
    Triple,
    VerbDefinition,
)
from .query import QueryInterpreter, StatsAggregator
from .registry import RoleRegistry, VerbRegistry
from .store import BaseTripleStore, RedisTripleStore

logger = logging.getLogger(__name__)


class ActionGraphService:
    """Entry point for callers (HTTP/RPC layers live outside this package).

    Args:
        store: Triple store collaborator.
        config: Engine configuration; defaults to ``EngineConfig()``.
        verbs / roles: Pre-built registries (e.g. with a custom seed).
        policy: Approval policy for :meth:`check_action`.
    """

    def __init__(
        self,
        store: BaseTripleStore,
        config: Optional[EngineConfig] = None,
        *,
        verbs: Optional[VerbRegistry] = None,
        roles: Optional[RoleRegistry] = None,
        policy: Optional[ApprovalPolicy] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.store = store
        self.verbs = verbs or VerbRegistry(store)
        self.roles = roles or RoleRegistry(store)
        self.policy = policy
        self.resolver = CapabilityResolver(self.roles, self.verbs)
        self.lookup = NeighborLookup(store, strict=self.config.strict_neighbors)
        self.graph = GraphTraversal(self.lookup, self.config)
        self.queries = QueryInterpreter(store, self.config)
        self.stats = StatsAggregator(store)

    @classmethod
    def from_env(cls) -> "ActionGraphService":
        """Build a Redis-backed service from environment configuration."""
        config = load_config_from_env()
        logger.info("Starting action graph service %s", config.service_name or "(unnamed)")
        return cls(RedisTripleStore.from_config(config), config)

    async def close(self) -> None:
        await self.store.close()

    # ── Verbs ───────────────────────────────────────────

    async def resolve_verb(self, gerund: str) -> Optional[VerbDefinition]:
        return await self.verbs.resolve(gerund)

    async def list_verbs(self, category: Optional[str] = None) -> list[VerbDefinition]:
        return await self.verbs.list(category)

    async def register_verb(self, definition: VerbDefinition | dict[str, Any]) -> VerbDefinition:
        return await self.verbs.register(definition)

    # ── Roles ───────────────────────────────────────────

    async def resolve_role(self, name: str) -> Optional[RoleDefinition]:
        return await self.roles.resolve(name)

    async def role_capabilities(self, name: str) -> list[str]:
        return await self.roles.capabilities(name)

    async def register_role(self, definition: RoleDefinition | dict[str, Any]) -> RoleDefinition:
        return await self.roles.register(definition)

    async def list_roles(self) -> list[RoleDefinition]:
        return await self.roles.list()

    # ── Capabilities ────────────────────────────────────

    async def check_capability(self, role: str, verb: str, *, request_id: Optional[str] = None) -> CapabilityCheck:
        result = await self.resolver.check(role, verb)
        get_graph_logger(__name__, request_id).info(
            "Capability check %s/%s: %s", role, verb, "allowed" if result.allowed else "denied"
        )
        return result

    async def check_action(self, role: str, verb: str, *, request_id: Optional[str] = None) -> str:
        """``"safe"``, ``"confirm"`` or ``"deny"``; see :func:`~actiongraph.capabilities.check_action`."""
        risk = await check_action(self.resolver, role, verb, self.policy)
        get_graph_logger(__name__, request_id).info("Action check %s/%s: %s", role, verb, risk)
        return risk

    # ── Graph ───────────────────────────────────────────

    async def traverse(self, start: str, depth: int = 2, direction: Direction = "forward") -> GraphResult:
        return await self.graph.traverse(start, depth, direction)

    async def find_paths(self, source: str, target: str, max_depth: Optional[int] = None) -> list[Path]:
        return await self.graph.find_paths(source, target, max_depth)

    async def shortest_path(self, source: str, target: str, max_depth: Optional[int] = None) -> Optional[Path]:
        return await self.graph.shortest_path(source, target, max_depth)

    async def get_neighbors(self, node: str, direction: Direction = "both") -> list[str]:
        """Neighbor node ids (may repeat when several predicates connect the same node)."""
        neighbors = await self.lookup.get_neighbors(node, direction)
        return [n.node_id for n in neighbors]

    async def common_neighbors(self, first: str, second: str) -> list[str]:
        return await self.graph.common_neighbors(first, second)

    async def node_degree(self, node: str) -> NodeDegree:
        return await self.stats.node_degree(node)

    # ── Queries ─────────────────────────────────────────

    async def execute_query(self, pattern: str) -> list[Triple]:
        return await self.queries.execute(pattern)

    async def lookup_triple(self, verb: str, subject: str, object: str) -> Optional[Triple]:
        """Resolve a semantic ``/{verb}/{subject}/{object}`` reference."""
        return await self.queries.lookup(verb, subject, object)

    async def get_stats(self) -> dict[str, dict[str, int]]:
        return await self.stats.get_stats()


__all__ = ["ActionGraphService"]
