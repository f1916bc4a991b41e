"""Triple store collaborator contract.

The engine never owns durable state: triples, persisted verb/role
definitions and aggregate statistics all come from a store implementing
:class:`BaseTripleStore`. Backends must exclude soft-deleted triples from
every read and raise :class:`~actiongraph.exceptions.StoreUnavailableError`
when the backing service fails.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..models import (
    RoleDefinition,
    TargetRef,
    Triple,
    TripleContext,
    TripleFilter,
    TripleQueryResult,
    VerbDefinition,
)


def split_node_id(node_id: str) -> tuple[str, str]:
    """Split ``namespace:id`` on the first colon.

    Ids without a colon, or with an empty namespace (``":x"``), come back
    whole under the empty namespace so :func:`join_node_id` restores them.
    """
    namespace, sep, local_id = node_id.partition(":")
    if not sep or not namespace:
        return "", node_id
    return namespace, local_id


def join_node_id(namespace: str, local_id: str) -> str:
    return f"{namespace}:{local_id}" if namespace else local_id


class BaseTripleStore(ABC):
    """Async triple store interface consumed by registries and the graph engine."""

    # ── Triples ─────────────────────────────────────────

    @abstractmethod
    async def create_triple(
        self,
        subject: str,
        predicate: str,
        object: str,
        *,
        context: Optional[TripleContext] = None,
        created_by: str = "system",
        confidence: Optional[float] = None,
    ) -> Triple:
        raise NotImplementedError

    @abstractmethod
    async def get_triple(self, triple_id: str) -> Optional[Triple]:
        """Return a live triple by id, ``None`` if missing or soft-deleted."""
        raise NotImplementedError

    @abstractmethod
    async def delete_triple(self, triple_id: str, *, deleted_by: str = "system") -> bool:
        """Soft-delete. Returns False if missing or already deleted."""
        raise NotImplementedError

    @abstractmethod
    async def query_triples(self, triple_filter: TripleFilter) -> TripleQueryResult:
        """Equality filter over live triples, newest first."""
        raise NotImplementedError

    @abstractmethod
    async def get_outgoing_relationships(self, namespace: str, local_id: str) -> dict[str, TargetRef]:
        """Map predicate → object (single ref, or list when several)."""
        raise NotImplementedError

    @abstractmethod
    async def get_incoming_relationships(self, namespace: str, local_id: str) -> list[dict[str, str]]:
        """List of ``{"subject": ..., "predicate": ...}`` pointing at the node."""
        raise NotImplementedError

    # ── Verb & role persistence ─────────────────────────

    @abstractmethod
    async def upsert_verb(self, definition: VerbDefinition) -> None:
        raise NotImplementedError

    @abstractmethod
    async def lookup_verb(self, gerund: str) -> Optional[VerbDefinition]:
        raise NotImplementedError

    @abstractmethod
    async def list_verbs(self) -> list[VerbDefinition]:
        raise NotImplementedError

    @abstractmethod
    async def upsert_role(self, definition: RoleDefinition) -> None:
        raise NotImplementedError

    @abstractmethod
    async def lookup_role(self, name: str) -> Optional[RoleDefinition]:
        raise NotImplementedError

    @abstractmethod
    async def list_roles(self) -> list[RoleDefinition]:
        raise NotImplementedError

    # ── Aggregates ──────────────────────────────────────

    @abstractmethod
    async def predicate_frequency(self) -> dict[str, int]:
        raise NotImplementedError

    @abstractmethod
    async def subject_frequency(self) -> dict[str, int]:
        raise NotImplementedError

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
        return None


__all__ = ["BaseTripleStore", "join_node_id", "split_node_id"]
