"""In-process triple store.

Used for local development and tests. Keeps triples in insertion order and
answers every collaborator query by scanning; fine for small graphs.
"""

from __future__ import annotations

import logging
from collections import Counter
from datetime import datetime, timezone
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
from .base import BaseTripleStore, join_node_id

logger = logging.getLogger(__name__)


class InMemoryTripleStore(BaseTripleStore):
    """Dictionary-backed store with soft delete."""

    def __init__(self) -> None:
        self._triples: dict[str, Triple] = {}
        self._verbs: dict[str, VerbDefinition] = {}
        self._roles: dict[str, RoleDefinition] = {}

    def _live(self) -> list[Triple]:
        return [t for t in self._triples.values() if not t.is_deleted]

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
        triple = Triple(
            subject=subject,
            predicate=predicate,
            object=object,
            context=context,
            created_by=created_by,
            confidence=confidence,
        )
        self._triples[triple.id] = triple
        logger.debug("Created triple %s: %s %s %s", triple.id, subject, predicate, object)
        return triple

    async def get_triple(self, triple_id: str) -> Optional[Triple]:
        triple = self._triples.get(triple_id)
        if triple is None or triple.is_deleted:
            return None
        return triple

    async def delete_triple(self, triple_id: str, *, deleted_by: str = "system") -> bool:
        triple = self._triples.get(triple_id)
        if triple is None or triple.is_deleted:
            return False
        now = datetime.now(timezone.utc)
        self._triples[triple_id] = triple.model_copy(
            update={"deleted_at": now, "updated_at": now, "version": triple.version + 1}
        )
        logger.debug("Soft-deleted triple %s by %s", triple_id, deleted_by)
        return True

    async def query_triples(self, triple_filter: TripleFilter) -> TripleQueryResult:
        # reversed insertion order breaks created_at ties newest-first
        matches = [t for t in reversed(self._live()) if triple_filter.matches(t)]
        matches.sort(key=lambda t: t.created_at, reverse=True)
        start = triple_filter.offset
        end = start + triple_filter.limit if triple_filter.limit is not None else None
        return TripleQueryResult(triples=matches[start:end], total=len(matches))

    async def get_outgoing_relationships(self, namespace: str, local_id: str) -> dict[str, TargetRef]:
        node_id = join_node_id(namespace, local_id)
        grouped: dict[str, list[str]] = {}
        for triple in self._live():
            if triple.subject == node_id:
                grouped.setdefault(triple.predicate, []).append(triple.object)
        return {pred: objs[0] if len(objs) == 1 else objs for pred, objs in grouped.items()}

    async def get_incoming_relationships(self, namespace: str, local_id: str) -> list[dict[str, str]]:
        node_id = join_node_id(namespace, local_id)
        return [
            {"subject": t.subject, "predicate": t.predicate}
            for t in self._live()
            if t.object == node_id
        ]

    async def upsert_verb(self, definition: VerbDefinition) -> None:
        self._verbs[definition.gerund] = definition

    async def lookup_verb(self, gerund: str) -> Optional[VerbDefinition]:
        return self._verbs.get(gerund)

    async def list_verbs(self) -> list[VerbDefinition]:
        return list(self._verbs.values())

    async def upsert_role(self, definition: RoleDefinition) -> None:
        self._roles[definition.name] = definition

    async def lookup_role(self, name: str) -> Optional[RoleDefinition]:
        return self._roles.get(name)

    async def list_roles(self) -> list[RoleDefinition]:
        return list(self._roles.values())

    async def predicate_frequency(self) -> dict[str, int]:
        return dict(Counter(t.predicate for t in self._live()))

    async def subject_frequency(self) -> dict[str, int]:
        return dict(Counter(t.subject for t in self._live()))


__all__ = ["InMemoryTripleStore"]
