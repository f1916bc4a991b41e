"""Redis-backed triple store.

Key layout (all keys under ``{prefix}``)::

    {prefix}:triple:{id}            JSON-encoded Triple (kept after soft delete)
    {prefix}:triples                ZSET of live triple ids scored by created_at
    {prefix}:idx:s:{subject}        SET of live triple ids by subject
    {prefix}:idx:p:{predicate}      SET of live triple ids by predicate
    {prefix}:idx:o:{object}         SET of live triple ids by object
    {prefix}:stats:predicates       HASH predicate → live count
    {prefix}:stats:subjects         HASH subject → live count
    {prefix}:verbs                  HASH gerund → JSON VerbDefinition
    {prefix}:roles                  HASH name → JSON RoleDefinition

Soft-deleted triples are dropped from the zset, the indexes and the
counters, so reads never see them.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, TypeVar

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ..config import EngineConfig
from ..exceptions import ConfigurationError, StoreUnavailableError
from ..logging import redact_secrets
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

_T = TypeVar("_T")


def redis_errors(method: Callable[..., Awaitable[_T]]) -> Callable[..., Awaitable[_T]]:
    """Re-raise backend failures as StoreUnavailableError."""

    @functools.wraps(method)
    async def wrapper(self: "RedisTripleStore", *args: Any, **kwargs: Any) -> _T:
        try:
            return await method(self, *args, **kwargs)
        except RedisError as e:
            logger.error("Redis %s failed: %s", method.__name__, e)
            raise StoreUnavailableError(
                f"Redis {method.__name__} failed: {e}",
                operation=method.__name__,
            ) from e

    return wrapper


class RedisTripleStore(BaseTripleStore):
    """Triple store on ``redis.asyncio``.

    Args:
        client: Ready ``redis.asyncio.Redis`` client (``decode_responses=True``).
        prefix: Key prefix, see module docstring.
    """

    def __init__(self, client: aioredis.Redis, prefix: str = "actiongraph") -> None:
        self._redis = client
        self._prefix = prefix

    @classmethod
    def from_config(cls, config: EngineConfig) -> "RedisTripleStore":
        if not config.redis_url:
            raise ConfigurationError("REDIS_URL is required for RedisTripleStore")
        logger.info("Connecting triple store to %s", redact_secrets(config.redis_url))
        client = aioredis.from_url(config.redis_url, decode_responses=True)
        return cls(client, prefix=config.redis_prefix)

    # ── keys ────────────────────────────────────────────

    def _key(self, *parts: str) -> str:
        return ":".join((self._prefix, *parts))

    def _index_keys(self, triple: Triple) -> tuple[str, str, str]:
        return (
            self._key("idx", "s", triple.subject),
            self._key("idx", "p", triple.predicate),
            self._key("idx", "o", triple.object),
        )

    async def _load_many(self, ids: list[str]) -> list[Triple]:
        if not ids:
            return []
        raw = await self._redis.mget([self._key("triple", i) for i in ids])
        triples = [Triple.model_validate_json(r) for r in raw if r]
        return [t for t in triples if not t.is_deleted]

    # ── triples ─────────────────────────────────────────

    @redis_errors
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
        pipe = self._redis.pipeline(transaction=True)
        pipe.set(self._key("triple", triple.id), triple.model_dump_json())
        pipe.zadd(self._key("triples"), {triple.id: triple.created_at.timestamp()})
        for key in self._index_keys(triple):
            pipe.sadd(key, triple.id)
        pipe.hincrby(self._key("stats", "predicates"), predicate, 1)
        pipe.hincrby(self._key("stats", "subjects"), subject, 1)
        await pipe.execute()
        return triple

    @redis_errors
    async def get_triple(self, triple_id: str) -> Optional[Triple]:
        raw = await self._redis.get(self._key("triple", triple_id))
        if not raw:
            return None
        triple = Triple.model_validate_json(raw)
        return None if triple.is_deleted else triple

    @redis_errors
    async def delete_triple(self, triple_id: str, *, deleted_by: str = "system") -> bool:
        triple = await self.get_triple(triple_id)
        if triple is None:
            return False
        now = datetime.now(timezone.utc)
        deleted = triple.model_copy(update={"deleted_at": now, "updated_at": now, "version": triple.version + 1})
        pipe = self._redis.pipeline(transaction=True)
        pipe.set(self._key("triple", triple_id), deleted.model_dump_json())
        pipe.zrem(self._key("triples"), triple_id)
        for key in self._index_keys(triple):
            pipe.srem(key, triple_id)
        pipe.hincrby(self._key("stats", "predicates"), triple.predicate, -1)
        pipe.hincrby(self._key("stats", "subjects"), triple.subject, -1)
        await pipe.execute()
        logger.debug("Soft-deleted triple %s by %s", triple_id, deleted_by)
        return True

    @redis_errors
    async def query_triples(self, triple_filter: TripleFilter) -> TripleQueryResult:
        index_keys = [
            self._key("idx", code, value)
            for code, value in (
                ("s", triple_filter.subject),
                ("p", triple_filter.predicate),
                ("o", triple_filter.object),
            )
            if value is not None
        ]
        if index_keys:
            ids = list(await self._redis.sinter(index_keys))
        else:
            ids = list(await self._redis.zrange(self._key("triples"), 0, -1))

        matches = await self._load_many(ids)
        matches.sort(key=lambda t: t.created_at, reverse=True)
        start = triple_filter.offset
        end = start + triple_filter.limit if triple_filter.limit is not None else None
        return TripleQueryResult(triples=matches[start:end], total=len(matches))

    @redis_errors
    async def get_outgoing_relationships(self, namespace: str, local_id: str) -> dict[str, TargetRef]:
        node_id = join_node_id(namespace, local_id)
        ids = list(await self._redis.smembers(self._key("idx", "s", node_id)))
        grouped: dict[str, list[str]] = {}
        for triple in sorted(await self._load_many(ids), key=lambda t: t.created_at):
            grouped.setdefault(triple.predicate, []).append(triple.object)
        return {pred: objs[0] if len(objs) == 1 else objs for pred, objs in grouped.items()}

    @redis_errors
    async def get_incoming_relationships(self, namespace: str, local_id: str) -> list[dict[str, str]]:
        node_id = join_node_id(namespace, local_id)
        ids = list(await self._redis.smembers(self._key("idx", "o", node_id)))
        triples = sorted(await self._load_many(ids), key=lambda t: t.created_at)
        return [{"subject": t.subject, "predicate": t.predicate} for t in triples]

    # ── verbs & roles ───────────────────────────────────

    @redis_errors
    async def upsert_verb(self, definition: VerbDefinition) -> None:
        await self._redis.hset(self._key("verbs"), definition.gerund, definition.model_dump_json())

    @redis_errors
    async def lookup_verb(self, gerund: str) -> Optional[VerbDefinition]:
        raw = await self._redis.hget(self._key("verbs"), gerund)
        return VerbDefinition.model_validate_json(raw) if raw else None

    @redis_errors
    async def list_verbs(self) -> list[VerbDefinition]:
        raw = await self._redis.hgetall(self._key("verbs"))
        return [VerbDefinition.model_validate_json(v) for v in raw.values()]

    @redis_errors
    async def upsert_role(self, definition: RoleDefinition) -> None:
        await self._redis.hset(self._key("roles"), definition.name, definition.model_dump_json())

    @redis_errors
    async def lookup_role(self, name: str) -> Optional[RoleDefinition]:
        raw = await self._redis.hget(self._key("roles"), name)
        return RoleDefinition.model_validate_json(raw) if raw else None

    @redis_errors
    async def list_roles(self) -> list[RoleDefinition]:
        raw = await self._redis.hgetall(self._key("roles"))
        return [RoleDefinition.model_validate_json(v) for v in raw.values()]

    # ── aggregates ──────────────────────────────────────

    async def _counts(self, key: str) -> dict[str, int]:
        raw = await self._redis.hgetall(key)
        counts = {k: int(v) for k, v in raw.items()}
        return {k: v for k, v in counts.items() if v > 0}

    @redis_errors
    async def predicate_frequency(self) -> dict[str, int]:
        return await self._counts(self._key("stats", "predicates"))

    @redis_errors
    async def subject_frequency(self) -> dict[str, int]:
        return await self._counts(self._key("stats", "subjects"))

    async def close(self) -> None:
        await self._redis.aclose()


__all__ = ["RedisTripleStore", "redis_errors"]
