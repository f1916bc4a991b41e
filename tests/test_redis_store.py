"""Tests for RedisTripleStore against a mocked redis.asyncio client."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from actiongraph import (
    ConfigurationError,
    EngineConfig,
    RedisTripleStore,
    RoleDefinition,
    StoreUnavailableError,
    Triple,
    TripleFilter,
    VerbDefinition,
)


def _client() -> MagicMock:
    client = MagicMock()
    for name in ("get", "mget", "sinter", "zrange", "smembers", "hset", "hget", "hgetall", "aclose"):
        setattr(client, name, AsyncMock())
    pipe = MagicMock()
    pipe.execute = AsyncMock(return_value=[])
    client.pipeline = MagicMock(return_value=pipe)
    return client


def _triple(subject: str, predicate: str, object: str, minutes: int = 0, **kwargs) -> Triple:
    created = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(minutes=minutes)
    return Triple(subject=subject, predicate=predicate, object=object, created_at=created, **kwargs)


class TestFromConfig:
    """Construction from EngineConfig."""

    def test_requires_url(self) -> None:
        with pytest.raises(ConfigurationError, match="REDIS_URL"):
            RedisTripleStore.from_config(EngineConfig())

    def test_builds_client_from_url(self) -> None:
        config = EngineConfig(redis_url="redis://localhost:6379/3", redis_prefix="ag")
        with patch("actiongraph.store.redis_store.aioredis.from_url") as from_url:
            store = RedisTripleStore.from_config(config)
        from_url.assert_called_once_with("redis://localhost:6379/3", decode_responses=True)
        assert store._prefix == "ag"


class TestTriples:
    """Triple writes and reads."""

    @pytest.mark.asyncio
    async def test_create_writes_record_indexes_and_counters(self) -> None:
        client = _client()
        store = RedisTripleStore(client, prefix="ag")

        triple = await store.create_triple("wh:1", "shipping", "dc:1")

        client.pipeline.assert_called_once_with(transaction=True)
        pipe = client.pipeline.return_value
        pipe.set.assert_called_once_with(f"ag:triple:{triple.id}", triple.model_dump_json())
        pipe.zadd.assert_called_once_with("ag:triples", {triple.id: triple.created_at.timestamp()})
        indexed = [c.args[0] for c in pipe.sadd.call_args_list]
        assert indexed == ["ag:idx:s:wh:1", "ag:idx:p:shipping", "ag:idx:o:dc:1"]
        pipe.hincrby.assert_any_call("ag:stats:predicates", "shipping", 1)
        pipe.hincrby.assert_any_call("ag:stats:subjects", "wh:1", 1)
        pipe.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_live_deleted_and_missing(self) -> None:
        client = _client()
        store = RedisTripleStore(client, prefix="ag")
        live = _triple("a", "holding", "b")
        deleted = _triple("a", "holding", "c", deleted_at=datetime.now(timezone.utc))

        client.get.return_value = live.model_dump_json()
        assert await store.get_triple(live.id) == live
        client.get.return_value = deleted.model_dump_json()
        assert await store.get_triple(deleted.id) is None
        client.get.return_value = None
        assert await store.get_triple("nope") is None

    @pytest.mark.asyncio
    async def test_soft_delete_unindexes(self) -> None:
        client = _client()
        store = RedisTripleStore(client, prefix="ag")
        triple = _triple("wh:1", "shipping", "dc:1")
        client.get.return_value = triple.model_dump_json()

        assert await store.delete_triple(triple.id) is True

        pipe = client.pipeline.return_value
        record = Triple.model_validate_json(pipe.set.call_args.args[1])
        assert record.is_deleted
        assert record.version == 2
        pipe.zrem.assert_called_once_with("ag:triples", triple.id)
        assert pipe.srem.call_count == 3
        pipe.hincrby.assert_any_call("ag:stats:predicates", "shipping", -1)

    @pytest.mark.asyncio
    async def test_delete_missing(self) -> None:
        client = _client()
        client.get.return_value = None
        assert await RedisTripleStore(client).delete_triple("nope") is False
        client.pipeline.assert_not_called()

    @pytest.mark.asyncio
    async def test_query_intersects_indexes(self) -> None:
        client = _client()
        store = RedisTripleStore(client, prefix="ag")
        older = _triple("wh:1", "shipping", "dc:1", minutes=1)
        newer = _triple("wh:1", "shipping", "dc:2", minutes=2)
        client.sinter.return_value = {older.id, newer.id}
        client.mget.return_value = [older.model_dump_json(), newer.model_dump_json()]

        result = await store.query_triples(TripleFilter(subject="wh:1", predicate="shipping", limit=1))

        assert sorted(client.sinter.await_args.args[0]) == ["ag:idx:p:shipping", "ag:idx:s:wh:1"]
        assert result.total == 2
        assert [t.object for t in result.triples] == ["dc:2"]

    @pytest.mark.asyncio
    async def test_unconstrained_query_scans_zset(self) -> None:
        client = _client()
        client.zrange.return_value = []
        result = await RedisTripleStore(client, prefix="ag").query_triples(TripleFilter())
        client.zrange.assert_awaited_once_with("ag:triples", 0, -1)
        client.mget.assert_not_awaited()
        assert result.total == 0

    @pytest.mark.asyncio
    async def test_outgoing_groups_by_predicate(self) -> None:
        client = _client()
        t1 = _triple("wh:1", "shipping", "dc:1", minutes=1)
        t2 = _triple("wh:1", "shipping", "dc:2", minutes=2)
        t3 = _triple("wh:1", "storing", "pallet:9", minutes=3)
        client.smembers.return_value = {t1.id, t2.id, t3.id}
        client.mget.return_value = [t3.model_dump_json(), t1.model_dump_json(), t2.model_dump_json()]

        relationships = await RedisTripleStore(client, prefix="ag").get_outgoing_relationships("wh", "1")

        client.smembers.assert_awaited_once_with("ag:idx:s:wh:1")
        assert relationships == {"shipping": ["dc:1", "dc:2"], "storing": "pallet:9"}

    @pytest.mark.asyncio
    async def test_incoming(self) -> None:
        client = _client()
        t1 = _triple("node:B", "receiving", "node:C")
        client.smembers.return_value = {t1.id}
        client.mget.return_value = [t1.model_dump_json(), None]

        incoming = await RedisTripleStore(client, prefix="ag").get_incoming_relationships("node", "C")

        client.smembers.assert_awaited_once_with("ag:idx:o:node:C")
        assert incoming == [{"subject": "node:B", "predicate": "receiving"}]


class TestDefinitionsAndStats:
    """Verb/role hashes and counters."""

    @pytest.mark.asyncio
    async def test_verb_roundtrip(self) -> None:
        client = _client()
        store = RedisTripleStore(client, prefix="ag")
        verb = VerbDefinition(gerund="sterilizing", base_form="sterilize")

        await store.upsert_verb(verb)
        client.hset.assert_awaited_once_with("ag:verbs", "sterilizing", verb.model_dump_json())

        client.hget.return_value = verb.model_dump_json()
        assert await store.lookup_verb("sterilizing") == verb
        client.hget.return_value = None
        assert await store.lookup_verb("teleporting") is None

    @pytest.mark.asyncio
    async def test_list_roles(self) -> None:
        client = _client()
        role = RoleDefinition(name="pilot", capabilities=["transporting"])
        client.hgetall.return_value = {"pilot": role.model_dump_json()}
        assert await RedisTripleStore(client).list_roles() == [role]

    @pytest.mark.asyncio
    async def test_counts_drop_non_positive(self) -> None:
        client = _client()
        client.hgetall.return_value = {"shipping": "2", "returning": "0"}
        assert await RedisTripleStore(client, prefix="ag").predicate_frequency() == {"shipping": 2}
        client.hgetall.assert_awaited_once_with("ag:stats:predicates")

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        client = _client()
        await RedisTripleStore(client).close()
        client.aclose.assert_awaited_once()


class TestErrorWrapping:
    """Redis failures surface as StoreUnavailableError."""

    @pytest.mark.asyncio
    async def test_read_failure(self) -> None:
        client = _client()
        client.hget.side_effect = RedisConnectionError("refused")
        with pytest.raises(StoreUnavailableError) as exc_info:
            await RedisTripleStore(client).lookup_role("pilot")
        assert exc_info.value.details["operation"] == "lookup_role"
        assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    @pytest.mark.asyncio
    async def test_pipeline_failure(self) -> None:
        client = _client()
        client.pipeline.return_value.execute.side_effect = RedisConnectionError("refused")
        with pytest.raises(StoreUnavailableError):
            await RedisTripleStore(client).create_triple("a", "holding", "b")
