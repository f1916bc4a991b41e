"""Tests for the verb catalog, gerund inflection and VerbRegistry."""

from __future__ import annotations

import threading
from unittest.mock import AsyncMock, MagicMock

import pytest
from actiongraph import (
    DangerLevel,
    InMemoryTripleStore,
    StoreUnavailableError,
    ValidationError,
    VerbDefinition,
    VerbRegistry,
    to_gerund,
)
from actiongraph.registry import DOMAIN_VERBS, SEED_VERBS, SUPPLY_CHAIN_VERBS, SnapshotCache


class TestToGerund:
    """Heuristic base form → gerund."""

    @pytest.mark.parametrize(
        "base, gerund",
        [
            ("code", "coding"),
            ("run", "running"),
            ("die", "dying"),
            ("read", "reading"),
            ("ship", "shipping"),
            ("see", "seeing"),
            ("fix", "fixing"),
            ("be", "being"),
            ("visit", "visiting"),
            ("invoice", "invoicing"),
            ("debug", "debugging"),
            ("audit", "auditing"),
        ],
    )
    def test_single_words(self, base: str, gerund: str) -> None:
        assert to_gerund(base) == gerund

    def test_multi_word_inflects_last(self) -> None:
        assert to_gerund("cycle count") == "cycle_counting"
        assert to_gerund("Void  Ship") == "void_shipping"

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError):
            to_gerund("   ")

    def test_catalog_gerunds_match_base_forms(self) -> None:
        """Seeded single-inflection gerunds are what their base forms inflect to."""
        for verb in SEED_VERBS:
            if not verb.gerund.endswith("ing"):
                continue  # staging_outbound
            assert to_gerund(verb.base_form) == verb.gerund, verb.gerund


class TestCatalog:
    """Seed verb catalog invariants."""

    def test_supply_chain_has_37_gs1_steps(self) -> None:
        assert len(SUPPLY_CHAIN_VERBS) == 37
        for verb in SUPPLY_CHAIN_VERBS:
            assert verb.category == "supply_chain"
            assert verb.gs1_step == f"urn:epcglobal:cbv:bizstep:{verb.gerund}"

    def test_gerunds_unique(self) -> None:
        gerunds = [v.gerund for v in SEED_VERBS]
        assert len(gerunds) == len(set(gerunds))

    def test_ids_default_from_gerund(self) -> None:
        for verb in SEED_VERBS:
            assert verb.id == f"verb:{verb.gerund}"

    def test_destructive_steps_need_approval(self) -> None:
        by_gerund = {v.gerund: v for v in SEED_VERBS}
        assert by_gerund["destroying"].danger_level == DangerLevel.CRITICAL
        assert by_gerund["destroying"].requires_approval is True
        assert by_gerund["killing"].requires_approval is True
        assert by_gerund["shipping"].requires_approval is False

    def test_domain_categories(self) -> None:
        categories = {v.category for v in DOMAIN_VERBS}
        assert categories == {"knowledge", "business", "technology", "finance", "medical"}


class TestSnapshotCache:
    """Copy-on-write cache behaviour."""

    def test_snapshot_unchanged_by_later_put(self) -> None:
        cache: SnapshotCache[int] = SnapshotCache([("a", 1)])
        before = cache.snapshot()
        cache.put("b", 2)
        assert "b" not in before
        assert "b" in cache
        assert len(cache) == 2

    def test_snapshot_is_read_only(self) -> None:
        cache: SnapshotCache[int] = SnapshotCache([("a", 1)])
        with pytest.raises(TypeError):
            cache.snapshot()["a"] = 5  # type: ignore[index]

    def test_concurrent_puts_and_reads(self) -> None:
        cache: SnapshotCache[int] = SnapshotCache()
        writers, per_writer = 8, 200
        done = threading.Event()
        errors: list[str] = []

        def write(worker: int) -> None:
            for i in range(per_writer):
                cache.put(f"w{worker}-{i}", i)

        def read() -> None:
            last_size = 0
            while not done.is_set():
                snap = cache.snapshot()
                items = dict(snap.items())
                if len(items) < last_size:
                    errors.append(f"snapshot shrank from {last_size} to {len(items)}")
                last_size = len(items)
                for key, value in items.items():
                    if int(key.rsplit("-", 1)[1]) != value:
                        errors.append(f"{key} maps to {value}")

        readers = [threading.Thread(target=read) for _ in range(4)]
        workers = [threading.Thread(target=write, args=(n,)) for n in range(writers)]
        for thread in readers + workers:
            thread.start()
        for thread in workers:
            thread.join()
        done.set()
        for thread in readers:
            thread.join()

        assert errors == []
        expected = {f"w{n}-{i}": i for n in range(writers) for i in range(per_writer)}
        assert dict(cache.snapshot()) == expected


class TestVerbRegistryResolve:
    """Cache-then-store resolution."""

    @pytest.mark.asyncio
    async def test_resolve_seeded_verb(self) -> None:
        verb = await VerbRegistry().resolve("invoicing")
        assert verb is not None
        assert verb.category == "finance"
        assert verb.required_role == ["accountant", "finance_manager"]

    @pytest.mark.asyncio
    async def test_unknown_without_store(self) -> None:
        assert await VerbRegistry().resolve("teleporting") is None

    @pytest.mark.asyncio
    async def test_store_hit_is_cached(self) -> None:
        store = MagicMock()
        store.lookup_verb = AsyncMock(
            return_value=VerbDefinition(gerund="teleporting", base_form="teleport")
        )
        registry = VerbRegistry(store)

        first = await registry.resolve("teleporting")
        second = await registry.resolve("teleporting")

        assert first is second
        store.lookup_verb.assert_awaited_once_with("teleporting")

    @pytest.mark.asyncio
    async def test_seeded_verb_never_hits_store(self) -> None:
        store = MagicMock()
        store.lookup_verb = AsyncMock()
        await VerbRegistry(store).resolve("reading")
        store.lookup_verb.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self) -> None:
        store = MagicMock()
        store.lookup_verb = AsyncMock(side_effect=StoreUnavailableError("down"))
        with pytest.raises(StoreUnavailableError):
            await VerbRegistry(store).resolve("teleporting")


class TestVerbRegistryRegister:
    """Validation and write-through registration."""

    @pytest.mark.asyncio
    async def test_register_writes_through(self) -> None:
        store = InMemoryTripleStore()
        registry = VerbRegistry(store)

        verb = await registry.register(
            {"gerund": "sterilizing", "base_form": "sterilize", "category": "medical", "danger_level": "medium"}
        )

        assert verb.id == "verb:sterilizing"
        assert verb.danger_level == DangerLevel.MEDIUM
        assert await store.lookup_verb("sterilizing") == verb
        assert await registry.resolve("sterilizing") == verb

    @pytest.mark.asyncio
    async def test_registered_verb_visible_to_fresh_registry(self) -> None:
        store = InMemoryTripleStore()
        await VerbRegistry(store).register(VerbDefinition(gerund="sterilizing", base_form="sterilize"))
        assert await VerbRegistry(store).resolve("sterilizing") is not None

    @pytest.mark.asyncio
    async def test_register_replaces_seed(self) -> None:
        registry = VerbRegistry()
        await registry.register(
            VerbDefinition(gerund="reading", base_form="read", danger_level=DangerLevel.LOW)
        )
        verb = await registry.resolve("reading")
        assert verb.danger_level == DangerLevel.LOW

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"gerund": "Sterilize", "base_form": "sterilize"},
            {"gerund": "sterilize", "base_form": "sterilize"},
            {"gerund": "sterilizing_", "base_form": "sterilize"},
            {"gerund": "", "base_form": "sterilize"},
            {"gerund": "sterilizing", "base_form": "sterilize", "danger_level": "extreme"},
            {"gerund": "sterilizing", "base_form": "sterilize", "colour": "blue"},
            {"gerund": "sterilizing", "base_form": "sterilize", "required_role": [""]},
        ],
    )
    async def test_invalid_definitions_rejected(self, payload: dict) -> None:
        store = MagicMock()
        store.upsert_verb = AsyncMock()
        registry = VerbRegistry(store)

        with pytest.raises(ValidationError):
            await registry.register(payload)

        store.upsert_verb.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_store_failure_leaves_cache_untouched(self) -> None:
        store = MagicMock()
        store.upsert_verb = AsyncMock(side_effect=StoreUnavailableError("down"))
        store.lookup_verb = AsyncMock(return_value=None)
        registry = VerbRegistry(store)

        with pytest.raises(StoreUnavailableError):
            await registry.register(VerbDefinition(gerund="sterilizing", base_form="sterilize"))

        assert await registry.resolve("sterilizing") is None


class TestVerbRegistryList:
    """Listing and category filtering."""

    @pytest.mark.asyncio
    async def test_list_sorted_and_filtered(self) -> None:
        verbs = await VerbRegistry().list("medical")
        assert [v.gerund for v in verbs] == ["diagnosing", "examining", "prescribing", "treating"]

    @pytest.mark.asyncio
    async def test_list_merges_store_definitions(self) -> None:
        store = InMemoryTripleStore()
        await store.upsert_verb(VerbDefinition(gerund="teleporting", base_form="teleport"))
        verbs = await VerbRegistry(store).list()
        gerunds = [v.gerund for v in verbs]
        assert "teleporting" in gerunds
        assert len(gerunds) == len(SEED_VERBS) + 1
        assert gerunds == sorted(gerunds)
