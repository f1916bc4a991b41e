"""Shared fixtures: an in-memory store with a small supply-chain graph."""

from __future__ import annotations

import pytest
import pytest_asyncio
from actiongraph import ActionGraphService, InMemoryTripleStore


@pytest.fixture
def store() -> InMemoryTripleStore:
    return InMemoryTripleStore()


@pytest_asyncio.fixture
async def graph_store(store: InMemoryTripleStore) -> InMemoryTripleStore:
    """A → B → C, A → C, D → C; plus one soft-deleted C → A."""
    await store.create_triple("node:A", "shipping", "node:B")
    await store.create_triple("node:B", "receiving", "node:C")
    await store.create_triple("node:A", "packing", "node:C")
    await store.create_triple("node:D", "loading", "node:C")
    deleted = await store.create_triple("node:C", "returning", "node:A")
    await store.delete_triple(deleted.id)
    return store


@pytest.fixture
def service(store: InMemoryTripleStore) -> ActionGraphService:
    return ActionGraphService(store)
