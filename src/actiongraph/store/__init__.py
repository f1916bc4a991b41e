"""Triple store backends.

Provides:
- ``BaseTripleStore`` — async collaborator contract.
- ``InMemoryTripleStore`` — in-process store for development and tests.
- ``RedisTripleStore`` — ``redis.asyncio`` backend.
"""

from .base import BaseTripleStore, join_node_id, split_node_id
from .memory import InMemoryTripleStore
from .redis_store import RedisTripleStore

__all__ = [
    "BaseTripleStore",
    "InMemoryTripleStore",
    "RedisTripleStore",
    "join_node_id",
    "split_node_id",
]
