"""Copy-on-write definition cache shared by the verb and role registries.

Readers take the current snapshot without locking; writers build a new
dict under a lock and swap the reference. Lost updates between two
concurrent cache fills are acceptable (the next resolve re-fetches), a
half-written map is not.
"""

from __future__ import annotations

import threading
from types import MappingProxyType
from typing import Generic, Iterable, Mapping, Optional, TypeVar

_V = TypeVar("_V")


class SnapshotCache(Generic[_V]):
    """String-keyed map with lock-free reads and atomically swapped writes."""

    def __init__(self, items: Iterable[tuple[str, _V]] = ()) -> None:
        self._lock = threading.Lock()
        self._snapshot: Mapping[str, _V] = MappingProxyType(dict(items))

    def get(self, key: str) -> Optional[_V]:
        return self._snapshot.get(key)

    def put(self, key: str, value: _V) -> None:
        with self._lock:
            updated = dict(self._snapshot)
            updated[key] = value
            self._snapshot = MappingProxyType(updated)

    def snapshot(self) -> Mapping[str, _V]:
        """Read-only view; stays valid (and unchanged) after later writes."""
        return self._snapshot

    def __contains__(self, key: object) -> bool:
        return key in self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)


__all__ = ["SnapshotCache"]
