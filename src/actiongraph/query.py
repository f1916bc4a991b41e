"""Pattern queries and aggregate statistics.

The pattern language is deliberately tiny: whitespace-separated
``?field=value`` tokens where ``field`` is ``subject``, ``predicate`` or
``object``. ``*`` leaves a field unconstrained, values may be wrapped in
single or double quotes, anything else is ignored::

    ?subject='accountant' ?predicate='invoicing' ?object=*

No boolean operators, no ranges.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from .config import EngineConfig
from .logging import safe_log_value
from .models import NodeDegree, Triple, TripleFilter
from .store.base import BaseTripleStore

logger = logging.getLogger(__name__)

QUERY_FIELDS = frozenset({"subject", "predicate", "object"})
WILDCARD_VALUE = "*"

_TOKEN_RE = re.compile(r"""\?(\w+)=('[^']*'|"[^"]*"|\S+)""")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def parse_pattern(pattern: str, limit: Optional[int] = 100) -> TripleFilter:
    """Translate a ``?field=value`` pattern into a store filter.

    Example::

        >>> parse_pattern("?subject='accountant' ?object=*")
        TripleFilter(subject='accountant', predicate=None, object=None, limit=100, offset=0)
    """
    constraints: dict[str, str] = {}
    for field, raw in _TOKEN_RE.findall(pattern):
        if field not in QUERY_FIELDS:
            continue
        value = _unquote(raw)
        if value == WILDCARD_VALUE:
            constraints.pop(field, None)
            continue
        constraints[field] = value
    return TripleFilter(limit=limit, **constraints)


class QueryInterpreter:
    """Runs parsed patterns against the store (newest first, capped)."""

    def __init__(self, store: BaseTripleStore, config: Optional[EngineConfig] = None) -> None:
        self._store = store
        self._config = config or EngineConfig()

    async def execute(self, pattern: str) -> list[Triple]:
        triple_filter = parse_pattern(pattern, limit=self._config.query_limit)
        logger.debug("Executing pattern %s as %s", safe_log_value(pattern), triple_filter)
        result = await self._store.query_triples(triple_filter)
        return result.triples

    async def lookup(self, predicate: str, subject: str, object: str) -> Optional[Triple]:
        """First live triple matching all three positions, or None."""
        result = await self._store.query_triples(
            TripleFilter(subject=subject, predicate=predicate, object=object, limit=1)
        )
        return result.triples[0] if result.triples else None


class StatsAggregator:
    """Thin shaping layer over store-side aggregation."""

    def __init__(self, store: BaseTripleStore) -> None:
        self._store = store

    async def predicate_stats(self) -> dict[str, int]:
        return await self._store.predicate_frequency()

    async def subject_stats(self) -> dict[str, int]:
        return await self._store.subject_frequency()

    async def get_stats(self) -> dict[str, dict[str, int]]:
        return {
            "predicates": await self.predicate_stats(),
            "subjects": await self.subject_stats(),
        }

    async def node_degree(self, node_id: str) -> NodeDegree:
        """In/out/total counts of live triples touching ``node_id``."""
        outgoing = await self._store.query_triples(TripleFilter(subject=node_id, limit=1))
        incoming = await self._store.query_triples(TripleFilter(object=node_id, limit=1))
        return NodeDegree(in_=incoming.total, out=outgoing.total, total=incoming.total + outgoing.total)


__all__ = [
    "QUERY_FIELDS",
    "QueryInterpreter",
    "StatsAggregator",
    "parse_pattern",
]
