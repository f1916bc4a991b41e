"""Verb and role registries.

Provides:
- ``VerbRegistry`` / ``RoleRegistry`` — cache-then-store catalogs.
- ``SEED_VERBS`` / ``SEED_ROLES`` — canonical seed definitions.
- ``to_gerund()`` — heuristic base form → gerund.
"""

from .cache import SnapshotCache
from .catalog import DOMAIN_VERBS, SEED_ROLES, SEED_VERBS, SUPPLY_CHAIN_VERBS
from .roles import RoleRegistry
from .verbs import VerbRegistry, to_gerund

__all__ = [
    "DOMAIN_VERBS",
    "RoleRegistry",
    "SEED_ROLES",
    "SEED_VERBS",
    "SUPPLY_CHAIN_VERBS",
    "SnapshotCache",
    "VerbRegistry",
    "to_gerund",
]
