"""Role registry: seed catalog, single-parent inheritance, effective capabilities."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models import RoleDefinition
from ..store.base import BaseTripleStore
from .cache import SnapshotCache
from .catalog import SEED_ROLES

logger = logging.getLogger(__name__)


class RoleRegistry:
    """Catalog of roles keyed by name.

    Same cache-then-store resolution as :class:`VerbRegistry`. Occupation
    taxonomy inference is not attempted: an unknown role resolves to None.
    """

    def __init__(
        self,
        store: Optional[BaseTripleStore] = None,
        seed: Optional[Iterable[RoleDefinition]] = None,
    ) -> None:
        self._store = store
        roles = SEED_ROLES if seed is None else tuple(seed)
        self._cache: SnapshotCache[RoleDefinition] = SnapshotCache((r.name, r) for r in roles)

    async def resolve(self, name: str) -> Optional[RoleDefinition]:
        """Return the role definition, or None if unknown.

        Raises:
            StoreUnavailableError: the store failed on a cache miss.
        """
        role = self._cache.get(name)
        if role is not None:
            return role
        if self._store is None:
            return None
        role = await self._store.lookup_role(name)
        if role is None:
            return None
        self._cache.put(role.name, role)
        logger.debug("Cached role %s from store", role.name)
        return role

    async def ancestry(self, name: str) -> list[RoleDefinition]:
        """The role followed by its resolvable ancestors, nearest first.

        Stops at the first unresolvable parent and at the first repeated
        name, so a cyclic parent chain still terminates.
        """
        chain: list[RoleDefinition] = []
        visited: set[str] = set()
        current: Optional[str] = name
        while current is not None:
            if current in visited:
                logger.warning("Role inheritance cycle detected at '%s' (starting from '%s')", current, name)
                break
            visited.add(current)
            role = await self.resolve(current)
            if role is None:
                break
            chain.append(role)
            current = role.parent_role
        return chain

    async def capabilities(self, name: str) -> list[str]:
        """Own capabilities unioned with every ancestor's, deduplicated and sorted."""
        collected: set[str] = set()
        for role in await self.ancestry(name):
            collected.update(role.capabilities)
        return sorted(collected)

    async def list(self) -> list[RoleDefinition]:
        merged = dict(self._cache.snapshot())
        if self._store is not None:
            for role in await self._store.list_roles():
                merged.setdefault(role.name, role)
        return sorted(merged.values(), key=lambda r: r.name)

    async def register(self, definition: RoleDefinition | dict[str, Any]) -> RoleDefinition:
        """Validate, persist, then cache a role definition.

        A parent that does not exist yet is accepted (inheritance simply
        stops there until it is registered); a parent chain that leads
        back to the new role is rejected.

        Raises:
            ValidationError: malformed definition or inheritance cycle.
            StoreUnavailableError: persistence failed.
        """
        try:
            role = RoleDefinition.model_validate(definition)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid role definition: {e.error_count()} error(s)", errors=e.errors()) from e

        if role.parent_role is not None:
            for ancestor in await self.ancestry(role.parent_role):
                if ancestor.name == role.name or ancestor.parent_role == role.name:
                    raise ValidationError(
                        f"Role '{role.name}' would create an inheritance cycle via '{role.parent_role}'",
                        role=role.name,
                        parent_role=role.parent_role,
                    )

        if self._store is not None:
            await self._store.upsert_role(role)
        self._cache.put(role.name, role)
        logger.info("Registered role %s (parent=%s)", role.name, role.parent_role)
        return role


__all__ = ["RoleRegistry"]
