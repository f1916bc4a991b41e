"""Capability resolution: may role R perform verb V?

Checks, in order (first match wins):
1. Role or verb unknown → deny, naming the missing entity.
2. ``*`` in the role's own capabilities → allow.
3. Verb in the role's own capabilities → allow.
4. Verb in the role's ``forbidden_verbs`` → deny ("explicitly forbidden").
5. Parent role allows (same checks, recursively) → allow, "inherited".
6. Verb restricted by ``required_role`` → allow iff the role is listed,
   deny otherwise.
7. Deny.

Step 3 runs before step 4, so a verb listed both as a capability and as
forbidden on the same role is allowed.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..models import CapabilityCheck, VerbDefinition
from ..registry.roles import RoleRegistry
from ..registry.verbs import VerbRegistry

logger = logging.getLogger(__name__)


def _verdict(allowed: bool, reason: str, verb: Optional[VerbDefinition] = None) -> CapabilityCheck:
    if verb is None:
        return CapabilityCheck(allowed=allowed, reason=reason)
    return CapabilityCheck(
        allowed=allowed,
        reason=reason,
        requires_approval=verb.requires_approval,
        danger_level=verb.danger_level,
    )


class CapabilityResolver:
    """Pure decision function over registry state. Never raises on denial."""

    def __init__(self, roles: RoleRegistry, verbs: VerbRegistry) -> None:
        self._roles = roles
        self._verbs = verbs

    async def check(self, role: str, verb: str) -> CapabilityCheck:
        """Decide whether ``role`` may perform ``verb`` (a gerund).

        Raises:
            StoreUnavailableError: a registry cache miss could not be served.
        """
        result = await self._check(role, verb, frozenset())
        logger.debug("Capability %s/%s → allowed=%s (%s)", role, verb, result.allowed, result.reason)
        return result

    async def _check(self, role_name: str, gerund: str, visited: frozenset[str]) -> CapabilityCheck:
        if role_name in visited:
            logger.warning("Role inheritance cycle at '%s' while checking '%s'", role_name, gerund)
            return _verdict(False, f"Role inheritance cycle at '{role_name}'")

        role = await self._roles.resolve(role_name)
        if role is None:
            return _verdict(False, f"Role '{role_name}' not found")
        verb = await self._verbs.resolve(gerund)
        if verb is None:
            return _verdict(False, f"Verb '{gerund}' not found")

        if role.is_unrestricted:
            return _verdict(True, f"Role '{role.name}' has unrestricted capabilities", verb)

        if verb.gerund in role.capabilities:
            return _verdict(True, f"Role '{role.name}' has capability '{verb.gerund}'", verb)

        if verb.gerund in role.forbidden_verbs:
            return _verdict(False, f"Verb '{verb.gerund}' is explicitly forbidden for role '{role.name}'", verb)

        if role.parent_role:
            inherited = await self._check(role.parent_role, gerund, visited | {role.name})
            if inherited.allowed:
                return _verdict(
                    True,
                    f"Inherited from parent role '{role.parent_role}': {inherited.reason}",
                    verb,
                )

        if verb.required_role:
            if role.name in verb.required_role:
                return _verdict(True, f"Role '{role.name}' is a required role for '{verb.gerund}'", verb)
            return _verdict(
                False,
                f"Verb '{verb.gerund}' requires one of roles: {', '.join(verb.required_role)}",
                verb,
            )

        return _verdict(False, f"Role '{role.name}' does not have capability '{verb.gerund}'", verb)


__all__ = ["CapabilityResolver"]
