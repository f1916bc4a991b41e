"""Approval gating on top of capability checks.

Provides:
- ``ActionRisk`` — outcome classification (safe / confirm / deny).
- ``ApprovalPolicy`` — danger-level thresholds for confirmation or blocking.
- ``check_action()`` — combined CAN (capability) + SHOULD (policy) decision.
"""

from __future__ import annotations

from typing import Optional

from ..models import CapabilityCheck, DangerLevel
from .resolver import CapabilityResolver


class ActionRisk:
    """What a caller should do with an attempted action."""

    SAFE = "safe"  # Execute without confirmation
    CONFIRM = "confirm"  # Hold for human approval
    DENY = "deny"  # Block


class ApprovalPolicy:
    """Maps an allowed verdict to a risk by danger level.

    Controls SHOULD, not CAN: a role may be allowed to ``paying`` while
    the policy still requires confirmation.

    Args:
        confirm_from: Lowest danger level that needs confirmation.
        deny_from: Lowest danger level that is blocked outright (None = never).

    Example::

        strict = ApprovalPolicy(confirm_from=DangerLevel.MEDIUM, deny_from=DangerLevel.CRITICAL)
        strict.risk_for(CapabilityCheck(allowed=True, danger_level=DangerLevel.HIGH))  # "confirm"
    """

    __slots__ = ("confirm_from", "deny_from")

    def __init__(
        self,
        *,
        confirm_from: DangerLevel = DangerLevel.HIGH,
        deny_from: Optional[DangerLevel] = None,
    ) -> None:
        self.confirm_from = confirm_from
        self.deny_from = deny_from

    def risk_for(self, check: CapabilityCheck) -> str:
        if not check.allowed:
            return ActionRisk.DENY
        danger = check.danger_level or DangerLevel.SAFE
        if self.deny_from is not None and danger.rank >= self.deny_from.rank:
            return ActionRisk.DENY
        if check.requires_approval or danger.rank >= self.confirm_from.rank:
            return ActionRisk.CONFIRM
        return ActionRisk.SAFE

    def __repr__(self) -> str:
        return f"ApprovalPolicy(confirm_from={self.confirm_from.value!r}, deny_from={self.deny_from!r})"


DEFAULT_APPROVAL_POLICY = ApprovalPolicy()


async def check_action(
    resolver: CapabilityResolver,
    role: str,
    verb: str,
    policy: Optional[ApprovalPolicy] = None,
) -> str:
    """Combined authorization + approval decision.

    Decision logic:
    1. Capability check denies → ``DENY``
    2. Policy blocks the verb's danger level → ``DENY``
    3. Verb requires approval or is at/above ``confirm_from`` → ``CONFIRM``
    4. Otherwise → ``SAFE``

    Example::

        await check_action(resolver, "viewer", "reading")          # "safe"
        await check_action(resolver, "accountant", "paying")       # "confirm"
        await check_action(resolver, "viewer", "writing")          # "deny"
    """
    verdict = await resolver.check(role, verb)
    return (policy or DEFAULT_APPROVAL_POLICY).risk_for(verdict)


__all__ = [
    "ActionRisk",
    "ApprovalPolicy",
    "DEFAULT_APPROVAL_POLICY",
    "check_action",
]
