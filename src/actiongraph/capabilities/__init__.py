"""Capability resolution and approval gating.

Provides:
- ``CapabilityResolver`` — allow/deny verdict for a (role, verb) pair.
- ``ApprovalPolicy`` / ``ActionRisk`` / ``check_action()`` — safe/confirm/deny gating.
"""

from .policy import DEFAULT_APPROVAL_POLICY, ActionRisk, ApprovalPolicy, check_action
from .resolver import CapabilityResolver

__all__ = [
    "ActionRisk",
    "ApprovalPolicy",
    "CapabilityResolver",
    "DEFAULT_APPROVAL_POLICY",
    "check_action",
]
