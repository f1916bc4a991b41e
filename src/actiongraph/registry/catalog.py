"""Seed catalog: canonical verbs and roles loaded into every registry.

Provides:
- ``SUPPLY_CHAIN_VERBS`` — the 37 GS1 CBV business steps as gerunds.
- ``DOMAIN_VERBS`` — knowledge, business, technology, finance and medical actions.
- ``SEED_VERBS`` / ``SEED_ROLES`` — ready-made definitions.

Seeds are never removed; ``register`` may only add or replace.
"""

from __future__ import annotations

from ..models import DangerLevel, RoleDefinition, VerbDefinition

GS1_BIZSTEP_PREFIX = "urn:epcglobal:cbv:bizstep:"

_S = DangerLevel.SAFE
_L = DangerLevel.LOW
_M = DangerLevel.MEDIUM
_H = DangerLevel.HIGH
_C = DangerLevel.CRITICAL

# ── Supply chain (GS1 CBV business steps) ───────────────
# (gerund, base_form, danger_level)

_SUPPLY_CHAIN: tuple[tuple[str, str, DangerLevel], ...] = (
    ("accepting", "accept", _L),
    ("arriving", "arrive", _S),
    ("assembling", "assemble", _M),
    ("collecting", "collect", _L),
    ("commissioning", "commission", _M),
    ("consigning", "consign", _M),
    ("cycle_counting", "cycle count", _S),
    ("decommissioning", "decommission", _H),
    ("departing", "depart", _L),
    ("destroying", "destroy", _C),
    ("disassembling", "disassemble", _M),
    ("dispensing", "dispense", _M),
    ("encoding", "encode", _L),
    ("holding", "hold", _L),
    ("inspecting", "inspect", _S),
    ("installing", "install", _M),
    ("killing", "kill", _C),
    ("loading", "load", _L),
    ("packing", "pack", _L),
    ("picking", "pick", _L),
    ("receiving", "receive", _L),
    ("removing", "remove", _M),
    ("repackaging", "repackage", _L),
    ("repairing", "repair", _M),
    ("replacing", "replace", _M),
    ("reserving", "reserve", _L),
    ("retail_selling", "retail sell", _L),
    ("sampling", "sample", _L),
    ("shipping", "ship", _M),
    ("staging_outbound", "stage outbound", _L),
    ("stock_taking", "stock take", _S),
    ("stocking", "stock", _L),
    ("storing", "store", _L),
    ("transporting", "transport", _M),
    ("unloading", "unload", _L),
    ("unpacking", "unpack", _L),
    ("void_shipping", "void ship", _H),
)

# Irreversible physical/identity destruction of goods or tags.
_APPROVAL_REQUIRED = frozenset({"destroying", "killing"})

SUPPLY_CHAIN_VERBS: tuple[VerbDefinition, ...] = tuple(
    VerbDefinition(
        gerund=gerund,
        base_form=base,
        category="supply_chain",
        gs1_step=GS1_BIZSTEP_PREFIX + gerund,
        danger_level=danger,
        requires_approval=gerund in _APPROVAL_REQUIRED,
    )
    for gerund, base, danger in _SUPPLY_CHAIN
)

# ── Cross-domain ────────────────────────────────────────
# (gerund, base_form, category, danger_level, required_role, requires_approval)

_DOMAIN: tuple[tuple[str, str, str, DangerLevel, tuple[str, ...], bool], ...] = (
    # knowledge
    ("reading", "read", "knowledge", _S, (), False),
    ("writing", "write", "knowledge", _L, (), False),
    ("researching", "research", "knowledge", _S, (), False),
    ("analyzing", "analyze", "knowledge", _S, (), False),
    ("teaching", "teach", "knowledge", _L, (), False),
    ("learning", "learn", "knowledge", _S, (), False),
    # business
    ("approving", "approve", "business", _M, (), False),
    ("managing", "manage", "business", _L, (), False),
    ("hiring", "hire", "business", _M, ("manager",), False),
    ("selling", "sell", "business", _L, (), False),
    ("buying", "buy", "business", _M, (), False),
    ("negotiating", "negotiate", "business", _L, (), False),
    # technology
    ("coding", "code", "technology", _L, (), False),
    ("testing", "test", "technology", _L, (), False),
    ("reviewing", "review", "technology", _S, (), False),
    ("debugging", "debug", "technology", _L, (), False),
    ("deploying", "deploy", "technology", _H, ("devops_engineer", "senior_developer"), False),
    ("monitoring", "monitor", "technology", _S, (), False),
    ("configuring", "configure", "technology", _M, (), False),
    # finance
    ("invoicing", "invoice", "finance", _M, ("accountant", "finance_manager"), False),
    ("auditing", "audit", "finance", _M, (), False),
    ("paying", "pay", "finance", _H, ("accountant", "finance_manager"), True),
    ("budgeting", "budget", "finance", _L, (), False),
    ("reconciling", "reconcile", "finance", _M, (), False),
    # medical
    ("diagnosing", "diagnose", "medical", _H, ("doctor",), False),
    ("prescribing", "prescribe", "medical", _C, ("doctor",), True),
    ("treating", "treat", "medical", _H, ("doctor", "nurse"), False),
    ("examining", "examine", "medical", _M, ("doctor", "nurse"), False),
)

DOMAIN_VERBS: tuple[VerbDefinition, ...] = tuple(
    VerbDefinition(
        gerund=gerund,
        base_form=base,
        category=category,
        danger_level=danger,
        required_role=list(required) or None,
        requires_approval=approval,
    )
    for gerund, base, category, danger, required, approval in _DOMAIN
)

SEED_VERBS: tuple[VerbDefinition, ...] = SUPPLY_CHAIN_VERBS + DOMAIN_VERBS

# ── Roles ───────────────────────────────────────────────

SEED_ROLES: tuple[RoleDefinition, ...] = (
    RoleDefinition(
        name="admin",
        capabilities=["*"],
        description="Unrestricted system administrator",
    ),
    RoleDefinition(
        name="viewer",
        capabilities=["reading"],
        description="Read-only access",
    ),
    RoleDefinition(
        name="accountant",
        capabilities=["invoicing", "auditing", "reconciling", "budgeting", "paying", "reading", "writing", "analyzing"],
        forbidden_verbs=["approving"],
        onet_code="13-2011.00",
    ),
    RoleDefinition(
        name="developer",
        capabilities=["coding", "testing", "debugging", "reviewing", "reading", "writing", "researching"],
        forbidden_verbs=["deploying"],
        onet_code="15-1252.00",
    ),
    RoleDefinition(
        name="senior_developer",
        capabilities=["deploying", "configuring", "teaching"],
        parent_role="developer",
        onet_code="15-1252.00",
    ),
    RoleDefinition(
        name="doctor",
        capabilities=["diagnosing", "prescribing", "treating", "examining", "reading", "writing", "researching"],
        onet_code="29-1216.00",
    ),
    RoleDefinition(
        name="nurse",
        capabilities=["treating", "examining", "reading", "writing"],
        forbidden_verbs=["prescribing", "diagnosing"],
        onet_code="29-1141.00",
    ),
    RoleDefinition(
        name="lawyer",
        capabilities=["reading", "writing", "researching", "reviewing", "negotiating", "analyzing"],
        onet_code="23-1011.00",
    ),
    RoleDefinition(
        name="manager",
        capabilities=["approving", "managing", "hiring", "reviewing", "budgeting", "negotiating", "reading", "writing"],
        onet_code="11-1021.00",
    ),
    RoleDefinition(
        name="finance_manager",
        capabilities=["approving", "auditing", "budgeting", "invoicing", "paying", "reconciling", "analyzing"],
        parent_role="manager",
        onet_code="11-3031.00",
    ),
    RoleDefinition(
        name="devops_engineer",
        capabilities=["deploying", "monitoring", "configuring", "coding", "testing", "debugging", "reading"],
        onet_code="15-1244.00",
    ),
)


__all__ = [
    "DOMAIN_VERBS",
    "GS1_BIZSTEP_PREFIX",
    "SEED_ROLES",
    "SEED_VERBS",
    "SUPPLY_CHAIN_VERBS",
]
