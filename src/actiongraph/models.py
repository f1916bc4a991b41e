"""Core data models for the action graph engine.

These are Pydantic models shared by the registries, the capability
resolver, the traversal engine and the store backends.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator

Direction = Literal["forward", "backward", "both"]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Triple context ──────────────────────────────────────


class TemporalContext(BaseModel):
    """When the action happened."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None
    duration: Optional[str] = None  # ISO-8601 duration, e.g. "PT2H"
    timestamp: Optional[datetime] = None


class SpatialContext(BaseModel):
    """Where the action happened."""

    location: Optional[str] = None
    coordinates: Optional[tuple[float, float]] = None  # (lat, lon)
    address: Optional[str] = None
    region: Optional[str] = None


class CausalContext(BaseModel):
    """Why the action happened."""

    reason: Optional[str] = None
    goal: Optional[str] = None
    motivation: Optional[str] = None


class RelationalContext(BaseModel):
    """Who else was involved."""

    team: Optional[str] = None
    collaborators: list[str] = Field(default_factory=list)
    supervisor: Optional[str] = None
    client: Optional[str] = None


class InstrumentalContext(BaseModel):
    """How the action was performed."""

    tools: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    process: Optional[str] = None
    technique: Optional[str] = None


class TripleContext(BaseModel):
    """Structured 5W1H annotation attached to a triple.

    Every field is optional; absence means "unknown". Keys that are not
    part of the fixed structure are collected into ``extensions`` so a
    context read from the store serializes back to the same payload.
    """

    temporal: Optional[TemporalContext] = None
    spatial: Optional[SpatialContext] = None
    causal: Optional[CausalContext] = None
    relational: Optional[RelationalContext] = None
    instrumental: Optional[InstrumentalContext] = None

    source: Optional[str] = None
    inferred: Optional[bool] = None
    prediction: Optional[bool] = None
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    extensions: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _collect_extensions(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        known = set(cls.model_fields)
        extra = {k: v for k, v in data.items() if k not in known}
        if not extra:
            return data
        cleaned = {k: v for k, v in data.items() if k in known}
        cleaned["extensions"] = {**(data.get("extensions") or {}), **extra}
        return cleaned

    def to_payload(self) -> dict[str, Any]:
        """Serialize with extensions flattened back to the top level."""
        payload = self.model_dump(mode="json", exclude_none=True, exclude={"extensions"})
        payload.update(self.extensions)
        return payload


# ── Triple ──────────────────────────────────────────────


class Triple(BaseModel):
    """A subject–predicate–object fact.

    Subject, predicate and object are opaque ``namespace:id`` strings.
    Owned by the store; the engine only reads triples.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    subject: str
    predicate: str
    object: str
    context: Optional[TripleContext] = None

    created_at: datetime = Field(default_factory=_utcnow)
    created_by: str = "system"
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None
    version: int = 1
    confidence: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class TripleFilter(BaseModel):
    """Store-level equality filter. ``None`` means unconstrained."""

    subject: Optional[str] = None
    predicate: Optional[str] = None
    object: Optional[str] = None
    limit: Optional[int] = Field(default=None, gt=0)
    offset: int = Field(default=0, ge=0)

    def matches(self, triple: Triple) -> bool:
        return (
            (self.subject is None or triple.subject == self.subject)
            and (self.predicate is None or triple.predicate == self.predicate)
            and (self.object is None or triple.object == self.object)
        )


class TripleQueryResult(BaseModel):
    """Page of triples plus the total number of matches before paging."""

    triples: list[Triple] = Field(default_factory=list)
    total: int = 0


# ── Verbs & roles ───────────────────────────────────────


class DangerLevel(str, Enum):
    """Ordinal severity of a verb, used by callers for approval gating."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _DANGER_ORDER.index(self)


_DANGER_ORDER = (
    DangerLevel.SAFE,
    DangerLevel.LOW,
    DangerLevel.MEDIUM,
    DangerLevel.HIGH,
    DangerLevel.CRITICAL,
)


class VerbDefinition(BaseModel):
    """Canonical action, keyed by its gerund (e.g. ``"invoicing"``)."""

    model_config = ConfigDict(extra="forbid")

    id: str = ""
    gerund: str = Field(min_length=1)
    base_form: str = Field(min_length=1)
    category: Optional[str] = None
    gs1_step: Optional[str] = None
    onet_task_id: Optional[str] = None
    required_role: Optional[list[str]] = None
    danger_level: DangerLevel = DangerLevel.SAFE
    requires_approval: bool = False
    description: Optional[str] = None
    examples: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _default_id(self) -> "VerbDefinition":
        if not self.id:
            self.id = f"verb:{self.gerund}"
        return self


class RoleDefinition(BaseModel):
    """Named bundle of capabilities with optional single-parent inheritance.

    ``"*"`` in ``capabilities`` means unrestricted.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = ""
    name: str = Field(min_length=1)
    capabilities: list[str] = Field(default_factory=list)
    forbidden_verbs: list[str] = Field(default_factory=list)
    parent_role: Optional[str] = None
    onet_code: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="after")
    def _default_id(self) -> "RoleDefinition":
        if not self.id:
            self.id = f"role:{self.name}"
        if self.parent_role == self.name:
            raise ValueError(f"Role '{self.name}' cannot be its own parent")
        return self

    @property
    def is_unrestricted(self) -> bool:
        return WILDCARD in self.capabilities


WILDCARD = "*"


class CapabilityCheck(BaseModel):
    """Verdict for a (role, verb) pair. Denial is a value, not an error."""

    allowed: bool
    reason: Optional[str] = None
    requires_approval: Optional[bool] = None
    danger_level: Optional[DangerLevel] = None


# ── Graph output ────────────────────────────────────────


class Neighbor(BaseModel):
    """One neighbor of a node.

    ``role`` is the neighbor's position in the underlying triple:
    ``object`` for forward lookups, ``subject`` for backward ones.
    """

    node_id: str
    predicate: str
    role: Literal["subject", "object"]


class GraphNode(BaseModel):
    id: str
    type: Literal["subject", "object"]
    label: str


class GraphEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)

    from_: str = Field(alias="from")
    to: str
    predicate: str
    weight: Optional[float] = None


class GraphResult(BaseModel):
    """BFS neighbourhood: each node appears once."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    depth: int = 0


class Path(BaseModel):
    """Simple path; ``edges[i]`` is the predicate between ``nodes[i]`` and ``nodes[i+1]``."""

    nodes: list[str]
    edges: list[str] = Field(default_factory=list)
    length: int = 0


class NodeDegree(BaseModel):
    model_config = ConfigDict(populate_by_name=True, serialize_by_alias=True)

    in_: int = Field(default=0, alias="in")
    out: int = 0
    total: int = 0


TargetRef = Union[str, list[str]]


__all__ = [
    "CapabilityCheck",
    "CausalContext",
    "DangerLevel",
    "Direction",
    "GraphEdge",
    "GraphNode",
    "GraphResult",
    "InstrumentalContext",
    "Neighbor",
    "NodeDegree",
    "Path",
    "RelationalContext",
    "RoleDefinition",
    "SpatialContext",
    "TargetRef",
    "TemporalContext",
    "Triple",
    "TripleContext",
    "TripleFilter",
    "TripleQueryResult",
    "VerbDefinition",
    "WILDCARD",
]
