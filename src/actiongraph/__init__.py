from .capabilities import (
    DEFAULT_APPROVAL_POLICY,
    ActionRisk,
    ApprovalPolicy,
    CapabilityResolver,
    check_action,
)
from .config import EngineConfig, LogLevel, load_config_from_env
from .exceptions import (
    ActionGraphError,
    ConfigurationError,
    StorageError,
    StoreUnavailableError,
    ValidationError,
)
from .graph import GraphTraversal, NeighborLookup
from .logging import (
    GraphLogFormatter,
    GraphLoggerAdapter,
    get_graph_logger,
    redact_secrets,
    safe_log_value,
    safe_preview,
    setup_logging,
)
from .models import (
    CapabilityCheck,
    DangerLevel,
    GraphEdge,
    GraphNode,
    GraphResult,
    Neighbor,
    NodeDegree,
    Path,
    RoleDefinition,
    Triple,
    TripleContext,
    TripleFilter,
    TripleQueryResult,
    VerbDefinition,
)
from .query import QueryInterpreter, StatsAggregator, parse_pattern
from .registry import SEED_ROLES, SEED_VERBS, RoleRegistry, VerbRegistry, to_gerund
from .service import ActionGraphService
from .store import BaseTripleStore, InMemoryTripleStore, RedisTripleStore

__all__ = [
    'ActionGraphService',
    'ActionGraphError',
    'ConfigurationError',
    'StorageError',
    'StoreUnavailableError',
    'ValidationError',
    'EngineConfig',
    'LogLevel',
    'load_config_from_env',
    'safe_preview',
    'redact_secrets',
    'safe_log_value',
    'GraphLogFormatter',
    'GraphLoggerAdapter',
    'setup_logging',
    'get_graph_logger',
    'CapabilityCheck',
    'DangerLevel',
    'GraphEdge',
    'GraphNode',
    'GraphResult',
    'Neighbor',
    'NodeDegree',
    'Path',
    'RoleDefinition',
    'Triple',
    'TripleContext',
    'TripleFilter',
    'TripleQueryResult',
    'VerbDefinition',
    'VerbRegistry',
    'RoleRegistry',
    'SEED_VERBS',
    'SEED_ROLES',
    'to_gerund',
    'CapabilityResolver',
    'ActionRisk',
    'ApprovalPolicy',
    'DEFAULT_APPROVAL_POLICY',
    'check_action',
    'NeighborLookup',
    'GraphTraversal',
    'QueryInterpreter',
    'StatsAggregator',
    'parse_pattern',
    'BaseTripleStore',
    'InMemoryTripleStore',
    'RedisTripleStore',
]
