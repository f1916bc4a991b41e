"""Configuration contract for the action graph engine.

This module provides a Pydantic-validated configuration model for the
engine (logging, store connection, traversal ceilings, query limits).

Direct os.environ/os.getenv usage is only allowed in
:func:`load_config_from_env`; everything else receives an
:class:`EngineConfig` instance.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Standard log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EngineConfig(BaseModel):
    """Configuration for registries, traversal and the query interpreter.

    Depth arguments above ``max_traverse_depth`` / ``max_path_depth`` are
    clamped to the ceiling.
    """

    # Logging
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Logging level for the engine",
    )
    log_json: bool = Field(
        default=False,
        description="Use JSON log format (default: plain text)",
    )

    # Triple store
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis connection URL for RedisTripleStore (e.g., redis://localhost:6379/0)",
    )
    redis_prefix: str = Field(
        default="actiongraph",
        min_length=1,
        description="Key prefix for all Redis keys written by the engine",
    )

    # Traversal
    max_traverse_depth: int = Field(
        default=10,
        ge=0,
        description="Upper bound applied to traverse() depth",
    )
    max_path_depth: int = Field(
        default=10,
        ge=0,
        description="Upper bound applied to find_paths() max_depth",
    )
    default_path_depth: int = Field(
        default=5,
        ge=0,
        description="max_depth used by find_paths() when the caller gives none",
    )
    strict_neighbors: bool = Field(
        default=False,
        description="Re-raise store failures during neighbor lookup instead of treating them as no neighbors",
    )

    # Query interpreter
    query_limit: int = Field(
        default=100,
        gt=0,
        description="Maximum number of triples returned by execute_query()",
    )

    # Service identification
    service_name: Optional[str] = Field(
        default=None,
        description="Service name for log identification",
    )

    @field_validator("redis_url")
    @classmethod
    def validate_redis_url(cls, v: Optional[str]) -> Optional[str]:
        """Validate Redis URL format."""
        if v is None:
            return v
        if not v.startswith(("redis://", "rediss://", "unix://")):
            raise ValueError("Redis URL must start with redis://, rediss://, or unix://")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str | LogLevel) -> LogLevel:
        """Convert string to LogLevel enum."""
        if isinstance(v, LogLevel):
            return v
        if isinstance(v, str):
            try:
                return LogLevel[v.upper()]
            except KeyError:
                raise ValueError(f"Invalid log level: {v}. Must be one of {[e.value for e in LogLevel]}")
        raise ValueError(f"Log level must be string or LogLevel enum, got {type(v)}")

    model_config = {
        "use_enum_values": True,
        "extra": "forbid",
    }


_TRUTHY = ("true", "1", "yes", "on")


def load_config_from_env() -> EngineConfig:
    """Load engine configuration from environment variables.

    This is the ONLY place where os.getenv is allowed.

    Environment variables:
    - LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - LOG_JSON: Use JSON log format (true/false, default: false)
    - REDIS_URL: Redis connection URL
    - ACTIONGRAPH_REDIS_PREFIX: Redis key prefix (default: actiongraph)
    - ACTIONGRAPH_MAX_TRAVERSE_DEPTH: traverse() ceiling (default: 10)
    - ACTIONGRAPH_MAX_PATH_DEPTH: find_paths() ceiling (default: 10)
    - ACTIONGRAPH_DEFAULT_PATH_DEPTH: find_paths() default depth (default: 5)
    - ACTIONGRAPH_QUERY_LIMIT: execute_query() cap (default: 100)
    - ACTIONGRAPH_STRICT_NEIGHBORS: fail-fast neighbor lookups (default: false)
    - SERVICE_NAME: Service name for logging

    Returns:
        EngineConfig instance with values from environment or defaults.
    """
    import os

    return EngineConfig(
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_json=os.getenv("LOG_JSON", "false").lower() in _TRUTHY,
        redis_url=os.getenv("REDIS_URL"),
        redis_prefix=os.getenv("ACTIONGRAPH_REDIS_PREFIX", "actiongraph"),
        max_traverse_depth=int(os.getenv("ACTIONGRAPH_MAX_TRAVERSE_DEPTH", "10")),
        max_path_depth=int(os.getenv("ACTIONGRAPH_MAX_PATH_DEPTH", "10")),
        default_path_depth=int(os.getenv("ACTIONGRAPH_DEFAULT_PATH_DEPTH", "5")),
        query_limit=int(os.getenv("ACTIONGRAPH_QUERY_LIMIT", "100")),
        strict_neighbors=os.getenv("ACTIONGRAPH_STRICT_NEIGHBORS", "false").lower() in _TRUTHY,
        service_name=os.getenv("SERVICE_NAME"),
    )


__all__ = [
    "EngineConfig",
    "LogLevel",
    "load_config_from_env",
]
