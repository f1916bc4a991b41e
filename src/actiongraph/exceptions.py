"""Unified exception hierarchy for actiongraph.

All engine errors inherit from ActionGraphError and carry a stable error code.

Capability denials are NOT exceptions; see
:class:`actiongraph.models.CapabilityCheck`.

Usage:
    from actiongraph.exceptions import (
        ActionGraphError,
        StoreUnavailableError,
        ValidationError,
    )

Store backends may define thin subclasses for backend-specific errors:
    class RedisStoreError(StoreUnavailableError):
        pass
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ActionGraphError",
    "ConfigurationError",
    "ValidationError",
    "StorageError",
    "StoreUnavailableError",
]

# ---- Exception Hierarchy ----------------------------------------------------


class ActionGraphError(Exception):
    """Base exception for the action graph engine.

    Attributes:
        code: Stable error code string for protocol mapping (e.g. "STORE_UNAVAILABLE").
        message: Human-readable error description.
        details: Additional context as keyword arguments.
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(self, message: str | None = None, code: str | None = None, **kwargs: Any) -> None:
        self.message = message or self.message
        self.code = code or self.code
        self.details = kwargs
        super().__init__(self.message)


class ConfigurationError(ActionGraphError):
    """Invalid or missing configuration."""

    code: str = "CONFIGURATION_ERROR"


class ValidationError(ActionGraphError):
    """Malformed registration payload, rejected before any mutation."""

    code: str = "VALIDATION_ERROR"
    message: str = "Invalid definition"


class StorageError(ActionGraphError):
    """Triple store operation failure."""

    code: str = "STORAGE_ERROR"


class StoreUnavailableError(StorageError):
    """The external triple store could not be reached or failed to answer."""

    code: str = "STORE_UNAVAILABLE"
    message: str = "Triple store unavailable"

