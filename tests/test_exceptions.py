"""Tests for the exception hierarchy."""

from __future__ import annotations

import pytest
from actiongraph import (
    ActionGraphError,
    ConfigurationError,
    StorageError,
    StoreUnavailableError,
    ValidationError,
)


class TestHierarchy:
    """Codes, defaults and inheritance."""

    def test_default_message_and_code(self) -> None:
        err = StoreUnavailableError()
        assert err.code == "STORE_UNAVAILABLE"
        assert err.message == "Triple store unavailable"
        assert str(err) == "Triple store unavailable"

    def test_custom_message_and_details(self) -> None:
        err = ValidationError("bad gerund", gerund="code")
        assert err.message == "bad gerund"
        assert err.code == "VALIDATION_ERROR"
        assert err.details == {"gerund": "code"}

    def test_code_override(self) -> None:
        assert ActionGraphError("x", code="CUSTOM").code == "CUSTOM"

    @pytest.mark.parametrize(
        "cls",
        [ConfigurationError, ValidationError, StorageError, StoreUnavailableError],
    )
    def test_all_inherit_base(self, cls) -> None:
        assert issubclass(cls, ActionGraphError)

    def test_store_unavailable_is_storage_error(self) -> None:
        with pytest.raises(StorageError):
            raise StoreUnavailableError("redis down")

