"""Shared fixtures for dms.ops tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from dms.ops.context import OperationContext


@pytest.fixture()
def ctx(store, coordinator, metrics) -> OperationContext:
    """OperationContext over the in-memory store and file coordinator."""
    return OperationContext(store=store, coordinator=coordinator, metrics=metrics, caller="test")


@pytest.fixture()
def mock_store() -> MagicMock:
    return MagicMock(name="store")


@pytest.fixture()
def mock_coordinator() -> MagicMock:
    return MagicMock(name="coordinator")


@pytest.fixture()
def mock_ctx(mock_store, mock_coordinator, metrics) -> OperationContext:
    """OperationContext whose collaborators are MagicMocks."""
    return OperationContext(
        store=mock_store,
        coordinator=mock_coordinator,
        metrics=metrics,
        caller="test",
    )
