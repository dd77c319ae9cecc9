"""
Shared pytest fixtures for dms tests.

Every test gets its own metrics registry so counter assertions never see
calls made by other tests.
"""

from __future__ import annotations

import pytest

from dms.core.coordinator import ConnectorCoordinator, SchemeConnector
from dms.core.stores import InMemoryDatastreamStore
from dms.observability.metrics import DatastreamMetrics, MetricsRegistry

from tests._support.factories import FIXED_NOW


@pytest.fixture()
def metrics() -> DatastreamMetrics:
    """Datastream metrics on a private registry."""
    return DatastreamMetrics(MetricsRegistry())


@pytest.fixture()
def store() -> InMemoryDatastreamStore:
    return InMemoryDatastreamStore()


@pytest.fixture()
def coordinator() -> ConnectorCoordinator:
    """Coordinator accepting ``file`` sources, with a fixed clock."""
    return ConnectorCoordinator(
        {"file": SchemeConnector("file", ["file"])},
        destination_template="memory://dms/{connector_type}/{name}",
        clock=lambda: FIXED_NOW,
    )

