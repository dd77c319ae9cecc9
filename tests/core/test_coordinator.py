"""Tests for dms.core.coordinator."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from dms.core.coordinator import ConnectorCoordinator, SchemeConnector, create_coordinator
from dms.core.errors import CoordinatorError, DatastreamValidationError
from dms.core.models import CREATED_AT_MS_KEY, DatastreamDestination, DatastreamSource
from dms.core.protocols import Connector, Coordinator
from dms.core.settings import DmsSettings

from tests._support.factories import make_datastream


class TestSchemeConnector:
    def test_accepts_allowed_scheme(self):
        SchemeConnector("file", ["FILE"]).initialize_datastream(make_datastream())

    def test_rejects_other_scheme(self):
        ds = make_datastream(source=DatastreamSource("s3://bucket/key"))
        with pytest.raises(DatastreamValidationError) as exc_info:
            SchemeConnector("file", ["file"]).initialize_datastream(ds)
        assert "s3" in exc_info.value.reason
        assert exc_info.value.field_name == "source.connectionString"

    def test_requires_connection_string(self):
        ds = make_datastream(source=DatastreamSource())
        with pytest.raises(DatastreamValidationError):
            SchemeConnector("file", ["file"]).initialize_datastream(ds)

    def test_is_a_connector(self):
        assert isinstance(SchemeConnector("file", ["file"]), Connector)


class TestConnectorCoordinator:
    def test_is_a_coordinator(self, coordinator):
        assert isinstance(coordinator, Coordinator)

    def test_assigns_destination_and_created_at(self, coordinator):
        ds = make_datastream(metadata={})
        coordinator.initialize_datastream(ds)
        assert ds.destination == DatastreamDestination("memory://dms/file/orders", partitions=2)
        assert ds.metadata[CREATED_AT_MS_KEY] == "1700000000000"

    def test_keeps_user_managed_destination(self, coordinator):
        destination = DatastreamDestination("kafka://broker/orders", partitions=8)
        ds = make_datastream(destination=destination, metadata={})
        coordinator.initialize_datastream(ds)
        assert ds.destination == destination

    def test_existing_created_at_is_kept(self, coordinator):
        ds = make_datastream(metadata={CREATED_AT_MS_KEY: "5"})
        coordinator.initialize_datastream(ds)
        assert ds.metadata[CREATED_AT_MS_KEY] == "5"

    def test_missing_metadata_is_initialised(self, coordinator):
        ds = make_datastream()
        coordinator.initialize_datastream(ds)
        assert set(ds.metadata) == {CREATED_AT_MS_KEY}

    def test_unknown_connector_type(self, coordinator):
        with pytest.raises(DatastreamValidationError) as exc_info:
            coordinator.initialize_datastream(make_datastream(connector_type="kafka"))
        assert exc_info.value.field_name == "connectorType"

    def test_connector_crash_is_wrapped(self):
        connector = MagicMock()
        connector.initialize_datastream.side_effect = RuntimeError("boom")
        coordinator = ConnectorCoordinator({"file": connector})
        with pytest.raises(CoordinatorError) as exc_info:
            coordinator.initialize_datastream(make_datastream())
        assert exc_info.value.context.datastream == "orders"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_bad_template(self):
        coordinator = ConnectorCoordinator(
            {"file": SchemeConnector("file", ["file"])},
            destination_template="memory://{unknown}",
        )
        with pytest.raises(CoordinatorError):
            coordinator.initialize_datastream(make_datastream())

    def test_rollback_delegates_to_connector(self):
        connector = MagicMock()
        coordinator = ConnectorCoordinator({"file": connector})
        ds = make_datastream()
        coordinator.rollback_datastream(ds)
        connector.rollback_datastream.assert_called_once_with(ds)

    def test_rollback_unknown_type_is_noop(self, coordinator):
        coordinator.rollback_datastream(make_datastream(connector_type="kafka"))

    def test_register_connector(self, coordinator):
        coordinator.register_connector("s3", SchemeConnector("s3", ["s3"]))
        assert coordinator.connector_types == ["file", "s3"]
        ds = make_datastream(connector_type="s3", source=DatastreamSource("s3://bucket/orders"))
        coordinator.initialize_datastream(ds)
        assert ds.destination.connection_string == "memory://dms/s3/orders"


def test_create_coordinator_from_settings():
    settings = DmsSettings(
        connectors={"file": ["file"], "http": ["http", "https"]},
        destination_template="kafka://broker/{name}",
    )
    coordinator = create_coordinator(settings)
    assert coordinator.connector_types == ["file", "http"]

    ds = make_datastream(connector_type="http", source=DatastreamSource("https://example.com/feed"))
    coordinator.initialize_datastream(ds)
    assert ds.destination.connection_string == "kafka://broker/orders"
