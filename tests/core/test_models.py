"""Tests for dms.core.models."""

from dms.core.models import Datastream, DatastreamDestination, DatastreamSource


class TestDatastreamToDict:
    def test_camel_case_wire_names(self):
        ds = Datastream(
            name="orders",
            connector_type="file",
            source=DatastreamSource("file:///var/orders.csv", partitions=2),
            destination=DatastreamDestination("kafka://broker/orders"),
            metadata={"owner": "team-a"},
        )
        assert ds.to_dict() == {
            "name": "orders",
            "connectorType": "file",
            "source": {"connectionString": "file:///var/orders.csv", "partitions": 2},
            "destination": {"connectionString": "kafka://broker/orders"},
            "metadata": {"owner": "team-a"},
        }

    def test_unset_fields_are_omitted(self):
        assert Datastream(name="orders").to_dict() == {"name": "orders"}

    def test_metadata_is_copied(self):
        metadata = {"k": "v"}
        d = Datastream(metadata=metadata).to_dict()
        d["metadata"]["k"] = "changed"
        assert metadata == {"k": "v"}


class TestDatastreamFromDict:
    def test_round_trip(self):
        ds = Datastream(
            name="orders",
            connector_type="file",
            source=DatastreamSource("file:///var/orders.csv"),
            destination=DatastreamDestination("memory://dms/file/orders", partitions=3),
            metadata={"createdAtMs": "1"},
        )
        assert Datastream.from_dict(ds.to_dict()) == ds

    def test_metadata_values_become_strings(self):
        ds = Datastream.from_dict({"name": "orders", "metadata": {"retries": 3}})
        assert ds.metadata == {"retries": "3"}

    def test_empty(self):
        assert Datastream.from_dict({}) == Datastream()


class TestUserManagedDestination:
    def test_connection_string_marks_user_managed(self):
        assert Datastream(destination=DatastreamDestination("kafka://x")).has_user_managed_destination

    def test_empty_or_missing_is_not_user_managed(self):
        assert not Datastream().has_user_managed_destination
        assert not Datastream(destination=DatastreamDestination("")).has_user_managed_destination
        assert not Datastream(destination=DatastreamDestination(partitions=2)).has_user_managed_destination
