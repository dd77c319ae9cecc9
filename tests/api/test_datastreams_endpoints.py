"""Tests for the datastreams and metrics routers.

Runs the full app (in-memory store, file coordinator) through TestClient
so status mapping, envelopes and wire names are exercised end to end.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from dms.api.app import create_app
from dms.api.settings import DmsAPISettings
from dms.core.errors import StoreError

PREFIX = "/api/v1"


class TestCreate:
    def test_created(self, client, body, store):
        r = client.post(f"{PREFIX}/datastreams", json=body())

        assert r.status_code == 201
        assert r.json()["data"] == {"name": "orders"}
        assert r.headers["Location"].endswith(f"{PREFIX}/datastreams/orders")
        assert store.list_names() == ["orders"]

    @pytest.mark.parametrize(
        ("payload", "title", "field"),
        [
            ({}, "Must specify name of datastream", "name"),
            ({"name": "orders", "source": {}}, "Must specify connectorType of datastream", "connectorType"),
            ({"name": "orders", "connectorType": "file"}, "Must specify source of datastream", "source"),
        ],
    )
    def test_missing_fields(self, client, store, payload, title, field):
        r = client.post(f"{PREFIX}/datastreams", json=payload)

        assert r.status_code == 400
        assert r.headers["content-type"].startswith("application/problem+json")
        problem = r.json()
        assert problem["title"] == title
        assert problem["status"] == 400
        assert problem["errors"][0]["field"] == field
        assert store.list_names() == []

    def test_coordinator_rejection(self, client, body):
        r = client.post(
            f"{PREFIX}/datastreams",
            json=body(source={"connectionString": "ftp://example.com/orders"}),
        )
        assert r.status_code == 400
        assert r.json()["title"].startswith("Failed to initialize datastream 'orders': ")

    def test_duplicate(self, client, body):
        assert client.post(f"{PREFIX}/datastreams", json=body()).status_code == 201

        r = client.post(f"{PREFIX}/datastreams", json=body())

        assert r.status_code == 409
        assert r.json()["title"] == "Datastream 'orders' already exists"

    def test_snake_case_accepted(self, client):
        r = client.post(
            f"{PREFIX}/datastreams",
            json={
                "name": "orders",
                "connector_type": "file",
                "source": {"connection_string": "file:///var/orders.csv"},
            },
        )
        assert r.status_code == 201

    def test_store_failure_is_500(self, settings, coordinator, metrics, body):
        store = MagicMock()
        store.create.side_effect = StoreError("disk full")
        client = TestClient(create_app(settings, store=store, coordinator=coordinator, metrics=metrics))

        r = client.post(f"{PREFIX}/datastreams", json=body())

        assert r.status_code == 500
        assert r.json()["title"] == "Failed to create datastream 'orders'"
        assert metrics.call_errors.value == 1


class TestGet:
    def test_round_trip(self, client, body):
        client.post(f"{PREFIX}/datastreams", json=body(metadata={"owner": "team-a"}))

        r = client.get(f"{PREFIX}/datastreams/orders")

        assert r.status_code == 200
        data = r.json()["data"]
        assert data["name"] == "orders"
        assert data["connectorType"] == "file"
        assert data["source"] == {"connectionString": "file:///var/data/orders.csv", "partitions": 2}
        assert data["destination"] == {"connectionString": "memory://dms/file/orders", "partitions": 2}
        assert data["metadata"]["owner"] == "team-a"
        assert data["metadata"]["createdAtMs"] == "1700000000000"

    def test_user_managed_destination(self, client, body):
        client.post(
            f"{PREFIX}/datastreams",
            json=body(destination={"connectionString": "kafka://broker/orders"}),
        )
        data = client.get(f"{PREFIX}/datastreams/orders").json()["data"]
        assert data["destination"] == {"connectionString": "kafka://broker/orders"}
        assert data["metadata"]["isUserManagedDestination"] == "true"

    def test_not_found(self, client, metrics):
        r = client.get(f"{PREFIX}/datastreams/missing")

        assert r.status_code == 404
        assert r.json()["title"] == "Datastream 'missing' not found"
        assert metrics.call_errors.value == 0


class TestList:
    @pytest.fixture()
    def five(self, client, body):
        for name in ("a", "b", "c", "d", "e"):
            assert client.post(f"{PREFIX}/datastreams", json=body(name)).status_code == 201
        return client

    def test_window(self, five):
        r = five.get(f"{PREFIX}/datastreams", params={"start": 1, "count": 2})

        assert r.status_code == 200
        payload = r.json()
        assert [d["name"] for d in payload["data"]] == ["b", "c"]
        assert payload["page"] == {"total": 5, "limit": 2, "offset": 1, "has_more": True}

    def test_default_page(self, five):
        payload = five.get(f"{PREFIX}/datastreams").json()
        assert len(payload["data"]) == 5
        assert payload["page"]["limit"] == 50

    def test_empty(self, client):
        payload = client.get(f"{PREFIX}/datastreams").json()
        assert payload["data"] == []
        assert payload["page"]["total"] == 0

    @pytest.mark.parametrize("params", [{"start": -1}, {"count": 0}])
    def test_invalid_paging(self, client, params):
        assert client.get(f"{PREFIX}/datastreams", params=params).status_code == 422

    def test_count_is_capped(self, store, coordinator, metrics, body):
        app = create_app(DmsAPISettings(max_page_size=2), store=store, coordinator=coordinator, metrics=metrics)
        client = TestClient(app)
        for name in ("a", "b", "c"):
            client.post(f"{PREFIX}/datastreams", json=body(name))

        payload = client.get(f"{PREFIX}/datastreams", params={"count": 100}).json()

        assert [d["name"] for d in payload["data"]] == ["a", "b"]
        assert payload["page"]["limit"] == 2


class TestDelete:
    def test_delete(self, client, body):
        client.post(f"{PREFIX}/datastreams", json=body())

        r = client.delete(f"{PREFIX}/datastreams/orders")

        assert r.status_code == 200
        assert r.json()["data"] == {"name": "orders", "deleted": True}
        assert client.get(f"{PREFIX}/datastreams/orders").status_code == 404

    def test_delete_missing_succeeds(self, client):
        assert client.delete(f"{PREFIX}/datastreams/missing").status_code == 200


class TestSlashedNames:
    def test_lifecycle(self, client, body, store, metrics):
        r = client.post(f"{PREFIX}/datastreams", json=body("team/orders"))

        assert r.status_code == 201
        assert r.headers["Location"].endswith(f"{PREFIX}/datastreams/team/orders")
        assert store.list_names() == ["team/orders"]

        r = client.get(f"{PREFIX}/datastreams/team/orders")
        assert r.status_code == 200
        assert r.json()["data"]["name"] == "team/orders"

        assert client.put(f"{PREFIX}/datastreams/team/orders").status_code == 405

        r = client.delete(f"{PREFIX}/datastreams/team/orders")
        assert r.status_code == 200
        assert r.json()["data"] == {"name": "team/orders", "deleted": True}
        assert client.get(f"{PREFIX}/datastreams/team/orders").status_code == 404
        assert metrics.call_errors.value == 0

    def test_location_is_quoted(self, client, body):
        r = client.post(f"{PREFIX}/datastreams", json=body("daily orders"))

        assert r.status_code == 201
        assert r.headers["Location"].endswith(f"{PREFIX}/datastreams/daily%20orders")
        assert client.get(r.headers["Location"]).json()["data"]["name"] == "daily orders"


class TestUpdate:
    @pytest.mark.parametrize("payload", [None, {"name": "orders"}, {"garbage": [1, 2, 3]}])
    def test_always_405(self, client, body, metrics, payload):
        client.post(f"{PREFIX}/datastreams", json=body())

        r = client.put(f"{PREFIX}/datastreams/orders", json=payload)

        assert r.status_code == 405
        assert r.json()["title"] == "Updating a datastream is not supported"
        assert metrics.update_calls.value == 1
        assert metrics.call_errors.value == 0


class TestMetricsSnapshot:
    def test_counts_calls(self, client, body):
        client.post(f"{PREFIX}/datastreams", json=body())
        client.post(f"{PREFIX}/datastreams", json=body())
        client.get(f"{PREFIX}/datastreams/orders")
        client.get(f"{PREFIX}/datastreams")
        client.delete(f"{PREFIX}/datastreams/orders")
        client.put(f"{PREFIX}/datastreams/orders")

        r = client.get(f"{PREFIX}/metrics/datastreams")

        assert r.status_code == 200
        snap = r.json()["data"]
        assert snap["dms_datastream_create_calls_total"] == 2
        assert snap["dms_datastream_get_calls_total"] == 1
        assert snap["dms_datastream_get_all_calls_total"] == 1
        assert snap["dms_datastream_delete_calls_total"] == 1
        assert snap["dms_datastream_update_calls_total"] == 1
        assert snap["dms_datastream_call_errors_total"] == 1
        assert snap["dms_datastream_create_latency_seconds"]["count"] == 1
        assert snap["dms_datastream_delete_latency_seconds"]["count"] == 1
