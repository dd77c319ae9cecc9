"""
Tests for the FastAPI application factory.
"""

from __future__ import annotations

from unittest.mock import MagicMock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from dms.api.app import create_app
from dms.api.deps import get_operation_context
from dms.api.settings import DmsAPISettings
from dms.core.coordinator import ConnectorCoordinator
from dms.core.stores import InMemoryDatastreamStore, SqliteDatastreamStore


class TestCreateApp:
    def test_returns_fastapi_instance(self, app):
        assert isinstance(app, FastAPI)

    def test_openapi_under_prefix(self, app):
        assert app.openapi_url == "/api/v1/openapi.json"

    def test_custom_settings(self, store, coordinator):
        s = DmsAPISettings(api_prefix="/v2", api_title="Custom")
        app = create_app(s, store=store, coordinator=coordinator)
        assert app.title == "Custom"
        assert any(r.path == "/v2/datastreams" for r in app.routes)

    def test_routes_registered(self, app):
        paths = {r.path for r in app.routes}
        assert {
            "/health",
            "/health/live",
            "/metrics",
            "/api/v1/datastreams",
            "/api/v1/datastreams/{name}",
            "/api/v1/metrics/datastreams",
        } <= paths

    def test_cors_middleware_present(self, app):
        middleware_classes = [m.cls.__name__ for m in app.user_middleware]
        assert "CORSMiddleware" in middleware_classes
        assert "RequestIDMiddleware" in middleware_classes

    def test_builds_collaborators_from_settings(self, tmp_path):
        s = DmsAPISettings(store_backend="sqlite", database_path=tmp_path / "api.db")
        app = create_app(s)
        try:
            assert isinstance(app.state.store, SqliteDatastreamStore)
            assert isinstance(app.state.coordinator, ConnectorCoordinator)
            assert app.state.coordinator.connector_types == ["file"]
        finally:
            app.state.store.close()

    def test_lifespan_closes_store(self, tmp_path, metrics):
        store = MagicMock(spec=SqliteDatastreamStore)
        app = create_app(DmsAPISettings(log_json=True), store=store, metrics=metrics)
        with TestClient(app):
            store.close.assert_not_called()
        store.close.assert_called_once()


class TestRequestId:
    def test_generated(self, client):
        r = client.get("/health/live")
        assert r.headers["X-Request-ID"]
        assert "X-Process-Time-Ms" in r.headers

    def test_propagated(self, client):
        r = client.get("/health/live", headers={"X-Request-ID": "req-42"})
        assert r.headers["X-Request-ID"] == "req-42"


class TestHealth:
    def test_healthy(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        body = r.json()
        assert body["status"] == "healthy"
        assert body["service"] == "dms"
        assert body["checks"]["store"]["status"] == "healthy"

    def test_unhealthy_store(self, settings, coordinator):
        store = MagicMock()
        store.list_names.side_effect = RuntimeError("db down")
        client = TestClient(create_app(settings, store=store, coordinator=coordinator))

        r = client.get("/health")

        assert r.status_code == 503
        check = r.json()["checks"]["store"]
        assert check["status"] == "unhealthy"
        assert check["error"] == "store unavailable"
        assert "db down" not in r.text


class TestErrorHandling:
    def _broken(self, app):
        def boom():
            raise RuntimeError("secret detail")

        app.dependency_overrides[get_operation_context] = boom
        return TestClient(app, raise_server_exceptions=False)

    def test_unhandled_exception_is_problem_json(self, app):
        r = self._broken(app).get("/api/v1/datastreams/orders")
        assert r.status_code == 500
        assert r.headers["content-type"].startswith("application/problem+json")
        assert r.json()["detail"] == "An unexpected error occurred."

    def test_debug_exposes_detail(self, store, coordinator):
        app = create_app(DmsAPISettings(debug=True), store=store, coordinator=coordinator)
        r = self._broken(app).get("/api/v1/datastreams/orders")
        assert r.json()["detail"] == "secret detail"


class TestPrometheus:
    def test_metrics_text(self, client, body):
        client.post("/api/v1/datastreams", json=body())
        r = client.get("/metrics")
        assert r.status_code == 200
        assert r.headers["content-type"].startswith("text/plain")
        assert "dms_datastream_create_calls_total 1.0" in r.text
        assert "# TYPE dms_datastream_create_latency_seconds histogram" in r.text


def test_default_store_is_memory(coordinator):
    app = create_app(DmsAPISettings(), coordinator=coordinator)
    assert isinstance(app.state.store, InMemoryDatastreamStore)
