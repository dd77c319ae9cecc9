"""Shared fixtures for dms.api tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dms.api.app import create_app
from dms.api.settings import DmsAPISettings


@pytest.fixture()
def settings() -> DmsAPISettings:
    return DmsAPISettings(store_backend="memory", debug=False)


@pytest.fixture()
def app(settings, store, coordinator, metrics):
    return create_app(settings, store=store, coordinator=coordinator, metrics=metrics)


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


def orders_body(name: str = "orders", **overrides) -> dict:
    body = {
        "name": name,
        "connectorType": "file",
        "source": {"connectionString": f"file:///var/data/{name}.csv", "partitions": 2},
    }
    body.update(overrides)
    return body


@pytest.fixture()
def body():
    return orders_body
