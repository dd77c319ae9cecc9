"""
FastAPI application factory.

``create_app()`` wires middleware, routers, error handlers and lifespan
events into a single ``FastAPI`` instance.  The definition store,
coordinator and metrics are built here (or injected, for tests) and
kept on ``app.state`` for the dependency layer.

Manifesto:
    The app factory is the single composition root: collaborators,
    middleware, routers and lifecycle hooks are wired here so the rest
    of the codebase never touches ``FastAPI`` directly.

Tags:
    dms, api, app-factory, composition-root, FastAPI

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from dms.api.deps import get_settings
from dms.api.middleware.errors import unhandled_exception_handler
from dms.api.middleware.request_id import RequestIDMiddleware
from dms.api.settings import DmsAPISettings
from dms.core.logging import configure_logging, get_logger
from dms.observability.metrics import DatastreamMetrics, datastream_metrics


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan — startup / shutdown hooks."""
    settings: DmsAPISettings = app.state.settings
    configure_logging(level=settings.log_level, json_format=settings.log_json)

    log = get_logger("dms.api")
    log.info(
        "dms_api_starting",
        version=app.version,
        store=repr(app.state.store),
        connector_types=getattr(app.state.coordinator, "connector_types", None),
    )

    yield

    close = getattr(app.state.store, "close", None)
    if callable(close):
        close()
    log.info("dms_api_stopped")


def create_app(
    settings: DmsAPISettings | None = None,
    *,
    store: Any | None = None,
    coordinator: Any | None = None,
    metrics: DatastreamMetrics | None = None,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    Parameters
    ----------
    settings : DmsAPISettings | None
        Override settings (useful for testing).  When ``None`` the cached
        singleton from :func:`get_settings` is used.
    store, coordinator : optional
        Collaborators to serve.  Built from *settings* when omitted.
    metrics : DatastreamMetrics | None
        Metrics to record into; the process-wide instance by default.
    """
    from dms.core.coordinator import create_coordinator
    from dms.core.stores import create_store

    settings = settings or get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        lifespan=lifespan,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
    )

    app.state.settings = settings
    app.state.store = store if store is not None else create_store(settings)
    app.state.coordinator = coordinator if coordinator is not None else create_coordinator(settings)
    app.state.metrics = metrics or datastream_metrics

    # Override DI so endpoints use the provided settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ── Middleware (outermost → innermost) ────────────────────────────
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Exception handlers ───────────────────────────────────────────
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Routers ──────────────────────────────────────────────────────
    from dms.api.routers import datastreams, metrics as metrics_router
    from dms.api.routers.health import create_health_router

    prefix = settings.api_prefix

    # Health endpoints at root level (no prefix) for container healthchecks
    app.include_router(
        create_health_router("dms", version=settings.api_version),
        tags=["health"],
    )
    app.include_router(datastreams.router, prefix=prefix, tags=["datastreams"])
    app.include_router(metrics_router.router, prefix=prefix, tags=["metrics"])

    # ── Metrics endpoint (root-level, Prometheus format) ─────────
    @app.get("/metrics", tags=["observability"], response_class=PlainTextResponse)
    async def metrics_endpoint():
        """Export Prometheus-compatible metrics."""
        return PlainTextResponse(
            content=app.state.metrics.registry.export_prometheus(),
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    return app
