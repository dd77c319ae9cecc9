"""
FastAPI dependency injection — shared singletons and per-request factories.

Usage in routers::

    from dms.api.deps import OpContext, Paging

    @router.get("/datastreams")
    def list_datastreams(ctx: OpContext, paging: Paging):
        ...

The store and coordinator are built once by :func:`dms.api.app.create_app`
and kept on ``app.state``; every request gets a fresh
:class:`~dms.ops.context.OperationContext` wrapping them.

Tags:
    dms, api, dependency-injection, OpContext

Doc-Types:
    api-reference
"""

from __future__ import annotations

import uuid
from functools import lru_cache
from typing import Annotated, Any

from fastapi import Depends, Query, Request

from dms.api.settings import DmsAPISettings
from dms.ops.context import OperationContext
from dms.observability.metrics import DatastreamMetrics
from dms.ops.requests import ListDatastreamsRequest

# ── Settings (singleton) ─────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_settings() -> DmsAPISettings:
    """Cached settings — loaded once per process."""
    return DmsAPISettings()


# ── Collaborators (app-scoped) ───────────────────────────────────────────


def get_store(request: Request) -> Any:
    """The definition store built at app creation."""
    return request.app.state.store


def get_coordinator(request: Request) -> Any:
    """The coordinator built at app creation."""
    return request.app.state.coordinator


def get_metrics(request: Request) -> DatastreamMetrics:
    """The metrics the app records into."""
    return request.app.state.metrics


# ── Operation context (per-request) ──────────────────────────────────────


def get_operation_context(
    request: Request,
    store: Annotated[Any, Depends(get_store)],
    coordinator: Annotated[Any, Depends(get_coordinator)],
    metrics: Annotated[DatastreamMetrics, Depends(get_metrics)],
) -> OperationContext:
    """Build an :class:`OperationContext` from the current request."""
    request_id = getattr(request.state, "request_id", str(uuid.uuid4()))
    return OperationContext(
        store=store,
        coordinator=coordinator,
        metrics=metrics,
        request_id=request_id,
        caller="api",
    )


# ── Paging parameters (per-request) ──────────────────────────────────────


def get_paging(
    settings: Annotated[DmsAPISettings, Depends(get_settings)],
    start: int = Query(0, ge=0, description="Index of the first datastream to return"),
    count: int | None = Query(None, ge=1, description="Maximum datastreams to return"),
) -> ListDatastreamsRequest:
    """FastAPI dependency for the ``start`` / ``count`` paging window.

    ``count`` defaults to ``default_page_size`` and is capped at
    ``max_page_size``.
    """
    limit = min(count or settings.default_page_size, settings.max_page_size)
    return ListDatastreamsRequest(offset=start, limit=limit)


# ── Convenience type aliases ─────────────────────────────────────────────

Settings = Annotated[DmsAPISettings, Depends(get_settings)]
OpContext = Annotated[OperationContext, Depends(get_operation_context)]
Paging = Annotated[ListDatastreamsRequest, Depends(get_paging)]
