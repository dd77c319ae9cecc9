"""
Health router — liveness and store reachability for container orchestrators.

Endpoints (mounted at the root, without the API prefix):
    GET /health          200 when the definition store answers, else 503
    GET /health/live     Always 200 while the process is up
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from dms.core.logging import get_logger

logger = get_logger(__name__)

_START_TIME = time.monotonic()


class HealthResponse(BaseModel):
    """Health envelope returned by ``/health``."""

    status: Literal["healthy", "unhealthy"]
    service: str
    version: str
    timestamp: str
    uptime_s: float
    checks: dict[str, Any] = Field(default_factory=dict)


def create_health_router(service_name: str, version: str = "0.0.0") -> APIRouter:
    """Build the health router for *service_name*."""
    router = APIRouter()

    @router.get("/health", response_model=HealthResponse)
    def health(request: Request):
        start = time.perf_counter()
        check: dict[str, Any] = {"status": "healthy"}
        try:
            request.app.state.store.list_names()
        except Exception as exc:
            logger.warning("health_check_failed", check="store", error=str(exc))
            check = {"status": "unhealthy", "error": "store unavailable"}
        check["latency_ms"] = round((time.perf_counter() - start) * 1000, 2)

        body = HealthResponse(
            status=check["status"],
            service=service_name,
            version=version,
            timestamp=datetime.now(UTC).isoformat(),
            uptime_s=round(time.monotonic() - _START_TIME, 1),
            checks={"store": check},
        )
        status_code = 200 if body.status == "healthy" else 503
        return JSONResponse(status_code=status_code, content=body.model_dump())

    @router.get("/health/live")
    def live():
        return {"status": "alive"}

    return router
