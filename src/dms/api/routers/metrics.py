"""
Metrics router — JSON snapshot of the datastream call metrics.

The Prometheus text export lives at the root ``/metrics`` route in
:mod:`dms.api.app`; this router exposes the same counters as JSON for
dashboards and the CLI.

Endpoints:
    GET /metrics/datastreams     Counters and latency histograms
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from dms.api.deps import OpContext
from dms.api.schemas.common import SuccessResponse

router = APIRouter(prefix="/metrics")


@router.get("/datastreams", response_model=SuccessResponse[dict[str, Any]])
def datastream_metrics(ctx: OpContext):
    """Snapshot of the datastream call counters and latency histograms."""
    from dms.ops.datastreams import get_datastream_metrics

    result = get_datastream_metrics(ctx)
    return SuccessResponse(data=result.data, elapsed_ms=result.elapsed_ms)
