"""Request-ID middleware — correlates responses and log events.

Every request gets an ``X-Request-ID`` (the caller's, or a fresh UUID).
The id is stored on ``request.state``, echoed on the response, and bound
into the structlog context so every event logged while handling the
request carries it.  ``X-Process-Time-Ms`` reports server-side latency.

Tags:
    dms, api, middleware, request-id, correlation

Doc-Types:
    api-reference
"""

from __future__ import annotations

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from dms.core.logging import LogContext


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID and timing header to every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()
        async with LogContext(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time-Ms"] = str(round((time.perf_counter() - start) * 1000, 2))
        return response
