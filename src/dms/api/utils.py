"""
Shared API router utilities.

- ``_handle_error()`` — convert a failed OperationResult to a ``problem_response``
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from dms.api.middleware.errors import problem_response, status_for_error_code
from dms.ops.result import OperationResult


def _handle_error(result: OperationResult, request: Request | None = None) -> JSONResponse:
    """Convert a failed ``OperationResult`` into a Problem Details response.

    The error code picks the HTTP status, the error message becomes the
    problem title, and a ``field`` detail becomes a field-level error.
    """
    code = str(result.error.code) if result.error else "INTERNAL"
    title = result.error.message if result.error else "Operation failed"
    errors = None
    if result.error and result.error.details.get("field"):
        errors = [{"code": code, "message": title, "field": result.error.details["field"]}]
    return problem_response(
        status=status_for_error_code(code),
        title=title,
        instance=str(request.url) if request is not None else "",
        errors=errors,
    )
