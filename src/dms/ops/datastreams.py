"""
Datastream operations.

Create, get, list and delete datastream definitions against the
definition store, with coordinator initialization on create.  Update is
deliberately unsupported.

Create pipeline::

    validate shape ─► normalize metadata ─► coordinator.initialize ─► store.create
    (name, connectorType,   (default {}, user-managed   (may fill        (fails on
     source; first miss      destination flag)           destination)     duplicate)
     wins)

Every operation catches unexpected failures at its boundary and returns
an ``INTERNAL`` result; expected failures are classified first.  Each
failure path bumps the shared error counter exactly once.
"""

from __future__ import annotations

import time
from typing import Any

from dms.core.errors import (
    DatastreamAlreadyExistsError,
    ErrorCategory,
    ValidationError,
    categorize_error,
)
from dms.core.logging import get_logger
from dms.core.models import IS_USER_MANAGED_DESTINATION_KEY, Datastream
from dms.core.paging import PageSlice, with_paging
from dms.ops.context import OperationContext
from dms.ops.requests import ListDatastreamsRequest
from dms.ops.result import ErrorCode, OperationResult, PagedResult, start_timer

logger = get_logger(__name__)

# (attribute, wire name, message) in the order they are checked
_REQUIRED_FIELDS = (
    ("name", "name", "Must specify name of datastream"),
    ("connector_type", "connectorType", "Must specify connectorType of datastream"),
    ("source", "source", "Must specify source of datastream"),
)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _fail(
    ctx: OperationContext,
    operation: str,
    code: str,
    message: str,
    *,
    name: str | None = None,
    exc: Exception | None = None,
    category: ErrorCategory | None = None,
    details: dict[str, Any] | None = None,
    elapsed_ms: float = 0.0,
    result_cls: type[OperationResult] = OperationResult,
) -> OperationResult:
    """Count, log and build a failed result."""
    ctx.metrics.call_errors.inc()
    log_kw = {
        "operation": operation,
        "datastream": name,
        "code": code,
        "request_id": ctx.request_id,
        "caller": ctx.caller,
    }
    if code == ErrorCode.INTERNAL:
        logger.error("datastream_op_failed", error=message, cause=repr(exc), exc_info=exc, **log_kw)
    else:
        logger.warning("datastream_op_rejected", error=message, **log_kw)
    return result_cls.fail(
        code,
        message,
        category=category or (categorize_error(exc) if exc is not None else None),
        details=details,
        elapsed_ms=elapsed_ms,
    )


def _rollback(ctx: OperationContext, datastream: Datastream) -> None:
    """Release coordinator-side effects after a failed persist."""
    try:
        ctx.coordinator.rollback_datastream(datastream)
    except Exception as exc:
        # The persist failure is what the caller needs to see
        logger.error(
            "datastream_rollback_failed",
            datastream=datastream.name,
            request_id=ctx.request_id,
            exc_info=exc,
        )


# ------------------------------------------------------------------ #
# Create
# ------------------------------------------------------------------ #


def create_datastream(
    ctx: OperationContext,
    datastream: Datastream,
) -> OperationResult[str]:
    """Validate, initialize and persist a new datastream definition.

    Returns the stored name on success.  The definition is mutated in
    place: metadata defaults, the user-managed destination flag and any
    coordinator-assigned fields are visible to the caller afterwards.
    """
    timer = start_timer()
    ctx.metrics.create_calls.inc()
    name = datastream.name
    logger.info(
        "datastream_create_called",
        datastream=name,
        connector_type=datastream.connector_type,
        request_id=ctx.request_id,
    )
    logger.debug("datastream_create_definition", definition=datastream.to_dict())

    try:
        for attr, wire_name, message in _REQUIRED_FIELDS:
            if _is_missing(getattr(datastream, attr)):
                return _fail(
                    ctx,
                    "create",
                    ErrorCode.VALIDATION_FAILED,
                    message,
                    name=name,
                    category=ErrorCategory.VALIDATION,
                    details={"field": wire_name},
                    elapsed_ms=timer.elapsed_ms,
                )

        if datastream.metadata is None:
            datastream.metadata = {}
        if datastream.has_user_managed_destination:
            datastream.metadata[IS_USER_MANAGED_DESTINATION_KEY] = "true"

        started = time.perf_counter()

        try:
            ctx.coordinator.initialize_datastream(datastream)
        except ValidationError as exc:
            details = {"field": exc.field_name} if exc.field_name else None
            return _fail(
                ctx,
                "create",
                ErrorCode.VALIDATION_FAILED,
                f"Failed to initialize datastream '{name}': {exc.message}",
                name=name,
                category=ErrorCategory.VALIDATION,
                details=details,
                elapsed_ms=timer.elapsed_ms,
            )

        try:
            ctx.store.create(name, datastream)
        except DatastreamAlreadyExistsError:
            # No rollback: the stored definition owns what was assigned under this name
            return _fail(
                ctx,
                "create",
                ErrorCode.CONFLICT,
                f"Datastream '{name}' already exists",
                name=name,
                category=ErrorCategory.CONFLICT,
                elapsed_ms=timer.elapsed_ms,
            )
        except Exception as exc:
            _rollback(ctx, datastream)
            return _fail(
                ctx,
                "create",
                ErrorCode.INTERNAL,
                f"Failed to create datastream '{name}'",
                name=name,
                exc=exc,
                elapsed_ms=timer.elapsed_ms,
            )

        ctx.metrics.create_latency.observe(time.perf_counter() - started)
        logger.info("datastream_created", datastream=name, request_id=ctx.request_id)
        return OperationResult.ok(name, elapsed_ms=timer.elapsed_ms)
    except Exception as exc:
        return _fail(
            ctx,
            "create",
            ErrorCode.INTERNAL,
            f"Failed to create datastream '{name}'",
            name=name,
            exc=exc,
            elapsed_ms=timer.elapsed_ms,
        )


# ------------------------------------------------------------------ #
# Read
# ------------------------------------------------------------------ #


def get_datastream(
    ctx: OperationContext,
    name: str,
) -> OperationResult[Datastream | None]:
    """Get a single datastream by name.

    An unknown name is a successful result with ``data=None``.
    """
    timer = start_timer()
    ctx.metrics.get_calls.inc()
    logger.info("datastream_get_called", datastream=name, request_id=ctx.request_id)

    try:
        datastream = ctx.store.get(name)
    except Exception as exc:
        return _fail(
            ctx,
            "get",
            ErrorCode.INTERNAL,
            f"Failed to get datastream '{name}'",
            name=name,
            exc=exc,
            elapsed_ms=timer.elapsed_ms,
        )

    if datastream is None:
        logger.debug("datastream_not_found", datastream=name)
    return OperationResult.ok(datastream, elapsed_ms=timer.elapsed_ms)


def list_datastreams(
    ctx: OperationContext,
    request: ListDatastreamsRequest | None = None,
) -> PagedResult[Datastream]:
    """List datastreams in store enumeration order.

    The paging window is applied to the enumerated names before any
    definition is fetched.  Names that no longer resolve (deleted after
    enumeration) are skipped, so a page may hold fewer than ``limit``
    items.
    """
    timer = start_timer()
    request = request or ListDatastreamsRequest()
    ctx.metrics.get_all_calls.inc()
    logger.info(
        "datastream_list_called",
        offset=request.offset,
        limit=request.limit,
        request_id=ctx.request_id,
    )

    try:
        page = PageSlice(limit=request.limit, offset=request.offset)
    except ValueError as exc:
        return _fail(
            ctx,
            "list",
            ErrorCode.VALIDATION_FAILED,
            str(exc),
            category=ErrorCategory.VALIDATION,
            elapsed_ms=timer.elapsed_ms,
            result_cls=PagedResult,
        )

    try:
        names = ctx.store.list_names()
        items: list[Datastream] = []
        for name in with_paging(names, page):
            datastream = ctx.store.get(name)
            if datastream is None:
                logger.debug("datastream_vanished_during_list", datastream=name)
                continue
            items.append(datastream)
    except Exception as exc:
        return _fail(
            ctx,
            "list",
            ErrorCode.INTERNAL,
            "Failed to list datastreams",
            exc=exc,
            elapsed_ms=timer.elapsed_ms,
            result_cls=PagedResult,
        )

    return PagedResult.from_items(
        items,
        total=len(names),
        limit=page.limit,
        offset=page.offset,
        elapsed_ms=timer.elapsed_ms,
    )


# ------------------------------------------------------------------ #
# Delete / Update
# ------------------------------------------------------------------ #


def delete_datastream(
    ctx: OperationContext,
    name: str,
) -> OperationResult[dict]:
    """Delete a datastream.  Deleting an unknown name succeeds."""
    timer = start_timer()
    ctx.metrics.delete_calls.inc()
    logger.info("datastream_delete_called", datastream=name, request_id=ctx.request_id)

    started = time.perf_counter()
    try:
        ctx.store.delete(name)
    except Exception as exc:
        return _fail(
            ctx,
            "delete",
            ErrorCode.INTERNAL,
            f"Failed to delete datastream '{name}'",
            name=name,
            exc=exc,
            elapsed_ms=timer.elapsed_ms,
        )
    ctx.metrics.delete_latency.observe(time.perf_counter() - started)

    return OperationResult.ok(
        {"name": name, "deleted": True},
        elapsed_ms=timer.elapsed_ms,
    )


def update_datastream(
    ctx: OperationContext,
    name: str,
    datastream: Datastream | None = None,
) -> OperationResult[None]:
    """Always rejected: in-place mutation of a datastream is undefined."""
    ctx.metrics.update_calls.inc()
    logger.info("datastream_update_rejected", datastream=name, request_id=ctx.request_id)
    return OperationResult.fail(
        ErrorCode.METHOD_NOT_ALLOWED,
        "Updating a datastream is not supported",
    )


# ------------------------------------------------------------------ #
# Metrics
# ------------------------------------------------------------------ #


def get_datastream_metrics(ctx: OperationContext) -> OperationResult[dict]:
    """Snapshot of the datastream call counters and latency histograms."""
    return OperationResult.ok(ctx.metrics.snapshot())
