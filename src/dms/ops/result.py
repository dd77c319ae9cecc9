"""
Operation result envelope.

Ops functions never raise to their caller.  Each returns an
:class:`OperationResult` (or a :class:`PagedResult` for lists): a success
flag plus either a payload or an :class:`OperationError` whose ``code``
tells the transport which outcome to report.

======================  ======  =========================================
code                    HTTP    raised by
======================  ======  =========================================
``VALIDATION_FAILED``   400     missing field, coordinator rejection,
                                negative paging window
``NOT_FOUND``           404     transports only (lookups return ``None``)
``METHOD_NOT_ALLOWED``  405     update
``CONFLICT``            409     create on a taken name
``INTERNAL``            500     unexpected store/coordinator failure
======================  ======  =========================================
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

from dms.core.errors import ErrorCategory

T = TypeVar("T")


class ErrorCode(StrEnum):
    """Client-visible failure classifications."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True, slots=True)
class OperationError:
    """Why an operation failed.

    ``details`` carries machine-readable extras such as the offending
    ``field``; ``category`` mirrors the :class:`ErrorCategory` of the
    underlying exception when there was one.
    """

    code: str
    message: str
    category: ErrorCategory | None = None
    details: dict[str, Any] = field(default_factory=dict)
    retryable: bool = False

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": str(self.code), "message": self.message, "retryable": self.retryable}
        if self.details:
            d["details"] = dict(self.details)
        return d


@dataclass
class OperationResult(Generic[T]):
    """Tagged outcome of an operation.

    Build with :meth:`ok` / :meth:`fail`.  ``data`` may legitimately be
    ``None`` on success (a lookup that found nothing).
    """

    success: bool
    data: T | None = None
    error: OperationError | None = None
    elapsed_ms: float = 0.0

    @classmethod
    def ok(cls, data: T, *, elapsed_ms: float = 0.0) -> OperationResult[T]:
        return cls(success=True, data=data, elapsed_ms=elapsed_ms)

    @classmethod
    def fail(
        cls,
        code: str,
        message: str,
        *,
        category: ErrorCategory | None = None,
        details: dict[str, Any] | None = None,
        retryable: bool = False,
        elapsed_ms: float = 0.0,
    ) -> OperationResult[T]:
        error = OperationError(code, message, category, details or {}, retryable)
        return cls(success=False, error=error, elapsed_ms=elapsed_ms)

    @property
    def code(self) -> str | None:
        """Error code of a failed result, ``None`` on success."""
        return None if self.error is None else self.error.code

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for JSON output; empty parts are left out."""
        d: dict[str, Any] = {"success": self.success}
        if self.data is not None:
            d["data"] = self.data
        if self.error is not None:
            d["error"] = self.error.to_dict()
        if self.elapsed_ms:
            d["elapsed_ms"] = round(self.elapsed_ms, 2)
        return d


@dataclass
class PagedResult(OperationResult[list[T]]):
    """One window of a list operation.

    ``total`` counts the enumerated names before windowing; ``data`` may
    hold fewer than ``limit`` items when names vanished mid-listing.
    """

    total: int = 0
    limit: int = 50
    offset: int = 0

    @property
    def has_more(self) -> bool:
        return self.offset + self.limit < self.total

    @classmethod
    def from_items(
        cls,
        items: list[T],
        total: int,
        *,
        limit: int = 50,
        offset: int = 0,
        elapsed_ms: float = 0.0,
    ) -> PagedResult[T]:
        return cls(
            success=True,
            data=items,
            total=total,
            limit=limit,
            offset=offset,
            elapsed_ms=elapsed_ms,
        )

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d.update(total=self.total, limit=self.limit, offset=self.offset, has_more=self.has_more)
        return d


class _Stopwatch:
    __slots__ = ("_started",)

    def __init__(self) -> None:
        self._started = time.perf_counter()

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._started) * 1000


def start_timer() -> _Stopwatch:
    """Start a stopwatch; read ``.elapsed_ms`` when done."""
    return _Stopwatch()
