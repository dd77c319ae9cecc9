"""
Structured error types for the datastream management service.

Every failure the service knows how to classify is a :class:`DmsError`
subclass carrying a category, a retry hint, structured context and an
optional chained cause.  The ops layer maps these onto client-visible
error codes; anything that is *not* a ``DmsError`` is treated as an
internal failure.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                         DmsError                              │
        │        (category, retryable, context, cause)                  │
        ├──────────────────────────────────────────────────────────────┤
        │  ValidationError            DatastreamAlreadyExistsError      │
        │  (VALIDATION)               (CONFLICT)                        │
        │       │                                                       │
        │  DatastreamValidationError  StoreError       CoordinatorError │
        │  (coordinator rejection)    (STORAGE)        (COORDINATION)   │
        │                                                               │
        │  ConfigError ── InvalidConfigError                            │
        │  (CONFIG)                                                     │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> err = DatastreamValidationError("bad source config")
    >>> err.reason
    'bad source config'
    >>> err.category.value
    'VALIDATION'

    >>> err = StoreError("sqlite unavailable").with_context(datastream="orders")
    >>> err.context.datastream
    'orders'

Tags:
    error-handling, exception-hierarchy, dms, datastream

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard categories used for classification and log routing."""

    VALIDATION = "VALIDATION"  # Missing fields, connector rule violations
    CONFLICT = "CONFLICT"  # Duplicate datastream name
    STORAGE = "STORAGE"  # Definition store failures
    COORDINATION = "COORDINATION"  # Coordinator internal failures
    CONFIG = "CONFIG"  # Missing or invalid settings
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error for logging.

    Attributes:
        operation: Ops-layer operation that failed (``create``, ``get`` …).
        datastream: Name of the datastream involved, if any.
        connector_type: Connector type of the datastream, if known.
        request_id: Request correlation id.
        metadata: Additional key/value pairs.
    """

    operation: str | None = None
    datastream: str | None = None
    connector_type: str | None = None
    request_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "datastream", "connector_type", "request_id"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class DmsError(Exception):
    """
    Base exception for all datastream management errors.

    Subclasses set ``default_category`` and ``default_retryable`` so call
    sites only pass what differs from the defaults.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> DmsError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StoreError("Insert failed").with_context(datastream="orders")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS (never retryable)
# =============================================================================


class ValidationError(DmsError):
    """A datastream definition violates a structural or semantic rule."""

    default_category = ErrorCategory.VALIDATION

    def __init__(self, message: str, *, field_name: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.field_name = field_name

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field_name:
            result["field"] = self.field_name
        return result


class DatastreamValidationError(ValidationError):
    """The coordinator rejected a definition.

    ``reason`` is the human-readable explanation surfaced to the caller.
    """

    def __init__(self, reason: str, **kwargs: Any):
        super().__init__(reason, **kwargs)
        self.reason = reason


# =============================================================================
# STORE / COORDINATOR ERRORS
# =============================================================================


class DatastreamAlreadyExistsError(DmsError):
    """A datastream with the same name is already stored."""

    default_category = ErrorCategory.CONFLICT

    def __init__(self, name: str, message: str | None = None, **kwargs: Any):
        super().__init__(message or f"Datastream '{name}' already exists", **kwargs)
        self.name = name


class StoreError(DmsError):
    """The definition store could not complete a request."""

    default_category = ErrorCategory.STORAGE
    default_retryable = True


class CoordinatorError(DmsError):
    """The coordinator failed for a reason other than validation."""

    default_category = ErrorCategory.COORDINATION


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(DmsError):
    """Configuration is missing or invalid."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """A configuration value is not acceptable."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        super().__init__(message or f"Invalid value for {key!r}: {value!r}")
        self.key = key
        self.value = value


def categorize_error(error: Exception) -> ErrorCategory:
    """Return the category of *error*, ``INTERNAL`` for foreign exceptions."""
    if isinstance(error, DmsError):
        return error.category
    return ErrorCategory.INTERNAL


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "DmsError",
    "ValidationError",
    "DatastreamValidationError",
    "DatastreamAlreadyExistsError",
    "StoreError",
    "CoordinatorError",
    "ConfigError",
    "InvalidConfigError",
    "categorize_error",
]
