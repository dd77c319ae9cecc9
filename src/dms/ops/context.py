"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its
first argument.  The context carries the collaborators the operation
works against (definition store, coordinator), the metrics it records
into, and caller identity for logging.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from dms.core.protocols import Coordinator, DatastreamStore
from dms.observability.metrics import DatastreamMetrics, datastream_metrics


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        store: Definition store satisfying :class:`~dms.core.protocols.DatastreamStore`.
        coordinator: Coordinator satisfying :class:`~dms.core.protocols.Coordinator`.
        metrics: Metrics to record into (the process-wide instance by default).
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request: ``"api"``, ``"cli"`` or ``"sdk"``.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    store: DatastreamStore
    coordinator: Coordinator
    metrics: DatastreamMetrics = field(default_factory=lambda: datastream_metrics)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    metadata: dict[str, Any] = field(default_factory=dict)
