"""
Operations layer — pure request-handling logic for datastreams.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` (never raise)
- All functions are transport-agnostic (no HTTP, no CLI knowledge)

Usage::

    from dms.ops import OperationContext
    from dms.ops.datastreams import create_datastream, get_datastream

    ctx = OperationContext(store=my_store, coordinator=my_coordinator)
    result = create_datastream(ctx, datastream)
    assert result.success
"""

from dms.ops.context import OperationContext
from dms.ops.result import ErrorCode, OperationError, OperationResult, PagedResult

__all__ = [
    "ErrorCode",
    "OperationContext",
    "OperationError",
    "OperationResult",
    "PagedResult",
]
