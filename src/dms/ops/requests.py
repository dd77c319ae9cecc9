"""
Typed request objects for operations.

Requests carry only validated, transport-agnostic data: no raw HTTP
bodies, no Click/Typer params.  Create takes a
:class:`~dms.core.models.Datastream` directly since the definition *is*
the request.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_PAGE_SIZE = 50


@dataclass(frozen=True, slots=True)
class ListDatastreamsRequest:
    """Request for :func:`dms.ops.datastreams.list_datastreams`.

    Attributes:
        offset: Index of the first enumerated name to resolve.
        limit: Maximum number of names to resolve.
    """

    offset: int = 0
    limit: int = DEFAULT_PAGE_SIZE
