"""API schemas package.

Pydantic schemas define the API contract.  Centralising them here keeps
routers and ops decoupled from serialisation details.
"""

from dms.api.schemas.common import (
    ErrorDetail,
    PagedResponse,
    PageMeta,
    ProblemDetail,
    SuccessResponse,
)
from dms.api.schemas.datastreams import (
    DatastreamCreatedSchema,
    DatastreamDestinationSchema,
    DatastreamSchema,
    DatastreamSourceSchema,
)

__all__ = [
    "DatastreamCreatedSchema",
    "DatastreamDestinationSchema",
    "DatastreamSchema",
    "DatastreamSourceSchema",
    "ErrorDetail",
    "PageMeta",
    "PagedResponse",
    "ProblemDetail",
    "SuccessResponse",
]
