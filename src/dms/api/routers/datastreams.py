"""
Datastreams router — create, read, list and delete datastream definitions.

Endpoints:
    POST   /datastreams          Create a datastream
    GET    /datastreams          List datastreams (``start`` / ``count`` paging)
    GET    /datastreams/{name}   Get one datastream
    PUT    /datastreams/{name}   Always 405: datastreams are immutable
    DELETE /datastreams/{name}   Delete a datastream (missing names succeed)

Names may contain "/"; the item routes match the rest of the path.

Tags:
    dms, api, datastreams

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Path, Request, Response

from dms.api.deps import OpContext, Paging
from dms.api.middleware.errors import problem_response
from dms.api.schemas.common import PagedResponse, PageMeta, SuccessResponse
from dms.api.schemas.datastreams import DatastreamCreatedSchema, DatastreamSchema
from dms.api.utils import _handle_error

router = APIRouter(prefix="/datastreams")


@router.post(
    "",
    status_code=201,
    response_model=SuccessResponse[DatastreamCreatedSchema],
    responses={400: {}, 409: {}, 500: {}},
)
def create_datastream(
    ctx: OpContext,
    body: DatastreamSchema,
    request: Request,
    response: Response,
):
    """Create a datastream.

    The connector is initialized before the definition is stored; a
    connector rejection is a 400 and a duplicate name a 409.
    """
    from dms.ops.datastreams import create_datastream as _create

    result = _create(ctx, body.to_model())
    if not result.success:
        return _handle_error(result, request)

    # Names may contain "/", which url_for cannot place in a path parameter
    collection = str(request.url_for("list_datastreams"))
    response.headers["Location"] = f"{collection}/{quote(result.data, safe='/')}"
    return SuccessResponse(
        data=DatastreamCreatedSchema(name=result.data),
        elapsed_ms=result.elapsed_ms,
    )


@router.get(
    "",
    response_model=PagedResponse[DatastreamSchema],
    response_model_exclude_none=True,
)
def list_datastreams(ctx: OpContext, paging: Paging, request: Request):
    """List datastreams in store order.

    ``start`` skips that many names and ``count`` caps the page.  Names
    deleted while the page is being resolved are left out.
    """
    from dms.ops.datastreams import list_datastreams as _list

    result = _list(ctx, paging)
    if not result.success:
        return _handle_error(result, request)

    return PagedResponse(
        data=[DatastreamSchema.from_model(d) for d in result.data or []],
        page=PageMeta(
            total=result.total,
            limit=result.limit,
            offset=result.offset,
            has_more=result.has_more,
        ),
        elapsed_ms=result.elapsed_ms,
    )


@router.get(
    "/{name:path}",
    response_model=SuccessResponse[DatastreamSchema],
    response_model_exclude_none=True,
)
def get_datastream(
    ctx: OpContext,
    request: Request,
    name: str = Path(..., description="Datastream name"),
):
    """Get a datastream by name."""
    from dms.ops.datastreams import get_datastream as _get

    result = _get(ctx, name)
    if not result.success:
        return _handle_error(result, request)
    if result.data is None:
        return problem_response(
            status=404,
            title=f"Datastream '{name}' not found",
            instance=str(request.url),
        )
    return SuccessResponse(
        data=DatastreamSchema.from_model(result.data),
        elapsed_ms=result.elapsed_ms,
    )


@router.put("/{name:path}", status_code=405, responses={405: {}})
def update_datastream(
    ctx: OpContext,
    request: Request,
    name: str = Path(..., description="Datastream name"),
):
    """Always rejected with 405; the body is never read."""
    from dms.ops.datastreams import update_datastream as _update

    return _handle_error(_update(ctx, name), request)


@router.delete("/{name:path}", response_model=SuccessResponse[dict])
def delete_datastream(
    ctx: OpContext,
    request: Request,
    name: str = Path(..., description="Datastream name"),
):
    """Delete a datastream.  Deleting an unknown name succeeds."""
    from dms.ops.datastreams import delete_datastream as _delete

    result = _delete(ctx, name)
    if not result.success:
        return _handle_error(result, request)
    return SuccessResponse(data=result.data, elapsed_ms=result.elapsed_ms)
