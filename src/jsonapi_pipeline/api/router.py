"""Generic JSON:API endpoints mapped onto the APIController.

Every resource type is served by the same three routes; the controller
decides whether the type exists and what the method means for it. All
methods are routed (not just the supported four) so that unsupported ones
get a proper JSON:API 405 from the pipeline.
"""

from __future__ import annotations

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from jsonapi_pipeline import models
from jsonapi_pipeline.api.deps import get_controller
from jsonapi_pipeline.controller import APIController
from jsonapi_pipeline.errors import bad_request

router = APIRouter()

ROUTED_METHODS = ["GET", "POST", "PATCH", "DELETE", "PUT"]


def to_http_response(response: models.Response) -> Response:
    """Convert a pipeline Response into a FastAPI response."""
    if response.body is None:
        return Response(status_code=response.status, headers=response.headers)
    return JSONResponse(
        content=response.body,
        status_code=response.status,
        headers=response.headers,
        media_type=response.content_type,
    )


def _parse_id_or_ids(raw: str | None) -> str | list[str] | None:
    if raw is None:
        return None
    if "," in raw:
        return [part for part in raw.split(",") if part]
    return raw


async def _dispatch(
    http_request: Request,
    controller: APIController,
    type_name: str,
    id_or_label: str | None = None,
    relationship: str | None = None,
) -> Response:
    accepts = http_request.headers.get("accept")
    raw_body = await http_request.body()

    body = None
    if raw_body:
        try:
            body = json.loads(raw_body)
        except ValueError as exc:
            error = bad_request("Request contains invalid JSON.", str(exc))
            return to_http_response(APIController.response_from_external_error(error, accepts))

    request = models.Request(
        method=http_request.method,
        type=type_name,
        id_or_ids=_parse_id_or_ids(id_or_label),
        relationship=relationship,
        allow_label=id_or_label is not None and relationship is None,
        accepts=accepts,
        content_type=http_request.headers.get("content-type"),
        has_body=bool(raw_body),
        body=body,
        uri=str(http_request.url),
        query_params=dict(http_request.query_params),
    )
    response = await controller.handle(request, http_request)
    return to_http_response(response)


@router.api_route("/{type_name}", methods=ROUTED_METHODS)
async def collection_endpoint(
    type_name: str,
    request: Request,
    controller: APIController = Depends(get_controller),
) -> Response:
    return await _dispatch(request, controller, type_name)


@router.api_route("/{type_name}/{id_or_label}", methods=ROUTED_METHODS)
async def resource_endpoint(
    type_name: str,
    id_or_label: str,
    request: Request,
    controller: APIController = Depends(get_controller),
) -> Response:
    return await _dispatch(request, controller, type_name, id_or_label)


@router.api_route(
    "/{type_name}/{resource_id}/relationships/{relationship}", methods=ROUTED_METHODS
)
async def relationship_endpoint(
    type_name: str,
    resource_id: str,
    relationship: str,
    request: Request,
    controller: APIController = Depends(get_controller),
) -> Response:
    return await _dispatch(request, controller, type_name, resource_id, relationship)
