"""Per-method handlers that build a query from the request and apply its result.

Each handler takes the request, the response being built, and the registry.
It fills in ``response.primary``/``included``/``status`` (and ``Location``
for creations) and lets any error propagate.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable

from jsonapi_pipeline.document import expand_url_template
from jsonapi_pipeline.errors import APIError, bad_request, invalid_query_param_value, not_found
from jsonapi_pipeline.models.http import Primary, Request, Response
from jsonapi_pipeline.models.query import (
    AddToRelationshipQuery,
    CreateQuery,
    Criteria,
    DeleteQuery,
    FindQuery,
    RemoveFromRelationshipQuery,
    SortField,
    UpdateQuery,
)
from jsonapi_pipeline.models.resource import Collection, Linkage, Resource
from jsonapi_pipeline.registry import ResourceTypeRegistry
from jsonapi_pipeline.steps.run_query import run_query

_FAMILY_PARAM = re.compile(r"(fields|filter)\[([^\[\]]+)\]")


# ---------------------------------------------------------------------------
# Query-string parsing
# ---------------------------------------------------------------------------


def parse_criteria(query_params: dict[str, str]) -> Criteria:
    """Build find criteria from ``page``, ``sort``, ``include``, ``fields`` and ``filter`` params.

    Raises:
        APIError: 400 for a non-integer or out-of-range page parameter.
    """
    fields: dict[str, tuple[str, ...]] = {}
    filters: dict[str, str] = {}
    for key, value in query_params.items():
        match = _FAMILY_PARAM.fullmatch(key)
        if match is None:
            continue
        family, name = match.groups()
        if family == "fields":
            fields[name] = tuple(_split_list(value))
        else:
            filters[name] = value

    sort = tuple(
        SortField(field[1:], ascending=False) if field.startswith("-") else SortField(field)
        for field in _split_list(query_params.get("sort"))
    )

    return Criteria(
        filters=filters,
        sort=sort,
        fields=fields,
        include=tuple(_split_list(query_params.get("include"))),
        limit=_parse_int(query_params, "page[limit]", minimum=1),
        offset=_parse_int(query_params, "page[offset]", minimum=0),
    )


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_int(query_params: dict[str, str], name: str, minimum: int) -> int | None:
    raw = query_params.get(name)
    if raw is None:
        return None
    try:
        value = int(raw)
    except ValueError:
        raise invalid_query_param_value(f"{name} must be an integer.", name) from None
    if value < minimum:
        raise invalid_query_param_value(f"{name} must be at least {minimum}.", name)
    return value


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _single_id(request: Request) -> str:
    if not isinstance(request.id_or_ids, str):
        raise bad_request(
            "Relationship endpoints address a single resource.",
            "Provide exactly one id in the URL when working with a relationship.",
        )
    return request.id_or_ids


def _linkage_from_primary(primary: Primary) -> Linkage:
    if isinstance(primary, Collection):
        return Linkage([resource.identifier() for resource in primary])
    if isinstance(primary, Resource):
        return Linkage(primary.identifier())
    return Linkage(None)


def _resources_of(primary: Primary) -> list[Resource]:
    if isinstance(primary, Collection):
        return list(primary)
    if isinstance(primary, Resource):
        return [primary]
    return []


# ---------------------------------------------------------------------------
# Method handlers
# ---------------------------------------------------------------------------


async def do_get(request: Request, response: Response, registry: ResourceTypeRegistry) -> None:
    if request.about_relationship:
        query = FindQuery(type=request.type, id_or_ids=_single_id(request))
    else:
        query = FindQuery(
            type=request.type,
            id_or_ids=request.id_or_ids,
            criteria=parse_criteria(request.query_params),
        )

    primary, included = await run_query(registry, query)

    if isinstance(request.id_or_ids, str) and primary is None:
        raise not_found(f"No {request.type} resource with id {request.id_or_ids!r} exists.")

    if request.about_relationship:
        linkage = primary.relationships.get(request.relationship)
        if linkage is None:
            raise not_found(
                f'No relationship named "{request.relationship}" exists on this resource.'
            )
        response.primary = linkage
        return

    response.primary = primary
    response.included = included or Collection()


async def do_post(request: Request, response: Response, registry: ResourceTypeRegistry) -> None:
    if request.about_relationship:
        await run_query(
            registry,
            AddToRelationshipQuery(
                type=request.type,
                id=_single_id(request),
                relationship_name=request.relationship,
                linkage=_linkage_from_primary(request.primary),
            ),
        )
        response.status = 204
        return

    if any(resource.id for resource in _resources_of(request.primary)):
        raise APIError(
            403,
            "client_generated_id",
            "Client-generated ids are not supported.",
            "Remove the id from the resources you're creating.",
        )

    created = await run_query(registry, CreateQuery(type=request.type, records=request.primary))
    response.primary = created
    response.status = 201

    if isinstance(created, Resource) and created.id is not None:
        template = registry.url_templates().get(created.type, {}).get("self")
        if template:
            response.headers["location"] = expand_url_template(
                template, {"id": created.id, "type": created.type}
            )


async def do_patch(request: Request, response: Response, registry: ResourceTypeRegistry) -> None:
    if request.about_relationship:
        patch = Resource(
            type=request.type,
            id=_single_id(request),
            relationships={request.relationship: _linkage_from_primary(request.primary)},
        )
        await run_query(registry, UpdateQuery(type=request.type, patch=patch))
        response.status = 204
        return

    body_ids = {resource.id for resource in _resources_of(request.primary)}
    url_ids = request.id_or_ids
    if isinstance(url_ids, str):
        url_ids = [url_ids]
    if url_ids is not None and not body_ids <= set(url_ids):
        raise APIError(
            409,
            "id_mismatch",
            "Resource id mismatch.",
            "The id of the resource you provided doesn't match the one in the URL.",
        )

    updated = await run_query(registry, UpdateQuery(type=request.type, patch=request.primary))
    response.primary = updated


async def do_delete(request: Request, response: Response, registry: ResourceTypeRegistry) -> None:
    if request.about_relationship:
        await run_query(
            registry,
            RemoveFromRelationshipQuery(
                type=request.type,
                id=_single_id(request),
                relationship_name=request.relationship,
                linkage=_linkage_from_primary(request.primary),
            ),
        )
    else:
        if request.id_or_ids is None:
            raise bad_request(
                "Missing resource id(s).",
                "Specify the id(s) of the resources to delete in the URL.",
            )
        await run_query(registry, DeleteQuery(type=request.type, id_or_ids=request.id_or_ids))

    response.status = 204


MethodHandler = Callable[[Request, Response, ResourceTypeRegistry], Awaitable[None]]

METHOD_HANDLERS: dict[str, MethodHandler] = {
    "get": do_get,
    "post": do_post,
    "patch": do_patch,
    "delete": do_delete,
}
