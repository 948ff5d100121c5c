"""Validate and parse a request body into resources.

Runs only for requests that carry a body, after the body's Content-Type
has been accepted.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from jsonapi_pipeline.errors import APIError, bad_request, invalid_document
from jsonapi_pipeline.models.http import Primary
from jsonapi_pipeline.models.resource import Collection, Linkage, Resource, ResourceIdentifier
from jsonapi_pipeline.registry import ResourceTypeRegistry
from jsonapi_pipeline.schemas.jsonapi import JSONAPIResourceIdentifierIn, JSONAPIResourceIn


def validate_document(body: Any, about_relationship: bool = False) -> None:
    """Check the top-level shape of a request document.

    The body must be an object with a ``data`` member holding a resource
    object or an array of them. ``data: null`` is only meaningful when
    clearing a to-one relationship.

    Raises:
        APIError: 400 when the document is malformed.
    """
    if not isinstance(body, dict) or "data" not in body:
        raise invalid_document("Missing data member.")

    data = body["data"]
    if isinstance(data, (dict, list)):
        return
    if data is None and about_relationship:
        return
    raise invalid_document(
        "The data member must be a resource object or an array of resource objects.",
        pointer="/data",
    )


def parse_request_primary(data: Any, about_relationship: bool = False) -> Primary:
    """Turn a document's ``data`` member into a Resource or Collection.

    Relationship payloads only carry identifiers, so they parse into
    resources with a type and id and nothing else.

    Raises:
        APIError: 400 when the data can't be parsed.
    """
    try:
        if about_relationship:
            if data is None:
                return None
            if isinstance(data, list):
                return Collection([_identifier_resource(item) for item in data])
            return _identifier_resource(data)

        if isinstance(data, list):
            return Collection([_resource_from_json(item) for item in data])
        return _resource_from_json(data)

    except APIError:
        raise
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "data"
        raise bad_request(
            "The resources you provided could not be parsed.",
            f'The precise error was: "{location}: {first["msg"]}".',
        ) from exc
    except (TypeError, ValueError) as exc:
        raise bad_request(
            "The resources you provided could not be parsed.",
            f'The precise error was: "{exc}".',
        ) from exc


def validate_resources(
    endpoint_type: str,
    primary: Primary,
    registry: ResourceTypeRegistry,
    require_ids: bool = False,
) -> None:
    """Check parsed resources against the registry.

    Every resource must belong in the endpoint's collection (the endpoint
    type itself or a registered sub-type), must have an id when
    ``require_ids`` is set, and must not list relationship names among its
    attributes.

    Raises:
        APIError: 400 for the first problem found.
    """
    if isinstance(primary, Collection):
        resources = list(primary)
        pointers = [f"/data/{i}" for i in range(len(resources))]
    elif isinstance(primary, Resource):
        resources = [primary]
        pointers = ["/data"]
    else:
        return

    if require_ids:
        for resource, pointer in zip(resources, pointers):
            if not resource.id:
                raise bad_request(
                    "Missing resource id.",
                    "Every resource you're updating must include its id.",
                    source={"pointer": f"{pointer}/id"},
                )

    allowed = registry.types_allowed_in_collection(endpoint_type)
    if not {r.type for r in resources} <= set(allowed):
        raise bad_request(
            "Some of the resources you provided are of a type that "
            "doesn't belong in this collection.",
            f"Valid types for this collection are: {', '.join(allowed)}.",
        )

    for resource, pointer in zip(resources, pointers):
        misplaced = [
            name for name in registry.relationship_names(resource.type) if name in resource.attrs
        ]
        if misplaced:
            raise bad_request(
                "Relationship fields must be specified under the `relationships` key.",
                f"These fields are relationships: {', '.join(misplaced)}.",
                source={"pointer": f"{pointer}/attributes/{misplaced[0]}"},
            )


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------


def _identifier(data: Any) -> ResourceIdentifier:
    parsed = JSONAPIResourceIdentifierIn.model_validate(data)
    return ResourceIdentifier(type=parsed.type, id=parsed.id)


def _identifier_resource(data: Any) -> Resource:
    identifier = _identifier(data)
    return Resource(type=identifier.type, id=identifier.id)


def _linkage_from_json(data: Any) -> Linkage:
    if data is None:
        return Linkage(None)
    if isinstance(data, list):
        return Linkage([_identifier(item) for item in data])
    if isinstance(data, dict):
        return Linkage(_identifier(data))
    raise ValueError("Relationship data must be null, an object, or an array.")


def _resource_from_json(data: Any) -> Resource:
    parsed = JSONAPIResourceIn.model_validate(data)

    relationships: dict[str, Linkage] = {}
    for name, relationship in parsed.relationships.items():
        if "data" not in relationship:
            raise bad_request(
                "Missing relationship linkage.",
                f'No data was provided for the "{name}" relationship.',
                source={"pointer": f"/data/relationships/{name}"},
            )
        relationships[name] = _linkage_from_json(relationship["data"])

    return Resource(
        type=parsed.type,
        id=parsed.id,
        attrs=dict(parsed.attributes),
        relationships=relationships,
        meta=parsed.meta,
    )
