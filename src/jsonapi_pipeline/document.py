"""Build top-level JSON:API documents from pipeline values.

The output is a plain dict ready for JSON encoding. Resource and error
objects go through the Pydantic models in :mod:`jsonapi_pipeline.schemas`.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Any
from urllib.parse import quote

from jsonapi_pipeline.errors import APIError
from jsonapi_pipeline.models.http import Primary
from jsonapi_pipeline.models.resource import Collection, Linkage, Resource
from jsonapi_pipeline.schemas.jsonapi import (
    JSONAPIErrorResponse,
    JSONAPIResource,
    JSONAPIResourceIdentifier,
)

UrlTemplates = Mapping[str, Mapping[str, str]]

_TEMPLATE_VAR = re.compile(r"\{(\w+)\}")


def expand_url_template(template: str, values: Mapping[str, Any]) -> str:
    """Fill ``{name}`` placeholders; unknown placeholders are left in place."""

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return quote(str(values[name]), safe="")

    return _TEMPLATE_VAR.sub(_replace, template)


def build_document(
    primary: Primary,
    included: Iterable[Resource] | None = None,
    url_templates: UrlTemplates | None = None,
    uri: str | None = None,
) -> dict[str, Any]:
    """Build a success document.

    ``primary`` may be a Resource, a Collection, relationship Linkage, or
    ``None`` (rendered as ``"data": null``).
    """
    templates = url_templates or {}
    document: dict[str, Any] = {"data": _primary_to_json(primary, templates)}

    included_json = [resource_to_json(r, templates) for r in included or ()]
    if included_json:
        document["included"] = included_json

    if uri:
        document["links"] = {"self": uri}
    return document


def build_error_document(errors: Iterable[APIError]) -> dict[str, Any]:
    return JSONAPIErrorResponse(errors=[e.to_schema() for e in errors]).model_dump(
        exclude_none=True
    )


def resource_to_json(resource: Resource, url_templates: UrlTemplates) -> dict[str, Any]:
    type_templates = url_templates.get(resource.type, {})
    values = {"id": resource.id, "type": resource.type}

    links = None
    if resource.id is not None and "self" in type_templates:
        links = {"self": expand_url_template(type_templates["self"], values)}

    data = JSONAPIResource(
        type=resource.type,
        id=resource.id,
        attributes=resource.attrs or None,
        links=links,
        meta=resource.meta,
    ).model_dump(exclude_none=True)

    if resource.relationships:
        relationships = {}
        for name, linkage in resource.relationships.items():
            relationship: dict[str, Any] = {"data": linkage_to_json(linkage)}
            template = type_templates.get("relationship")
            if template and resource.id is not None:
                relationship["links"] = {
                    "self": expand_url_template(template, {**values, "relationship": name})
                }
            relationships[name] = relationship
        data["relationships"] = relationships

    return data


def linkage_to_json(linkage: Linkage) -> Any:
    if linkage.value is None:
        return None
    if isinstance(linkage.value, list):
        return [
            JSONAPIResourceIdentifier(type=i.type, id=i.id).model_dump() for i in linkage.value
        ]
    return JSONAPIResourceIdentifier(type=linkage.value.type, id=linkage.value.id).model_dump()


def _primary_to_json(primary: Primary, url_templates: UrlTemplates) -> Any:
    if isinstance(primary, Resource):
        return resource_to_json(primary, url_templates)
    if isinstance(primary, Collection):
        return [resource_to_json(r, url_templates) for r in primary]
    if isinstance(primary, Linkage):
        return linkage_to_json(primary)
    return None
