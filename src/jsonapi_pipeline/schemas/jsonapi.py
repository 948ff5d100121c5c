"""JSON:API document models using Pydantic v2.

Inbound models validate the shape of resource objects in a request body
before they are turned into :class:`~jsonapi_pipeline.models.resource.Resource`
values. Outbound models serialize resources and errors into response
documents.

Reference: https://jsonapi.org/format/
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Inbound (request body) models
# ---------------------------------------------------------------------------


class JSONAPIResourceIdentifierIn(BaseModel):
    """A resource identifier object as sent in relationship payloads."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1)


class JSONAPIResourceIn(BaseModel):
    """A resource object as sent in a POST/PATCH body.

    ``id`` is optional because creation requests normally omit it.
    Relationship objects are kept as raw dicts; their linkage is checked
    separately so the client gets a precise error message.
    """

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., min_length=1)
    id: str | None = None
    attributes: dict[str, Any] = Field(default_factory=dict)
    relationships: dict[str, dict[str, Any]] = Field(default_factory=dict)
    meta: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Outbound (response body) models
# ---------------------------------------------------------------------------


class JSONAPIResourceIdentifier(BaseModel):
    """A resource identifier object: just ``type`` and ``id``."""

    type: str
    id: str


class JSONAPIResource(BaseModel):
    """A single JSON:API resource object with type, id, and attributes.

    ``relationships`` is attached by the document builder after dumping,
    because relationship linkage may legitimately be ``null``.
    """

    type: str
    id: str | None = None
    attributes: dict[str, Any] | None = None
    links: dict[str, str] | None = None
    meta: dict[str, Any] | None = None


class JSONAPIError(BaseModel):
    """A single JSON:API error object."""

    status: str
    code: str | None = None
    title: str | None = None
    detail: str | None = None
    source: dict[str, str] | None = None
    links: dict[str, str] | None = None


class JSONAPIErrorResponse(BaseModel):
    """JSON:API response envelope containing a list of errors."""

    errors: list[JSONAPIError]
