"""Framework-agnostic request and response types.

A framework binding fills in a :class:`Request` from whatever its web
framework hands it, runs it through the controller, and writes the resulting
:class:`Response` back out.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from jsonapi_pipeline.errors import APIError
from jsonapi_pipeline.models.query import IdOrIds
from jsonapi_pipeline.models.resource import Collection, Linkage, Resource

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"
JSON_MEDIA_TYPE = "application/json"

Primary = Resource | Collection | Linkage | None


@dataclass
class Request:
    """An incoming JSON:API request.

    ``method`` is stored lower-cased. ``primary`` and the resolved
    ``id_or_ids`` are filled in by the pipeline as it runs.
    """

    method: str
    type: str
    id_or_ids: IdOrIds = None
    relationship: str | None = None
    allow_label: bool = False
    accepts: str | None = None
    content_type: str | None = None
    has_body: bool = False
    body: Any = None
    uri: str | None = None
    query_params: dict[str, str] = field(default_factory=dict)

    primary: Primary = None
    label_resolved: bool = False

    def __post_init__(self) -> None:
        self.method = self.method.lower()

    @property
    def about_relationship(self) -> bool:
        return self.relationship is not None


@dataclass
class Response:
    """The pipeline's output.

    ``body`` is the finished top-level document (a dict ready for JSON
    encoding), or ``None`` for bodiless responses such as 204.
    """

    content_type: str | None = None
    headers: dict[str, str] = field(default_factory=lambda: {"vary": "Accept"})
    status: int = 200
    primary: Primary = None
    included: Collection = field(default_factory=Collection)
    errors: list[APIError] = field(default_factory=list)
    body: dict[str, Any] | None = None
