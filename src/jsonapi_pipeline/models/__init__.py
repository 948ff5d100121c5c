"""Value types flowing through the request pipeline."""

from jsonapi_pipeline.models.http import (
    JSON_MEDIA_TYPE,
    JSONAPI_MEDIA_TYPE,
    Request,
    Response,
)
from jsonapi_pipeline.models.query import (
    AddToRelationshipQuery,
    CreateQuery,
    Criteria,
    DeleteQuery,
    FindQuery,
    Query,
    QueryKind,
    RemoveFromRelationshipQuery,
    SortField,
    UpdateQuery,
    WithCriteriaQuery,
)
from jsonapi_pipeline.models.resource import (
    Collection,
    Linkage,
    Resource,
    ResourceIdentifier,
)

__all__ = [
    "JSON_MEDIA_TYPE",
    "JSONAPI_MEDIA_TYPE",
    "AddToRelationshipQuery",
    "Collection",
    "CreateQuery",
    "Criteria",
    "DeleteQuery",
    "FindQuery",
    "Linkage",
    "Query",
    "QueryKind",
    "RemoveFromRelationshipQuery",
    "Request",
    "Resource",
    "ResourceIdentifier",
    "Response",
    "SortField",
    "UpdateQuery",
    "WithCriteriaQuery",
]
