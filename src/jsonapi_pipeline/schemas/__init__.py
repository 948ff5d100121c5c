"""Pydantic schemas for JSON:API documents and pagination policy."""

from jsonapi_pipeline.schemas.jsonapi import (
    JSONAPIError,
    JSONAPIErrorResponse,
    JSONAPIResource,
    JSONAPIResourceIdentifier,
    JSONAPIResourceIdentifierIn,
    JSONAPIResourceIn,
)
from jsonapi_pipeline.schemas.pagination import PaginationConfig

__all__ = [
    "JSONAPIError",
    "JSONAPIErrorResponse",
    "JSONAPIResource",
    "JSONAPIResourceIdentifier",
    "JSONAPIResourceIdentifierIn",
    "JSONAPIResourceIn",
    "PaginationConfig",
]
