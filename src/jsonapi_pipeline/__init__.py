"""Framework-agnostic JSON:API request pipeline."""

from jsonapi_pipeline.controller import APIController
from jsonapi_pipeline.errors import APIError
from jsonapi_pipeline.registry import HookName, ResourceTypeConfig, ResourceTypeRegistry

__all__ = [
    "APIController",
    "APIError",
    "HookName",
    "ResourceTypeConfig",
    "ResourceTypeRegistry",
]
