"""Finalize a query against the type's pagination policy and send it to the adapter."""

from __future__ import annotations

import inspect
import logging
from typing import Any

from jsonapi_pipeline.errors import AdapterConfigurationError, invalid_query_param_value
from jsonapi_pipeline.models.query import Query, QueryKind, WithCriteriaQuery
from jsonapi_pipeline.registry import ResourceTypeRegistry

logger = logging.getLogger(__name__)

# Adapter method serving each query kind.
ADAPTER_METHODS: dict[QueryKind, str] = {
    QueryKind.FIND: "find",
    QueryKind.CREATE: "create",
    QueryKind.UPDATE: "update",
    QueryKind.DELETE: "delete",
    QueryKind.ADD_TO_RELATIONSHIP: "add_to_relationship",
    QueryKind.REMOVE_FROM_RELATIONSHIP: "remove_from_relationship",
}

_unmapped = set(QueryKind) - set(ADAPTER_METHODS)
if _unmapped:
    raise RuntimeError(f"No adapter method mapped for query kinds: {sorted(_unmapped)}")


async def run_query(registry: ResourceTypeRegistry, query: Query) -> Any:
    """Apply pagination policy, then run the query on the type's adapter.

    Returns whatever the adapter returns.

    Raises:
        APIError: 400 if the requested page size exceeds the maximum.
        AdapterConfigurationError: If the adapter lacks the needed operation.
    """
    finalized = query
    if isinstance(query, WithCriteriaQuery):
        enforce_max_limit(registry, query)
        finalized = apply_default_limit(registry, query)

    adapter = registry.db_adapter(finalized.type)
    return await dispatch_query(adapter, finalized)


def enforce_max_limit(registry: ResourceTypeRegistry, query: WithCriteriaQuery) -> None:
    max_page_size = registry.pagination(query.type).max_page_size
    if (
        not query.ignore_limit_max
        and max_page_size is not None
        and query.limit is not None
        and query.limit > max_page_size
    ):
        raise invalid_query_param_value("Must use a smaller limit per page.", "page[limit]")


def apply_default_limit(
    registry: ResourceTypeRegistry, query: WithCriteriaQuery
) -> WithCriteriaQuery:
    default_page_size = registry.pagination(query.type).default_page_size
    if query.limit is None and default_page_size is not None:
        return query.with_limit(default_page_size)
    return query


async def dispatch_query(adapter: Any, query: Query) -> Any:
    kind = getattr(query, "kind", None)
    method_name = ADAPTER_METHODS.get(kind)
    if method_name is None:
        raise AdapterConfigurationError(f"Unexpected query type: {type(query).__name__}")

    method = getattr(adapter, method_name, None)
    if not callable(method):
        raise AdapterConfigurationError(
            f"Adapter {type(adapter).__name__} for type {query.type!r} "
            f"doesn't implement {method_name}()"
        )

    logger.debug("Dispatching %s query for type %s", kind.value, query.type)
    result = method(query)
    if inspect.isawaitable(result):
        result = await result
    return result
