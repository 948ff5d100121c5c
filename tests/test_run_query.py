"""Query dispatch and pagination policy.

Tests cover:
    - Each query kind reaches the matching adapter method
    - Max page size enforcement and its opt-out
    - Default page size applied when no limit is given
    - Adapters missing an operation fail as a configuration error
"""

import pytest

from jsonapi_pipeline.errors import AdapterConfigurationError, APIError
from jsonapi_pipeline.models import (
    AddToRelationshipQuery,
    CreateQuery,
    Criteria,
    DeleteQuery,
    FindQuery,
    QueryKind,
    RemoveFromRelationshipQuery,
    UpdateQuery,
)
from jsonapi_pipeline.registry import ResourceTypeRegistry
from jsonapi_pipeline.steps.run_query import ADAPTER_METHODS, run_query


def test_every_query_kind_has_an_adapter_method():
    assert set(ADAPTER_METHODS) == set(QueryKind)


@pytest.mark.asyncio
async def test_dispatches_queries_to_the_matching_adapter_method(registry, adapter):
    queries = {
        "create": CreateQuery(type="schools"),
        "update": UpdateQuery(type="schools"),
        "delete": DeleteQuery(type="schools", id_or_ids="1"),
        "add_to_relationship": AddToRelationshipQuery(
            type="schools", id="1", relationship_name="x"
        ),
        "remove_from_relationship": RemoveFromRelationshipQuery(
            type="schools", id="1", relationship_name="x"
        ),
    }

    for method_name, query in queries.items():
        await run_query(registry, query)
        getattr(adapter, method_name).assert_awaited_once_with(query)

    adapter.find.assert_not_called()


@pytest.mark.asyncio
async def test_find_is_dispatched_to_find(registry, adapter):
    query = FindQuery(type="schools", criteria=Criteria(limit=3))

    await run_query(registry, query)

    adapter.find.assert_awaited_once_with(query)


@pytest.mark.asyncio
async def test_returns_adapter_result_unmodified(registry, adapter):
    sentinel = object()
    adapter.create.return_value = sentinel

    assert await run_query(registry, CreateQuery(type="schools")) is sentinel


@pytest.mark.asyncio
async def test_enforces_max_page_size(registry, adapter):
    query = FindQuery(type="schools", criteria=Criteria(limit=10))

    with pytest.raises(APIError) as exc_info:
        await run_query(registry, query)

    assert exc_info.value.status == 400
    assert exc_info.value.detail == "Must use a smaller limit per page."
    assert exc_info.value.source == {"parameter": "page[limit]"}
    adapter.find.assert_not_called()


@pytest.mark.asyncio
async def test_ignore_limit_max_dispatches_limit_unchanged(registry, adapter):
    query = FindQuery(type="schools", criteria=Criteria(limit=10)).without_max_limit()

    await run_query(registry, query)

    adapter.find.assert_awaited_once_with(query)
    assert adapter.find.await_args.args[0].limit == 10


@pytest.mark.asyncio
async def test_limit_equal_to_max_is_allowed(registry, adapter):
    query = FindQuery(type="schools", criteria=Criteria(limit=4))

    await run_query(registry, query)

    adapter.find.assert_awaited_once_with(query)


@pytest.mark.asyncio
async def test_applies_default_limit_when_none_given(registry, adapter):
    adapter.find.side_effect = lambda query: query.limit

    limit = await run_query(registry, FindQuery(type="schools"))

    assert limit == 2


@pytest.mark.asyncio
async def test_no_default_limit_without_pagination_policy(registry, adapter):
    await run_query(registry, FindQuery(type="people"))

    assert adapter.find.await_args.args[0].limit is None


@pytest.mark.asyncio
async def test_adapter_without_operation_is_a_configuration_error():
    class ReadOnlyAdapter:
        async def find(self, query):
            return None, None

    registry = ResourceTypeRegistry({"schools": {"db_adapter": ReadOnlyAdapter()}})

    with pytest.raises(AdapterConfigurationError):
        await run_query(registry, DeleteQuery(type="schools", id_or_ids="1"))
