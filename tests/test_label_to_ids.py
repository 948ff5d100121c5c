from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import make_adapter
from jsonapi_pipeline.registry import ResourceTypeRegistry
from jsonapi_pipeline.steps.label_to_ids import label_to_ids


@pytest.mark.asyncio
async def test_mapper_called_with_model_and_framework_request():
    mapper = MagicMock(return_value=["1", "2"])
    adapter = make_adapter()
    registry = ResourceTypeRegistry(
        {"events": {"db_adapter": adapter, "label_mappers": {"upcoming": mapper}}}
    )

    result = await label_to_ids("events", "upcoming", registry, "framework-req")

    assert result == ["1", "2"]
    adapter.get_model.assert_called_once_with("events")
    mapper.assert_called_once_with("model-handle", "framework-req")


@pytest.mark.asyncio
async def test_async_mapper_is_awaited():
    registry = ResourceTypeRegistry(
        {
            "events": {
                "db_adapter": make_adapter(),
                "label_mappers": {"next": AsyncMock(return_value="42")},
            }
        }
    )

    assert await label_to_ids("events", "next", registry) == "42"


@pytest.mark.asyncio
async def test_unknown_label_passes_through_as_id():
    registry = ResourceTypeRegistry(
        {"events": {"db_adapter": make_adapter(), "label_mappers": {"upcoming": MagicMock()}}}
    )

    assert await label_to_ids("events", "abc123", registry) == "abc123"


@pytest.mark.asyncio
async def test_type_without_mappers_passes_ids_through():
    registry = ResourceTypeRegistry({"events": {"db_adapter": make_adapter()}})

    assert await label_to_ids("events", ["1", "2"], registry) == ["1", "2"]
