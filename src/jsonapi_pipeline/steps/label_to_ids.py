"""Resolve a URL label (e.g. ``/events/upcoming``) to concrete ids."""

from __future__ import annotations

import inspect
import logging
from typing import Any

from jsonapi_pipeline.models.query import IdOrIds
from jsonapi_pipeline.registry import ResourceTypeRegistry

logger = logging.getLogger(__name__)


async def label_to_ids(
    type_name: str,
    label_or_id: IdOrIds,
    registry: ResourceTypeRegistry,
    framework_req: Any = None,
) -> Any:
    """Map a label to an id or list of ids using the type's label mappers.

    The mapper is called with the adapter's model handle for the type and
    the framework request. When no mapper matches, ``label_or_id`` is
    assumed to be a literal id and is returned unchanged.
    """
    mappers = registry.label_mappers(type_name)
    mapper = mappers.get(label_or_id) if mappers and isinstance(label_or_id, str) else None
    if mapper is None:
        return label_or_id

    adapter = registry.db_adapter(type_name)
    model = adapter.get_model(type_name) if hasattr(adapter, "get_model") else None

    result = mapper(model, framework_req)
    if inspect.isawaitable(result):
        result = await result

    logger.debug("Label %r on %s resolved to %r", label_or_id, type_name, result)
    return result
