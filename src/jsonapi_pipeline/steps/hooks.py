"""Hook invocation.

Hooks are user-supplied callables registered per resource type under a
:class:`~jsonapi_pipeline.registry.HookName`. They receive the resource(s)
plus the framework's own request and response objects, which the pipeline
passes through untouched. Hooks may be plain functions or coroutines.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any

from jsonapi_pipeline.models.resource import Collection, Resource
from jsonapi_pipeline.registry import HookName, ResourceTypeRegistry

logger = logging.getLogger(__name__)


def _type_of(resource_or_type: Resource | Collection | str) -> str | None:
    if isinstance(resource_or_type, str):
        return resource_or_type
    if isinstance(resource_or_type, Resource):
        return resource_or_type.type
    types = set(resource_or_type.types)
    if not types:
        return None
    if len(types) > 1:
        raise ValueError(
            f"Can't pick a single hook for a collection of mixed types: {sorted(types)}"
        )
    return types.pop()


async def trigger_hook(
    resource_or_type: Resource | Collection | str,
    hook_name: HookName | str,
    registry: ResourceTypeRegistry,
    framework_req: Any = None,
    framework_res: Any = None,
) -> Any:
    """Call the hook registered for this resource's type.

    With no hook registered, returns an empty list without calling anything.
    The hook receives ``resource_or_type`` exactly as given. Exceptions
    raised by the hook propagate unchanged.
    """
    type_name = _type_of(resource_or_type)
    fn = registry.hook(hook_name, type_name) if type_name is not None else None
    if fn is None:
        return []

    logger.debug("Running %s hook for type %s", HookName(hook_name).value, type_name)
    result = fn(resource_or_type, framework_req, framework_res)
    if inspect.isawaitable(result):
        result = await result
    return result


async def apply_transform(
    to_transform: Any,
    hook_name: HookName | str,
    registry: ResourceTypeRegistry,
    framework_req: Any = None,
    framework_res: Any = None,
) -> Any:
    """Run a transform hook over a Resource or each member of a Collection.

    A resource whose type has no hook is returned unchanged. For
    collections, members the hook turns into ``None`` are dropped and the
    remaining order is kept. Anything else (``None``, relationship linkage)
    is returned as-is.
    """
    if isinstance(to_transform, Resource):
        return await _transform_one(to_transform, hook_name, registry, framework_req, framework_res)

    if isinstance(to_transform, Collection):
        transformed = []
        for resource in to_transform:
            result = await _transform_one(
                resource, hook_name, registry, framework_req, framework_res
            )
            if result is not None:
                transformed.append(result)
        return Collection(transformed)

    return to_transform


async def _transform_one(
    resource: Resource,
    hook_name: HookName | str,
    registry: ResourceTypeRegistry,
    framework_req: Any,
    framework_res: Any,
) -> Any:
    if registry.hook(hook_name, resource.type) is None:
        return resource
    return await trigger_hook(resource, hook_name, registry, framework_req, framework_res)
