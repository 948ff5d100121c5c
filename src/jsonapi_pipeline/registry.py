"""Resource type registry.

Maps each resource type name to its storage adapter, pagination policy,
hooks, label mappers, and URL templates. A registry is built once at
startup and is read-only afterwards; the controller holds a reference to it
and every request reads from the same instance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from jsonapi_pipeline.schemas.pagination import PaginationConfig

logger = logging.getLogger(__name__)

HookFn = Callable[..., Any]
LabelMapper = Callable[[Any, Any], Any]


class HookName(str, Enum):
    BEFORE_SAVE = "beforeSave"
    BEFORE_DELETE = "beforeDelete"
    BEFORE_RENDER = "beforeRender"


class ResourceTypeConfig(BaseModel):
    """Configuration for one resource type.

    ``url_templates`` maps link names (``self``, ``relationship``, ...) to
    templates such as ``"https://api.example.com/people/{id}"``.
    ``parent_type`` marks this type as a sub-type whose resources may be
    posted to the parent's collection.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    db_adapter: Any = None
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)
    hooks: dict[HookName, HookFn] = Field(default_factory=dict)
    label_mappers: dict[str, LabelMapper] = Field(default_factory=dict)
    url_templates: dict[str, str] = Field(default_factory=dict)
    parent_type: str | None = None
    relationship_names: tuple[str, ...] = ()


class ResourceTypeRegistry:
    """Immutable lookup of per-type configuration.

    Args:
        types: Type name to :class:`ResourceTypeConfig` (or a plain dict of
            its fields).
        defaults: Field values applied to every type that doesn't set them
            itself, typically a shared ``db_adapter``.

    Raises:
        ValueError: If a type ends up without an adapter or names an
            unregistered parent type.
    """

    def __init__(
        self,
        types: Mapping[str, ResourceTypeConfig | Mapping[str, Any]] | None = None,
        defaults: Mapping[str, Any] | None = None,
    ) -> None:
        configs: dict[str, ResourceTypeConfig] = {}
        for type_name, raw in (types or {}).items():
            configs[type_name] = _merge_with_defaults(raw, defaults or {})

        for type_name, config in configs.items():
            if config.db_adapter is None:
                raise ValueError(f"No db_adapter configured for type {type_name!r}")
            if config.parent_type is not None and config.parent_type not in configs:
                raise ValueError(
                    f"Type {type_name!r} names unregistered parent type "
                    f"{config.parent_type!r}"
                )

        self._configs: Mapping[str, ResourceTypeConfig] = MappingProxyType(configs)
        self._hooks: Mapping[tuple[str, HookName], HookFn] = MappingProxyType(
            {
                (type_name, hook_name): fn
                for type_name, config in configs.items()
                for hook_name, fn in config.hooks.items()
            }
        )
        logger.debug("Registry built with types: %s", ", ".join(sorted(configs)))

    def has_type(self, type_name: str) -> bool:
        return type_name in self._configs

    def db_adapter(self, type_name: str) -> Any:
        config = self._configs.get(type_name)
        return config.db_adapter if config else None

    def pagination(self, type_name: str) -> PaginationConfig:
        config = self._configs.get(type_name)
        return config.pagination if config else PaginationConfig()

    def hook(self, hook_name: HookName | str, type_name: str) -> HookFn | None:
        """Return the hook registered for ``type_name`` under ``hook_name``, if any.

        Names that aren't a :class:`HookName` simply have no hook. Plain
        strings match because HookName members compare equal to their values.
        """
        return self._hooks.get((type_name, hook_name))

    def label_mappers(self, type_name: str) -> Mapping[str, LabelMapper] | None:
        config = self._configs.get(type_name)
        if config is None or not config.label_mappers:
            return None
        return MappingProxyType(config.label_mappers)

    def url_templates(self) -> dict[str, dict[str, str]]:
        """Return every type's URL templates, keyed by type name."""
        return {
            type_name: dict(config.url_templates)
            for type_name, config in self._configs.items()
            if config.url_templates
        }

    def parent_type(self, type_name: str) -> str | None:
        config = self._configs.get(type_name)
        return config.parent_type if config else None

    def types_allowed_in_collection(self, type_name: str) -> list[str]:
        """Return ``type_name`` plus every type registered as its sub-type."""
        return [type_name] + [
            name for name in self._configs if self.parent_type(name) == type_name
        ]

    def relationship_names(self, type_name: str) -> tuple[str, ...]:
        config = self._configs.get(type_name)
        return config.relationship_names if config else ()


def _merge_with_defaults(
    raw: ResourceTypeConfig | Mapping[str, Any],
    defaults: Mapping[str, Any],
) -> ResourceTypeConfig:
    if isinstance(raw, ResourceTypeConfig):
        own = {name: getattr(raw, name) for name in raw.model_fields_set}
    else:
        own = dict(raw)
    return ResourceTypeConfig.model_validate({**defaults, **own})
