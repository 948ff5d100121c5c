"""Resource, Collection, and relationship linkage value types."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ResourceIdentifier:
    """A (type, id) pair pointing at one resource."""

    type: str
    id: str


@dataclass
class Linkage:
    """The value of a relationship.

    ``None`` for an empty to-one relationship, a single identifier for a
    populated to-one, or a (possibly empty) list for a to-many.
    """

    value: ResourceIdentifier | list[ResourceIdentifier] | None = None

    @property
    def identifiers(self) -> list[ResourceIdentifier]:
        if self.value is None:
            return []
        if isinstance(self.value, list):
            return list(self.value)
        return [self.value]


@dataclass
class Resource:
    """A single addressable entity with a type and (once saved) an id."""

    type: str
    id: str | None = None
    attrs: dict[str, Any] = field(default_factory=dict)
    relationships: dict[str, Linkage] = field(default_factory=dict)
    meta: dict[str, Any] | None = None

    def identifier(self) -> ResourceIdentifier:
        """Return this resource's identifier.

        Raises:
            ValueError: If the resource has no id yet.
        """
        if self.id is None:
            raise ValueError(f"Resource of type {self.type!r} has no id")
        return ResourceIdentifier(type=self.type, id=self.id)


@dataclass
class Collection:
    """An ordered list of resources. Order is always preserved."""

    resources: list[Resource] = field(default_factory=list)

    def __iter__(self) -> Iterator[Resource]:
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    @property
    def ids(self) -> list[str | None]:
        return [r.id for r in self.resources]

    @property
    def types(self) -> list[str]:
        return [r.type for r in self.resources]
