"""Query variants handed to storage adapters.

Each query is an immutable value tagged with a :class:`QueryKind`. The
dispatcher routes on that tag, so adding a kind means adding an enum member
and an adapter method together.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, ClassVar

from jsonapi_pipeline.models.resource import Collection, Linkage, Resource

IdOrIds = str | list[str] | None


class QueryKind(str, Enum):
    FIND = "find"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ADD_TO_RELATIONSHIP = "add_to_relationship"
    REMOVE_FROM_RELATIONSHIP = "remove_from_relationship"


@dataclass(frozen=True)
class SortField:
    field: str
    ascending: bool = True


@dataclass(frozen=True, kw_only=True)
class Criteria:
    """Filter, sort, sparse-fieldset, include and pagination parameters."""

    filters: dict[str, Any] = field(default_factory=dict)
    sort: tuple[SortField, ...] = ()
    fields: dict[str, tuple[str, ...]] = field(default_factory=dict)
    include: tuple[str, ...] = ()
    limit: int | None = None
    offset: int | None = None


@dataclass(frozen=True, kw_only=True)
class Query:
    kind: ClassVar[QueryKind]

    type: str


@dataclass(frozen=True, kw_only=True)
class WithCriteriaQuery(Query):
    """A query that reads a (possibly paginated) set of resources."""

    criteria: Criteria = field(default_factory=Criteria)
    ignore_limit_max: bool = False

    @property
    def limit(self) -> int | None:
        return self.criteria.limit

    @property
    def offset(self) -> int | None:
        return self.criteria.offset

    def with_limit(self, limit: int | None):
        return replace(self, criteria=replace(self.criteria, limit=limit))

    def without_max_limit(self):
        """Return a copy that bypasses the type's maximum page size."""
        return replace(self, ignore_limit_max=True)


@dataclass(frozen=True, kw_only=True)
class FindQuery(WithCriteriaQuery):
    kind: ClassVar[QueryKind] = QueryKind.FIND

    id_or_ids: IdOrIds = None


@dataclass(frozen=True, kw_only=True)
class CreateQuery(Query):
    kind: ClassVar[QueryKind] = QueryKind.CREATE

    records: Resource | Collection | None = None


@dataclass(frozen=True, kw_only=True)
class UpdateQuery(Query):
    kind: ClassVar[QueryKind] = QueryKind.UPDATE

    patch: Resource | Collection | None = None


@dataclass(frozen=True, kw_only=True)
class DeleteQuery(Query):
    kind: ClassVar[QueryKind] = QueryKind.DELETE

    id_or_ids: IdOrIds = None


@dataclass(frozen=True, kw_only=True)
class AddToRelationshipQuery(Query):
    kind: ClassVar[QueryKind] = QueryKind.ADD_TO_RELATIONSHIP

    id: str
    relationship_name: str
    linkage: Linkage = field(default_factory=Linkage)


@dataclass(frozen=True, kw_only=True)
class RemoveFromRelationshipQuery(Query):
    kind: ClassVar[QueryKind] = QueryKind.REMOVE_FROM_RELATIONSHIP

    id: str
    relationship_name: str
    linkage: Linkage = field(default_factory=Linkage)
