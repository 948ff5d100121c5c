"""Storage adapter interface.

An adapter owns persistence for one or more resource types. The pipeline
never talks to storage directly: it builds a query and hands it to the
adapter method matching the query's kind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from jsonapi_pipeline.models.query import (
    AddToRelationshipQuery,
    CreateQuery,
    DeleteQuery,
    FindQuery,
    RemoveFromRelationshipQuery,
    UpdateQuery,
)
from jsonapi_pipeline.models.resource import Collection, Resource


class Adapter(ABC):
    """Base interface for storage backends.

    Adapters raise their own exceptions on failure. Those are reported to
    clients as opaque 500s unless the exception sets
    ``is_jsonapi_display_ready = True`` along with ``status``/``title``/
    ``detail`` attributes.
    """

    @abstractmethod
    async def find(
        self, query: FindQuery
    ) -> tuple[Resource | Collection | None, Collection | None]:
        """Return ``(primary, included)`` for a read.

        ``primary`` is a single Resource (or None) when the query targets
        one id, otherwise a Collection.
        """
        ...

    @abstractmethod
    async def create(self, query: CreateQuery) -> Resource | Collection:
        """Persist new records and return them with their ids assigned."""
        ...

    @abstractmethod
    async def update(self, query: UpdateQuery) -> Resource | Collection:
        """Apply a partial update and return the updated records."""
        ...

    @abstractmethod
    async def delete(self, query: DeleteQuery) -> None:
        ...

    @abstractmethod
    async def add_to_relationship(self, query: AddToRelationshipQuery) -> None:
        ...

    @abstractmethod
    async def remove_from_relationship(
        self, query: RemoveFromRelationshipQuery
    ) -> None:
        ...

    def get_model(self, type_name: str) -> Any:
        """Return the backend model handle that label mappers receive.

        Defaults to ``None`` for adapters without a model concept.
        """
        return None
