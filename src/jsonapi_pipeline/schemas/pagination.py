"""Pagination policy models.

A resource type may declare a default page size (applied when the client
doesn't send ``page[limit]``) and a maximum page size (requests above it are
rejected unless the query explicitly opts out of the maximum).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PaginationConfig(BaseModel):
    """Per-type pagination policy."""

    model_config = ConfigDict(frozen=True)

    default_page_size: int | None = Field(default=None, ge=1)
    max_page_size: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _default_within_max(self) -> PaginationConfig:
        if (
            self.default_page_size is not None
            and self.max_page_size is not None
            and self.default_page_size > self.max_page_size
        ):
            msg = (
                f"default_page_size ({self.default_page_size}) cannot exceed "
                f"max_page_size ({self.max_page_size})"
            )
            raise ValueError(msg)
        return self
