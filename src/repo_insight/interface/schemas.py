"""Pydantic request DTOs for the API boundary."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, SecretStr, field_validator

from repo_insight.domain.value_objects import DEFAULT_IDENTITY
from repo_insight.services.repository_lister import RepositoryFilters, SearchFilters


class RepositoryQuery(BaseModel):
    """Query string for ``GET /repositories``."""

    language: str | None = None
    sort_by: Literal["updated", "created", "name", "stars"] = "updated"
    limit: int = Field(default=50, ge=1, le=100)
    include_private: bool = True
    force_refresh: bool = False

    def to_filters(self) -> RepositoryFilters:
        return RepositoryFilters(
            language=self.language,
            sort_by=self.sort_by,
            limit=self.limit,
            include_private=self.include_private,
        )


class SearchQuery(BaseModel):
    """Query string for ``GET /repositories/search``."""

    query: str | None = None
    language: str | None = None
    min_stars: int | None = Field(default=None, ge=0)
    max_stars: int | None = Field(default=None, ge=0)
    min_forks: int | None = Field(default=None, ge=0)
    has_license: bool | None = None
    is_private: bool | None = None
    sort_by: Literal["stars", "forks", "updated", "created", "name"] = "stars"
    limit: int = Field(default=20, ge=1, le=100)

    def to_filters(self) -> SearchFilters:
        return SearchFilters(**self.model_dump())


class CredentialsRequest(BaseModel):
    """Request body for ``PUT /credentials``."""

    principal: str
    token: SecretStr
    identity: str = DEFAULT_IDENTITY

    @field_validator("principal", "identity")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "must not be empty."
            raise ValueError(msg)
        return stripped


class CredentialsStatus(BaseModel):
    """Response for ``GET /credentials``."""

    configured: bool
    identity: str | None = None
    principal: str | None = None
