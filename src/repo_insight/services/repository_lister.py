"""Repository listing: fetch, normalize, cache, filter and sort."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Literal, Sequence

from repo_insight.domain.entities import Repository
from repo_insight.domain.exceptions import RepositoryNotFoundError
from repo_insight.domain.value_objects import CredentialContext
from repo_insight.infrastructure.client_context import GitHubContext

logger = logging.getLogger(__name__)

ListSortKey = Literal["updated", "created", "name", "stars"]
SearchSortKey = Literal["stars", "forks", "updated", "created", "name"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


# ── Normalization ───────────────────────────────────────────────────────────


def _parse_timestamp(value: Any) -> datetime:
    if not isinstance(value, str) or not value:
        return _EPOCH
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Unparseable timestamp %r", value)
        return _EPOCH


def _optional_text(value: Any) -> str | None:
    # "" from the API is kept: only a missing value means unknown.
    return value if isinstance(value, str) else None


def repository_from_api(data: dict[str, Any], credentials: CredentialContext) -> Repository:
    """Map a ``/user/repos`` item onto :class:`Repository`."""
    license_info = data.get("license") or {}
    owner_info = data.get("owner") or {}
    return Repository(
        id=int(data["id"]),
        name=data["name"],
        full_name=data.get("full_name") or f"{owner_info.get('login', '')}/{data['name']}",
        description=_optional_text(data.get("description")),
        language=_optional_text(data.get("language")),
        stars=data.get("stargazers_count", 0) or 0,
        forks=data.get("forks_count", 0) or 0,
        size=data.get("size", 0) or 0,
        updated_at=_parse_timestamp(data.get("updated_at")),
        created_at=_parse_timestamp(data.get("created_at")),
        private=bool(data.get("private", False)),
        url=data.get("html_url", ""),
        identity=credentials.identity,
        owner=owner_info.get("login") or credentials.principal,
        topics=frozenset(data.get("topics") or ()),
        license=_optional_text(license_info.get("name")),
        default_branch=data.get("default_branch") or "main",
    )


# ── Filters ─────────────────────────────────────────────────────────────────


def _check_limit(limit: int) -> None:
    if not 1 <= limit <= 100:
        raise ValueError("limit must be between 1 and 100.")


@dataclass(frozen=True, slots=True)
class RepositoryFilters:
    """Filters for :meth:`RepositoryAnalysisService.list_repositories`."""

    language: str | None = None
    sort_by: ListSortKey = "updated"
    limit: int = 50
    include_private: bool = True

    def __post_init__(self) -> None:
        _check_limit(self.limit)


@dataclass(frozen=True, slots=True)
class SearchFilters:
    """Filters for :meth:`RepositoryAnalysisService.search_repositories`."""

    query: str | None = None
    language: str | None = None
    min_stars: int | None = None
    max_stars: int | None = None
    min_forks: int | None = None
    has_license: bool | None = None
    is_private: bool | None = None
    sort_by: SearchSortKey = "stars"
    limit: int = 20

    def __post_init__(self) -> None:
        _check_limit(self.limit)
        for name in ("min_stars", "max_stars", "min_forks"):
            value = getattr(self, name)
            if value is not None and value < 0:
                raise ValueError(f"{name} must not be negative.")


@dataclass(frozen=True, slots=True)
class RepositoryListing:
    repositories: tuple[Repository, ...]
    total: int
    active_identity: str


@dataclass(frozen=True, slots=True)
class SearchResult:
    repositories: tuple[Repository, ...]
    total: int
    filters: SearchFilters


_SORT_KEYS: dict[str, tuple[Callable[[Repository], Any], bool]] = {
    "stars": (lambda r: r.stars, True),
    "forks": (lambda r: r.forks, True),
    "updated": (lambda r: r.updated_at, True),
    "created": (lambda r: r.created_at, True),
    "name": (lambda r: r.name.lower(), False),
}


def sort_repositories(repos: Sequence[Repository], sort_by: str) -> list[Repository]:
    """Stable sort: counts and dates descending, names ascending."""
    key, reverse = _SORT_KEYS[sort_by]
    return sorted(repos, key=key, reverse=reverse)


def _same_language(repo: Repository, language: str) -> bool:
    return repo.language is not None and repo.language.lower() == language.lower()


def filter_listing(repos: Sequence[Repository], filters: RepositoryFilters) -> list[Repository]:
    selected = [r for r in repos if filters.include_private or not r.private]
    if filters.language:
        selected = [r for r in selected if _same_language(r, filters.language)]
    return sort_repositories(selected, filters.sort_by)


def search(repos: Sequence[Repository], filters: SearchFilters) -> list[Repository]:
    """Apply every set filter, sort, then truncate to ``filters.limit``."""
    selected = list(repos)
    if filters.query:
        term = filters.query.lower()
        selected = [
            r for r in selected
            if term in r.name.lower() or (r.description and term in r.description.lower())
        ]
    if filters.language:
        selected = [r for r in selected if _same_language(r, filters.language)]
    if filters.min_stars is not None:
        selected = [r for r in selected if r.stars >= filters.min_stars]
    if filters.max_stars is not None:
        selected = [r for r in selected if r.stars <= filters.max_stars]
    if filters.min_forks is not None:
        selected = [r for r in selected if r.forks >= filters.min_forks]
    if filters.has_license is not None:
        selected = [r for r in selected if (r.license is not None) == filters.has_license]
    if filters.is_private is not None:
        selected = [r for r in selected if r.private == filters.is_private]
    return sort_repositories(selected, filters.sort_by)[: filters.limit]


# ── Lister ──────────────────────────────────────────────────────────────────


class RepositoryLister:
    """Lists the active identity's repositories, memoized in the context cache."""

    def __init__(self, context: GitHubContext) -> None:
        self._context = context

    async def list_repositories(self, force_refresh: bool = False) -> list[Repository]:
        """Return every accessible repository, most recently updated first.

        Raises :class:`NotConfiguredError` without credentials and
        :class:`UpstreamError` when GitHub cannot be reached.
        """
        credentials = self._context.credentials
        source = self._context.source
        cache = self._context.cache
        key = credentials.cache_key

        if not force_refresh:
            cached: tuple[Repository, ...] | None = cache.get(key)
            if cached is not None:
                return list(cached)

        raw = await source.list_user_repositories()
        repos = [repository_from_api(item, credentials) for item in raw]
        cache.set(key, tuple(repos))
        logger.info("Listed %d repositories for %s", len(repos), credentials.principal)
        return repos

    async def find(self, owner: str, repo: str) -> Repository:
        """Look *owner*/*repo* up among the accessible repositories."""
        principal = self._context.credentials.principal.lower()
        owner_lower = owner.lower()
        named = [
            r for r in await self.list_repositories() if r.name.lower() == repo.lower()
        ]
        for candidate in named:
            if candidate.owner.lower() == owner_lower:
                return candidate
        # Asking for the principal's own name reaches repos listed under that identity.
        if named and principal == owner_lower:
            return named[0]
        raise RepositoryNotFoundError(owner, repo)
