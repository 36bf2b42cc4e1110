"""API routes: thin controllers that delegate to the analysis service."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from repo_insight.domain.entities import ProjectStructure
from repo_insight.interface.dependencies import get_service
from repo_insight.interface.schemas import (
    CredentialsRequest,
    CredentialsStatus,
    RepositoryQuery,
    SearchQuery,
)
from repo_insight.services.analyze_repo import (
    CodebaseReport,
    CodeQualityReport,
    DependencyReport,
    RepositoryAnalysisService,
    ScanType,
    SecurityReport,
)
from repo_insight.services.repository_lister import RepositoryListing, SearchResult
from repo_insight.services.repository_metrics import RepositoryMetrics

router = APIRouter()

Service = Annotated[RepositoryAnalysisService, Depends(get_service)]

_NOT_CONFIGURED = {503: {"description": "GitHub credentials are not configured"}}
_UPSTREAM = {502: {"description": "GitHub API failed after retries"}}
_NOT_FOUND = {404: {"description": "Repository not accessible to the active credentials"}}
_PER_REPO = {**_NOT_CONFIGURED, **_UPSTREAM, **_NOT_FOUND}


# ── Credentials ─────────────────────────────────────────────────────────────


@router.get("/credentials", response_model=CredentialsStatus)
async def credentials_status(service: Service) -> CredentialsStatus:
    if not service.is_configured():
        return CredentialsStatus(configured=False)
    credentials = service.credentials
    return CredentialsStatus(
        configured=True,
        identity=credentials.identity,
        principal=credentials.principal,
    )


@router.put("/credentials", status_code=status.HTTP_204_NO_CONTENT)
async def set_credentials(body: CredentialsRequest, service: Service) -> None:
    """Switch the active GitHub identity; clears every cached listing."""
    await service.set_credentials(
        body.principal, body.token.get_secret_value(), body.identity
    )


# ── Listing ─────────────────────────────────────────────────────────────────


@router.get("/repositories", responses={**_NOT_CONFIGURED, **_UPSTREAM})
async def list_repositories(
    query: Annotated[RepositoryQuery, Query()],
    service: Service,
) -> RepositoryListing:
    return await service.list_repositories(
        query.to_filters(), force_refresh=query.force_refresh
    )


@router.get("/repositories/search", responses={**_NOT_CONFIGURED, **_UPSTREAM})
async def search_repositories(
    query: Annotated[SearchQuery, Query()],
    service: Service,
) -> SearchResult:
    return await service.search_repositories(query.to_filters())


# ── Per-repository ──────────────────────────────────────────────────────────


@router.get("/repositories/{owner}/{repo}/structure", responses=_PER_REPO)
async def repository_structure(
    owner: str,
    repo: str,
    service: Service,
    max_depth: Annotated[int | None, Query(ge=0, le=10)] = None,
) -> ProjectStructure:
    return await service.get_repository_structure(owner, repo, max_depth)


@router.get("/repositories/{owner}/{repo}/analysis", responses=_PER_REPO)
async def analyze_codebase(
    owner: str,
    repo: str,
    service: Service,
    max_depth: Annotated[int | None, Query(ge=1, le=5)] = None,
) -> CodebaseReport:
    """Classify frameworks, technologies, patterns, complexity and purpose."""
    return await service.analyze_codebase(owner, repo, max_depth)


@router.get("/repositories/{owner}/{repo}/metrics", responses=_PER_REPO)
async def repository_metrics(owner: str, repo: str, service: Service) -> RepositoryMetrics:
    return await service.get_repository_metrics(owner, repo)


@router.get("/repositories/{owner}/{repo}/quality", responses=_PER_REPO)
async def code_quality(owner: str, repo: str, service: Service) -> CodeQualityReport:
    return await service.get_code_quality(owner, repo)


@router.get("/repositories/{owner}/{repo}/security", responses=_PER_REPO)
async def security_scan(
    owner: str,
    repo: str,
    service: Service,
    scan_type: ScanType = "basic",
) -> SecurityReport:
    return await service.security_scan(owner, repo, scan_type)


@router.get("/repositories/{owner}/{repo}/dependencies", responses=_PER_REPO)
async def dependency_analysis(owner: str, repo: str, service: Service) -> DependencyReport:
    return await service.dependency_analysis(owner, repo)
