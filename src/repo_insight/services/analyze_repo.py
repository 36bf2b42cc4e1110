"""Repository analysis use cases: the operations exposed to callers.

This is the single entry point for the business logic.  It depends on the
:class:`GitHubContext` for credentials, source and cache, and composes the
lister, traverser and the pure scoring modules.  The interface layer injects
the context at runtime.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Literal

from repo_insight.domain.entities import (
    CodebaseAnalysis,
    ProjectStructure,
    Repository,
    RepositoryRef,
)
from repo_insight.domain.events import EventSink
from repo_insight.domain.value_objects import DEFAULT_IDENTITY, CredentialContext
from repo_insight.infrastructure.client_context import GitHubContext
from repo_insight.services.classifier import analyze_codebase
from repo_insight.services.dependency_analysis import (
    DependencyAnalysis,
    PackageSummary,
    analyze_dependencies,
)
from repo_insight.services.quality_scorer import (
    QualityMetrics,
    StructureFacts,
    assess_quality,
)
from repo_insight.services.repository_lister import (
    RepositoryFilters,
    RepositoryLister,
    RepositoryListing,
    SearchFilters,
    SearchResult,
    filter_listing,
    search,
)
from repo_insight.services.repository_metrics import RepositoryMetrics, compute_metrics
from repo_insight.services.security_scanner import SecurityAnalysis, scan_security
from repo_insight.services.tree_traverser import DEFAULT_MAX_DEPTH, TreeTraverser

logger = logging.getLogger(__name__)

ScanType = Literal["basic", "comprehensive"]

# ── Report shapes ───────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class StructureSummary:
    file_count: int
    directory_count: int
    languages: dict[str, int]
    has_configs: bool
    package_managers: tuple[PackageSummary, ...]


@dataclass(frozen=True, slots=True)
class CodebaseInsights:
    is_well_structured: bool
    has_tests: bool
    has_documentation: bool
    modern_stack: bool


@dataclass(frozen=True, slots=True)
class CodebaseReport:
    analysis: CodebaseAnalysis
    summary: StructureSummary
    insights: CodebaseInsights


@dataclass(frozen=True, slots=True)
class CodeQualityReport:
    repository: RepositoryRef
    structure: StructureFacts
    quality_metrics: QualityMetrics
    overall_score: int
    recommendations: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SecurityReport:
    repository: RepositoryRef
    security_analysis: SecurityAnalysis
    scan_type: ScanType
    scan_date: datetime


@dataclass(frozen=True, slots=True)
class DependencyReport:
    repository: RepositoryRef
    dependency_analysis: DependencyAnalysis


# ── Use case ────────────────────────────────────────────────────────────────


class RepositoryAnalysisService:
    """Orchestrates listing, traversal and heuristics for one GitHub context.

    Parameters
    ----------
    context:
        Credentials, authenticated source and response cache.
    on_event:
        Optional sink receiving every recovered traversal failure.
    max_depth:
        Default traversal depth when an operation does not specify one.
    clock:
        Returns "now" for metrics and scan timestamps.
    """

    def __init__(
        self,
        context: GitHubContext,
        *,
        on_event: EventSink | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._context = context
        self._lister = RepositoryLister(context)
        self._on_event = on_event
        self._max_depth = max_depth
        self._clock = clock

    # ── Credentials ─────────────────────────────────────────────────────

    def is_configured(self) -> bool:
        return self._context.is_configured()

    @property
    def credentials(self) -> CredentialContext:
        return self._context.credentials

    async def set_credentials(
        self, principal: str, token: str, identity: str = DEFAULT_IDENTITY
    ) -> None:
        await self._context.set_credentials(principal, token, identity)

    # ── Listing ─────────────────────────────────────────────────────────

    async def list_repositories(
        self, filters: RepositoryFilters | None = None, force_refresh: bool = False
    ) -> RepositoryListing:
        filters = filters or RepositoryFilters()
        repos = await self._lister.list_repositories(force_refresh=force_refresh)
        selected = filter_listing(repos, filters)
        return RepositoryListing(
            repositories=tuple(selected[: filters.limit]),
            total=len(selected),
            active_identity=self._context.credentials.identity,
        )

    async def search_repositories(self, filters: SearchFilters | None = None) -> SearchResult:
        filters = filters or SearchFilters()
        repos = await self._lister.list_repositories()
        matches = search(repos, filters)
        return SearchResult(repositories=tuple(matches), total=len(matches), filters=filters)

    # ── Per-repository operations ───────────────────────────────────────

    async def get_repository_structure(
        self, owner: str, repo: str, max_depth: int | None = None
    ) -> ProjectStructure:
        _, structure = await self._load(owner, repo, max_depth)
        return structure

    async def analyze_codebase(
        self, owner: str, repo: str, max_depth: int | None = None
    ) -> CodebaseReport:
        repository, structure = await self._load(owner, repo, max_depth)
        analysis = analyze_codebase(repository, structure)
        logger.info(
            "Analyzed %s: %s, complexity %s",
            repository.full_name, analysis.main_purpose, analysis.complexity.value,
        )
        return CodebaseReport(
            analysis=analysis,
            summary=StructureSummary(
                file_count=len(structure.files),
                directory_count=len(structure.directories),
                languages=dict(structure.languages),
                has_configs=bool(structure.configs),
                package_managers=tuple(PackageSummary.of(m) for m in structure.manifests),
            ),
            insights=CodebaseInsights(
                is_well_structured=len(structure.directories) > 3,
                has_tests="Unit Testing" in analysis.patterns,
                has_documentation=bool(structure.readmes),
                modern_stack="TypeScript" in analysis.technologies,
            ),
        )

    async def get_repository_metrics(self, owner: str, repo: str) -> RepositoryMetrics:
        repository = await self._lister.find(owner, repo)
        return compute_metrics(repository, now=self._clock())

    async def get_code_quality(self, owner: str, repo: str) -> CodeQualityReport:
        repository, structure = await self._load(owner, repo)
        assessment = assess_quality(structure)
        return CodeQualityReport(
            repository=RepositoryRef.of(repository),
            structure=assessment.facts,
            quality_metrics=assessment.metrics,
            overall_score=assessment.overall_score,
            recommendations=assessment.recommendations,
        )

    async def security_scan(
        self, owner: str, repo: str, scan_type: ScanType = "basic"
    ) -> SecurityReport:
        repository, structure = await self._load(owner, repo)
        return SecurityReport(
            repository=RepositoryRef.of(repository),
            security_analysis=scan_security(structure),
            scan_type=scan_type,
            scan_date=self._clock(),
        )

    async def dependency_analysis(self, owner: str, repo: str) -> DependencyReport:
        repository, structure = await self._load(owner, repo)
        return DependencyReport(
            repository=RepositoryRef.of(repository),
            dependency_analysis=analyze_dependencies(structure),
        )

    # ── Internals ───────────────────────────────────────────────────────

    async def _load(
        self, owner: str, repo: str, max_depth: int | None = None
    ) -> tuple[Repository, ProjectStructure]:
        """Resolve the repository, then walk its tree with the active source."""
        repository = await self._lister.find(owner, repo)
        traverser = TreeTraverser(self._context.source, on_event=self._on_event)
        structure = await traverser.build_structure(
            repository.owner,
            repository.name,
            max_depth=self._max_depth if max_depth is None else max_depth,
        )
        return repository, structure
