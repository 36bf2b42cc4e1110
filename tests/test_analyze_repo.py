"""RepositoryAnalysisService end to end over the in-memory source."""

from __future__ import annotations

import pytest

from repo_insight.domain.entities import Complexity
from repo_insight.domain.events import EventKind, TraversalEvent
from repo_insight.domain.exceptions import NotConfiguredError, RepositoryNotFoundError
from repo_insight.infrastructure.client_context import GitHubContext
from repo_insight.services.analyze_repo import RepositoryAnalysisService
from repo_insight.services.dependency_analysis import MaintenanceStatus
from repo_insight.services.repository_lister import RepositoryFilters, SearchFilters
from repo_insight.services.security_scanner import IssueType

from conftest import NOW


@pytest.fixture
def service(context) -> RepositoryAnalysisService:
    return RepositoryAnalysisService(context, clock=lambda: NOW)


class TestListing:
    @pytest.mark.asyncio
    async def test_total_counts_before_limit(self, service):
        listing = await service.list_repositories(RepositoryFilters(limit=1))
        assert len(listing.repositories) == 1
        assert listing.total == 2
        assert listing.active_identity == "account1"

    @pytest.mark.asyncio
    async def test_search(self, service):
        result = await service.search_repositories(SearchFilters(language="PYTHON"))
        assert [r.name for r in result.repositories] == ["cli-tool"]
        assert result.total == 1
        assert result.filters.language == "PYTHON"

    @pytest.mark.asyncio
    async def test_unconfigured(self, settings):
        service = RepositoryAnalysisService(GitHubContext(settings=settings))
        assert not service.is_configured()
        with pytest.raises(NotConfiguredError):
            await service.list_repositories()

    @pytest.mark.asyncio
    async def test_set_credentials_configures(self, settings, fake_source):
        context = GitHubContext(settings=settings, source_factory=lambda _: fake_source)
        service = RepositoryAnalysisService(context)
        await service.set_credentials("octo", "ghp_x", "work")
        listing = await service.list_repositories()
        assert listing.active_identity == "work"
        assert service.credentials.principal == "octo"


class TestPerRepository:
    @pytest.mark.asyncio
    async def test_unknown_repository(self, service, fake_source):
        with pytest.raises(RepositoryNotFoundError):
            await service.get_code_quality("octo", "missing")
        assert fake_source.listed_paths == []

    @pytest.mark.asyncio
    async def test_structure_honours_depth(self, service):
        shallow = await service.get_repository_structure("octo", "web", max_depth=0)
        full = await service.get_repository_structure("octo", "web")
        assert len(shallow.files) == 4
        assert len(full.files) == 9

    @pytest.mark.asyncio
    async def test_analyze_codebase(self, service):
        report = await service.analyze_codebase("octo", "web")

        assert report.analysis.frameworks == ("React", "Express.js")
        assert report.analysis.main_purpose == "Web Application"
        assert report.analysis.complexity is Complexity.LOW
        assert report.summary.file_count == 9
        assert report.summary.directory_count == 5
        assert report.summary.has_configs
        assert report.summary.package_managers[0].name == "web"
        assert report.insights.is_well_structured
        assert report.insights.has_tests
        assert report.insights.has_documentation

    @pytest.mark.asyncio
    async def test_metrics_use_listing_only(self, service, fake_source):
        metrics = await service.get_repository_metrics("octo", "web")
        assert metrics.repository.full_name == "octo/web"
        assert metrics.activity.days_since_updated == 2
        assert fake_source.listed_paths == []

    @pytest.mark.asyncio
    async def test_code_quality(self, service):
        report = await service.get_code_quality("octo", "web")
        assert report.repository.full_name == "octo/web"
        assert report.structure.file_count == 9
        assert report.quality_metrics.modern_practices.has_ci
        assert 0 <= report.overall_score <= 100

    @pytest.mark.asyncio
    async def test_security_scan(self, service):
        report = await service.security_scan("octo", "web", scan_type="comprehensive")
        assert report.scan_type == "comprehensive"
        assert report.scan_date == NOW
        assert [i.type for i in report.security_analysis.issues] == [
            IssueType.MISSING_SECURITY_CONFIG
        ]
        assert report.security_analysis.score == 90

    @pytest.mark.asyncio
    async def test_dependency_analysis(self, service):
        report = await service.dependency_analysis("octo", "web")
        analysis = report.dependency_analysis
        assert analysis.total_packages == 5
        assert analysis.common_frameworks == ("React", "Express.js")
        assert analysis.maintenance_status is MaintenanceStatus.SINGLE

    @pytest.mark.asyncio
    async def test_traversal_failures_reach_the_sink(self, context, fake_source):
        del fake_source.tree["src"]
        events: list[TraversalEvent] = []
        service = RepositoryAnalysisService(context, on_event=events.append)

        structure = await service.get_repository_structure("octo", "web")

        assert [e.kind for e in events] == [EventKind.SUBTREE_FAILED]
        assert events[0].path == "src"
        assert len(structure.files) == 5
