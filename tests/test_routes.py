"""HTTP surface: routing, serialization and the error envelope."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from repo_insight.domain.exceptions import UpstreamError
from repo_insight.infrastructure.client_context import GitHubContext
from repo_insight.interface.app import create_app

from conftest import FakeRepoSource


class BrokenSource(FakeRepoSource):
    async def list_user_repositories(self):
        raise UpstreamError("GitHub API returned HTTP 500 for /user/repos", 500)


@pytest.fixture
def client(context):
    with TestClient(create_app(context)) as test_client:
        yield test_client


@pytest.fixture
def unconfigured_client(settings, fake_source):
    context = GitHubContext(settings=settings, source_factory=lambda _: fake_source)
    with TestClient(create_app(context)) as test_client:
        yield test_client


class TestMeta:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_credentials_status(self, client):
        body = client.get("/credentials").json()
        assert body == {"configured": True, "identity": "account1", "principal": "octo"}


class TestCredentials:
    def test_unconfigured_listing_is_503(self, unconfigured_client):
        resp = unconfigured_client.get("/repositories")
        assert resp.status_code == 503
        assert resp.json()["status"] == "error"

    def test_put_credentials_configures(self, unconfigured_client):
        resp = unconfigured_client.put(
            "/credentials", json={"principal": "octo", "token": "ghp_x", "identity": "work"}
        )
        assert resp.status_code == 204
        listing = unconfigured_client.get("/repositories").json()
        assert listing["active_identity"] == "work"
        assert listing["total"] == 2

    def test_blank_principal_rejected(self, unconfigured_client):
        resp = unconfigured_client.put("/credentials", json={"principal": " ", "token": "t"})
        assert resp.status_code == 422


class TestListing:
    def test_list_with_limit(self, client):
        resp = client.get("/repositories", params={"limit": 1, "sort_by": "stars"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 2
        assert [r["name"] for r in body["repositories"]] == ["cli-tool"]
        assert body["repositories"][0]["topics"] == ["tools"]

    def test_invalid_limit(self, client):
        resp = client.get("/repositories", params={"limit": 0})
        assert resp.status_code == 422
        assert "limit" in resp.json()["message"]

    def test_search(self, client):
        resp = client.get("/repositories/search", params={"query": "web"})
        assert resp.status_code == 200
        assert [r["full_name"] for r in resp.json()["repositories"]] == ["octo/web"]

    def test_upstream_failure_is_502(self, settings, credentials):
        context = GitHubContext(
            credentials, settings=settings, source_factory=lambda _: BrokenSource()
        )
        with TestClient(create_app(context)) as test_client:
            resp = test_client.get("/repositories")
        assert resp.status_code == 502
        assert resp.json() == {
            "status": "error",
            "message": "GitHub API returned HTTP 500 for /user/repos",
        }


class TestPerRepository:
    def test_not_found(self, client):
        resp = client.get("/repositories/octo/missing/quality")
        assert resp.status_code == 404
        assert "octo/missing" in resp.json()["message"]

    def test_structure(self, client):
        resp = client.get("/repositories/octo/web/structure", params={"max_depth": 0})
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["files"]) == 4
        assert body["directories"] == ["src", ".github"]

    def test_analysis(self, client):
        body = client.get("/repositories/octo/web/analysis").json()
        assert body["analysis"]["main_purpose"] == "Web Application"
        assert body["analysis"]["complexity"] == "low"
        assert body["insights"]["has_tests"] is True

    def test_analysis_depth_bounds(self, client):
        assert client.get("/repositories/octo/web/analysis?max_depth=9").status_code == 422

    def test_metrics(self, client):
        body = client.get("/repositories/octo/web/metrics").json()
        assert body["repository"]["full_name"] == "octo/web"
        assert body["quality"]["has_readme"] is False

    def test_quality(self, client):
        body = client.get("/repositories/octo/web/quality").json()
        assert body["structure"]["file_count"] == 9
        assert 0 <= body["overall_score"] <= 100

    def test_security(self, client):
        body = client.get(
            "/repositories/octo/web/security", params={"scan_type": "comprehensive"}
        ).json()
        assert body["scan_type"] == "comprehensive"
        assert body["security_analysis"]["score"] == 90

    def test_security_rejects_unknown_scan_type(self, client):
        resp = client.get("/repositories/octo/web/security", params={"scan_type": "deep"})
        assert resp.status_code == 422

    def test_dependencies(self, client):
        body = client.get("/repositories/octo/web/dependencies").json()
        assert body["dependency_analysis"]["maintenance_status"] == "single configuration"
        assert body["dependency_analysis"]["total_packages"] == 5
