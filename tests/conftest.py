"""Shared fixtures: an in-memory RepoSource and sample GitHub payloads."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Sequence

import pytest

from repo_insight.domain.entities import (
    ContentItem,
    EntryKind,
    FileEntry,
    PackageManifest,
    ProjectStructure,
)
from repo_insight.domain.exceptions import ContentFetchError, UpstreamError
from repo_insight.domain.value_objects import CredentialContext
from repo_insight.infrastructure.client_context import GitHubContext
from repo_insight.infrastructure.config import Settings
from repo_insight.services.file_rules import file_extension, is_config_file, is_readme

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


def _name(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def file_item(path: str, size: int = 100) -> ContentItem:
    return ContentItem(name=_name(path), path=path, kind=EntryKind.FILE, sha="abc", size=size)


def dir_item(path: str) -> ContentItem:
    return ContentItem(name=_name(path), path=path, kind=EntryKind.DIR)


def raw_repo(name: str, owner: str = "octo", **overrides: Any) -> dict[str, Any]:
    """A ``/user/repos`` item with sensible defaults."""
    data: dict[str, Any] = {
        "id": abs(hash((owner, name))) % 100_000,
        "name": name,
        "full_name": f"{owner}/{name}",
        "description": f"{name} description",
        "language": "TypeScript",
        "stargazers_count": 10,
        "forks_count": 2,
        "size": 2000,
        "updated_at": "2024-05-30T12:00:00Z",
        "created_at": "2024-01-01T00:00:00Z",
        "private": False,
        "html_url": f"https://github.com/{owner}/{name}",
        "owner": {"login": owner},
        "topics": ["tools"],
        "license": {"name": "MIT License"},
        "default_branch": "main",
    }
    data.update(overrides)
    return data


def make_structure(
    files: Sequence[str] = (),
    dirs: Sequence[str] = (),
    deps: dict[str, str] | None = None,
    dev_deps: dict[str, str] | None = None,
    manifests: int = 0,
    contents: dict[str, str] | None = None,
    raw: dict[str, Any] | None = None,
) -> ProjectStructure:
    """Build a snapshot directly, filing entries the way the traverser does."""
    contents = contents or {}
    structure = ProjectStructure(directories=list(dirs))
    for path in files:
        name = _name(path)
        entry = FileEntry(name=name, path=path, sha="", size=1, url="", content=contents.get(path))
        structure.files.append(entry)
        if is_readme(name):
            structure.readmes.append(entry)
        if is_config_file(name):
            structure.configs.append(entry)
        ext = file_extension(name)
        if ext:
            structure.languages[ext] = structure.languages.get(ext, 0) + 1
    if deps is not None or dev_deps is not None or raw is not None:
        structure.manifests.append(
            PackageManifest(
                path="package.json",
                dependencies=deps or {},
                dev_dependencies=dev_deps or {},
                raw=raw or {},
            )
        )
    for i in range(manifests - len(structure.manifests)):
        structure.manifests.append(PackageManifest(path=f"pkg{i}/package.json"))
    return structure


class FakeRepoSource:
    """RepoSource backed by dicts.

    ``tree`` maps a directory path ("" is the root) to its entries; a missing
    path raises :class:`UpstreamError`.  ``contents`` maps file paths to
    bodies; a missing path raises :class:`ContentFetchError`.
    """

    def __init__(
        self,
        repos: list[dict[str, Any]] | None = None,
        tree: dict[str, list[ContentItem]] | None = None,
        contents: dict[str, str] | None = None,
    ) -> None:
        self.repos = repos or []
        self.tree = tree or {}
        self.contents = contents or {}
        self.list_calls = 0
        self.listed_paths: list[str] = []
        self.fetched_paths: list[str] = []

    async def list_user_repositories(self) -> list[dict[str, Any]]:
        self.list_calls += 1
        return list(self.repos)

    async def list_contents(self, owner: str, repo: str, path: str = "") -> list[ContentItem]:
        self.listed_paths.append(path)
        if path not in self.tree:
            raise UpstreamError(f"GitHub API returned HTTP 500 for {path}", 500)
        return list(self.tree[path])

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> tuple[str, str]:
        self.fetched_paths.append(path)
        if path not in self.contents:
            raise ContentFetchError(f"Could not fetch {path}")
        return self.contents[path], "base64"


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, cache_ttl_seconds=300.0, max_depth=3)


@pytest.fixture
def credentials() -> CredentialContext:
    return CredentialContext(principal="octo", token="ghp_test", identity="account1")


@pytest.fixture
def react_tree() -> dict[str, list[ContentItem]]:
    """A small React + Express web app."""
    return {
        "": [
            file_item("package.json"),
            file_item("README.md"),
            file_item("tsconfig.json"),
            file_item(".eslintrc.json"),
            dir_item("src"),
            dir_item(".github"),
        ],
        "src": [
            dir_item("src/components"),
            dir_item("src/pages"),
            file_item("src/index.tsx"),
            file_item("src/App.test.tsx"),
        ],
        "src/components": [file_item("src/components/Button.tsx")],
        "src/pages": [file_item("src/pages/Home.tsx")],
        ".github": [dir_item(".github/workflows")],
        ".github/workflows": [file_item(".github/workflows/ci.yml")],
    }


@pytest.fixture
def react_contents() -> dict[str, str]:
    return {
        "package.json": (
            '{"name": "web", "version": "1.0.0",'
            ' "dependencies": {"react": "^18.2.0", "express": "^4.18.0", "stripe": "^12.0.0"},'
            ' "devDependencies": {"typescript": "^5.0.0", "jest": "^29.0.0"}}'
        ),
        "README.md": "# Web\n\nServed over https://example.com",
        "tsconfig.json": '{"compilerOptions": {"strict": true}}',
    }


@pytest.fixture
def fake_source(react_tree, react_contents) -> FakeRepoSource:
    return FakeRepoSource(
        repos=[raw_repo("web"), raw_repo("cli-tool", language="Python", stargazers_count=50)],
        tree=react_tree,
        contents=react_contents,
    )


@pytest.fixture
def context(settings, credentials, fake_source) -> GitHubContext:
    return GitHubContext(credentials, settings=settings, source_factory=lambda _: fake_source)
