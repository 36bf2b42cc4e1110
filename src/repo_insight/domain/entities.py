"""Domain entities: pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class EntryKind(str, Enum):
    """Kind of a node returned by the contents API."""

    FILE = "file"
    DIR = "dir"


class Complexity(str, Enum):
    """Ordinal complexity label."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True, slots=True)
class Repository:
    """Snapshot of one remote repository at fetch time."""

    id: int
    name: str
    full_name: str
    description: str | None
    language: str | None
    stars: int
    forks: int
    size: int
    updated_at: datetime
    created_at: datetime
    private: bool
    url: str
    identity: str
    owner: str
    topics: frozenset[str] = frozenset()
    license: str | None = None
    default_branch: str = "main"


@dataclass(frozen=True, slots=True)
class RepositoryRef:
    """Short reference attached to every per-repository report."""

    name: str
    full_name: str
    url: str

    @classmethod
    def of(cls, repository: Repository) -> RepositoryRef:
        return cls(name=repository.name, full_name=repository.full_name, url=repository.url)


@dataclass(frozen=True, slots=True)
class ContentItem:
    """A single entry from ``GET /repos/{owner}/{repo}/contents/{path}``."""

    name: str
    path: str
    kind: EntryKind
    sha: str = ""
    size: int = 0
    url: str = ""


@dataclass(slots=True)
class FileEntry:
    """A file visited during traversal, optionally with its decoded body."""

    name: str
    path: str
    sha: str
    size: int
    url: str
    content: str | None = None
    encoding: str | None = None
    kind: EntryKind = EntryKind.FILE


@dataclass(frozen=True, slots=True)
class PackageManifest:
    """A parsed ``package.json``."""

    path: str
    name: str | None = None
    version: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def all_dependencies(self) -> dict[str, str]:
        """Runtime and dev dependencies merged; dev entries win on conflict."""
        return {**self.dependencies, **self.dev_dependencies}

    @property
    def dependency_count(self) -> int:
        return len(self.dependencies) + len(self.dev_dependencies)


@dataclass(slots=True)
class ProjectStructure:
    """Aggregate of everything one traversal learned about a repository."""

    files: list[FileEntry] = field(default_factory=list)
    directories: list[str] = field(default_factory=list)
    languages: dict[str, int] = field(default_factory=dict)
    manifests: list[PackageManifest] = field(default_factory=list)
    readmes: list[FileEntry] = field(default_factory=list)
    configs: list[FileEntry] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class CodebaseAnalysis:
    """Heuristic classification of a repository."""

    repository: Repository
    structure: ProjectStructure
    frameworks: tuple[str, ...]
    technologies: tuple[str, ...]
    patterns: tuple[str, ...]
    complexity: Complexity
    main_purpose: str
    key_features: tuple[str, ...]
