"""Heuristic codebase classifier.

Every detector is a small loop over a module-level rule table, so the rule
sets can be read, tested and extended as data.  The classifier is a pure
function of the repository record and its structure snapshot: the same input
always produces the same :class:`CodebaseAnalysis`, with labels in a stable
order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Literal

from repo_insight.domain.entities import (
    CodebaseAnalysis,
    Complexity,
    ProjectStructure,
    Repository,
)

MatchKind = Literal["exact", "prefix"]
KeywordRule = tuple[tuple[str, ...], str]

# ── Rule tables ─────────────────────────────────────────────────────────────

FRAMEWORK_RULES: tuple[tuple[MatchKind, str, str], ...] = (
    ("exact", "react", "React"),
    ("exact", "next", "Next.js"),
    ("exact", "gatsby", "Gatsby"),
    ("exact", "vue", "Vue.js"),
    ("exact", "nuxt", "Nuxt.js"),
    ("prefix", "@angular/", "Angular"),
    ("exact", "express", "Express.js"),
    ("exact", "fastify", "Fastify"),
    ("exact", "koa", "Koa"),
    ("exact", "nestjs", "NestJS"),
    ("exact", "svelte", "Svelte"),
    ("exact", "remix", "Remix"),
)

CUSTOM_FRAMEWORK = "Custom Framework"

EXTENSION_TECHNOLOGIES: dict[str, str] = {
    "ts": "TypeScript",
    "js": "JavaScript",
    "jsx": "JSX",
    "tsx": "TSX",
    "py": "Python",
    "rs": "Rust",
    "go": "Go",
    "java": "Java",
    "cpp": "C++",
    "cc": "C++",
    "cxx": "C++",
    "c": "C",
    "rb": "Ruby",
    "php": "PHP",
    "swift": "Swift",
    "kt": "Kotlin",
    "dart": "Dart",
    "css": "CSS",
    "scss": "SCSS",
    "sass": "Sass",
    "less": "Less",
}

DEPENDENCY_TECHNOLOGIES: tuple[KeywordRule, ...] = (
    (("tailwind",), "Tailwind CSS"),
    (("styled-components",), "Styled Components"),
    (("emotion",), "Emotion"),
    (("prisma",), "Prisma"),
    (("mongoose",), "MongoDB"),
    (("postgres", "pg"), "PostgreSQL"),
    (("mysql",), "MySQL"),
    (("redis",), "Redis"),
    (("graphql",), "GraphQL"),
    (("apollo",), "Apollo"),
    (("stripe",), "Stripe"),
    (("auth0",), "Auth0"),
    (("firebase",), "Firebase"),
    (("aws-sdk",), "AWS"),
)

DIRECTORY_PATTERNS: tuple[KeywordRule, ...] = (
    (("components",), "Component Architecture"),
    (("hooks",), "Custom Hooks"),
    (("context",), "Context API"),
    (("store", "redux"), "State Management"),
    (("middleware",), "Middleware Pattern"),
    (("controllers",), "MVC Pattern"),
    (("services",), "Service Layer"),
    (("utils", "helpers"), "Utility Functions"),
    (("types",), "Type Definitions"),
)

FILE_PATTERNS: tuple[KeywordRule, ...] = (
    (("test", "spec"), "Unit Testing"),
    (("e2e",), "E2E Testing"),
    (("docker",), "Containerization"),
    (("ci", ".yml"), "CI/CD"),
)

DEPENDENCY_FEATURES: tuple[KeywordRule, ...] = (
    (("auth",), "Authentication"),
    (("payment", "stripe"), "Payment Processing"),
    (("upload",), "File Upload"),
    (("email",), "Email Integration"),
    (("chart", "graph"), "Data Visualization"),
    (("map",), "Maps Integration"),
    (("socket",), "Real-time Communication"),
    (("test",), "Testing Suite"),
    (("deploy",), "Deployment Tools"),
)

DIRECTORY_FEATURES: tuple[KeywordRule, ...] = (
    (("admin",), "Admin Panel"),
    (("dashboard",), "Dashboard"),
    (("blog",), "Blog System"),
    (("shop", "cart"), "E-commerce"),
    (("chat",), "Chat System"),
)


@dataclass(frozen=True, slots=True)
class PurposeFacts:
    """What purpose rules are allowed to look at."""

    name: str
    description: str
    directories: tuple[str, ...]
    extensions: frozenset[str]
    has_manifest: bool

    def any_dir(self, *keywords: str) -> bool:
        return any(k in d for d in self.directories for k in keywords)


PURPOSE_RULES: tuple[tuple[Callable[[PurposeFacts], bool], str], ...] = (
    (lambda f: f.any_dir("components", "pages"), "Web Application"),
    (lambda f: f.any_dir("routes", "controllers", "api"), "API Server"),
    (
        lambda f: f.has_manifest and ("lib" in f.name or "library" in f.description),
        "Library/Package",
    ),
    (lambda f: f.any_dir("cli", "bin"), "CLI Tool"),
    (lambda f: f.any_dir("android", "ios"), "Mobile Application"),
    (lambda f: bool(f.extensions & {"html", "css"}), "Website"),
)

DEFAULT_PURPOSE = "Software Project"

# ── Helpers ─────────────────────────────────────────────────────────────────


def _unique(labels: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(labels))


def _keyword_labels(values: Iterable[str], rules: tuple[KeywordRule, ...]) -> list[str]:
    """Labels of every rule with a keyword contained in any of *values*."""
    labels: list[str] = []
    for value in values:
        for keywords, label in rules:
            if any(k in value for k in keywords):
                labels.append(label)
    return labels


def _dependency_names(structure: ProjectStructure) -> list[str]:
    names: list[str] = []
    for manifest in structure.manifests:
        names.extend(manifest.all_dependencies)
    return names


def _lower_dirs(structure: ProjectStructure) -> list[str]:
    return [d.lower() for d in structure.directories]


# ── Detectors ───────────────────────────────────────────────────────────────


def detect_frameworks(structure: ProjectStructure) -> tuple[str, ...]:
    found: list[str] = []
    for dep in _dependency_names(structure):
        for kind, package, label in FRAMEWORK_RULES:
            if (kind == "exact" and dep == package) or (
                kind == "prefix" and dep.startswith(package)
            ):
                found.append(label)

    if not found:
        dirs = _lower_dirs(structure)
        has_components = any("component" in d for d in dirs)
        has_pages = any("page" in d for d in dirs)
        if has_components and has_pages:
            found.append(CUSTOM_FRAMEWORK)
    return _unique(found)


def detect_technologies(structure: ProjectStructure) -> tuple[str, ...]:
    found = [
        EXTENSION_TECHNOLOGIES[ext] for ext in structure.languages if ext in EXTENSION_TECHNOLOGIES
    ]
    found.extend(_keyword_labels(_dependency_names(structure), DEPENDENCY_TECHNOLOGIES))
    return _unique(found)


def detect_patterns(structure: ProjectStructure) -> tuple[str, ...]:
    dirs = _lower_dirs(structure)
    files = [f.name.lower() for f in structure.files]
    found: list[str] = []
    for keywords, label in DIRECTORY_PATTERNS:
        if any(k in d for d in dirs for k in keywords):
            found.append(label)
    for keywords, label in FILE_PATTERNS:
        if any(k in name for name in files for k in keywords):
            found.append(label)
    return _unique(found)


def complexity_score(structure: ProjectStructure) -> int:
    """Sum of the four threshold contributions (0 to 6)."""
    file_count = len(structure.files)
    dir_count = len(structure.directories)

    score = 0
    if file_count > 50:
        score += 2
    elif file_count > 20:
        score += 1

    if dir_count > 20:
        score += 2
    elif dir_count > 10:
        score += 1

    if len(structure.languages) > 3:
        score += 1
    if len(structure.manifests) > 1:
        score += 1
    return score


def assess_complexity(structure: ProjectStructure) -> Complexity:
    score = complexity_score(structure)
    if score >= 4:
        return Complexity.HIGH
    if score >= 2:
        return Complexity.MEDIUM
    return Complexity.LOW


def infer_main_purpose(repository: Repository, structure: ProjectStructure) -> str:
    """First matching rule of :data:`PURPOSE_RULES` wins."""
    facts = PurposeFacts(
        name=repository.name.lower(),
        description=(repository.description or "").lower(),
        directories=tuple(_lower_dirs(structure)),
        extensions=frozenset(structure.languages),
        has_manifest=bool(structure.manifests),
    )
    for predicate, label in PURPOSE_RULES:
        if predicate(facts):
            return label
    return DEFAULT_PURPOSE


def extract_key_features(structure: ProjectStructure) -> tuple[str, ...]:
    found = _keyword_labels(_dependency_names(structure), DEPENDENCY_FEATURES)
    dirs = _lower_dirs(structure)
    for keywords, label in DIRECTORY_FEATURES:
        if any(k in d for d in dirs for k in keywords):
            found.append(label)
    return _unique(found)


def analyze_codebase(repository: Repository, structure: ProjectStructure) -> CodebaseAnalysis:
    """Run every detector over one snapshot."""
    return CodebaseAnalysis(
        repository=repository,
        structure=structure,
        frameworks=detect_frameworks(structure),
        technologies=detect_technologies(structure),
        patterns=detect_patterns(structure),
        complexity=assess_complexity(structure),
        main_purpose=infer_main_purpose(repository, structure),
        key_features=extract_key_features(structure),
    )
