"""Code quality checklist scoring."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable

from repo_insight.domain.entities import ProjectStructure

_MANY_FILES_THRESHOLD = 10


@dataclass(frozen=True, slots=True)
class StructureFacts:
    """Informational figures reported next to the checklist."""

    file_count: int
    directory_count: int
    language_distribution: dict[str, int]


@dataclass(frozen=True, slots=True)
class StructureChecks:
    has_many_files: bool
    has_config_files: bool
    has_manifest: bool


@dataclass(frozen=True, slots=True)
class OrganizationChecks:
    has_components: bool
    has_tests: bool
    has_docs: bool
    has_utils: bool
    has_types: bool


@dataclass(frozen=True, slots=True)
class ModernPracticeChecks:
    uses_typescript: bool
    has_eslint: bool
    has_prettier: bool
    has_git_hooks: bool
    has_ci: bool


@dataclass(frozen=True, slots=True)
class DocumentationChecks:
    has_readme: bool
    has_changelog: bool
    has_contributing: bool
    has_license: bool


@dataclass(frozen=True, slots=True)
class QualityMetrics:
    structure: StructureChecks
    organization: OrganizationChecks
    modern_practices: ModernPracticeChecks
    documentation: DocumentationChecks

    def indicators(self) -> dict[str, bool]:
        """Every boolean indicator, keyed ``category.indicator``."""
        flat: dict[str, bool] = {}
        for category, checks in asdict(self).items():
            for name, value in checks.items():
                flat[f"{category}.{name}"] = value
        return flat


@dataclass(frozen=True, slots=True)
class QualityAssessment:
    facts: StructureFacts
    metrics: QualityMetrics
    overall_score: int
    recommendations: tuple[str, ...]


# Only a curated subset of failed indicators produces advice.
RECOMMENDATIONS: tuple[tuple[Callable[[QualityMetrics, StructureFacts], bool], str], ...] = (
    (
        lambda m, f: not m.organization.has_tests,
        "Add unit tests to improve code reliability",
    ),
    (
        lambda m, f: not m.modern_practices.uses_typescript and "js" in f.language_distribution,
        "Consider migrating to TypeScript for better type safety",
    ),
    (
        lambda m, f: not m.modern_practices.has_eslint,
        "Add ESLint for code quality enforcement",
    ),
    (
        lambda m, f: not m.modern_practices.has_prettier,
        "Add Prettier for consistent code formatting",
    ),
    (
        lambda m, f: not m.modern_practices.has_ci,
        "Set up CI/CD pipeline for automated testing and deployment",
    ),
    (
        lambda m, f: not m.documentation.has_readme,
        "Add a comprehensive README file",
    ),
    (
        lambda m, f: not m.documentation.has_license,
        "Add a license file to clarify usage terms",
    ),
)


def _any_dir(structure: ProjectStructure, *keywords: str) -> bool:
    return any(k in d.lower() for d in structure.directories for k in keywords)


def _any_name(structure: ProjectStructure, *keywords: str) -> bool:
    return any(k in f.name.lower() for f in structure.files for k in keywords)


def _any_path(structure: ProjectStructure, *keywords: str) -> bool:
    return any(k in f.path.lower() for f in structure.files for k in keywords)


def collect_metrics(structure: ProjectStructure) -> QualityMetrics:
    return QualityMetrics(
        structure=StructureChecks(
            has_many_files=len(structure.files) > _MANY_FILES_THRESHOLD,
            has_config_files=bool(structure.configs),
            has_manifest=bool(structure.manifests),
        ),
        organization=OrganizationChecks(
            has_components=_any_dir(structure, "component"),
            has_tests=_any_name(structure, "test", "spec"),
            has_docs=bool(structure.readmes),
            has_utils=_any_dir(structure, "utils", "helpers"),
            has_types=_any_dir(structure, "types", "interfaces"),
        ),
        modern_practices=ModernPracticeChecks(
            uses_typescript="ts" in structure.languages or "tsx" in structure.languages,
            has_eslint=_any_name(structure, ".eslintrc", "eslint.config"),
            has_prettier=_any_name(structure, ".prettierrc", "prettier.config"),
            has_git_hooks=_any_path(structure, "husky"),
            has_ci=_any_path(structure, ".github/workflows", ".gitlab-ci", "circleci"),
        ),
        documentation=DocumentationChecks(
            has_readme=bool(structure.readmes),
            has_changelog=_any_name(structure, "changelog"),
            has_contributing=_any_name(structure, "contributing"),
            has_license=_any_name(structure, "license"),
        ),
    )


def assess_quality(structure: ProjectStructure) -> QualityAssessment:
    """Score = share of true indicators across all four categories, 0-100."""
    metrics = collect_metrics(structure)
    facts = StructureFacts(
        file_count=len(structure.files),
        directory_count=len(structure.directories),
        language_distribution=dict(structure.languages),
    )

    indicators = metrics.indicators()
    passed = sum(1 for value in indicators.values() if value)
    score = round(passed / len(indicators) * 100) if indicators else 0

    recommendations = tuple(
        message for applies, message in RECOMMENDATIONS if applies(metrics, facts)
    )
    return QualityAssessment(
        facts=facts,
        metrics=metrics,
        overall_score=score,
        recommendations=recommendations,
    )
