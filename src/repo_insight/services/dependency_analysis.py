"""Aggregate parsed manifests into package-manager summaries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from repo_insight.domain.entities import PackageManifest, ProjectStructure

# Substring match, so "react-dom" also counts as React.
COMMON_FRAMEWORKS: tuple[tuple[str, str], ...] = (
    ("react", "React"),
    ("vue", "Vue.js"),
    ("angular", "Angular"),
    ("express", "Express.js"),
    ("fastify", "Fastify"),
    ("next", "Next.js"),
    ("nuxt", "Nuxt.js"),
)

# (package keyword, version marker, concern)
VULNERABLE_RANGES: tuple[tuple[str, str, str], ...] = (
    ("jquery", "1.", "Outdated jQuery version detected"),
    ("lodash", "3.", "Outdated Lodash version detected"),
)


class MaintenanceStatus(str, Enum):
    NONE = "none detected"
    SINGLE = "single configuration"
    MULTIPLE = "multiple configurations"


@dataclass(frozen=True, slots=True)
class PackageSummary:
    name: str | None
    version: str | None
    dependencies: tuple[str, ...]
    dev_dependencies: tuple[str, ...]
    total_dependencies: int

    @classmethod
    def of(cls, manifest: PackageManifest) -> PackageSummary:
        return cls(
            name=manifest.name,
            version=manifest.version,
            dependencies=tuple(manifest.dependencies),
            dev_dependencies=tuple(manifest.dev_dependencies),
            total_dependencies=manifest.dependency_count,
        )


@dataclass(frozen=True, slots=True)
class DependencyAnalysis:
    package_managers: tuple[PackageSummary, ...]
    has_dependencies: bool
    total_packages: int
    common_frameworks: tuple[str, ...]
    security_concerns: tuple[str, ...]
    maintenance_status: MaintenanceStatus


def detect_common_frameworks(manifests: list[PackageManifest]) -> tuple[str, ...]:
    found: list[str] = []
    for manifest in manifests:
        for dep in manifest.all_dependencies:
            found.extend(label for keyword, label in COMMON_FRAMEWORKS if keyword in dep)
    return tuple(dict.fromkeys(found))


def detect_security_concerns(manifests: list[PackageManifest]) -> tuple[str, ...]:
    concerns: list[str] = []
    for manifest in manifests:
        for dep, version in manifest.all_dependencies.items():
            for keyword, marker, concern in VULNERABLE_RANGES:
                if keyword in dep and marker in version:
                    concerns.append(concern)
    return tuple(concerns)


def maintenance_status(manifest_count: int) -> MaintenanceStatus:
    if manifest_count == 0:
        return MaintenanceStatus.NONE
    if manifest_count == 1:
        return MaintenanceStatus.SINGLE
    return MaintenanceStatus.MULTIPLE


def analyze_dependencies(structure: ProjectStructure) -> DependencyAnalysis:
    manifests = structure.manifests
    return DependencyAnalysis(
        package_managers=tuple(PackageSummary.of(m) for m in manifests),
        has_dependencies=bool(manifests),
        total_packages=sum(m.dependency_count for m in manifests),
        common_frameworks=detect_common_frameworks(manifests),
        security_concerns=detect_security_concerns(manifests),
        maintenance_status=maintenance_status(len(manifests)),
    )
