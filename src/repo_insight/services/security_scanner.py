"""Security scan: name and content heuristics over a structure snapshot.

This never consults a vulnerability database; it flags shapes that are
commonly associated with leaked secrets or missing hardening.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum

from repo_insight.domain.entities import ProjectStructure


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueType(str, Enum):
    SENSITIVE_FILE = "sensitive_file"
    HARDCODED_SECRET = "hardcoded_secret"
    MISSING_SECURITY_CONFIG = "missing_security_config"
    OUTDATED_DEPENDENCIES = "outdated_dependencies"
    MISSING_HTTPS = "missing_https"


SEVERITY_PENALTY: dict[Severity, int] = {
    Severity.CRITICAL: 25,
    Severity.HIGH: 15,
    Severity.MEDIUM: 10,
    Severity.LOW: 5,
}

SENSITIVE_NAME_PATTERNS: tuple[str, ...] = ("env", "secret", "key", "password", "token")
SECRET_MANIFEST_PATTERNS: tuple[str, ...] = ("password", "secret", "token")
SECURITY_CONFIG_PATTERNS: tuple[str, ...] = ("security", ".security", "csp")
HTTPS_MARKERS: tuple[str, ...] = ("https://", "secure: true", "ssl: true")

TYPE_RECOMMENDATIONS: tuple[tuple[IssueType, str], ...] = (
    (IssueType.SENSITIVE_FILE, "Remove sensitive files from version control and add to .gitignore"),
    (IssueType.HARDCODED_SECRET, "Replace hardcoded secrets with environment variables"),
    (IssueType.OUTDATED_DEPENDENCIES, "Update dependencies to latest secure versions"),
    (IssueType.MISSING_SECURITY_CONFIG, "Implement security headers and configurations"),
    (IssueType.MISSING_HTTPS, "Enforce HTTPS for all connections"),
)

GENERIC_RECOMMENDATIONS: tuple[str, ...] = (
    "Run regular security audits and vulnerability scans",
    "Implement security best practices and coding standards",
)


@dataclass(frozen=True, slots=True)
class SecurityIssue:
    type: IssueType
    severity: Severity
    description: str
    recommendation: str
    file: str | None = None


@dataclass(frozen=True, slots=True)
class SecurityAnalysis:
    score: int
    total_issues: int
    issues_by_severity: dict[str, int]
    issues: tuple[SecurityIssue, ...]
    recommendations: tuple[str, ...]


def security_score(issues: tuple[SecurityIssue, ...] | list[SecurityIssue]) -> int:
    """100 minus the per-severity penalties, floored at 0."""
    penalty = sum(SEVERITY_PENALTY[issue.severity] for issue in issues)
    return max(0, 100 - penalty)


def find_issues(structure: ProjectStructure) -> list[SecurityIssue]:
    issues: list[SecurityIssue] = []

    for entry in structure.files:
        name = entry.name.lower()
        if any(p in name for p in SENSITIVE_NAME_PATTERNS):
            issues.append(
                SecurityIssue(
                    type=IssueType.SENSITIVE_FILE,
                    severity=Severity.HIGH,
                    description=f"Potentially sensitive file found: {entry.name}",
                    recommendation=(
                        "Ensure sensitive files are in .gitignore and never "
                        "committed to version control"
                    ),
                    file=entry.path,
                )
            )

    for manifest in structure.manifests:
        text = json.dumps(manifest.raw)
        if any(p in text for p in SECRET_MANIFEST_PATTERNS):
            issues.append(
                SecurityIssue(
                    type=IssueType.HARDCODED_SECRET,
                    severity=Severity.CRITICAL,
                    description="Potential hardcoded secrets found in package.json",
                    recommendation="Use environment variables for sensitive configuration",
                    file=manifest.path,
                )
            )

    has_security_config = any(
        p in entry.name.lower() for entry in structure.files for p in SECURITY_CONFIG_PATTERNS
    )
    if not has_security_config:
        issues.append(
            SecurityIssue(
                type=IssueType.MISSING_SECURITY_CONFIG,
                severity=Severity.MEDIUM,
                description="No security configuration files found",
                recommendation=(
                    "Add security headers, CSP policies, and other security configurations"
                ),
            )
        )

    for manifest in structure.manifests:
        outdated = [
            name
            for name, version in manifest.all_dependencies.items()
            if "^" in version and "old" in name
        ]
        if outdated:
            issues.append(
                SecurityIssue(
                    type=IssueType.OUTDATED_DEPENDENCIES,
                    severity=Severity.MEDIUM,
                    description=f"Potentially outdated dependencies: {', '.join(outdated)}",
                    recommendation=(
                        "Update dependencies to latest secure versions and run "
                        "vulnerability scans"
                    ),
                    file=manifest.path,
                )
            )

    has_https = any(
        entry.content is not None and any(m in entry.content for m in HTTPS_MARKERS)
        for entry in structure.files
    )
    if not has_https:
        issues.append(
            SecurityIssue(
                type=IssueType.MISSING_HTTPS,
                severity=Severity.MEDIUM,
                description="No HTTPS enforcement configuration found",
                recommendation=(
                    "Ensure all connections use HTTPS and implement proper SSL/TLS configuration"
                ),
            )
        )

    return issues


def recommend(issues: list[SecurityIssue]) -> tuple[str, ...]:
    """Advice keyed on which issue types are present, not how many."""
    severities = {issue.severity for issue in issues}
    types = {issue.type for issue in issues}

    recommendations: list[str] = []
    if Severity.CRITICAL in severities:
        recommendations.append("CRITICAL: Address critical security issues immediately")
    if Severity.HIGH in severities:
        recommendations.append("HIGH: Fix high-priority security vulnerabilities")
    recommendations.extend(message for kind, message in TYPE_RECOMMENDATIONS if kind in types)
    recommendations.extend(GENERIC_RECOMMENDATIONS)
    return tuple(recommendations)


def scan_security(structure: ProjectStructure) -> SecurityAnalysis:
    issues = find_issues(structure)
    counts = {severity.value: 0 for severity in Severity}
    for issue in issues:
        counts[issue.severity.value] += 1

    return SecurityAnalysis(
        score=security_score(issues),
        total_issues=len(issues),
        issues_by_severity=counts,
        issues=tuple(issues),
        recommendations=recommend(issues),
    )
