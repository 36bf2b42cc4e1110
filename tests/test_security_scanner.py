"""Security scan heuristics and scoring."""

from __future__ import annotations

from repo_insight.domain.entities import PackageManifest
from repo_insight.services.security_scanner import (
    GENERIC_RECOMMENDATIONS,
    IssueType,
    Severity,
    scan_security,
)

from conftest import make_structure


class TestSecurityScanner:
    def test_env_file_is_one_high_issue(self):
        analysis = scan_security(make_structure(files=[".env.production"]))

        high = [i for i in analysis.issues if i.severity is Severity.HIGH]
        assert len(high) == 1
        assert high[0].type is IssueType.SENSITIVE_FILE
        assert high[0].file == ".env.production"
        assert analysis.issues_by_severity == {"critical": 0, "high": 1, "medium": 2, "low": 0}
        assert analysis.score == 100 - 15 - 10 - 10
        assert analysis.recommendations == (
            "HIGH: Fix high-priority security vulnerabilities",
            "Remove sensitive files from version control and add to .gitignore",
            "Implement security headers and configurations",
            "Enforce HTTPS for all connections",
            *GENERIC_RECOMMENDATIONS,
        )

    def test_clean_repository(self):
        structure = make_structure(
            files=["README.md", "security.config.js"],
            contents={"README.md": "Docs live at https://example.com"},
        )
        analysis = scan_security(structure)
        assert analysis.issues == ()
        assert analysis.score == 100
        assert analysis.recommendations == GENERIC_RECOMMENDATIONS

    def test_score_is_floored_at_zero(self):
        structure = make_structure()
        structure.manifests.extend(
            PackageManifest(path=f"p{i}/package.json", raw={"scripts": {"login": "token"}})
            for i in range(5)
        )
        analysis = scan_security(structure)
        assert analysis.issues_by_severity["critical"] == 5
        assert analysis.score == 0
        assert analysis.recommendations[0] == (
            "CRITICAL: Address critical security issues immediately"
        )

    def test_outdated_dependency_marker(self):
        analysis = scan_security(make_structure(deps={"old-request": "^2.0.0", "react": "^18"}))
        outdated = [i for i in analysis.issues if i.type is IssueType.OUTDATED_DEPENDENCIES]
        assert len(outdated) == 1
        assert "old-request" in outdated[0].description

    def test_sensitive_names_are_case_insensitive(self):
        analysis = scan_security(make_structure(files=["config/API_KEY.txt", "src/main.py"]))
        flagged = [i.file for i in analysis.issues if i.type is IssueType.SENSITIVE_FILE]
        assert flagged == ["config/API_KEY.txt"]
