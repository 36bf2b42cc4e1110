"""Domain exception hierarchy.

Fatal errors propagate to the caller and map to an HTTP status code at the
interface layer.  Recoverable errors are raised by single fetch/parse steps
and handled inside the tree traverser.
"""

from __future__ import annotations


class RepoInsightError(Exception):
    """Base exception for the entire application."""


# ── Fatal errors ────────────────────────────────────────────────────────────


class NotConfiguredError(RepoInsightError):
    """No GitHub credentials are active."""

    def __init__(self, message: str = "GitHub credentials are not configured.") -> None:
        super().__init__(message)


class RepositoryNotFoundError(RepoInsightError):
    """The repository is not among those accessible to the active credentials."""

    def __init__(self, owner: str, repo: str) -> None:
        self.owner = owner
        self.repo = repo
        super().__init__(f"Repository {owner}/{repo} not found or not accessible.")


class UpstreamError(RepoInsightError):
    """The GitHub API call failed after retries were exhausted."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


# ── Recoverable errors ──────────────────────────────────────────────────────


class ContentFetchError(RepoInsightError):
    """A single file body could not be fetched or decoded."""


class ManifestParseError(RepoInsightError):
    """A dependency manifest is not a valid JSON object."""
