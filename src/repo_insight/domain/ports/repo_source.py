"""Repository source port, defined by the domain and implemented by infrastructure."""

from __future__ import annotations

from typing import Any, Protocol

from repo_insight.domain.entities import ContentItem


class RepoSource(Protocol):
    """Abstract contract for reading repositories from the hosting API."""

    async def list_user_repositories(self) -> list[dict[str, Any]]:
        """Return every repository visible to the authenticated user (raw JSON)."""
        ...

    async def list_contents(self, owner: str, repo: str, path: str = "") -> list[ContentItem]:
        """Return the entries at *path*; a single file comes back as a one-item list."""
        ...

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> tuple[str, str]:
        """Return ``(decoded_text, encoding)`` for a single file."""
        ...
