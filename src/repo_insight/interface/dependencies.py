"""FastAPI dependency injection wiring."""

from __future__ import annotations

from repo_insight.infrastructure.client_context import GitHubContext
from repo_insight.infrastructure.config import get_settings
from repo_insight.services.analyze_repo import RepositoryAnalysisService

_context: GitHubContext | None = None


async def startup(context: GitHubContext | None = None) -> None:
    """Initialise shared resources; called from the app lifespan."""
    global _context  # noqa: PLW0603

    _context = context or GitHubContext.from_settings(get_settings())


async def shutdown() -> None:
    """Release shared resources."""
    global _context  # noqa: PLW0603

    if _context:
        await _context.aclose()
        _context = None


def get_context() -> GitHubContext:
    if _context is None:
        raise RuntimeError("startup() was not called")
    return _context


def get_service() -> RepositoryAnalysisService:
    """Build the use case around the shared context."""
    return RepositoryAnalysisService(get_context(), max_depth=get_settings().max_depth)
