"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_insight.infrastructure.client_context import GitHubContext
from repo_insight.interface.dependencies import shutdown, startup
from repo_insight.interface.error_handlers import register_error_handlers
from repo_insight.interface.routes import router


def create_app(context: GitHubContext | None = None) -> FastAPI:
    """Build and wire the FastAPI application.

    *context* replaces the environment-configured :class:`GitHubContext`;
    tests pass one backed by a fake source.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await startup(context)
        yield
        await shutdown()

    app = FastAPI(
        title="GitHub Repository Insight",
        version="1.0.0",
        description=(
            "Lists the repositories visible to a GitHub account and derives "
            "structure, classification, quality, security and dependency "
            "reports from their file trees."
        ),
        lifespan=lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
