"""Translate domain errors into HTTP responses.

Every failure path returns the ``{"status": "error", "message": "..."}``
envelope.  Domain errors are resolved through :data:`STATUS_BY_ERROR` by
walking the exception's MRO, so subclasses inherit their parent's status.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from repo_insight.domain.exceptions import (
    NotConfiguredError,
    RepoInsightError,
    RepositoryNotFoundError,
    UpstreamError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[RepoInsightError], int] = {
    NotConfiguredError: 503,
    RepositoryNotFoundError: 404,
    UpstreamError: 502,
}


def status_for(exc: RepoInsightError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return 500


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    @app.exception_handler(RepoInsightError)
    async def domain_handler(request: Request, exc: RepoInsightError) -> JSONResponse:
        code = status_for(exc)
        logger.warning("%s %s -> %d: %s", request.method, request.url.path, code, exc)
        return _error_json(code, str(exc))

    # ── Input validation ────────────────────────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = [
            f"{'.'.join(str(p) for p in err.get('loc', []))}: "
            f"{err.get('msg', 'validation error')}"
            for err in exc.errors()
        ]
        return _error_json(422, "; ".join(messages))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        return _error_json(422, str(exc))

    # ── Catch-all ───────────────────────────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception on %s", request.url.path)
        return _error_json(500, "An unexpected error occurred. Please try again later.")
