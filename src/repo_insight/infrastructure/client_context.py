"""Credential and client context shared by every service.

Holds at most one active :class:`CredentialContext` together with the
authenticated :class:`RepoSource` built for it and the response cache.
Replacing the credentials always clears the cache so a list fetched for one
identity is never served to another.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

import httpx

from repo_insight.domain.exceptions import NotConfiguredError
from repo_insight.domain.ports.repo_source import RepoSource
from repo_insight.domain.value_objects import DEFAULT_IDENTITY, CredentialContext
from repo_insight.infrastructure.config import Settings, get_settings
from repo_insight.infrastructure.github_rest_adapter import GitHubRestAdapter, Sleeper
from repo_insight.infrastructure.response_cache import ResponseCache
from repo_insight.infrastructure.retry import RetryPolicy

logger = logging.getLogger(__name__)

SourceFactory = Callable[[CredentialContext], RepoSource]


class GitHubContext:
    """The one place credentials, HTTP client and cache live.

    Parameters
    ----------
    credentials:
        Initial credentials, or *None* to start unconfigured.
    settings:
        Timeouts, retry counts and cache TTL.  Defaults to :func:`get_settings`.
    source_factory:
        Builds the :class:`RepoSource` for a credential set.  When omitted an
        ``httpx.AsyncClient`` wrapped in :class:`GitHubRestAdapter` is used.
    transport:
        Optional ``httpx`` transport for the default client (used in tests).
    """

    def __init__(
        self,
        credentials: CredentialContext | None = None,
        *,
        settings: Settings | None = None,
        cache: ResponseCache | None = None,
        source_factory: SourceFactory | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._settings = settings or get_settings()
        self._cache = cache or ResponseCache(ttl_seconds=self._settings.cache_ttl_seconds)
        self._source_factory = source_factory
        self._transport = transport
        self._sleep = sleep

        self._credentials: CredentialContext | None = None
        self._source: RepoSource | None = None
        self._client: httpx.AsyncClient | None = None
        if credentials is not None:
            self._activate(credentials)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: object) -> GitHubContext:
        """Build a context from environment defaults (unconfigured if none are set)."""
        credentials = None
        username, token = settings.github_username, settings.github_token
        if username and token is not None and token.get_secret_value():
            credentials = CredentialContext(
                principal=username,
                token=token.get_secret_value(),
                identity=settings.github_identity,
            )
        return cls(credentials, settings=settings, **kwargs)  # type: ignore[arg-type]

    # ── Public API ──────────────────────────────────────────────────────

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    @property
    def credentials(self) -> CredentialContext:
        """The active credentials; raises :class:`NotConfiguredError` when unset."""
        if self._credentials is None:
            raise NotConfiguredError()
        return self._credentials

    @property
    def source(self) -> RepoSource:
        """The authenticated source; raises :class:`NotConfiguredError` when unset."""
        if self._source is None:
            raise NotConfiguredError()
        return self._source

    def is_configured(self) -> bool:
        return self._credentials is not None and self._source is not None

    async def set_credentials(
        self, principal: str, token: str, identity: str = DEFAULT_IDENTITY
    ) -> None:
        """Replace the active credentials and drop every cached response."""
        previous_client = self._activate(
            CredentialContext(principal=principal, token=token, identity=identity)
        )
        if previous_client is not None:
            await previous_client.aclose()

    async def aclose(self) -> None:
        """Release the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ── Internals ───────────────────────────────────────────────────────

    def _activate(self, credentials: CredentialContext) -> httpx.AsyncClient | None:
        previous_client = self._client
        self._client = None

        if self._source_factory is not None:
            source = self._source_factory(credentials)
        else:
            source = self._build_rest_source(credentials)

        self._credentials = credentials
        self._source = source
        self._cache.clear()
        logger.info("Active GitHub identity: %s (%s)", credentials.identity, credentials.principal)
        return previous_client

    def _build_rest_source(self, credentials: CredentialContext) -> GitHubRestAdapter:
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._settings.request_timeout_seconds),
            transport=self._transport,
        )
        policy = RetryPolicy(
            max_retries=self._settings.max_retries,
            backoff_base=self._settings.backoff_base_seconds,
        )
        return GitHubRestAdapter(
            client=self._client,
            token=credentials.token,
            api_url=self._settings.github_api_url,
            policy=policy,
            sleep=self._sleep,
        )
