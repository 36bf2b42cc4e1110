"""GitHub REST API adapter: implements the RepoSource port."""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Any, Awaitable, Callable
from urllib.parse import quote

import httpx

from repo_insight.domain.entities import ContentItem, EntryKind
from repo_insight.domain.exceptions import ContentFetchError, UpstreamError
from repo_insight.infrastructure.retry import (
    RetryPolicy,
    is_rate_limited,
    retry_after_seconds,
)

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"
_PAGE_SIZE = 100

Sleeper = Callable[[float], Awaitable[None]]


class GitHubRestAdapter:
    """Concrete RepoSource backed by the GitHub v3 REST API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        *,
        api_url: str = _GITHUB_API,
        policy: RetryPolicy | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._policy = policy or RetryPolicy()
        self._sleep = sleep
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "repo-insight/1.0",
            "X-GitHub-Api-Version": "2022-11-28",
            "Authorization": f"Bearer {token}",
        }

    async def list_user_repositories(self) -> list[dict[str, Any]]:
        """GET /user/repos (every page) → raw repository objects."""
        repos: list[dict[str, Any]] = []
        url: str | None = f"{self._api_url}/user/repos"
        params: dict[str, str] | None = {
            "sort": "updated",
            "per_page": str(_PAGE_SIZE),
            "visibility": "all",
        }
        while url:
            resp = await self._api_get(url, params=params)
            page = _json_body(resp, url)
            if not isinstance(page, list):
                raise UpstreamError("Unexpected response shape from /user/repos", resp.status_code)
            repos.extend(page)
            # The "next" link already carries the query string.
            url = resp.links.get("next", {}).get("url")
            params = None
        logger.debug("Fetched %d repositories", len(repos))
        return repos

    async def list_contents(self, owner: str, repo: str, path: str = "") -> list[ContentItem]:
        """GET /repos/{owner}/{repo}/contents/{path} → [ContentItem]."""
        url = self._contents_url(owner, repo, path)
        data = _json_body(await self._api_get(url), url)
        items = data if isinstance(data, list) else [data]

        entries: list[ContentItem] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            kind = item.get("type")
            if kind not in (EntryKind.FILE.value, EntryKind.DIR.value):
                # symlinks and submodules carry no tree of their own
                continue
            entries.append(
                ContentItem(
                    name=item.get("name", ""),
                    path=item.get("path", ""),
                    kind=EntryKind(kind),
                    sha=item.get("sha", ""),
                    size=item.get("size", 0) or 0,
                    url=item.get("html_url") or "",
                )
            )
        return entries

    async def fetch_file_content(self, owner: str, repo: str, path: str) -> tuple[str, str]:
        """Fetch a single file through the contents API and base64-decode it."""
        try:
            resp = await self._api_get(self._contents_url(owner, repo, path))
        except UpstreamError as exc:
            raise ContentFetchError(f"Could not fetch {path}: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise ContentFetchError(f"Malformed response for {path}: {exc}") from exc
        if not isinstance(data, dict) or not data.get("content"):
            raise ContentFetchError(f"No inline content returned for {path}")

        encoding = data.get("encoding", "base64")
        if encoding != "base64":
            raise ContentFetchError(f"Unsupported encoding {encoding!r} for {path}")

        try:
            text = base64.b64decode(data["content"]).decode("utf-8", errors="replace")
        except (binascii.Error, ValueError) as exc:
            raise ContentFetchError(f"Could not decode {path}: {exc}") from exc
        return text, encoding

    def _contents_url(self, owner: str, repo: str, path: str) -> str:
        base = f"{self._api_url}/repos/{owner}/{repo}/contents"
        return f"{base}/{quote(path)}" if path else base

    async def _api_get(
        self,
        url: str,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Perform a GitHub API GET request with retry, throttling and error translation."""
        policy = self._policy
        attempt = 0
        while True:
            try:
                resp = await self._client.get(url, headers=self._api_headers, params=params)
            except httpx.TransportError as exc:
                if attempt >= policy.max_retries:
                    raise UpstreamError(f"Network error fetching {url}: {exc}") from exc
                delay = policy.backoff(attempt)
                logger.warning(
                    "Network error on %s (attempt %d): %s; retrying in %.1fs",
                    url, attempt + 1, exc, delay,
                )
                await self._sleep(delay)
                attempt += 1
                continue
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise UpstreamError(f"HTTP error fetching {url}: {exc}") from exc

            if resp.status_code == 200:
                return resp

            if is_rate_limited(resp):
                wait = retry_after_seconds(resp, policy.backoff(attempt))
                if attempt < policy.max_retries and policy.on_rate_limit(wait, attempt, url):
                    await self._sleep(wait)
                    attempt += 1
                    continue
                raise UpstreamError(
                    f"GitHub API rate limit exceeded: {_error_message(resp)}",
                    resp.status_code,
                )

            if policy.should_retry_status(resp.status_code) and attempt < policy.max_retries:
                delay = policy.backoff(attempt)
                logger.warning(
                    "GitHub API returned HTTP %d for %s (attempt %d); retrying in %.1fs",
                    resp.status_code, url, attempt + 1, delay,
                )
                await self._sleep(delay)
                attempt += 1
                continue

            raise UpstreamError(
                f"GitHub API returned HTTP {resp.status_code} for {url}: {_error_message(resp)}",
                resp.status_code,
            )


def _json_body(resp: httpx.Response, url: str) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise UpstreamError(f"Malformed JSON from {url}: {exc}", resp.status_code) from exc


def _error_message(resp: httpx.Response) -> str:
    try:
        data = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason_phrase
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return resp.reason_phrase
