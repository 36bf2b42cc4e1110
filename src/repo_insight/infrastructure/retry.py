"""Retry and throttle policy for GitHub API calls.

GitHub enforces a primary rate limit (``x-ratelimit-remaining: 0``) and
secondary abuse-detection limits (403/429 with a "secondary rate limit"
message).  Both are answered by waiting for the interval the API asks for.
Other transient failures back off exponentially.  Definitive client errors
are never retried.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable

import httpx

logger = logging.getLogger(__name__)

DO_NOT_RETRY: frozenset[int] = frozenset({400, 401, 403, 404, 422})

# (retry_after_seconds, attempt, url) -> wait and retry?
RateLimitHandler = Callable[[float, int, str], bool]


def always_wait(retry_after: float, attempt: int, url: str) -> bool:
    """Default throttle handler: never fail fast on a rate limit."""
    logger.warning(
        "Rate limited on %s (attempt %d); retrying after %.1fs", url, attempt + 1, retry_after
    )
    return True


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """How many times and how long to wait before re-issuing a request."""

    max_retries: int = 3
    backoff_base: float = 1.0
    do_not_retry: frozenset[int] = DO_NOT_RETRY
    on_rate_limit: RateLimitHandler = field(default=always_wait)

    def backoff(self, attempt: int) -> float:
        """Exponential delay for the zero-based *attempt*."""
        return self.backoff_base * (2**attempt)

    def should_retry_status(self, status_code: int) -> bool:
        return status_code >= 500 and status_code not in self.do_not_retry


def is_rate_limited(resp: httpx.Response) -> bool:
    """Return *True* for primary or secondary rate-limit responses."""
    if resp.status_code == 429:
        return True
    if resp.status_code != 403:
        return False
    if resp.headers.get("x-ratelimit-remaining") == "0":
        return True
    if "retry-after" in resp.headers:
        return True
    return "rate limit" in resp.text.lower()


def retry_after_seconds(resp: httpx.Response, fallback: float) -> float:
    """Seconds the API asked us to wait, or *fallback* when it did not say."""
    retry_after = resp.headers.get("retry-after")
    if retry_after:
        try:
            return max(0.0, float(retry_after))
        except ValueError:
            pass

    reset = resp.headers.get("x-ratelimit-reset")
    if reset and resp.headers.get("x-ratelimit-remaining") == "0":
        try:
            return max(0.0, int(reset) - time.time())
        except ValueError:
            pass

    return fallback
