"""TTL memoization for expensive GitHub list calls."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


@dataclass(slots=True)
class CacheEntry:
    payload: Any
    captured_at: float


class ResponseCache:
    """In-memory cache whose entries expire *ttl_seconds* after capture.

    Safe to share between concurrent requests: every access holds a lock, and
    ``set`` simply overwrites, so the last writer wins.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._store: dict[str, CacheEntry] = {}
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                logger.debug("Cache MISS: %s", key)
                return None
            if self._clock() - entry.captured_at >= self._ttl:
                del self._store[key]
                logger.debug("Cache EXPIRED: %s", key)
                return None
            logger.debug("Cache HIT: %s", key)
            return entry.payload

    def set(self, key: str, payload: Any) -> None:
        with self._lock:
            self._store[key] = CacheEntry(payload=payload, captured_at=self._clock())

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
