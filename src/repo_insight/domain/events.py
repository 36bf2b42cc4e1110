"""Structured events for failures that are recovered locally.

Traversal never raises for a single bad subtree, file body or manifest.  It
logs the failure and, when a sink is attached, hands it a
:class:`TraversalEvent` so callers and tests can inspect what was skipped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable


class EventKind(str, Enum):
    SUBTREE_FAILED = "subtree_failed"
    CONTENT_FETCH_FAILED = "content_fetch_failed"
    MANIFEST_PARSE_FAILED = "manifest_parse_failed"


@dataclass(frozen=True, slots=True)
class TraversalEvent:
    """One recovered failure."""

    kind: EventKind
    owner: str
    repo: str
    path: str
    message: str


EventSink = Callable[[TraversalEvent], None]
