"""Derived repository metrics.

``stars_per_day`` and ``engagement_score`` are ad-hoc popularity heuristics
kept for compatibility with existing consumers.  They are not calibrated:
the engagement score divides by ``size / 1000`` where ``size`` is the
repository size in KB as reported by GitHub.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from repo_insight.domain.entities import Repository, RepositoryRef

_TRENDING_STARS = 100
_TRENDING_WINDOW = timedelta(days=7)


@dataclass(frozen=True, slots=True)
class BasicMetrics:
    stars: int
    forks: int
    size: int
    language: str | None
    topics: frozenset[str]
    license: str | None
    private: bool


@dataclass(frozen=True, slots=True)
class ActivityMetrics:
    created_at: datetime
    updated_at: datetime
    days_since_created: int
    days_since_updated: int


@dataclass(frozen=True, slots=True)
class PopularityMetrics:
    stars_per_day: float
    engagement_score: float
    trending: bool


@dataclass(frozen=True, slots=True)
class QualitySignals:
    has_description: bool
    has_topics: bool
    has_license: bool
    has_readme: bool
    documentation_score: int


@dataclass(frozen=True, slots=True)
class RepositoryMetrics:
    repository: RepositoryRef
    basic: BasicMetrics
    activity: ActivityMetrics
    popularity: PopularityMetrics
    quality: QualitySignals


def _whole_days(delta: timedelta) -> int:
    return delta // timedelta(days=1)


def compute_metrics(repository: Repository, now: datetime | None = None) -> RepositoryMetrics:
    now = now or datetime.now(timezone.utc)
    days_since_created = _whole_days(now - repository.created_at)
    days_since_updated = _whole_days(now - repository.updated_at)

    has_description = bool(repository.description)
    has_topics = bool(repository.topics)
    has_license = bool(repository.license)

    return RepositoryMetrics(
        repository=RepositoryRef.of(repository),
        basic=BasicMetrics(
            stars=repository.stars,
            forks=repository.forks,
            size=repository.size,
            language=repository.language,
            topics=repository.topics,
            license=repository.license,
            private=repository.private,
        ),
        activity=ActivityMetrics(
            created_at=repository.created_at,
            updated_at=repository.updated_at,
            days_since_created=days_since_created,
            days_since_updated=days_since_updated,
        ),
        popularity=PopularityMetrics(
            stars_per_day=repository.stars / max(1, days_since_created),
            engagement_score=(repository.stars * 2 + repository.forks)
            / max(1, repository.size / 1000),
            trending=repository.stars > _TRENDING_STARS
            and now - repository.updated_at < _TRENDING_WINDOW,
        ),
        quality=QualitySignals(
            has_description=has_description,
            has_topics=has_topics,
            has_license=has_license,
            # Metrics come from the listing alone; no tree is fetched here.
            has_readme=False,
            documentation_score=int(has_description) + int(has_topics) + int(has_license),
        ),
    )
