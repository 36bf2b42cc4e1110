"""Derived repository metrics."""

from __future__ import annotations

from datetime import timedelta

import pytest

from repo_insight.domain.value_objects import CredentialContext
from repo_insight.services.repository_lister import repository_from_api
from repo_insight.services.repository_metrics import compute_metrics

from conftest import NOW, raw_repo

CREDS = CredentialContext("octo", "t")


def metrics_for(**overrides):
    return compute_metrics(repository_from_api(raw_repo("web", **overrides), CREDS), now=NOW)


class TestRepositoryMetrics:
    def test_activity_in_whole_days(self):
        metrics = metrics_for()
        assert metrics.activity.days_since_created == 152
        assert metrics.activity.days_since_updated == 2

    def test_popularity_heuristics(self):
        metrics = metrics_for()
        assert metrics.popularity.stars_per_day == pytest.approx(10 / 152)
        assert metrics.popularity.engagement_score == pytest.approx((10 * 2 + 2) / 2)
        assert not metrics.popularity.trending

    def test_small_repository_does_not_inflate_engagement(self):
        metrics = metrics_for(size=10, stargazers_count=3, forks_count=1)
        assert metrics.popularity.engagement_score == 7

    def test_created_today_divides_by_one(self):
        metrics = metrics_for(created_at=(NOW - timedelta(hours=3)).isoformat())
        assert metrics.activity.days_since_created == 0
        assert metrics.popularity.stars_per_day == 10

    @pytest.mark.parametrize(
        "stars, updated, expected",
        [
            (150, "2024-05-30T12:00:00Z", True),
            (100, "2024-05-30T12:00:00Z", False),
            (150, "2024-05-20T12:00:00Z", False),
        ],
    )
    def test_trending(self, stars, updated, expected):
        assert metrics_for(stargazers_count=stars, updated_at=updated).popularity.trending is expected

    def test_quality_signals(self):
        full = metrics_for()
        assert full.quality.documentation_score == 3
        assert full.quality.has_readme is False

        bare = metrics_for(description=None, topics=[], license=None)
        assert bare.quality.documentation_score == 0
        assert bare.basic.license is None
