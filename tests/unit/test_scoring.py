"""Unit tests for vcpkg_readme.scoring."""

from __future__ import annotations

from datetime import timedelta

import pytest

from tests.factories import NOW, repository
from vcpkg_readme.models.github import GitHubRepository
from vcpkg_readme.models.vcpkg import VcpkgPortInfo
from vcpkg_readme.scoring import (
    calculate_scores,
    clamp01,
    maintenance_score,
    popularity_score,
    quality_score,
)


@pytest.fixture()
def bare_port() -> VcpkgPortInfo:
    return VcpkgPortInfo(name="bare")


@pytest.fixture()
def full_port() -> VcpkgPortInfo:
    return VcpkgPortInfo(
        name="full",
        description="Fully described",
        homepage="https://example.com",
        dependencies=["zlib"],
    )


class TestClamp:
    def test_bounds(self) -> None:
        assert clamp01(-0.5) == 0.0
        assert clamp01(1.5) == 1.0
        assert clamp01(0.25) == 0.25


class TestQualityScore:
    def test_bare_port_without_upstream(self, bare_port: VcpkgPortInfo) -> None:
        assert quality_score(bare_port, None) == pytest.approx(0.5)

    def test_manifest_fields_add_up(self, full_port: VcpkgPortInfo) -> None:
        assert quality_score(full_port, None) == pytest.approx(0.8)

    def test_healthy_upstream_caps_at_one(self, full_port: VcpkgPortInfo) -> None:
        assert quality_score(full_port, repository("owner")) == pytest.approx(1.0)

    def test_archived_and_disabled_penalised(self, bare_port: VcpkgPortInfo) -> None:
        upstream = GitHubRepository(archived=True, disabled=True)
        assert quality_score(bare_port, upstream) == pytest.approx(0.0)


class TestPopularityScore:
    def test_no_upstream(self) -> None:
        assert popularity_score(None) == pytest.approx(0.1)

    def test_empty_repository_scores_zero(self) -> None:
        assert popularity_score(GitHubRepository()) == 0.0

    def test_more_stars_never_lowers_score(self) -> None:
        low = popularity_score(repository("a", stars=100))
        high = popularity_score(repository("a", stars=5000))
        assert high > low

    def test_components_are_capped(self) -> None:
        huge = repository("a", stars=10**9, forks=10**9, watchers=10**9)
        assert popularity_score(huge) == pytest.approx(0.9)


class TestMaintenanceScore:
    def test_no_upstream(self) -> None:
        assert maintenance_score(None, NOW) == pytest.approx(0.5)

    @pytest.mark.parametrize(
        ("days", "expected"),
        [(5, 1.0), (45, 0.8), (120, 0.6), (300, 0.4), (400, 0.2)],
    )
    def test_recency_buckets(self, days: int, expected: float) -> None:
        # 50 open issues: neither bonus nor penalty
        upstream = repository("a", pushed_days_ago=days, open_issues=50)
        assert maintenance_score(upstream, NOW) == pytest.approx(expected)

    def test_missing_push_date_treated_as_stale(self) -> None:
        upstream = repository("a", pushed_days_ago=None, open_issues=50)
        assert maintenance_score(upstream, NOW) == pytest.approx(0.2)

    def test_few_open_issues_bonus(self) -> None:
        upstream = repository("a", pushed_days_ago=5, open_issues=3)
        assert maintenance_score(upstream, NOW) == pytest.approx(1.0)

    def test_many_open_issues_penalty(self) -> None:
        upstream = repository("a", pushed_days_ago=45, open_issues=500)
        assert maintenance_score(upstream, NOW) == pytest.approx(0.7)

    def test_naive_push_date_treated_as_utc(self) -> None:
        upstream = GitHubRepository(
            pushed_at=(NOW - timedelta(days=5)).replace(tzinfo=None),
            open_issues_count=50,
        )
        assert maintenance_score(upstream, NOW) == pytest.approx(1.0)


class TestCalculateScores:
    def test_all_scores_within_unit_interval(self, full_port: VcpkgPortInfo) -> None:
        result = calculate_scores(full_port, repository("a", stars=10**9), 10_000, now=NOW)
        for value in (result.final, result.quality, result.popularity, result.maintenance):
            assert 0.0 <= value <= 1.0

    def test_weighted_blend(self, bare_port: VcpkgPortInfo) -> None:
        result = calculate_scores(bare_port, None, 50.0, now=NOW)
        expected = 0.5 * 0.3 + 0.1 * 0.3 + 0.5 * 0.2 + 0.5 * 0.2
        assert result.final == pytest.approx(expected)
        assert result.quality == pytest.approx(0.5)
        assert result.popularity == pytest.approx(0.1)
        assert result.maintenance == pytest.approx(0.5)

    def test_higher_search_score_never_lowers_final(self, bare_port: VcpkgPortInfo) -> None:
        low = calculate_scores(bare_port, None, 10.0, now=NOW)
        high = calculate_scores(bare_port, None, 90.0, now=NOW)
        assert high.final > low.final

    def test_result_is_immutable(self, bare_port: VcpkgPortInfo) -> None:
        result = calculate_scores(bare_port, None, 0.0, now=NOW)
        with pytest.raises(ValueError):
            result.final = 0.9  # type: ignore[misc]
