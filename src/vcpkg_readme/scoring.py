"""Relevance scoring for search results.

Pure functions: receive port and upstream metadata, return scores in [0, 1].
The weights and per-factor constants are fixed policy.
"""

from __future__ import annotations

import math
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from vcpkg_readme.models.github import GitHubRepository
    from vcpkg_readme.models.vcpkg import VcpkgPortInfo

QUALITY_WEIGHT = 0.3
POPULARITY_WEIGHT = 0.3
MAINTENANCE_WEIGHT = 0.2
SEARCH_RELEVANCE_WEIGHT = 0.2

# Code search relevance is assumed to be on a 0–100 scale.
SEARCH_SCORE_SCALE = 100.0

# (upper bound in days since last push, score), checked in order
_RECENCY_BUCKETS: tuple[tuple[int, float], ...] = (
    (30, 1.0),
    (90, 0.8),
    (180, 0.6),
    (365, 0.4),
)
_STALE_SCORE = 0.2
_LOW_ISSUES = 10
_HIGH_ISSUES = 100


class ScoreResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    final: float
    quality: float
    popularity: float
    maintenance: float


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def quality_score(port: VcpkgPortInfo, upstream: GitHubRepository | None) -> float:
    """Completeness of the port manifest and health of the upstream repo."""
    score = 0.5

    if port.description:
        score += 0.1
    if port.homepage:
        score += 0.1
    if port.dependencies:
        score += 0.1

    if upstream is not None:
        if upstream.description:
            score += 0.05
        if upstream.license is not None:
            score += 0.1
        if upstream.topics:
            score += 0.05
        if upstream.archived:
            score -= 0.2
        if upstream.disabled:
            score -= 0.3

    return clamp01(score)


def popularity_score(upstream: GitHubRepository | None) -> float:
    """Log-compressed stars, forks and watchers of the upstream repo."""
    if upstream is None:
        return 0.1

    stars = min(0.4, math.log10(upstream.stargazers_count + 1) / 5)
    forks = min(0.3, math.log10(upstream.forks_count + 1) / 4)
    watchers = min(0.2, math.log10(upstream.watchers_count + 1) / 3)
    return clamp01(stars + forks + watchers)


def maintenance_score(upstream: GitHubRepository | None, now: datetime | None = None) -> float:
    """Recency of the last upstream push, nudged by the open issue count.

    A repository without ``pushed_at`` is treated as stale.
    """
    if upstream is None:
        return 0.5

    score = _STALE_SCORE
    if upstream.pushed_at is not None:
        now = now or datetime.now(UTC)
        pushed_at = upstream.pushed_at
        if pushed_at.tzinfo is None:
            pushed_at = pushed_at.replace(tzinfo=UTC)
        days = (now - pushed_at).total_seconds() / 86400
        for max_days, bucket_score in _RECENCY_BUCKETS:
            if days < max_days:
                score = bucket_score
                break

    if upstream.open_issues_count < _LOW_ISSUES:
        score += 0.1
    elif upstream.open_issues_count > _HIGH_ISSUES:
        score -= 0.1

    return clamp01(score)


def calculate_scores(
    port: VcpkgPortInfo,
    upstream: GitHubRepository | None,
    search_score: float,
    *,
    now: datetime | None = None,
) -> ScoreResult:
    """Blend the three factor scores with raw search relevance."""
    quality = quality_score(port, upstream)
    popularity = popularity_score(upstream)
    maintenance = maintenance_score(upstream, now)

    final = (
        quality * QUALITY_WEIGHT
        + popularity * POPULARITY_WEIGHT
        + maintenance * MAINTENANCE_WEIGHT
        + (search_score / SEARCH_SCORE_SCALE) * SEARCH_RELEVANCE_WEIGHT
    )

    return ScoreResult(
        final=clamp01(final),
        quality=quality,
        popularity=popularity,
        maintenance=maintenance,
    )
