"""Search pipeline: index query → per-port metadata → score → filter → sort.

Candidates are processed one at a time in the order the index returns them.
A candidate that cannot be resolved, or whose processing raises, is skipped;
it never fails the whole search. Only the index query itself is required.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from vcpkg_readme.models.tools import (
    PackageScore,
    PackageSearchResult,
    ScoreDetail,
    SearchPackagesOutput,
)
from vcpkg_readme.ports import generate_keywords, get_author, get_maintainers, port_name_from_path
from vcpkg_readme.scoring import calculate_scores

if TYPE_CHECKING:
    from datetime import datetime

    from vcpkg_readme.models.github import GitHubSearchItem
    from vcpkg_readme.protocols import CacheProtocol, GitHubProtocol

log = structlog.get_logger()

SEARCH_RESULTS_TTL_MS = 30 * 60 * 1000
MAX_INDEX_RESULTS = 100


def search_cache_key(
    query: str, limit: int, quality: float | None, popularity: float | None
) -> str:
    quality_part = "none" if quality is None else quality
    popularity_part = "none" if popularity is None else popularity
    return f"search_packages:{query}:{limit}:{quality_part}:{popularity_part}"


async def search_packages(
    query: str,
    limit: int,
    *,
    cache: CacheProtocol,
    github: GitHubProtocol,
    quality: float | None = None,
    popularity: float | None = None,
    ttl_ms: int = SEARCH_RESULTS_TTL_MS,
    now: datetime | None = None,
) -> SearchPackagesOutput:
    """Run a scored search. ``limit`` is assumed to be validated (1–250).

    Thresholds are part of the cache key, so a cache hit is returned verbatim.
    Results are ordered by final score descending, ties broken by name.
    """
    cache_key = search_cache_key(query, limit, quality, popularity)
    cached = cache.get(cache_key)
    if cached is not None:
        log.debug("search_cache_hit", query=query)
        return cached

    index_result = await github.search_ports(query, min(limit, MAX_INDEX_RESULTS))

    packages: list[PackageSearchResult] = []
    for item in index_result.items:
        try:
            result = await _process_candidate(
                item, github, quality=quality, popularity=popularity, now=now
            )
        except Exception:
            log.debug("candidate_skipped", path=item.path, reason="error", exc_info=True)
            continue
        if result is not None:
            packages.append(result)

    packages.sort(key=lambda p: (-p.score.final, p.name))

    output = SearchPackagesOutput(
        query=query,
        total=index_result.total_count,
        packages=packages[:limit],
    )
    cache.set(cache_key, output, ttl_ms)

    log.info(
        "search_complete",
        query=query,
        total=output.total,
        returned=len(output.packages),
    )
    return output


async def _process_candidate(
    item: GitHubSearchItem,
    github: GitHubProtocol,
    *,
    quality: float | None,
    popularity: float | None,
    now: datetime | None,
) -> PackageSearchResult | None:
    """Resolve, score and filter one index hit. ``None`` means skip."""
    package_name = port_name_from_path(item.path)
    if package_name is None:
        log.debug("candidate_skipped", path=item.path, reason="not_a_port_path")
        return None

    port = await github.get_port_info(package_name)
    if port is None:
        log.debug("candidate_skipped", path=item.path, reason="port_not_resolved")
        return None

    portfile = await github.get_portfile(package_name)
    upstream = None
    if portfile is not None and portfile.vcpkg_from_github is not None:
        source = portfile.vcpkg_from_github
        upstream = await github.get_repository(source.owner, source.repo)

    scores = calculate_scores(port, upstream, item.score, now=now)

    if quality is not None and scores.quality < quality:
        return None
    if popularity is not None and scores.popularity < popularity:
        return None

    return PackageSearchResult(
        name=package_name,
        version=port.version,
        description=port.description,
        keywords=generate_keywords(port, upstream),
        author=get_author(upstream),
        maintainers=get_maintainers(upstream),
        score=PackageScore(
            final=scores.final,
            detail=ScoreDetail(
                quality=scores.quality,
                popularity=scores.popularity,
                maintenance=scores.maintenance,
            ),
        ),
        search_score=item.score,
    )
