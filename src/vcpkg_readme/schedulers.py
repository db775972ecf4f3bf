"""Background scheduler coroutine for cache cleanup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from vcpkg_readme.state import AppState

log = structlog.get_logger()


async def run_cache_cleanup_scheduler(state: AppState) -> None:
    """Sweep expired cache entries every ``cache.cleanup_interval_seconds``.

    Runs until cancelled by the lifespan on shutdown.
    """
    interval_seconds = state.settings.cache.cleanup_interval_seconds

    while True:
        await asyncio.sleep(interval_seconds)
        removed = state.cache.cleanup()
        stats = state.cache.stats()
        log.info(
            "cache_cleanup_complete",
            removed=removed,
            approx_size_bytes=stats.approx_size_bytes,
            hits=stats.hits,
            misses=stats.misses,
        )
