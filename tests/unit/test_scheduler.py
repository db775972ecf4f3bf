"""Unit tests for the cache cleanup scheduler in schedulers.py.

asyncio.sleep is patched so each loop iteration runs immediately; the loop is
stopped by making the patched sleep raise CancelledError.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest

from vcpkg_readme.config import Settings
from vcpkg_readme.schedulers import run_cache_cleanup_scheduler
from vcpkg_readme.state import AppState

if TYPE_CHECKING:
    from tests.factories import FakeClock, FakeGitHub
    from vcpkg_readme.cache import MemoryCache


def _make_state(cache: MemoryCache, github: FakeGitHub, interval: int = 300) -> AppState:
    settings = Settings(cache={"cleanup_interval_seconds": interval})
    return AppState(settings=settings, cache=cache, github=github)


class TestCacheCleanupScheduler:
    async def test_sleeps_for_configured_interval(
        self, cache: MemoryCache, json_ports: FakeGitHub
    ) -> None:
        state = _make_state(cache, json_ports, interval=42)
        mock_sleep = AsyncMock(side_effect=[None, asyncio.CancelledError()])

        with (
            patch("vcpkg_readme.schedulers.asyncio.sleep", mock_sleep),
            pytest.raises(asyncio.CancelledError),
        ):
            await run_cache_cleanup_scheduler(state)

        assert [call.args[0] for call in mock_sleep.await_args_list] == [42, 42]

    async def test_expired_entries_swept(
        self, cache: MemoryCache, clock: FakeClock, json_ports: FakeGitHub
    ) -> None:
        cache.set("old", "v", ttl_ms=10)
        cache.set("fresh", "v", ttl_ms=10_000)
        clock.advance(10)
        state = _make_state(cache, json_ports)
        mock_sleep = AsyncMock(side_effect=[None, asyncio.CancelledError()])

        with (
            patch("vcpkg_readme.schedulers.asyncio.sleep", mock_sleep),
            pytest.raises(asyncio.CancelledError),
        ):
            await run_cache_cleanup_scheduler(state)

        assert len(cache) == 1
        assert cache.has("fresh") is True

    async def test_cancellation_stops_loop(
        self, cache: MemoryCache, json_ports: FakeGitHub
    ) -> None:
        state = _make_state(cache, json_ports, interval=3600)
        task = asyncio.create_task(run_cache_cleanup_scheduler(state))
        await asyncio.sleep(0)

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert task.cancelled() is True
