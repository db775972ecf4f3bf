"""Shared test fixtures for the vcpkg-readme test suite."""

from __future__ import annotations

import pytest

from tests.factories import FakeClock, FakeGitHub, json_parser_ports
from vcpkg_readme.cache import MemoryCache
from vcpkg_readme.config import Settings
from vcpkg_readme.state import AppState


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(clock: FakeClock) -> MemoryCache:
    return MemoryCache(max_size_bytes=1_000_000, default_ttl_ms=60_000, clock=clock)


@pytest.fixture()
def json_ports() -> FakeGitHub:
    return json_parser_ports()


@pytest.fixture()
def app_state(cache: MemoryCache, json_ports: FakeGitHub) -> AppState:
    """AppState wired to the in-memory GitHub fake."""
    return AppState(settings=Settings(), cache=cache, github=json_ports)
