"""Integration test fixtures.

Provides a fully wired AppState (real MemoryCache, real GitHubClient over an
httpx.AsyncClient) and a respx router that plays the GitHub API for one
port, zlib, built from madler/zlib.
"""

from __future__ import annotations

import json
import os
from typing import TYPE_CHECKING

import httpx
import pytest
import respx

from tests.factories import file_contents
from vcpkg_readme.cache import MemoryCache
from vcpkg_readme.config import Settings
from vcpkg_readme.github import GitHubClient
from vcpkg_readme.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Iterator

API = "https://api.github.com"
PORT_DIR = "/repos/Microsoft/vcpkg/contents/ports/zlib"

ZLIB_MANIFEST = {
    "name": "zlib",
    "version": "1.3.1",
    "description": "A compression library",
    "homepage": "https://www.zlib.net/",
    "dependencies": [{"name": "vcpkg-cmake", "host": True}],
}

ZLIB_PORTFILE = """\
vcpkg_from_github(
    OUT_SOURCE_PATH SOURCE_PATH
    REPO madler/zlib
    REF v1.3.1
    SHA512 8c9642495bafd6fad4ab9fb67f09b268c69ff9af0f4f20cf15dfc18852ff1f312bd8ca41de761b3f8d8e90e77d79f2ccacd3d4c5b19e475ecf09d021fdfe9088
    HEAD_REF master
)
"""

ZLIB_README = """\
[![Build](https://img.shields.io/badge/build-passing-green.svg)](https://ci.example.com)
# zlib

A massively spiffy yet delicately unobtrusive compression library.

<!-- maintainers: keep this short -->

## Usage

Compress a buffer:

```c
#include <zlib.h>
compress(dest, &destLen, source, sourceLen);
```

See [the FAQ](FAQ) for details.
"""

ZLIB_REPOSITORY = {
    "full_name": "madler/zlib",
    "description": "A massively spiffy yet delicately unobtrusive compression library.",
    "license": {"key": "zlib", "name": "zlib License", "spdx_id": "Zlib"},
    "topics": ["compression", "deflate"],
    "language": "C",
    "stargazers_count": 5000,
    "forks_count": 2400,
    "watchers_count": 5000,
    "open_issues_count": 40,
    "pushed_at": "2026-09-01T00:00:00Z",
    "archived": False,
    "disabled": False,
    "owner": {"login": "madler"},
}


@pytest.fixture()
def subprocess_env() -> dict[str, str]:
    """Baseline env dict for subprocess-based MCP integration tests.

    Forces stdio transport so a local vcpkg-readme.yaml cannot change it.
    """
    env = os.environ.copy()
    env["VCPKG_README__SERVER__TRANSPORT"] = "stdio"
    env["VCPKG_README__LOGGING__LEVEL"] = "ERROR"
    return env


@pytest.fixture()
def github_api() -> Iterator[respx.MockRouter]:
    """respx router serving the zlib port. Anything else on the API is a 404."""
    with respx.mock(base_url=API, assert_all_called=False) as router:
        router.get("/search/code", name="search").respond(
            200,
            json={
                "total_count": 1,
                "incomplete_results": False,
                "items": [{"name": "vcpkg.json", "path": "ports/zlib/vcpkg.json", "score": 30.0}],
            },
        )
        router.get(f"{PORT_DIR}/vcpkg.json", name="manifest").respond(
            200, json=file_contents(json.dumps(ZLIB_MANIFEST))
        )
        router.get(f"{PORT_DIR}/portfile.cmake", name="portfile").respond(
            200, json=file_contents(ZLIB_PORTFILE)
        )
        router.get(f"{PORT_DIR}/README.md", name="port_readme").respond(404)
        router.get("/repos/madler/zlib/contents/README.md", name="upstream_readme").respond(
            200, json=file_contents(ZLIB_README)
        )
        router.get("/repos/madler/zlib", name="repository").respond(200, json=ZLIB_REPOSITORY)
        router.route(name="fallthrough").respond(404)
        yield router


@pytest.fixture()
async def app_state(github_api: respx.MockRouter) -> AsyncGenerator[AppState, None]:
    """Full AppState wired for integration tests."""
    cache = MemoryCache()
    async with httpx.AsyncClient(base_url=API) as client:
        state = AppState(
            settings=Settings(),
            cache=cache,
            github=GitHubClient(client, cache),
            http_client=client,
        )
        yield state
