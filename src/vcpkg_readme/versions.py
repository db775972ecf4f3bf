"""Port version resolution.

The registry only carries the version on its default branch, so "resolving"
a requested version means reporting the current port version and warning
when the caller asked for something else.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from vcpkg_readme.errors import ErrorCode, VcpkgReadmeError

if TYPE_CHECKING:
    from vcpkg_readme.protocols import CacheProtocol, GitHubProtocol

log = structlog.get_logger()

LATEST_VERSION_TTL_MS = 60 * 60 * 1000


def _not_found(package_name: str) -> VcpkgReadmeError:
    return VcpkgReadmeError(
        code=ErrorCode.PACKAGE_NOT_FOUND,
        message=f"Package '{package_name}' not found in vcpkg registry",
        suggestion="Call search_packages_from_vcpkg to find the correct port name.",
        recoverable=False,
    )


async def get_latest_version(
    package_name: str, *, cache: CacheProtocol, github: GitHubProtocol
) -> str:
    cache_key = f"latest_version:{package_name}"
    cached = cache.get(cache_key)
    if cached is not None:
        return cached

    port = await github.get_port_info(package_name)
    if port is None:
        raise _not_found(package_name)

    cache.set(cache_key, port.version, LATEST_VERSION_TTL_MS)
    return port.version


async def resolve_version(
    package_name: str,
    requested: str | None,
    *,
    cache: CacheProtocol,
    github: GitHubProtocol,
) -> str:
    """Return the port version to report for ``requested``."""
    if not requested or requested == "latest":
        return await get_latest_version(package_name, cache=cache, github=github)

    port = await github.get_port_info(package_name)
    if port is None:
        raise _not_found(package_name)

    if requested != port.version:
        log.warning(
            "requested_version_mismatch",
            package_name=package_name,
            requested_version=requested,
            port_version=port.version,
        )
    return port.version
