"""Tool handler for get_package_info_from_vcpkg.

Receives AppState, orchestrates cache lookup / port metadata fetch / upstream
enrichment, and returns a structured dict. A port that does not exist yields
``exists: false`` rather than an error. No MCP or FastMCP imports; server.py
handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from vcpkg_readme.errors import ErrorCode, VcpkgReadmeError
from vcpkg_readme.models.tools import DownloadStats, GetPackageInfoInput, GetPackageInfoOutput
from vcpkg_readme.ports import (
    UNKNOWN_LICENSE,
    download_stats,
    generate_keywords,
    get_author,
    get_license,
    repository_info,
)
from vcpkg_readme.versions import get_latest_version

if TYPE_CHECKING:
    from vcpkg_readme.state import AppState


async def handle(
    package_name: str,
    state: AppState,
    include_dependencies: bool = True,
    include_dev_dependencies: bool = False,
) -> dict:
    """Handle a get_package_info_from_vcpkg tool call."""
    log = structlog.get_logger().bind(
        tool="get_package_info_from_vcpkg", package_name=package_name
    )
    log.info("handler_called")

    # Validate input
    try:
        validated = GetPackageInfoInput(
            package_name=package_name,
            include_dependencies=include_dependencies,
            include_dev_dependencies=include_dev_dependencies,
        )
    except ValueError as exc:
        raise VcpkgReadmeError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion="Provide a vcpkg port name (lowercase letters, digits, hyphens).",
            recoverable=False,
        ) from exc

    name = validated.package_name
    cache_key = (
        f"package_info:{name}:{validated.include_dependencies}"
        f":{validated.include_dev_dependencies}"
    )
    cached = state.cache.get(cache_key)
    if cached is not None:
        log.info("cache_hit")
        return cached

    port = await state.github.get_port_info(name)
    if port is None:
        log.info("package_not_found")
        output = GetPackageInfoOutput(
            package_name=name,
            latest_version="",
            description="",
            author="",
            license="",
            keywords=[],
            download_stats=DownloadStats(),
            exists=False,
        )
        return output.model_dump(mode="json")

    portfile = await state.github.get_portfile(name)
    latest_version = await get_latest_version(name, cache=state.cache, github=state.github)

    upstream = None
    if portfile is not None and portfile.vcpkg_from_github is not None:
        source = portfile.vcpkg_from_github
        upstream = await state.github.get_repository(source.owner, source.repo)

    dependencies: dict[str, str] | None = None
    if validated.include_dependencies and port.dependencies:
        # vcpkg manifests do not pin dependency versions
        dependencies = dict.fromkeys(port.dependency_names(), "latest")

    dev_dependencies: dict[str, str] | None = {} if validated.include_dev_dependencies else None

    output = GetPackageInfoOutput(
        package_name=name,
        latest_version=latest_version,
        description=port.description,
        author=get_author(upstream),
        license=get_license(upstream) or UNKNOWN_LICENSE,
        keywords=generate_keywords(port, upstream),
        dependencies=dependencies,
        dev_dependencies=dev_dependencies,
        download_stats=download_stats(upstream),
        repository=repository_info(name, portfile),
        exists=True,
    )
    result = output.model_dump(mode="json")

    state.cache.set(cache_key, result, state.settings.cache.ttl_seconds * 1000)
    log.info(
        "package_info_complete",
        version=latest_version,
        dependencies_count=len(dependencies or {}),
    )
    return result
