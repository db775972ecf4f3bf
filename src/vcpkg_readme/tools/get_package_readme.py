"""Tool handler for get_readme_from_vcpkg.

Receives AppState, orchestrates cache lookup / existence check / README fetch
/ example extraction, and returns a structured dict. No MCP or FastMCP
imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from rapidfuzz import fuzz, process

from vcpkg_readme.errors import ErrorCode, VcpkgReadmeError
from vcpkg_readme.models.tools import (
    GetPackageReadmeInput,
    GetPackageReadmeOutput,
    PackageBasicInfo,
)
from vcpkg_readme.ports import (
    basic_info,
    fallback_readme,
    installation_info,
    repository_info,
    vcpkg_examples,
)
from vcpkg_readme.readme import cleanup_content, extract_description, parse_usage_examples
from vcpkg_readme.search import search_packages
from vcpkg_readme.versions import resolve_version

if TYPE_CHECKING:
    from vcpkg_readme.state import AppState

# Existence is checked against the top results of a search for the name.
EXISTENCE_SEARCH_LIMIT = 10
SIMILAR_NAME_CUTOFF = 60
SIMILAR_NAME_LIMIT = 3


async def handle(
    package_name: str,
    state: AppState,
    version: str = "latest",
    include_examples: bool = True,
) -> dict:
    """Handle a get_readme_from_vcpkg tool call."""
    log = structlog.get_logger().bind(tool="get_readme_from_vcpkg", package_name=package_name)
    log.info("handler_called", version=version, include_examples=include_examples)

    # Validate input
    try:
        validated = GetPackageReadmeInput(
            package_name=package_name, version=version, include_examples=include_examples
        )
    except ValueError as exc:
        raise VcpkgReadmeError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide a vcpkg port name (lowercase letters, digits, hyphens) and "
                "a version of 'latest' or [A-Za-z0-9_.-]."
            ),
            recoverable=False,
        ) from exc

    name = validated.package_name
    cache_key = f"package_readme:{name}:{validated.version}:{validated.include_examples}"
    cached = state.cache.get(cache_key)
    if cached is not None:
        log.info("cache_hit")
        return cached

    # Existence check
    search_result = await search_packages(
        name,
        EXISTENCE_SEARCH_LIMIT,
        cache=state.cache,
        github=state.github,
        ttl_ms=state.settings.cache.search_ttl_seconds * 1000,
    )
    found_names = [pkg.name for pkg in search_result.packages]
    if name not in found_names:
        similar = similar_names(name, found_names)
        log.info("package_not_found", similar=similar)
        return _not_found_output(name, validated.version, similar)

    # Port metadata
    resolved_version = await resolve_version(
        name, validated.version, cache=state.cache, github=state.github
    )
    port = await state.github.get_port_info(name)
    if port is None:
        raise VcpkgReadmeError(
            code=ErrorCode.PACKAGE_NOT_FOUND,
            message=f"Package '{name}' not found in vcpkg registry",
            suggestion="Call search_packages_from_vcpkg to find the correct port name.",
            recoverable=False,
        )
    portfile = await state.github.get_portfile(name)

    # README: port directory, then upstream, then a generated one
    readme = await state.github.get_port_readme(name)
    if not readme and portfile is not None and portfile.vcpkg_from_github is not None:
        source = portfile.vcpkg_from_github
        readme = await state.github.get_upstream_readme(source.owner, source.repo)
    if not readme:
        log.debug("readme_fallback_generated")
        readme = fallback_readme(port, portfile)

    content = cleanup_content(readme)
    examples = (
        [*vcpkg_examples(name, port), *parse_usage_examples(content)]
        if validated.include_examples
        else []
    )

    output = GetPackageReadmeOutput(
        package_name=name,
        version=resolved_version,
        description=port.description or extract_description(content),
        readme_content=content,
        usage_examples=examples,
        installation=installation_info(name),
        basic_info=basic_info(port, resolved_version),
        repository=repository_info(name, portfile),
        exists=True,
    )
    result = output.model_dump(mode="json")

    state.cache.set(cache_key, result, state.settings.cache.ttl_seconds * 1000)
    log.info("readme_complete", version=resolved_version, examples_count=len(examples))
    return result


def similar_names(name: str, candidates: list[str]) -> list[str]:
    """Port names from ``candidates`` that look like ``name``, best first."""
    matches = process.extract(
        name,
        candidates,
        scorer=fuzz.ratio,
        limit=SIMILAR_NAME_LIMIT,
        score_cutoff=SIMILAR_NAME_CUTOFF,
    )
    return [candidate for candidate, _score, _idx in matches]


def _not_found_output(name: str, version: str, similar: list[str]) -> dict:
    output = GetPackageReadmeOutput(
        package_name=name,
        version=version,
        description="",
        readme_content="",
        usage_examples=[],
        installation=installation_info(name),
        basic_info=PackageBasicInfo(
            name=name,
            version=version,
            description="",
            license="",
            author="",
            keywords=[],
        ),
        similar_packages=similar,
        exists=False,
    )
    return output.model_dump(mode="json")
