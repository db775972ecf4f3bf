"""Tool handler for search_packages_from_vcpkg.

Receives AppState, validates input, delegates to the search pipeline, and
returns a structured dict. No MCP or FastMCP imports; server.py handles the
MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from vcpkg_readme.errors import ErrorCode, VcpkgReadmeError
from vcpkg_readme.models.tools import SearchPackagesInput
from vcpkg_readme.search import search_packages

if TYPE_CHECKING:
    from vcpkg_readme.state import AppState


async def handle(
    query: str,
    state: AppState,
    limit: int = 20,
    quality: float | None = None,
    popularity: float | None = None,
) -> dict:
    """Handle a search_packages_from_vcpkg tool call."""
    log = structlog.get_logger().bind(tool="search_packages_from_vcpkg", query=query)
    log.info("handler_called", limit=limit, quality=quality, popularity=popularity)

    # Validate input
    try:
        validated = SearchPackagesInput(
            query=query, limit=limit, quality=quality, popularity=popularity
        )
    except ValueError as exc:
        raise VcpkgReadmeError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "Provide a non-empty query (max 200 chars), limit between 1 and 250, "
                "and quality/popularity between 0 and 1."
            ),
            recoverable=False,
        ) from exc

    output = await search_packages(
        validated.query,
        validated.limit,
        cache=state.cache,
        github=state.github,
        quality=validated.quality,
        popularity=validated.popularity,
        ttl_ms=state.settings.cache.search_ttl_seconds * 1000,
    )
    return output.model_dump(mode="json")
