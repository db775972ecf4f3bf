"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the correct transport (stdio or HTTP)
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from contextlib import asynccontextmanager, suppress
from typing import TYPE_CHECKING

import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import vcpkg_readme.tools.get_package_info as t_info
import vcpkg_readme.tools.get_package_readme as t_readme
import vcpkg_readme.tools.search_packages as t_search
from vcpkg_readme import __version__
from vcpkg_readme.cache import MemoryCache
from vcpkg_readme.config import Settings
from vcpkg_readme.errors import VcpkgReadmeError
from vcpkg_readme.github import GitHubClient, build_http_client
from vcpkg_readme.schedulers import run_cache_cleanup_scheduler
from vcpkg_readme.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr; stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info(
        "server_starting",
        version=__version__,
        transport=settings.server.transport,
    )

    cache = MemoryCache(
        max_size_bytes=settings.cache.max_size_bytes,
        default_ttl_ms=settings.cache.ttl_seconds * 1000,
    )
    http_client = build_http_client(settings.github)
    github = GitHubClient(http_client, cache)

    state = AppState(
        settings=settings,
        cache=cache,
        github=github,
        http_client=http_client,
    )

    cache_cleanup_task = asyncio.create_task(run_cache_cleanup_scheduler(state))

    log.info(
        "server_started",
        version=__version__,
        transport=settings.server.transport,
        cache_max_size_bytes=settings.cache.max_size_bytes,
    )

    try:
        yield state
    finally:
        cache_cleanup_task.cancel()
        with suppress(asyncio.CancelledError):
            await cache_cleanup_task
        await http_client.aclose()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("vcpkg-readme", lifespan=lifespan)
# FastMCP doesn't expose a version kwarg, so set it on the underlying Server
# so the MCP initialize handshake reports our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: VcpkgReadmeError) -> CallToolResult:
    """Convert a VcpkgReadmeError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


def _log_tool_error(tool: str, exc: VcpkgReadmeError) -> None:
    log.warning(
        "tool_error",
        tool=tool,
        code=exc.code,
        message=exc.message,
        recoverable=exc.recoverable,
    )


@mcp.tool()
async def get_readme_from_vcpkg(
    package_name: str,
    ctx: Context,
    version: str = "latest",
    include_examples: bool = True,
) -> object:
    """Get package README and usage examples from the vcpkg registry."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_readme.handle(package_name, state, version, include_examples)
    except VcpkgReadmeError as exc:
        _log_tool_error("get_readme_from_vcpkg", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="get_readme_from_vcpkg", exc_info=True)
        raise


@mcp.tool()
async def get_package_info_from_vcpkg(
    package_name: str,
    ctx: Context,
    include_dependencies: bool = True,
    include_dev_dependencies: bool = False,
) -> object:
    """Get package basic information and dependencies from the vcpkg registry."""
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_info.handle(
            package_name, state, include_dependencies, include_dev_dependencies
        )
    except VcpkgReadmeError as exc:
        _log_tool_error("get_package_info_from_vcpkg", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="get_package_info_from_vcpkg", exc_info=True)
        raise


@mcp.tool()
async def search_packages_from_vcpkg(
    query: str,
    ctx: Context,
    limit: int = 20,
    quality: float | None = None,
    popularity: float | None = None,
) -> object:
    """Search for packages in the vcpkg registry.

    Results are ranked by a score blending manifest quality, upstream
    popularity, upstream maintenance and search relevance. ``quality`` and
    ``popularity`` are optional minimum scores between 0 and 1.
    """
    state: AppState = ctx.request_context.lifespan_context
    try:
        return await t_search.handle(query, state, limit, quality, popularity)
    except VcpkgReadmeError as exc:
        _log_tool_error("search_packages_from_vcpkg", exc)
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool="search_packages_from_vcpkg", exc_info=True)
        raise


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    settings = Settings()

    if settings.server.transport == "http":
        mcp.settings.host = settings.server.host
        mcp.settings.port = settings.server.port
        mcp.run(transport="streamable-http")
        return

    mcp.run()


if __name__ == "__main__":
    main()
