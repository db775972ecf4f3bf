"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and injected into every tool handler via the MCP Context object.
The lifespan owns the lifetime of every field: the HTTP client is closed and
the cache cleanup task cancelled on shutdown.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from vcpkg_readme.config import Settings
    from vcpkg_readme.protocols import CacheProtocol, GitHubProtocol


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    cache: CacheProtocol
    github: GitHubProtocol
    http_client: httpx.AsyncClient | None = None
