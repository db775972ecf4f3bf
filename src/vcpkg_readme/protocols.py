"""Protocol interfaces for swappable components.

Tool handlers, the search pipeline and AppState reference these protocols,
not the concrete implementations. This allows:
- Tests to use lightweight in-memory fakes for the GitHub client
- A different cache backend to be swapped in without changing tool code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from vcpkg_readme.models.cache import CacheStats
    from vcpkg_readme.models.github import GitHubRepository, GitHubSearchResult
    from vcpkg_readme.models.vcpkg import VcpkgPortfileInfo, VcpkgPortInfo


class CacheProtocol(Protocol):
    """Interface for the response cache."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> bool: ...

    def clear(self) -> None: ...

    def cleanup(self) -> int: ...

    def stats(self) -> CacheStats: ...


class GitHubProtocol(Protocol):
    """Interface for the vcpkg registry / GitHub metadata source."""

    async def search_ports(self, query: str, limit: int = 20) -> GitHubSearchResult: ...

    async def get_port_info(self, package_name: str) -> VcpkgPortInfo | None: ...

    async def get_portfile(self, package_name: str) -> VcpkgPortfileInfo | None: ...

    async def get_port_readme(self, package_name: str) -> str | None: ...

    async def get_upstream_readme(self, owner: str, repo: str) -> str | None: ...

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository | None: ...
