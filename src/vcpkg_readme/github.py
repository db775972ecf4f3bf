"""GitHub REST client for the vcpkg registry and upstream repositories.

All network I/O goes through a single GitHubClient instance shared across
tool calls. The client receives an httpx.AsyncClient via constructor
injection; the lifespan owns the client lifecycle. Responses are validated
into pydantic models here, at the boundary, and cached in the shared
MemoryCache.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from vcpkg_readme.errors import ErrorCode, VcpkgReadmeError
from vcpkg_readme.models.github import GitHubFileContent, GitHubRepository, GitHubSearchResult
from vcpkg_readme.models.vcpkg import VcpkgPortInfo
from vcpkg_readme.ports import (
    PORTS_PREFIX,
    REGISTRY_OWNER,
    REGISTRY_REPO,
    decode_file_content,
    parse_control_file,
    parse_portfile,
)

if TYPE_CHECKING:
    from vcpkg_readme.config import GitHubSettings
    from vcpkg_readme.models.vcpkg import VcpkgPortfileInfo
    from vcpkg_readme.protocols import CacheProtocol

log = structlog.get_logger()

SEARCH_CACHE_TTL_MS = 30 * 60 * 1000
FILE_CACHE_TTL_MS = 60 * 60 * 1000
REPO_CACHE_TTL_MS = 60 * 60 * 1000

# GitHub code search returns at most 100 items per page.
MAX_SEARCH_PAGE_SIZE = 100

README_FILENAMES = ("README.md", "readme.md", "Readme.md", "README", "readme")


def build_http_client(settings: GitHubSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    headers = {
        "Accept": "application/vnd.github.v3+json",
        "User-Agent": settings.user_agent,
    }
    if settings.token:
        headers["Authorization"] = f"token {settings.token}"
    else:
        log.warning("github_token_missing", message="Unauthenticated requests are rate limited")

    return httpx.AsyncClient(
        base_url=settings.api_url,
        timeout=httpx.Timeout(settings.timeout_seconds),
        headers=headers,
        limits=httpx.Limits(
            max_connections=10,
            max_keepalive_connections=5,
        ),
    )


def _http_error(response: httpx.Response, context: str) -> VcpkgReadmeError:
    """Map a non-2xx GitHub response to a VcpkgReadmeError."""
    status = response.status_code

    if status == 404:
        return VcpkgReadmeError(
            code=ErrorCode.NOT_FOUND,
            message=f"Resource not found in {context}",
            suggestion="Check the package name; it must match a directory under ports/.",
            recoverable=False,
        )
    # GitHub signals primary rate limits with 403 and a zeroed remaining count.
    if status == 429 or (status == 403 and response.headers.get("x-ratelimit-remaining") == "0"):
        return VcpkgReadmeError(
            code=ErrorCode.RATE_LIMIT_EXCEEDED,
            message=f"Rate limit exceeded in {context}",
            suggestion="Wait before retrying, or set GITHUB_TOKEN to raise the limit.",
            recoverable=True,
        )
    if status == 403:
        return VcpkgReadmeError(
            code=ErrorCode.FORBIDDEN,
            message=f"Access forbidden in {context}. Check API token.",
            suggestion="Verify that GITHUB_TOKEN is valid and has read access.",
            recoverable=False,
        )
    if status in (500, 502, 503, 504):
        return VcpkgReadmeError(
            code=ErrorCode.SERVER_ERROR,
            message=f"Server error in {context}: {status} {response.reason_phrase}",
            suggestion="GitHub may be temporarily unavailable. Try again later.",
            recoverable=True,
        )
    return VcpkgReadmeError(
        code=ErrorCode.HTTP_ERROR,
        message=f"HTTP error in {context}: {status} {response.reason_phrase}",
        suggestion="The GitHub API returned an unexpected status.",
        recoverable=False,
    )


class GitHubClient:
    """vcpkg registry metadata source implementing GitHubProtocol."""

    def __init__(self, client: httpx.AsyncClient, cache: CacheProtocol) -> None:
        self._client = client
        self._cache = cache

    async def _request_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET ``url`` and return the decoded JSON body.

        Raises VcpkgReadmeError on non-2xx responses, timeouts and network
        errors. No retries are attempted.
        """
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as exc:
            raise VcpkgReadmeError(
                code=ErrorCode.TIMEOUT_ERROR,
                message=f"Request timeout in GitHub API: {url}",
                suggestion="GitHub did not respond in time. Try again later.",
                recoverable=True,
            ) from exc
        except httpx.HTTPError as exc:
            raise VcpkgReadmeError(
                code=ErrorCode.NETWORK_ERROR,
                message=f"Network error in GitHub API: {exc}",
                suggestion="Check your internet connection and try again.",
                recoverable=True,
            ) from exc

        if not response.is_success:
            raise _http_error(response, "GitHub API")

        try:
            return response.json()
        except ValueError as exc:
            raise VcpkgReadmeError(
                code=ErrorCode.HTTP_ERROR,
                message=f"Invalid JSON from GitHub API: {url}",
                suggestion="The GitHub API returned an unexpected body.",
                recoverable=True,
            ) from exc

    # ------------------------------------------------------------------
    # Registry (Microsoft/vcpkg)
    # ------------------------------------------------------------------

    async def search_ports(self, query: str, limit: int = 20) -> GitHubSearchResult:
        """Code-search port manifests in the vcpkg registry."""
        cache_key = f"github_search:{query}:{limit}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        search_query = (
            f"repo:{REGISTRY_OWNER}/{REGISTRY_REPO} path:{PORTS_PREFIX}/ filename:vcpkg.json {query}"
        )
        log.debug("github_search", query=query, limit=limit)
        data = await self._request_json(
            "/search/code",
            params={"q": search_query, "per_page": min(limit, MAX_SEARCH_PAGE_SIZE)},
        )
        result = GitHubSearchResult.model_validate(data)

        self._cache.set(cache_key, result, SEARCH_CACHE_TTL_MS)
        return result

    async def get_file_content(
        self, owner: str, repo: str, path: str, ref: str | None = "master"
    ) -> GitHubFileContent:
        """Fetch a file via the contents API. ``ref=None`` reads the default branch."""
        cache_key = f"github_file:{owner}/{repo}:{path}:{ref or 'default'}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        log.debug("github_file_fetch", owner=owner, repo=repo, path=path, ref=ref)
        data = await self._request_json(
            f"/repos/{owner}/{repo}/contents/{quote(path)}",
            params={"ref": ref} if ref else None,
        )
        result = GitHubFileContent.model_validate(data)

        self._cache.set(cache_key, result, FILE_CACHE_TTL_MS)
        return result

    async def _get_port_file_text(self, package_name: str, filename: str) -> str:
        file = await self.get_file_content(
            REGISTRY_OWNER, REGISTRY_REPO, f"{PORTS_PREFIX}/{package_name}/{filename}"
        )
        return decode_file_content(file)

    async def get_port_info(self, package_name: str) -> VcpkgPortInfo | None:
        """Read the port manifest, falling back to the legacy CONTROL file.

        Returns ``None`` when neither file can be fetched or parsed.
        """
        try:
            text = await self._get_port_file_text(package_name, "vcpkg.json")
            return VcpkgPortInfo.model_validate_json(text)
        except (VcpkgReadmeError, ValidationError, UnicodeDecodeError, ValueError):
            log.debug("port_manifest_unavailable", package_name=package_name, exc_info=True)

        try:
            text = await self._get_port_file_text(package_name, "CONTROL")
            return parse_control_file(text, package_name)
        except (VcpkgReadmeError, ValidationError, UnicodeDecodeError, ValueError):
            log.debug("port_control_unavailable", package_name=package_name, exc_info=True)
            return None

    async def get_portfile(self, package_name: str) -> VcpkgPortfileInfo | None:
        try:
            text = await self._get_port_file_text(package_name, "portfile.cmake")
        except (VcpkgReadmeError, UnicodeDecodeError, ValueError):
            log.debug("portfile_unavailable", package_name=package_name, exc_info=True)
            return None
        return parse_portfile(text)

    async def get_port_readme(self, package_name: str) -> str | None:
        """Return the first README found in the port directory, if any."""
        for filename in README_FILENAMES:
            try:
                return await self._get_port_file_text(package_name, filename)
            except (VcpkgReadmeError, UnicodeDecodeError, ValueError):
                continue

        log.debug("port_readme_not_found", package_name=package_name)
        return None

    # ------------------------------------------------------------------
    # Upstream repositories
    # ------------------------------------------------------------------

    async def get_upstream_readme(self, owner: str, repo: str) -> str | None:
        try:
            file = await self.get_file_content(owner, repo, "README.md", ref=None)
            return decode_file_content(file)
        except (VcpkgReadmeError, UnicodeDecodeError, ValueError):
            log.debug("upstream_readme_unavailable", owner=owner, repo=repo, exc_info=True)
            return None

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository | None:
        """Upstream repository metadata. Best effort: ``None`` when unavailable."""
        cache_key = f"github_repo:{owner}/{repo}"
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            data = await self._request_json(f"/repos/{owner}/{repo}")
            result = GitHubRepository.model_validate(data)
        except (VcpkgReadmeError, ValidationError, ValueError):
            log.debug("upstream_repository_unavailable", owner=owner, repo=repo, exc_info=True)
            return None

        self._cache.set(cache_key, result, REPO_CACHE_TTL_MS)
        return result
