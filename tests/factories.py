"""Test doubles and model builders shared across the suite."""

from __future__ import annotations

import base64
from datetime import UTC, datetime, timedelta

from vcpkg_readme.models.github import (
    GitHubLicense,
    GitHubOwner,
    GitHubRepository,
    GitHubSearchItem,
    GitHubSearchResult,
)
from vcpkg_readme.models.vcpkg import VcpkgGitHubSource, VcpkgPortfileInfo, VcpkgPortInfo

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=UTC)


class FakeClock:
    """Manually advanced millisecond clock for MemoryCache."""

    def __init__(self, start_ms: int = 1_000_000) -> None:
        self.now_ms = start_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, ms: int) -> None:
        self.now_ms += ms


class FakeGitHub:
    """In-memory GitHubProtocol implementation.

    ``ports`` maps port name to manifest, ``portfiles`` and ``repositories``
    provide the upstream side. Names listed in ``failing`` raise on lookup.
    """

    def __init__(
        self,
        *,
        ports: dict[str, VcpkgPortInfo] | None = None,
        portfiles: dict[str, VcpkgPortfileInfo] | None = None,
        repositories: dict[str, GitHubRepository] | None = None,
        search_items: list[GitHubSearchItem] | None = None,
        total_count: int | None = None,
        port_readmes: dict[str, str] | None = None,
        upstream_readmes: dict[str, str] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.ports = ports or {}
        self.portfiles = portfiles or {}
        self.repositories = repositories or {}
        self.search_items = search_items or []
        self.total_count = len(self.search_items) if total_count is None else total_count
        self.port_readmes = port_readmes or {}
        self.upstream_readmes = upstream_readmes or {}
        self.failing = failing or set()
        self.search_calls: list[tuple[str, int]] = []

    async def search_ports(self, query: str, limit: int = 20) -> GitHubSearchResult:
        self.search_calls.append((query, limit))
        return GitHubSearchResult(
            total_count=self.total_count,
            items=self.search_items[:limit],
        )

    async def get_port_info(self, package_name: str) -> VcpkgPortInfo | None:
        if package_name in self.failing:
            raise RuntimeError(f"boom: {package_name}")
        return self.ports.get(package_name)

    async def get_portfile(self, package_name: str) -> VcpkgPortfileInfo | None:
        return self.portfiles.get(package_name)

    async def get_port_readme(self, package_name: str) -> str | None:
        return self.port_readmes.get(package_name)

    async def get_upstream_readme(self, owner: str, repo: str) -> str | None:
        return self.upstream_readmes.get(f"{owner}/{repo}")

    async def get_repository(self, owner: str, repo: str) -> GitHubRepository | None:
        return self.repositories.get(f"{owner}/{repo}")


def search_item(name: str, score: float = 50.0) -> GitHubSearchItem:
    return GitHubSearchItem(name="vcpkg.json", path=f"ports/{name}/vcpkg.json", score=score)


def from_github(owner: str, repo: str) -> VcpkgPortfileInfo:
    return VcpkgPortfileInfo(
        vcpkg_from_github=VcpkgGitHubSource(owner=owner, repo=repo, ref="v1.0.0", sha512="abc123")
    )


def repository(
    owner: str,
    *,
    stars: int = 100,
    forks: int = 10,
    watchers: int = 10,
    open_issues: int = 5,
    pushed_days_ago: int | None = 10,
    license_name: str | None = "MIT License",
) -> GitHubRepository:
    return GitHubRepository(
        description=f"{owner} upstream",
        license=GitHubLicense(key="mit", name=license_name, spdx_id="MIT") if license_name else None,
        topics=["json", "parser"],
        language="C++",
        stargazers_count=stars,
        forks_count=forks,
        watchers_count=watchers,
        open_issues_count=open_issues,
        pushed_at=None if pushed_days_ago is None else NOW - timedelta(days=pushed_days_ago),
        owner=GitHubOwner(login=owner),
    )


def json_parser_ports() -> FakeGitHub:
    """Two JSON parser ports that differ only in upstream popularity."""
    return FakeGitHub(
        ports={
            "nlohmann-json": VcpkgPortInfo(
                name="nlohmann-json",
                version="3.11.3",
                description="JSON for Modern C++",
                homepage="https://github.com/nlohmann/json",
            ),
            "rapidjson": VcpkgPortInfo(
                name="rapidjson",
                version="2023-07-17",
                description="A fast JSON parser/generator for C++",
                homepage="https://github.com/Tencent/rapidjson",
            ),
        },
        portfiles={
            "nlohmann-json": from_github("nlohmann", "json"),
            "rapidjson": from_github("Tencent", "rapidjson"),
        },
        repositories={
            "nlohmann/json": repository("nlohmann", stars=5000),
            "Tencent/rapidjson": repository("Tencent", stars=100),
        },
        search_items=[search_item("rapidjson"), search_item("nlohmann-json")],
        total_count=2,
    )


def file_contents(text: str) -> dict:
    """A contents-API payload carrying ``text`` base64 encoded."""
    return {
        "name": "file",
        "path": "file",
        "content": base64.b64encode(text.encode()).decode(),
        "encoding": "base64",
    }
