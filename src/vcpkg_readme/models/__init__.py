from __future__ import annotations

from vcpkg_readme.models.cache import CacheEntry, CacheStats
from vcpkg_readme.models.github import (
    GitHubFileContent,
    GitHubLicense,
    GitHubOwner,
    GitHubRepository,
    GitHubSearchItem,
    GitHubSearchResult,
)
from vcpkg_readme.models.tools import (
    GetPackageInfoInput,
    GetPackageInfoOutput,
    GetPackageReadmeInput,
    GetPackageReadmeOutput,
    PackageSearchResult,
    SearchPackagesInput,
    SearchPackagesOutput,
    UsageExample,
)
from vcpkg_readme.models.vcpkg import (
    VcpkgDependency,
    VcpkgFeature,
    VcpkgGitHubSource,
    VcpkgPortfileInfo,
    VcpkgPortInfo,
)

__all__ = [
    # cache
    "CacheEntry",
    "CacheStats",
    # github
    "GitHubOwner",
    "GitHubLicense",
    "GitHubRepository",
    "GitHubSearchItem",
    "GitHubSearchResult",
    "GitHubFileContent",
    # vcpkg
    "VcpkgDependency",
    "VcpkgFeature",
    "VcpkgPortInfo",
    "VcpkgGitHubSource",
    "VcpkgPortfileInfo",
    # tools
    "UsageExample",
    "PackageSearchResult",
    "GetPackageReadmeInput",
    "GetPackageReadmeOutput",
    "GetPackageInfoInput",
    "GetPackageInfoOutput",
    "SearchPackagesInput",
    "SearchPackagesOutput",
]
