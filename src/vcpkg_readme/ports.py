"""Pure helpers for vcpkg port metadata.

Parses the three files a port directory carries (vcpkg.json, the legacy
CONTROL file, portfile.cmake) and derives the presentation fields shared by
the tool handlers. No I/O, no AppState.
"""

from __future__ import annotations

import base64
import re
from typing import TYPE_CHECKING

from vcpkg_readme.models.tools import (
    DownloadStats,
    InstallationInfo,
    PackageBasicInfo,
    RepositoryInfo,
    UsageExample,
)
from vcpkg_readme.models.vcpkg import VcpkgGitHubSource, VcpkgPortfileInfo, VcpkgPortInfo

if TYPE_CHECKING:
    from vcpkg_readme.models.github import GitHubFileContent, GitHubRepository

PORTS_PREFIX = "ports"
REGISTRY_OWNER = "Microsoft"
REGISTRY_REPO = "vcpkg"
REGISTRY_URL = f"https://github.com/{REGISTRY_OWNER}/{REGISTRY_REPO}"

UNKNOWN_LICENSE = "See upstream repository"
COMMUNITY_AUTHOR = "vcpkg community"

_BASE_KEYWORDS = ["vcpkg", "cpp", "c++", "native"]
_DEPENDENCY_KEYWORDS = ("boost", "qt", "opencv")

_FROM_GITHUB_RE = re.compile(
    r"vcpkg_from_github\s*\(\s*OUT_SOURCE_PATH\s+\w+\s+"
    r"REPO\s+([^/\s]+)/(\S+)\s+"
    r"REF\s+(\S+)\s+"
    r"SHA512\s+([^\s)]+)",
    re.DOTALL,
)


def decode_file_content(file: GitHubFileContent) -> str:
    """Return the text of a contents-API payload, decoding base64 if needed."""
    if file.encoding == "base64":
        return base64.b64decode(file.content).decode("utf-8")
    return file.content


def port_name_from_path(path: str) -> str | None:
    """``'ports/zlib/vcpkg.json'`` → ``'zlib'``; ``None`` for any other shape."""
    parts = path.split("/")
    if len(parts) < 2 or parts[0] != PORTS_PREFIX or not parts[1]:
        return None
    return parts[1]


def parse_control_file(content: str, package_name: str) -> VcpkgPortInfo:
    """Parse a legacy CONTROL file (``Key: value`` lines)."""
    fields: dict[str, object] = {"name": package_name, "version": "unknown", "description": ""}

    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("Version:"):
            fields["version"] = stripped[len("Version:") :].strip()
        elif stripped.startswith("Description:"):
            fields["description"] = stripped[len("Description:") :].strip()
        elif stripped.startswith("Homepage:"):
            fields["homepage"] = stripped[len("Homepage:") :].strip()
        elif stripped.startswith("Build-Depends:"):
            deps = stripped[len("Build-Depends:") :].split(",")
            fields["dependencies"] = [dep.strip() for dep in deps if dep.strip()]

    return VcpkgPortInfo.model_validate(fields)


def parse_portfile(content: str) -> VcpkgPortfileInfo:
    """Extract the ``vcpkg_from_github`` source, if the portfile has one."""
    match = _FROM_GITHUB_RE.search(content)
    if match is None:
        return VcpkgPortfileInfo()
    owner, repo, ref, sha512 = match.groups()
    return VcpkgPortfileInfo(
        vcpkg_from_github=VcpkgGitHubSource(owner=owner, repo=repo, ref=ref, sha512=sha512)
    )


# ---------------------------------------------------------------------------
# Derived presentation fields
# ---------------------------------------------------------------------------


def repository_info(package_name: str, portfile: VcpkgPortfileInfo | None) -> RepositoryInfo:
    """Upstream repo when the port builds from GitHub, else the port directory."""
    if portfile is not None and portfile.vcpkg_from_github is not None:
        source = portfile.vcpkg_from_github
        return RepositoryInfo(url=f"https://github.com/{source.owner}/{source.repo}")
    return RepositoryInfo(url=REGISTRY_URL, directory=f"{PORTS_PREFIX}/{package_name}")


def get_author(upstream: GitHubRepository | None) -> str:
    if upstream is not None and upstream.owner is not None and upstream.owner.login:
        return upstream.owner.login
    return COMMUNITY_AUTHOR


def get_license(upstream: GitHubRepository | None) -> str | None:
    if upstream is not None and upstream.license is not None and upstream.license.name:
        return upstream.license.name
    return None


def get_maintainers(upstream: GitHubRepository | None) -> list[str]:
    maintainers = ["vcpkg team"]
    if upstream is not None and upstream.owner is not None and upstream.owner.login:
        maintainers.append(upstream.owner.login)
    return maintainers


def generate_keywords(port: VcpkgPortInfo, upstream: GitHubRepository | None) -> list[str]:
    """Base vcpkg keywords plus upstream language/topics and dependency hints.

    Duplicates are removed, first occurrence wins.
    """
    keywords = list(_BASE_KEYWORDS)

    if upstream is not None:
        if upstream.language:
            keywords.append(upstream.language.lower())
        keywords.extend(upstream.topics[:5])

    dependency_names = port.dependency_names()
    if dependency_names:
        keywords.append("dependencies")
        for name in dependency_names[:3]:
            keywords.extend(hint for hint in _DEPENDENCY_KEYWORDS if hint in name)

    return list(dict.fromkeys(keywords))


def download_stats(upstream: GitHubRepository | None) -> DownloadStats:
    """vcpkg publishes no download counts; approximate from stars and forks."""
    if upstream is None:
        return DownloadStats()
    last_month = (upstream.stargazers_count + upstream.forks_count) // 10
    last_week = last_month // 4
    return DownloadStats(last_day=last_week // 7, last_week=last_week, last_month=last_month)


def installation_info(package_name: str) -> InstallationInfo:
    return InstallationInfo(
        command=f"vcpkg install {package_name}",
        alternatives=[
            f"vcpkg install {package_name}:x64-windows",
            f"vcpkg install {package_name}:x64-linux",
            f"vcpkg install {package_name}:x64-osx",
        ],
    )


def basic_info(port: VcpkgPortInfo, version: str) -> PackageBasicInfo:
    return PackageBasicInfo(
        name=port.name,
        version=version,
        description=port.description,
        homepage=port.homepage,
        license=UNKNOWN_LICENSE,
        author=COMMUNITY_AUTHOR,
        keywords=list(_BASE_KEYWORDS),
    )


def vcpkg_examples(package_name: str, port: VcpkgPortInfo) -> list[UsageExample]:
    """Install and CMake examples every port gets, plus a features example."""
    examples = [
        UsageExample(
            title="Install with vcpkg",
            description="Install the package using vcpkg package manager",
            code=f"vcpkg install {package_name}",
            language="bash",
        ),
        UsageExample(
            title="CMake Integration",
            description="Use the package in your CMake project with vcpkg toolchain",
            code=(
                "# In your CMakeLists.txt\n"
                f"find_package({package_name} CONFIG REQUIRED)\n"
                f"target_link_libraries(your_target PRIVATE {package_name})"
            ),
            language="cmake",
        ),
    ]

    if port.features:
        features = ",".join(list(port.features)[:2])
        examples.append(
            UsageExample(
                title="Install with Features",
                description="Install the package with specific features enabled",
                code=f"vcpkg install {package_name}[{features}]",
                language="bash",
            )
        )

    return examples


def fallback_readme(port: VcpkgPortInfo, portfile: VcpkgPortfileInfo | None) -> str:
    """Synthesize a README for ports that ship none and have no upstream one."""
    parts = [f"# {port.name}\n\n"]

    if port.description:
        parts.append(f"{port.description}\n\n")
    if port.homepage:
        parts.append(f"**Homepage:** {port.homepage}\n\n")

    parts.append("## Installation\n\n")
    parts.append(f"```bash\nvcpkg install {port.name}\n```\n\n")

    parts.append("## Usage\n\n")
    parts.append("Add the following to your CMakeLists.txt:\n\n")
    parts.append(
        "```cmake\n"
        f"find_package({port.name} CONFIG REQUIRED)\n"
        f"target_link_libraries(your_target PRIVATE {port.name})\n"
        "```\n\n"
    )

    dependency_names = port.dependency_names()
    if dependency_names:
        parts.append("## Dependencies\n\n")
        parts.extend(f"- {name}\n" for name in dependency_names)
        parts.append("\n")

    if portfile is not None and portfile.vcpkg_from_github is not None:
        source = portfile.vcpkg_from_github
        slug = f"{source.owner}/{source.repo}"
        parts.append("## Source\n\n")
        parts.append(f"This package is based on [{slug}](https://github.com/{slug}).\n\n")

    return "".join(parts)
