from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator

_PACKAGE_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9-]*[a-z0-9]$|^[a-z0-9]$")
_VERSION_RE = re.compile(r"^[\w.-]+$")


def _validate_package_name(v: str) -> str:
    if not v:
        raise ValueError("package_name must be a non-empty string")
    if v.strip() != v:
        raise ValueError("package_name cannot have leading or trailing whitespace")
    if not _PACKAGE_NAME_RE.match(v):
        raise ValueError(
            "package_name must contain only lowercase letters, numbers, and hyphens"
        )
    return v


# ---------------------------------------------------------------------------
# Shared output pieces
# ---------------------------------------------------------------------------


class UsageExample(BaseModel):
    title: str
    description: str | None = None
    code: str
    language: str


class InstallationInfo(BaseModel):
    command: str
    alternatives: list[str] = []


class PackageBasicInfo(BaseModel):
    name: str
    version: str
    description: str
    homepage: str | None = None
    license: str
    author: str
    keywords: list[str] = []


class RepositoryInfo(BaseModel):
    type: str = "git"
    url: str
    directory: str | None = None


class DownloadStats(BaseModel):
    last_day: int = 0
    last_week: int = 0
    last_month: int = 0


class ScoreDetail(BaseModel):
    quality: float
    popularity: float
    maintenance: float


class PackageScore(BaseModel):
    final: float
    detail: ScoreDetail


class PackageSearchResult(BaseModel):
    """Single scored port returned by search_packages_from_vcpkg."""

    name: str
    version: str
    description: str
    keywords: list[str]
    author: str
    publisher: str = "vcpkg"
    maintainers: list[str]
    score: PackageScore
    search_score: float


# ---------------------------------------------------------------------------
# get_readme_from_vcpkg
# ---------------------------------------------------------------------------


class GetPackageReadmeInput(BaseModel):
    package_name: str
    version: str = "latest"
    include_examples: bool = True

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        return _validate_package_name(v)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if not v:
            raise ValueError("version must be a non-empty string")
        if v != "latest" and not _VERSION_RE.match(v):
            raise ValueError("version must be 'latest' or contain only [A-Za-z0-9_.-]")
        return v


class GetPackageReadmeOutput(BaseModel):
    package_name: str
    version: str
    description: str
    readme_content: str
    usage_examples: list[UsageExample]
    installation: InstallationInfo
    basic_info: PackageBasicInfo
    repository: RepositoryInfo | None = None
    similar_packages: list[str] = []  # Only filled when exists is False
    exists: bool


# ---------------------------------------------------------------------------
# get_package_info_from_vcpkg
# ---------------------------------------------------------------------------


class GetPackageInfoInput(BaseModel):
    package_name: str
    include_dependencies: bool = True
    include_dev_dependencies: bool = False

    @field_validator("package_name")
    @classmethod
    def validate_package_name(cls, v: str) -> str:
        return _validate_package_name(v)


class GetPackageInfoOutput(BaseModel):
    package_name: str
    latest_version: str
    description: str
    author: str
    license: str
    keywords: list[str]
    dependencies: dict[str, str] | None = None
    dev_dependencies: dict[str, str] | None = None
    download_stats: DownloadStats
    repository: RepositoryInfo | None = None
    exists: bool


# ---------------------------------------------------------------------------
# search_packages_from_vcpkg
# ---------------------------------------------------------------------------


class SearchPackagesInput(BaseModel):
    query: str = Field(max_length=200)
    limit: int = Field(default=20, ge=1, le=250)
    quality: float | None = Field(default=None, ge=0.0, le=1.0)
    popularity: float | None = Field(default=None, ge=0.0, le=1.0)

    @field_validator("query")
    @classmethod
    def validate_query(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("query must not be empty or whitespace only")
        return v


class SearchPackagesOutput(BaseModel):
    query: str
    total: int  # Raw index count, may exceed len(packages)
    packages: list[PackageSearchResult]
