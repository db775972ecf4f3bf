"""Response shapes returned by the GitHub REST API.

Only the fields this server reads are declared; everything else in the
payload is ignored. Optional fields default to ``None`` / empty so callers
never have to probe raw dicts.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class GitHubOwner(BaseModel):
    login: str


class GitHubLicense(BaseModel):
    key: str | None = None
    name: str | None = None
    spdx_id: str | None = None


class GitHubRepository(BaseModel):
    """Upstream repository metadata used for scoring and package info."""

    full_name: str | None = None
    description: str | None = None
    license: GitHubLicense | None = None
    topics: list[str] = []
    language: str | None = None
    stargazers_count: int = 0
    forks_count: int = 0
    watchers_count: int = 0
    open_issues_count: int = 0
    pushed_at: datetime | None = None
    archived: bool = False
    disabled: bool = False
    owner: GitHubOwner | None = None


class GitHubSearchItem(BaseModel):
    name: str = ""
    path: str
    score: float = 0.0  # Raw relevance reported by code search


class GitHubSearchResult(BaseModel):
    total_count: int = 0
    incomplete_results: bool = False
    items: list[GitHubSearchItem] = []


class GitHubFileContent(BaseModel):
    name: str = ""
    path: str = ""
    content: str = ""
    encoding: str = ""
