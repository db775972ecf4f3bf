from __future__ import annotations

from typing import Any

from pydantic import BaseModel, model_validator

# vcpkg.json allows exactly one of these to carry the port version.
_VERSION_KEYS = ("version", "version-semver", "version-date", "version-string")


class VcpkgDependency(BaseModel):
    name: str
    features: list[str] | None = None
    platform: str | None = None
    host: bool | None = None


class VcpkgFeature(BaseModel):
    description: str = ""
    dependencies: list[str | VcpkgDependency] | None = None

    @model_validator(mode="before")
    @classmethod
    def _join_description(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("description"), list):
            data = {**data, "description": "\n".join(data["description"])}
        return data


class VcpkgPortInfo(BaseModel):
    """Port manifest, parsed from vcpkg.json or a legacy CONTROL file."""

    name: str
    version: str = "unknown"
    port_version: int = 0
    description: str = ""
    homepage: str | None = None
    dependencies: list[str | VcpkgDependency] | None = None
    features: dict[str, VcpkgFeature] | None = None
    supports: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalise_manifest(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in _VERSION_KEYS:
            if data.get(key):
                data["version"] = str(data[key])
                break
        if "port-version" in data:
            data["port_version"] = data.pop("port-version")
        if isinstance(data.get("description"), list):
            data["description"] = "\n".join(data["description"])
        return data

    def dependency_names(self) -> list[str]:
        """Dependency names with any ``[feature,...]`` suffix stripped."""
        names: list[str] = []
        for dep in self.dependencies or []:
            if isinstance(dep, str):
                names.append(dep.split("[", 1)[0] or dep)
            else:
                names.append(dep.name)
        return names


class VcpkgGitHubSource(BaseModel):
    owner: str
    repo: str
    ref: str
    sha512: str


class VcpkgPortfileInfo(BaseModel):
    """Facts extracted from portfile.cmake."""

    vcpkg_from_github: VcpkgGitHubSource | None = None
