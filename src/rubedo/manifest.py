# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typed view over ``manifest.json`` limited to what the pipeline consumes."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import InvalidDependencyIdentity, ManifestError
from .project import ProjectRoot

_IDENTITY_SEPARATOR: Final[str] = "/"
_FORBIDDEN_SEGMENTS: Final[frozenset[str]] = frozenset({".", ".."})


def split_identity(identity: str) -> tuple[str, str]:
    """Return ``(owner, name)`` for a dependency identity.

    Args:
        identity: Identity in ``owner/name`` form.

    Returns:
        tuple[str, str]: Owner and repository name segments.

    Raises:
        InvalidDependencyIdentity: If the identity is not exactly two
            non-empty, path-safe segments.
    """

    parts = identity.split(_IDENTITY_SEPARATOR)
    if len(parts) != 2 or not all(part.strip() for part in parts):
        raise InvalidDependencyIdentity(f"Invalid module name: {identity!r}", identity=identity)
    owner, name = parts
    if owner in _FORBIDDEN_SEGMENTS or name in _FORBIDDEN_SEGMENTS or "\\" in identity:
        raise InvalidDependencyIdentity(f"Invalid module name: {identity!r}", identity=identity)
    return owner, name


class DependencyDescriptor(BaseModel):
    """One entry of the ``rubedo_dependencies`` list."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    module_name: str
    version: str = "latest"
    local_path: str | None = Field(
        default=None,
        validation_alias=AliasChoices("local_path", "localPath"),
    )

    @field_validator("version")
    @classmethod
    def _strip_version(cls, value: str) -> str:
        stripped = value.strip()
        return stripped or "latest"

    @property
    def identity(self) -> str:
        return self.module_name

    @property
    def owner(self) -> str:
        return split_identity(self.module_name)[0]

    @property
    def name(self) -> str:
        """Short identity segment used for asset namespaces."""

        return split_identity(self.module_name)[1]

    def override_path(self, project: ProjectRoot) -> Path | None:
        """Return the absolute override path, relative entries anchored at the project."""

        if not self.local_path:
            return None
        candidate = Path(self.local_path).expanduser()
        if not candidate.is_absolute():
            candidate = project.path / candidate
        return candidate.resolve()


class Manifest(BaseModel):
    """Project descriptor; keys outside the pipeline's concern are tolerated."""

    model_config = ConfigDict(extra="allow")

    format_version: int | None = None
    header: dict[str, Any] = Field(default_factory=dict)
    modules: list[dict[str, Any]] = Field(default_factory=list)
    dependencies: list[dict[str, Any]] | None = None
    capabilities: list[str] | None = None
    rubedo_dependencies: list[DependencyDescriptor] = Field(default_factory=list)


def parse_manifest(data: Mapping[str, Any], *, source: str = "manifest.json") -> Manifest:
    """Validate ``data`` and every dependency identity it declares.

    Raises:
        ManifestError: If the document does not match the expected shape.
        InvalidDependencyIdentity: If any dependency identity is malformed.
    """

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestError(f"{source} is invalid: {exc}") from exc
    for descriptor in manifest.rubedo_dependencies:
        split_identity(descriptor.module_name)
    return manifest


def load_json(path: Path) -> dict[str, Any]:
    """Read a JSON object from ``path``.

    Raises:
        ManifestError: If the file is missing, unreadable or not an object.
    """

    if not path.is_file():
        raise ManifestError(f"{path.name} not found in {path.parent}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ManifestError(f"Unable to read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"{path} must contain a JSON object")
    return data


def read_manifest(project: ProjectRoot) -> Manifest:
    """Load and validate the project's ``manifest.json``."""

    return parse_manifest(load_json(project.manifest_path), source=str(project.manifest_path))


def dependencies_of(manifest: Manifest) -> list[DependencyDescriptor]:
    return list(manifest.rubedo_dependencies)


def write_manifest(payload: Mapping[str, Any], path: Path) -> None:
    """Write ``payload`` as two-space indented JSON with a trailing newline."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


__all__ = [
    "DependencyDescriptor",
    "Manifest",
    "dependencies_of",
    "load_json",
    "parse_manifest",
    "read_manifest",
    "split_identity",
    "write_manifest",
]
