# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Union dependency manifests into the host manifest.

The union is keyed: external dependencies by ``module_name`` (``uuid`` when
no name is given), capabilities by their literal value. It is deterministic
and idempotent for a fixed input, but not commutative: when two dependencies
require the same external module at different versions, whichever is seen
first wins and the other is dropped without reconciliation.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

from .errors import ManifestError, ManifestMergeFailed
from .logging import get_logger, info, ok
from .manifest import load_json, write_manifest
from .modules import ModuleRecord
from .project import MANIFEST_FILENAME, ProjectRoot

LOGGER = get_logger(__name__)

DEPENDENCIES_FIELD: Final[str] = "dependencies"
CAPABILITIES_FIELD: Final[str] = "capabilities"


def dependency_key(entry: Mapping[str, Any]) -> str | None:
    """Return the identity an external dependency entry is deduplicated by."""

    for field in ("module_name", "uuid"):
        value = entry.get(field)
        if isinstance(value, str) and value:
            return value
    return None


def _list_field(document: dict[str, Any], field: str) -> list[Any]:
    value = document.get(field)
    if not isinstance(value, list):
        value = document[field] = []
    return value


def _union_dependencies(target: list[Any], additions: Sequence[Any]) -> None:
    seen = {dependency_key(entry) for entry in target if isinstance(entry, Mapping)}
    for entry in additions:
        if not isinstance(entry, Mapping):
            continue
        key = dependency_key(entry)
        if key is None or key in seen:
            continue
        seen.add(key)
        target.append(copy.deepcopy(dict(entry)))


def _union_capabilities(target: list[Any], additions: Sequence[Any]) -> None:
    for capability in additions:
        if capability not in target:
            target.append(capability)


class ManifestMerger:
    """Merge each dependency's external dependencies and capabilities into the host."""

    def __init__(self, project: ProjectRoot, *, use_emoji: bool = True) -> None:
        self._project = project
        self._use_emoji = use_emoji

    @staticmethod
    def merge(host: Mapping[str, Any], dependency_manifests: Sequence[Mapping[str, Any]]) -> dict[str, Any]:
        """Return a deep copy of ``host`` extended with every dependency's declarations.

        Args:
            host: Host manifest document; never mutated.
            dependency_manifests: Dependency manifest documents in declaration order.

        Returns:
            dict[str, Any]: Merged manifest document.
        """

        merged: dict[str, Any] = copy.deepcopy(dict(host))
        for manifest in dependency_manifests:
            dependencies = manifest.get(DEPENDENCIES_FIELD)
            if isinstance(dependencies, list):
                _union_dependencies(_list_field(merged, DEPENDENCIES_FIELD), dependencies)
            capabilities = manifest.get(CAPABILITIES_FIELD)
            if isinstance(capabilities, list):
                _union_capabilities(_list_field(merged, CAPABILITIES_FIELD), capabilities)
        return merged

    def read_dependency_manifests(self, modules: Sequence[ModuleRecord]) -> list[dict[str, Any]]:
        """Load ``manifest.json`` from each module that ships one.

        Raises:
            ManifestMergeFailed: If a present manifest cannot be parsed.
        """

        documents: list[dict[str, Any]] = []
        for module in modules:
            path = module.local_path / MANIFEST_FILENAME
            if not path.is_file():
                LOGGER.debug("%s: no %s, nothing to merge", module.identity, MANIFEST_FILENAME)
                continue
            try:
                documents.append(load_json(path))
            except ManifestError as exc:
                raise ManifestMergeFailed(str(exc), identity=module.identity) from exc
        return documents

    def merge_into_output(self, host: Mapping[str, Any], modules: Sequence[ModuleRecord]) -> Path:
        """Merge and write the result to ``<output>/manifest.json``.

        Returns:
            Path: Location of the written manifest.

        Raises:
            ManifestMergeFailed: If reading a dependency manifest or writing fails.
        """

        info("Merging manifest...", use_emoji=self._use_emoji)
        merged = self.merge(host, self.read_dependency_manifests(modules))
        destination = self._project.output_manifest_path
        try:
            write_manifest(merged, destination)
        except OSError as exc:
            raise ManifestMergeFailed(f"unable to write {destination}: {exc}") from exc
        ok("Manifest merged successfully!", use_emoji=self._use_emoji)
        return destination


__all__ = ["ManifestMerger", "dependency_key"]
