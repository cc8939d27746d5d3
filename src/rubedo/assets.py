# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Copy category asset subtrees from modules into the build output."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from .errors import AssetLinkFailed
from .linking import remove_path
from .logging import get_logger, info, ok, warn
from .modules import ModuleRecord
from .project import ProjectRoot

LOGGER = get_logger(__name__)

ASSET_CATEGORIES: Final[tuple[str, ...]] = (
    "animation_controllers",
    "animations",
    "blocks",
    "entities",
    "feature_rules",
    "features",
    "functions",
    "items",
    "loot_tables",
    "recipes",
    "spawn_rules",
    "structures",
    "texts",
)

# Need identifier-level merging (language keys, entity type ids, function
# paths), which is not implemented.
UNMERGED_CATEGORIES: Final[frozenset[str]] = frozenset({"entities", "functions", "texts"})


class AssetLinker:
    """Copy each module's asset categories into ``<output>/<category>/<name>``.

    ``<name>`` is the repository segment of the module identity, so two
    modules never write into the same destination directory. Every
    destination subtree is deleted before it is copied, which keeps repeated
    runs byte-identical and drops files removed upstream.
    """

    def __init__(self, project: ProjectRoot, *, use_emoji: bool = True) -> None:
        self._project = project
        self._use_emoji = use_emoji

    @property
    def output_dir(self) -> Path:
        return self._project.output_dir

    def destination(self, module: ModuleRecord, category: str) -> Path:
        return self.output_dir / category / module.name

    def link_assets(self, modules: Sequence[ModuleRecord]) -> list[Path]:
        """Copy supported categories of every module; return the destinations written.

        Raises:
            AssetLinkFailed: If two modules share a namespace or copying fails.
        """

        self._check_namespaces(modules)
        info("Copying dependency assets...", use_emoji=self._use_emoji)
        written: list[Path] = []
        for module in modules:
            for category in ASSET_CATEGORIES:
                source = module.local_path / category
                if not source.is_dir():
                    continue
                if category in UNMERGED_CATEGORIES:
                    warn(
                        f"Skipping {category} from {module.identity}: merging {category} is not supported yet",
                        use_emoji=self._use_emoji,
                    )
                    continue
                destination = self.destination(module, category)
                self._replace_tree(source, destination, identity=module.identity)
                LOGGER.debug("copied %s -> %s", source, destination)
                info(f"Copied {category} from {module.identity}", use_emoji=self._use_emoji)
                written.append(destination)
        ok("Dependency assets copied successfully!", use_emoji=self._use_emoji)
        return written

    def link_project_assets(self) -> list[Path]:
        """Copy the host project's own category directories into the output.

        Raises:
            AssetLinkFailed: If copying fails.
        """

        written: list[Path] = []
        for category in ASSET_CATEGORIES:
            source = self._project.path / category
            if not source.is_dir():
                continue
            destination = self.output_dir / category
            try:
                shutil.copytree(source, destination, dirs_exist_ok=True)
            except (OSError, shutil.Error) as exc:
                raise AssetLinkFailed(f"unable to copy {source} to {destination}: {exc}") from exc
            info(f"Copied {category} from project", use_emoji=self._use_emoji)
            written.append(destination)
        return written

    @staticmethod
    def _check_namespaces(modules: Sequence[ModuleRecord]) -> None:
        seen: dict[str, str] = {}
        for module in modules:
            previous = seen.setdefault(module.name, module.identity)
            if previous != module.identity:
                raise AssetLinkFailed(
                    f"asset namespace '{module.name}' is already used by {previous}",
                    identity=module.identity,
                )

    @staticmethod
    def _replace_tree(source: Path, destination: Path, *, identity: str) -> None:
        try:
            remove_path(destination)
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copytree(source, destination)
        except (OSError, shutil.Error) as exc:
            raise AssetLinkFailed(f"unable to copy {source} to {destination}: {exc}", identity=identity) from exc


__all__ = ["ASSET_CATEGORIES", "AssetLinker", "UNMERGED_CATEGORIES"]
