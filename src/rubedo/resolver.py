# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Staleness checks and checkouts for each version variant."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .errors import CheckoutFailed
from .git import GitRepository, is_git_checkout
from .logging import get_logger
from .modules import ModuleRecord
from .versions import Commit, Latest, Ref, Tag, VersionVariant

LOGGER = get_logger(__name__)

RepositoryFactory = Callable[[Path, str], GitRepository]


def _default_factory(path: Path, identity: str) -> GitRepository:
    return GitRepository(path, identity=identity)


class VersionResolver:
    """Decide whether a module is stale and move it to its declared revision."""

    def __init__(self, *, repository_factory: RepositoryFactory | None = None) -> None:
        self._repository_factory = repository_factory or _default_factory

    def repository(self, module: ModuleRecord) -> GitRepository:
        return self._repository_factory(module.local_path, module.identity)

    def is_stale(self, module: ModuleRecord, variant: VersionVariant | None = None) -> bool:
        """Return ``True`` when the local revision differs from what ``variant`` selects.

        Linked modules are never stale; a module that was never materialised
        always is. Fetches from the remote where the answer depends on it.

        Args:
            module: Module record to inspect.
            variant: Parsed version expression, defaults to the record's own.

        Returns:
            bool: Whether a checkout would change the working tree.

        Raises:
            RemoteUnreachable: If fetching from the remote fails.
            CheckoutFailed: If the local repository cannot be inspected.
        """

        if module.is_linked:
            return False
        if not is_git_checkout(module.local_path):
            return True
        variant = variant if variant is not None else module.variant
        repo = self.repository(module)
        match variant:
            case Latest():
                repo.fetch()
                if repo.current_branch() is None:
                    return True
                return repo.commits_behind_upstream() > 0
            case Tag():
                repo.fetch()
                tag_commit = repo.tag_commits().get(variant.tag_name)
                if tag_commit is None:
                    LOGGER.debug("%s: tag %s not found", module.identity, variant.tag_name)
                    return True
                return repo.head_commit() != tag_commit
            case Commit(sha=sha):
                return not repo.head_commit().startswith(sha)
            case Ref(name=name):
                repo.fetch()
                if repo.current_branch() != name:
                    return True
                return repo.commits_behind_upstream() > 0
        raise TypeError(f"unsupported version variant: {variant!r}")

    def checkout(self, module: ModuleRecord, variant: VersionVariant | None = None) -> None:
        """Fetch and check out the revision ``variant`` selects.

        Raises:
            CheckoutFailed: If the tree is dirty or git refuses the checkout.
            RemoteUnreachable: If fetching from the remote fails.
        """

        if module.is_linked:
            LOGGER.debug("%s: linked module, skipping checkout", module.identity)
            return
        variant = variant if variant is not None else module.variant
        repo = self.repository(module)
        if repo.is_dirty():
            raise CheckoutFailed(
                f"working tree at {module.local_path} has uncommitted changes",
                identity=module.identity,
            )
        repo.fetch()
        match variant:
            case Latest():
                branch = repo.current_branch()
                if branch is None:
                    branch = repo.default_branch()
                    if branch is None:
                        raise CheckoutFailed("unable to determine the remote default branch", identity=module.identity)
                    repo.checkout(branch)
                repo.pull(branch)
            case Tag():
                repo.checkout(variant.ref)
            case Commit(sha=sha):
                repo.checkout(sha)
            case Ref(name=name):
                repo.checkout(name)
                if repo.current_branch() == name:
                    repo.pull(name)
            case _:
                raise TypeError(f"unsupported version variant: {variant!r}")


__all__ = ["RepositoryFactory", "VersionResolver"]
