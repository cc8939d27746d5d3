# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy shared by the install, build and watch pipelines."""

from __future__ import annotations


class RubedoError(Exception):
    """Base class for every failure surfaced to the CLI.

    Attributes:
        identity: ``owner/name`` of the dependency involved, when one applies.
    """

    def __init__(self, message: str, *, identity: str | None = None) -> None:
        super().__init__(message)
        self.identity = identity

    def __str__(self) -> str:
        message = super().__str__()
        if self.identity is None:
            return message
        return f"{self.identity}: {message}"


class ConfigError(RubedoError):
    """Raised when ``rubedo.toml`` or environment overrides are invalid."""


class ManifestError(RubedoError):
    """Raised when ``manifest.json`` is missing or cannot be parsed."""


class InvalidDependencyIdentity(ManifestError):
    """Raised for a dependency identity that is not ``owner/name``."""


class ResolutionError(RubedoError):
    """Raised when a dependency cannot be brought to its declared revision."""


class RemoteUnreachable(ResolutionError):
    """Raised when clone or fetch against the remote repository fails."""


class CheckoutFailed(ResolutionError):
    """Raised when checkout, pull or linking of a module fails."""


class CompileFailed(RubedoError):
    """Raised when the external source bundler exits unsuccessfully."""


class AssetLinkFailed(RubedoError):
    """Raised when copying a module's asset subtree fails."""


class ManifestMergeFailed(RubedoError):
    """Raised when dependency manifests cannot be read or the output written."""


__all__ = [
    "AssetLinkFailed",
    "CheckoutFailed",
    "CompileFailed",
    "ConfigError",
    "InvalidDependencyIdentity",
    "ManifestError",
    "ManifestMergeFailed",
    "RemoteUnreachable",
    "ResolutionError",
    "RubedoError",
]
