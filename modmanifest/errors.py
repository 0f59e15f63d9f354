"""Exception hierarchy for modmanifest."""

from __future__ import annotations

from pathlib import Path


class ModManifestError(RuntimeError):
    """Base class for fatal generation and loading failures."""


class ConfigError(ModManifestError):
    """Raised when the configuration file cannot be parsed."""


class DiscoveryError(ModManifestError):
    """Raised when a directory or file cannot be read during traversal."""

    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = Path(path)
        super().__init__(f"Failed to read {path}: {reason}")


class ArtifactError(ModManifestError):
    """Raised when the manifest artifact cannot be written or decoded."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        self.path = Path(path) if path is not None else None
        if path is not None:
            message = f"{message} ({path})"
        super().__init__(message)


__all__ = ["ArtifactError", "ConfigError", "DiscoveryError", "ModManifestError"]
