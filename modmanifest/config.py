"""Configuration loading for modmanifest (.modmanifest.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional, Sequence

import yaml

from .artifact import DEFAULT_CHUNK_SIZE
from .errors import ConfigError

CONFIG_FILENAME = ".modmanifest.yml"

DEFAULT_SOURCE_EXTENSION = "php"
DEFAULT_EXCLUDE_DIRS: FrozenSet[str] = frozenset({".", "..", "test", "tests", "logs"})
DEFAULT_OUTPUT = Path("vendor") / "modules.json"


@dataclass
class GeneratorConfig:
    """Settings for one generation run."""

    source_extension: str = DEFAULT_SOURCE_EXTENSION
    exclude_dirs: FrozenSet[str] = field(default_factory=lambda: DEFAULT_EXCLUDE_DIRS)
    output: Path = DEFAULT_OUTPUT
    chunk_size: int = DEFAULT_CHUNK_SIZE
    workers: int = 1

    @property
    def suffix(self) -> str:
        return f".{self.source_extension}"

    def output_path(self, root: Path) -> Path:
        """Return the artifact location, resolving relative paths against ``root``."""
        if self.output.is_absolute():
            return self.output
        return root / self.output


def load_config(config_path: Path) -> GeneratorConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    if not config_file.exists():
        return GeneratorConfig()

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = GeneratorConfig()

    extension = _as_str(data.get("source_extension"), "source_extension")
    if extension is not None:
        extension = extension.strip().lstrip(".")
        if not extension:
            raise ConfigError("source_extension must not be empty")
        config.source_extension = extension

    if "exclude_dirs" in data:
        config.exclude_dirs = frozenset(_as_str_list(data.get("exclude_dirs")))

    output = _as_str(data.get("output"), "output")
    if output:
        config.output = Path(output).expanduser()

    if "chunk_size" in data:
        config.chunk_size = _as_positive_int(data.get("chunk_size"), "chunk_size")
    if "workers" in data:
        config.workers = _as_positive_int(data.get("workers"), "workers")

    return config


def load_root_config(root: Path, config_path: Path | None = None) -> GeneratorConfig:
    """Return the configuration for scanning ``root``.

    An explicit ``config_path`` wins. Otherwise ``root/.modmanifest.yml`` is
    read when ``root`` is a directory, and defaults apply when it is not.
    """
    if config_path is not None:
        return load_config(config_path)
    if not root.is_dir():
        return GeneratorConfig()
    return load_config(root)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_str(value: Any, name: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise ConfigError(f"{name} must be a string")
    return str(value)


def _as_positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a positive integer")
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError as exc:
            raise ConfigError(f"{name} must be a positive integer") from exc
    if not isinstance(value, int) or value < 1:
        raise ConfigError(f"{name} must be a positive integer")
    return value


def _as_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        items: list[str] = []
        for item in value:
            if isinstance(item, bool) or not isinstance(item, (str, int, float)):
                raise ConfigError("exclude_dirs entries must be directory names")
            items.append(str(item))
        return items
    raise ConfigError("exclude_dirs must be a list of directory names")


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_EXCLUDE_DIRS",
    "DEFAULT_OUTPUT",
    "DEFAULT_SOURCE_EXTENSION",
    "GeneratorConfig",
    "load_config",
    "load_root_config",
]
