"""Recursive source tree traversal feeding the module extractor."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterator, List, Optional

from .config import GeneratorConfig
from .errors import DiscoveryError
from .extractor import extract_module_from_file
from .logging import get_logger
from .models import ModuleDefinition

_LOGGER = get_logger("walker")


class TreeWalker:
    """Walks a directory tree and extracts module declarations from source files."""

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        self._config = config or GeneratorConfig()

    def walk(self, root: Path | str) -> List[ModuleDefinition]:
        """Return every module found under ``root`` in traversal order."""
        root_path = Path(root)
        if not root_path.is_dir():
            raise DiscoveryError(root_path, "not a directory")

        files = list(self.iter_source_files(root_path))
        workers = min(self._config.workers, len(files))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                results = list(executor.map(_extract, files))
        else:
            results = [_extract(path) for path in files]

        modules = [module for module in results if module is not None]
        _LOGGER.debug("Scanned %d source files under %s", len(files), root_path)
        return modules

    def iter_source_files(self, directory: Path) -> Iterator[Path]:
        """Yield candidate source files below ``directory`` sorted by name per level."""
        try:
            with os.scandir(directory) as handle:
                entries = sorted(handle, key=lambda entry: entry.name)
        except OSError as exc:
            raise DiscoveryError(directory, exc.strerror or str(exc)) from exc

        for entry in entries:
            path = Path(entry.path)
            try:
                is_file = entry.is_file()
                is_dir = not is_file and entry.is_dir(follow_symlinks=False)
            except OSError as exc:
                raise DiscoveryError(path, exc.strerror or str(exc)) from exc

            if is_file:
                if entry.name.endswith(self._config.suffix):
                    yield path
            elif is_dir:
                if entry.name in self._config.exclude_dirs:
                    _LOGGER.debug("Skipping excluded directory %s", path)
                    continue
                yield from self.iter_source_files(path)


def _extract(path: Path) -> Optional[ModuleDefinition]:
    try:
        module = extract_module_from_file(path)
    except OSError as exc:
        raise DiscoveryError(path, exc.strerror or str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise DiscoveryError(path, f"not valid UTF-8 ({exc.reason})") from exc
    if module is not None:
        _LOGGER.debug("Discovered module %s in %s", module.qualified_name, path)
    return module


__all__ = ["TreeWalker"]
