"""Manifest building: discovery results grouped by category."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .artifact import write_artifact
from .config import GeneratorConfig
from .logging import get_logger
from .models import ManifestIndex, ModuleDefinition
from .walker import TreeWalker

_LOGGER = get_logger("manifest")


@dataclass
class GenerationResult:
    """Outcome of a generation run that wrote an artifact."""

    path: Path
    index: ManifestIndex

    @property
    def module_count(self) -> int:
        return len({id(module) for members in self.index.values() for module in members})


def build_manifest(modules: Iterable[ModuleDefinition]) -> ManifestIndex:
    """Group ``modules`` by category name, preserving first-use order."""
    index: ManifestIndex = {}
    for module in modules:
        for category in module.categories:
            index.setdefault(category.name, []).append(module)
    return index


class ManifestGenerator:
    """Runs discovery over a source tree and persists the resulting index."""

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        *,
        walker: TreeWalker | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self._walker = walker or TreeWalker(self.config)

    def generate(self, root: Path | str = ".") -> ManifestIndex:
        """Discover modules under ``root`` and return the category index."""
        modules = self._walker.walk(root)
        index = build_manifest(modules)
        _LOGGER.info(
            "Discovered %d modules across %d categories", len(modules), len(index)
        )
        return index

    def dump(
        self, root: Path | str = ".", output: Optional[Path | str] = None
    ) -> GenerationResult:
        """Generate the index for ``root`` and write it to the artifact path."""
        root_path = Path(root)
        if output is None:
            target = self.config.output_path(root_path)
        else:
            target = Path(output)
            if not target.is_absolute():
                target = root_path / target

        index = self.generate(root_path)
        write_artifact(index, target, chunk_size=self.config.chunk_size)
        _LOGGER.info("Wrote module manifest to %s", target)
        return GenerationResult(path=target, index=index)


__all__ = ["GenerationResult", "ManifestGenerator", "build_manifest"]
