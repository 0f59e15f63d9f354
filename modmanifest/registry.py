"""Runtime lookup over a loaded module manifest."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

from .artifact import read_artifact
from .models import ManifestIndex, ModuleDefinition


class ModuleRegistry:
    """Read-only view of a manifest index keyed by category name."""

    def __init__(self, index: ManifestIndex) -> None:
        self._index = index

    @classmethod
    def from_artifact(cls, path: Path | str) -> "ModuleRegistry":
        return cls(read_artifact(path))

    def categories(self) -> List[str]:
        return list(self._index)

    def modules(self, category: str) -> List[ModuleDefinition]:
        """Return modules registered under ``category``; empty when unknown."""
        return list(self._index.get(category, []))

    def find(self, category: str, /, **attributes: str) -> List[ModuleDefinition]:
        """Return modules whose ``category`` declares every given keyed attribute value."""
        matches: List[ModuleDefinition] = []
        for module in self._index.get(category, []):
            declared = module.category(category)
            if declared is None:
                continue
            if all(declared.get(key) == value for key, value in attributes.items()):
                matches.append(module)
        return matches

    def __contains__(self, category: object) -> bool:
        return category in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)


__all__ = ["ModuleRegistry"]
