"""Core data models shared across modmanifest components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass(frozen=True)
class CategoryAttribute:
    """One category argument; positional when ``key`` is None."""

    key: Optional[str]
    value: str

    @property
    def positional(self) -> bool:
        return self.key is None


@dataclass
class ModuleCategory:
    """A category tag attached to a module, optionally parameterised."""

    name: str
    attributes: List[CategoryAttribute] = field(default_factory=list)

    @property
    def positional(self) -> List[str]:
        return [attr.value for attr in self.attributes if attr.key is None]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Return the first value declared for ``key``."""
        for attr in self.attributes:
            if attr.key == key:
                return attr.value
        return default

    def has_attribute(self, key: str) -> bool:
        return any(attr.key == key for attr in self.attributes)


@dataclass
class ModuleDefinition:
    """A module discovered in one source file."""

    namespace: str
    categories: List[ModuleCategory]
    type_name: str

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}\\{self.type_name}"

    def category(self, name: str) -> Optional[ModuleCategory]:
        for category in self.categories:
            if category.name == name:
                return category
        return None


ManifestIndex = Dict[str, List[ModuleDefinition]]
