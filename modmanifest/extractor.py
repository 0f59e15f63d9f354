"""Lightweight pattern extraction of ``@module`` declarations from source text."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .categories import parse_categories
from .models import ModuleDefinition

_NAMESPACE = re.compile(r"\bnamespace\s+(\w+(?:\\\w+)*)\s*;")

# A doc comment that carries an ``@module`` line before it closes.
_MODULE_MARKER = re.compile(
    r"/\*\*(?:(?!\*/).)*?@module (?P<categories>[\w $(),=]+)\r?\n",
    re.DOTALL,
)

# Rest of the doc comment, then a class declaration with no ``{`` in between.
_CLASS_DECLARATION = re.compile(
    r"(?:(?!\*/).)*?\*/"
    r"(?:[^{]*?\n)?[ \t]*"
    r"(?:(?:abstract|final|readonly)\s+)*"
    r"class\s+(?P<type_name>\w+)",
    re.DOTALL,
)


def find_namespace(text: str) -> Optional[Tuple[str, int]]:
    """Return the declared namespace and the offset just past its declaration."""
    match = _NAMESPACE.search(text)
    if match is None:
        return None
    return match.group(1), match.end()


def iter_module_markers(text: str, start: int = 0) -> Iterator[Tuple[str, int]]:
    """Yield ``(category_string, offset)`` for each marked doc comment after ``start``."""
    for match in _MODULE_MARKER.finditer(text, start):
        yield match.group("categories").strip(), match.end()


def find_type_name(text: str, start: int) -> Optional[str]:
    """Return the class declared right after the doc comment containing ``start``."""
    match = _CLASS_DECLARATION.match(text, start)
    if match is None:
        return None
    return match.group("type_name")


def extract_module(text: str) -> Optional[ModuleDefinition]:
    """Return the module declared in ``text`` or None when there is none."""
    namespace = find_namespace(text)
    if namespace is None:
        return None
    namespace_path, offset = namespace

    for category_string, marker_end in iter_module_markers(text, offset):
        type_name = find_type_name(text, marker_end)
        if type_name is None:
            continue
        return ModuleDefinition(
            namespace=namespace_path,
            categories=parse_categories(category_string),
            type_name=type_name,
        )
    return None


def extract_module_from_file(path: Path) -> Optional[ModuleDefinition]:
    """Read ``path`` as UTF-8 and extract its module declaration."""
    return extract_module(path.read_text(encoding="utf-8"))


__all__ = [
    "extract_module",
    "extract_module_from_file",
    "find_namespace",
    "find_type_name",
    "iter_module_markers",
]
