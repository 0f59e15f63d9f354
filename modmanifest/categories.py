"""Parser for the ``@module`` category mini-grammar.

A category string is a space separated list of entries. Each entry is either
a bare name (``admin``) or a name followed by a parenthesised argument list
(``svc(primary, priority=1)``). Arguments are positional unless they contain
``=``, in which case the text before the first ``=`` is the key.

The grammar is permissive: anything that does not look like ``NAME(ARGS)`` is
kept verbatim as a bare category name. There is no escaping, so ``(``, ``)``,
``,`` and ``=`` cannot appear inside a value. An empty string yields a single
bare category with an empty name.
"""

from __future__ import annotations

import re
from typing import List

from .models import CategoryAttribute, ModuleCategory

_PARAMETERISED = re.compile(r"(\w+)\((.*)\)")


def parse_categories(text: str) -> List[ModuleCategory]:
    """Return the categories declared by ``text`` in declaration order."""
    categories: List[ModuleCategory] = []
    for entry in text.strip().split(" "):
        match = _PARAMETERISED.search(entry)
        if match is None:
            categories.append(ModuleCategory(name=entry))
            continue
        categories.append(
            ModuleCategory(name=match.group(1), attributes=_parse_arguments(match.group(2)))
        )
    return categories


def _parse_arguments(arglist: str) -> List[CategoryAttribute]:
    attributes: List[CategoryAttribute] = []
    for component in arglist.split(","):
        key, sep, value = component.partition("=")
        if not sep:
            attributes.append(CategoryAttribute(key=None, value=component.strip()))
        else:
            attributes.append(CategoryAttribute(key=key.strip(), value=value.strip()))
    return attributes


__all__ = ["parse_categories"]
