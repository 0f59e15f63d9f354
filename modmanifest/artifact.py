"""Encoding and persistence of the manifest artifact.

The artifact is a JSON document whose ``chunks`` list, once concatenated,
holds the compact JSON payload::

    {"modules": [{"namespace": ..., "type": ..., "categories": [...]}, ...],
     "index": [["<category>", [<module position>, ...]], ...]}

Each module is stored once and buckets refer to it by position, so a module
listed under several categories decodes to a single shared object. Chunking
only keeps lines short; boundaries carry no meaning.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List

from .errors import ArtifactError
from .models import CategoryAttribute, ManifestIndex, ModuleCategory, ModuleDefinition

GENERATOR_NAME = "modmanifest"
ARTIFACT_VERSION = 1
DEFAULT_CHUNK_SIZE = 70


def encode_manifest(index: ManifestIndex, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> str:
    """Return the artifact text for ``index``."""
    if chunk_size < 1:
        raise ValueError("chunk_size must be positive")

    modules: List[Dict[str, Any]] = []
    positions: Dict[int, int] = {}
    buckets: List[List[Any]] = []
    for name, members in index.items():
        refs: List[int] = []
        for module in members:
            key = id(module)
            if key not in positions:
                positions[key] = len(modules)
                modules.append(module_to_dict(module))
            refs.append(positions[key])
        buckets.append([name, refs])

    payload = json.dumps(
        {"modules": modules, "index": buckets},
        ensure_ascii=False,
        separators=(",", ":"),
    )
    chunks = [payload[i : i + chunk_size] for i in range(0, len(payload), chunk_size)]
    document = {
        "generator": GENERATOR_NAME,
        "version": ARTIFACT_VERSION,
        "chunks": chunks,
    }
    return json.dumps(document, ensure_ascii=False, indent=2) + "\n"


def decode_manifest(text: str) -> ManifestIndex:
    """Rebuild the index stored in artifact ``text``."""
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ArtifactError(f"Artifact is not valid JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ArtifactError("Artifact must contain a JSON object")
    if document.get("version") != ARTIFACT_VERSION:
        raise ArtifactError(f"Unsupported artifact version: {document.get('version')!r}")

    chunks = document.get("chunks")
    if not isinstance(chunks, list) or not all(isinstance(chunk, str) for chunk in chunks):
        raise ArtifactError("Artifact chunks must be a list of strings")

    try:
        payload = json.loads("".join(chunks))
    except json.JSONDecodeError as exc:
        raise ArtifactError(f"Artifact payload is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ArtifactError("Artifact payload must be a JSON object")

    raw_modules = payload.get("modules")
    raw_index = payload.get("index")
    if not isinstance(raw_modules, list) or not isinstance(raw_index, list):
        raise ArtifactError("Artifact payload requires 'modules' and 'index' lists")

    modules = [_module_from_dict(raw) for raw in raw_modules]
    index: ManifestIndex = {}
    for bucket in raw_index:
        if (
            not isinstance(bucket, list)
            or len(bucket) != 2
            or not isinstance(bucket[0], str)
            or not isinstance(bucket[1], list)
        ):
            raise ArtifactError("Malformed category bucket in artifact")
        name, refs = bucket
        if name in index:
            raise ArtifactError(f"Duplicate category bucket {name!r} in artifact")
        members: List[ModuleDefinition] = []
        for ref in refs:
            if isinstance(ref, bool) or not isinstance(ref, int) or not 0 <= ref < len(modules):
                raise ArtifactError(f"Invalid module reference {ref!r} in bucket {name!r}")
            members.append(modules[ref])
        index[name] = members
    return index


def write_artifact(
    index: ManifestIndex, path: Path | str, *, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Path:
    """Atomically replace the artifact at ``path`` with the encoding of ``index``."""
    target = Path(path)
    text = encode_manifest(index, chunk_size=chunk_size)

    tmp_path: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=str(target.parent), prefix=f".{target.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        os.chmod(tmp_path, 0o644)
        os.replace(tmp_path, target)
        tmp_path = None
    except (OSError, UnicodeEncodeError) as exc:
        raise ArtifactError(f"Failed to write artifact: {exc}", target) from exc
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
    return target


def read_artifact(path: Path | str) -> ManifestIndex:
    """Load and decode the artifact stored at ``path``."""
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ArtifactError("Artifact not found", source) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ArtifactError(f"Failed to read artifact: {exc}", source) from exc
    try:
        return decode_manifest(text)
    except ArtifactError as exc:
        raise ArtifactError(str(exc), source) from exc


def module_to_dict(module: ModuleDefinition) -> Dict[str, Any]:
    """Return the JSON-ready form of ``module``."""
    return {
        "namespace": module.namespace,
        "type": module.type_name,
        "categories": [
            {
                "name": category.name,
                "attributes": [[attr.key, attr.value] for attr in category.attributes],
            }
            for category in module.categories
        ],
    }


# ----------------------------------------------------------------------
# Internal helpers


def _module_from_dict(raw: object) -> ModuleDefinition:
    if not isinstance(raw, dict):
        raise ArtifactError("Module entries must be JSON objects")
    namespace = raw.get("namespace")
    type_name = raw.get("type")
    raw_categories = raw.get("categories")
    if (
        not isinstance(namespace, str)
        or not isinstance(type_name, str)
        or not isinstance(raw_categories, list)
    ):
        raise ArtifactError("Module entries require 'namespace', 'type' and 'categories'")
    return ModuleDefinition(
        namespace=namespace,
        categories=[_category_from_dict(item) for item in raw_categories],
        type_name=type_name,
    )


def _category_from_dict(raw: object) -> ModuleCategory:
    if not isinstance(raw, dict):
        raise ArtifactError("Category entries must be JSON objects")
    name = raw.get("name")
    raw_attributes = raw.get("attributes")
    if not isinstance(name, str) or not isinstance(raw_attributes, list):
        raise ArtifactError("Category entries require 'name' and 'attributes'")
    attributes: List[CategoryAttribute] = []
    for pair in raw_attributes:
        if (
            not isinstance(pair, list)
            or len(pair) != 2
            or not (pair[0] is None or isinstance(pair[0], str))
            or not isinstance(pair[1], str)
        ):
            raise ArtifactError(f"Malformed attribute in category {name!r}")
        attributes.append(CategoryAttribute(key=pair[0], value=pair[1]))
    return ModuleCategory(name=name, attributes=attributes)


__all__ = [
    "ARTIFACT_VERSION",
    "DEFAULT_CHUNK_SIZE",
    "decode_manifest",
    "encode_manifest",
    "module_to_dict",
    "read_artifact",
    "write_artifact",
]
