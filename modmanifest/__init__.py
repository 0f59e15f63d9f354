"""Discovery of ``@module`` annotated classes and their category manifest."""

from .artifact import decode_manifest, encode_manifest, read_artifact, write_artifact
from .categories import parse_categories
from .config import GeneratorConfig, load_config, load_root_config
from .errors import ArtifactError, ConfigError, DiscoveryError, ModManifestError
from .extractor import extract_module
from .manifest import GenerationResult, ManifestGenerator, build_manifest
from .models import CategoryAttribute, ManifestIndex, ModuleCategory, ModuleDefinition
from .registry import ModuleRegistry
from .walker import TreeWalker

__all__ = [
    "ArtifactError",
    "CategoryAttribute",
    "ConfigError",
    "DiscoveryError",
    "GenerationResult",
    "GeneratorConfig",
    "ManifestGenerator",
    "ManifestIndex",
    "ModManifestError",
    "ModuleCategory",
    "ModuleDefinition",
    "ModuleRegistry",
    "TreeWalker",
    "build_manifest",
    "decode_manifest",
    "encode_manifest",
    "extract_module",
    "load_config",
    "load_root_config",
    "parse_categories",
    "read_artifact",
    "write_artifact",
]
