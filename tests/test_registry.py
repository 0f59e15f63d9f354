"""Tests for modmanifest.registry."""

from __future__ import annotations

from pathlib import Path

import pytest

from modmanifest.artifact import write_artifact
from modmanifest.categories import parse_categories
from modmanifest.errors import ArtifactError
from modmanifest.manifest import build_manifest
from modmanifest.models import ModuleDefinition
from modmanifest.registry import ModuleRegistry


def _module(type_name: str, categories: str) -> ModuleDefinition:
    return ModuleDefinition(
        namespace="App", categories=parse_categories(categories), type_name=type_name
    )


@pytest.fixture
def registry() -> ModuleRegistry:
    return ModuleRegistry(
        build_manifest(
            [
                _module("Mailer", "queue(name=mail,priority=1) admin"),
                _module("Reports", "queue(name=reports)"),
                _module("Console", "admin"),
            ]
        )
    )


def test_registry_lists_categories_in_index_order(registry: ModuleRegistry) -> None:
    assert registry.categories() == ["queue", "admin"]
    assert list(registry) == ["queue", "admin"]
    assert len(registry) == 2
    assert "queue" in registry
    assert "missing" not in registry


def test_registry_modules_returns_copies(registry: ModuleRegistry) -> None:
    modules = registry.modules("admin")
    modules.clear()

    assert [module.type_name for module in registry.modules("admin")] == ["Mailer", "Console"]
    assert registry.modules("missing") == []


def test_registry_find_filters_by_attribute(registry: ModuleRegistry) -> None:
    assert [m.type_name for m in registry.find("queue", name="reports")] == ["Reports"]
    assert [m.type_name for m in registry.find("queue", name="mail", priority="1")] == ["Mailer"]
    assert registry.find("queue", name="sms") == []
    assert [m.type_name for m in registry.find("queue")] == ["Mailer", "Reports"]


def test_registry_from_artifact(tmp_path: Path) -> None:
    index = build_manifest([_module("Mailer", "queue(name=mail)")])
    write_artifact(index, tmp_path / "modules.json")

    loaded = ModuleRegistry.from_artifact(tmp_path / "modules.json")

    assert loaded.find("queue", name="mail")[0].type_name == "Mailer"


def test_registry_from_missing_artifact(tmp_path: Path) -> None:
    with pytest.raises(ArtifactError):
        ModuleRegistry.from_artifact(tmp_path / "absent.json")


def test_registry_find_accepts_attribute_named_category() -> None:
    registry = ModuleRegistry(
        build_manifest(
            [
                _module("Audit", "hook(category=billing)"),
                _module("Mail", "hook(category=mail)"),
            ]
        )
    )

    assert [m.type_name for m in registry.find("hook", category="mail")] == ["Mail"]
