from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, List

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from PIL import Image

from animlib.assets import MappingAssetProvider
from animlib.registry import Registry
from animlib.reporting import RegistryReporter
from plugins import PluginManager
from tests.stubs import (
    StubCountingSource,
    StubDecliningSource,
    StubExplodingSource,
    StubNarrowSource,
    StubSource,
    StubTracklessSource,
    StubZeroSizeSource,
    texture_path,
)

TEXTURED_SOURCES = (
    StubSource,
    StubCountingSource,
    StubDecliningSource,
    StubExplodingSource,
    StubNarrowSource,
    StubTracklessSource,
    StubZeroSizeSource,
)


class RecordingPlugin:
    """Plugin that records every registry hook it receives."""

    name = "recorder"

    def __init__(self) -> None:
        self.registered: List[Any] = []
        self.diagnostics: List[Any] = []
        self.unloads = 0

    def on_registry_registered(self, module, registration) -> None:
        self.registered.append((module, registration))

    def on_registry_diagnostic(self, error) -> None:
        self.diagnostics.append(error)

    def on_registry_unloaded(self) -> None:
        self.unloads += 1


@pytest.fixture()
def textures() -> MappingAssetProvider:
    """Asset provider holding a 64x64 sheet for every stub source that needs one."""

    provider = MappingAssetProvider()
    for cls in TEXTURED_SOURCES:
        provider.add(texture_path(cls), Image.new("RGBA", (64, 64), (20, 40, 60, 255)))
    provider.add("Shared/Sprites/Player", Image.new("RGBA", (32, 32)))
    return provider


@pytest.fixture()
def plugin_manager() -> PluginManager:
    manager = PluginManager()
    yield manager
    manager._plugins.clear()
    manager._exposed.clear()


@pytest.fixture()
def recorder(plugin_manager: PluginManager) -> RecordingPlugin:
    plugin = RecordingPlugin()
    plugin_manager.register_object("recorder", plugin)
    return plugin


@pytest.fixture()
def reporter(plugin_manager: PluginManager, recorder: RecordingPlugin) -> RegistryReporter:
    return RegistryReporter(plugin_manager=plugin_manager)


@pytest.fixture()
def registry(textures: MappingAssetProvider, reporter: RegistryReporter) -> Registry:
    registry = Registry(textures, reporter=reporter)
    yield registry
    registry.unload()


@pytest.fixture()
def entity() -> SimpleNamespace:
    return SimpleNamespace(name="player", events=[])


@pytest.fixture(autouse=True)
def _reset_counters():
    StubCountingSource.created = 0
    yield
    StubCountingSource.created = 0


