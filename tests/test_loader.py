import pytest
from PIL import Image

from animlib.assets import DirectoryAssetProvider
from animlib.capabilities import Module
from animlib.exceptions import ModuleDiscoveryError
from animlib.loader import discover_modules, load_module
from animlib.registry import Registry


def test_discover_modules_collects_declared_modules():
    modules = discover_modules("tests.sample_modules")

    assert [module.name for module in modules] == ["alpha", "beta"]
    beta = modules[1]
    assert [cls.__name__ for cls in beta.types] == ["BetaManager", "BetaDash"]


def test_discover_modules_respects_match_callable():
    modules = discover_modules("tests.sample_modules", match=lambda name: name.endswith("beta"))
    assert [module.name for module in modules] == ["beta"]


def test_discover_modules_reports_contract_failures():
    with pytest.raises(ModuleDiscoveryError) as excinfo:
        discover_modules("tests.broken_modules")
    assert "tests.broken_modules.bad" in str(excinfo.value)


def test_discover_modules_requires_a_package(tmp_path):
    with pytest.raises(ModuleDiscoveryError):
        discover_modules(tmp_path / "missing")


def test_load_module_ignores_modules_without_declarations():
    assert load_module("tests.sample_modules.gamma") is None
    assert isinstance(load_module("tests.broken_modules.good"), Module)


def test_discovered_modules_load_into_registry(tmp_path, reporter):
    sheet = tmp_path / "tests" / "sample_modules" / "alpha" / "AlphaSource.png"
    sheet.parent.mkdir(parents=True)
    Image.new("RGBA", (32, 16)).save(sheet)

    registry = Registry(DirectoryAssetProvider(tmp_path), reporter=reporter)
    registry.load(discover_modules("tests.sample_modules"))

    assert registry.modules() == ("alpha", "beta")
    source = registry.sources("alpha").value[0]
    assert source.texture.size == (32, 16)
    assert registry.units("beta").value[0].qualified_name == "tests.sample_modules.beta.BetaDash"
    assert registry.diagnostics == ()
