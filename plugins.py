"""Observer plugins for the animlib module registry.

A plugin is any object; it is either handed over directly with
:meth:`PluginManager.register_object` or built by a ``setup_plugin(manager,
exposed)`` callable found in an importable module.  The registry talks to
plugins only through :meth:`PluginManager.broadcast`, calling whichever of
these hooks a plugin defines:

``on_registry_registered(module, registration)``
    A module finished classification and became visible to queries.
``on_registry_diagnostic(error)``
    A candidate, family or module was rejected or flagged.
``on_registry_unloaded()``
    The registry was cleared, either by ``unload`` or by a cancelled load.

Objects plugins may want to reach (the registry class, the module loader)
are published with :meth:`PluginManager.expose` on :data:`PLUGIN_MANAGER`.
"""
from __future__ import annotations

from dataclasses import dataclass
from importlib import import_module
from importlib.util import find_spec
from pathlib import Path
import pkgutil
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

PLUGIN_SUFFIXES = ("plugin",)
PLUGIN_PREFIXES = ("plugin_",)


class PluginError(RuntimeError):
    """A plugin could not be found, set up or called."""


@dataclass(frozen=True)
class PluginRecord:
    name: str
    module: str
    obj: Any


class PluginManager:
    """Keeps the registered observers and the objects exposed to them."""

    def __init__(self) -> None:
        self._plugins: Dict[str, PluginRecord] = {}
        self._exposed: Dict[str, Any] = {}

    @property
    def exposed(self) -> MappingProxyType:
        return MappingProxyType(self._exposed)

    @property
    def plugins(self) -> MappingProxyType:
        return MappingProxyType(self._plugins)

    def expose(self, name: str, obj: Any) -> None:
        """Publish ``obj`` to plugins as ``name``, replacing any earlier value."""

        if not name:
            raise PluginError("Exposed names must be non-empty strings.")
        self._exposed[name] = obj

    def _add(self, key: str, obj: Any, module: str) -> PluginRecord:
        record = PluginRecord(getattr(obj, "name", key), module, obj)
        self._plugins[key] = record
        return record

    def register_plugin(self, module_name: str, attr: str = "setup_plugin") -> PluginRecord:
        """Import ``module_name`` and register what its ``attr`` callable returns.

        The callable receives this manager and the read-only exposed mapping.
        """

        if module_name in self._plugins:
            raise PluginError(f"Plugin '{module_name}' is already registered.")
        setup = getattr(import_module(module_name), attr, None)
        if not callable(setup):
            raise PluginError(f"'{module_name}.{attr}' is missing or not callable.")
        return self._add(module_name, setup(self, self.exposed), module_name)

    def register_object(self, name: str, obj: Any) -> PluginRecord:
        if name in self._plugins:
            raise PluginError(f"Plugin '{name}' is already registered.")
        return self._add(name, obj, type(obj).__module__)

    def unregister_plugin(self, name: str) -> Optional[PluginRecord]:
        return self._plugins.pop(name, None)

    def listeners(self, hook: str) -> Iterator[Tuple[str, Callable[..., Any]]]:
        """Yield ``(plugin, handler)`` for every plugin defining ``hook``."""

        for key, record in list(self._plugins.items()):
            handler = getattr(record.obj, hook, None)
            if handler is None:
                continue
            if not callable(handler):
                raise PluginError(f"'{key}.{hook}' is {type(handler).__name__}, not a callable.")
            yield key, handler

    def broadcast(self, hook: str, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        """Call ``hook`` on every listening plugin; return their answers by plugin."""

        return {key: handler(*args, **kwargs) for key, handler in self.listeners(hook)}

    def auto_discover(
        self,
        location: str | Path,
        *,
        attr: str = "setup_plugin",
        recursive: bool = True,
        match: Optional[Callable[[str], bool]] = None,
    ) -> Dict[str, PluginRecord]:
        """Register every plugin module found below ``location``.

        Modules are picked by ``match`` (by default, names starting with
        ``plugin_`` or ending in ``plugin``).  Every module is attempted; the
        failures are raised together afterwards.
        """

        package_name, search_paths = resolve_package_location(location)
        accept = match or looks_like_plugin
        discovered: Dict[str, PluginRecord] = {}
        failures: List[str] = []
        for module_name in walk_package_modules(search_paths, package_name, recursive):
            if not accept(module_name):
                continue
            try:
                discovered[module_name] = self.register_plugin(module_name, attr=attr)
            except PluginError as exc:
                failures.append(f"- {module_name}: {exc}")
        if failures:
            raise PluginError("Plugin discovery failed:\n" + "\n".join(failures))
        return discovered


def looks_like_plugin(module_name: str) -> bool:
    leaf = module_name.rpartition(".")[2].lower()
    return leaf.startswith(PLUGIN_PREFIXES) or leaf.endswith(PLUGIN_SUFFIXES)


def resolve_package_location(location: str | Path) -> Tuple[str, Sequence[str]]:
    """Return ``(package_name, search_paths)`` for a dotted name or directory.

    Directories must be packages inside the repository so their dotted name
    can be derived from the path.
    """

    if not isinstance(location, Path):
        spec = find_spec(str(location))
        if spec is not None and spec.submodule_search_locations:
            return str(location), list(spec.submodule_search_locations)
        location = Path(str(location))
    directory = location.resolve()
    if not directory.is_dir():
        raise PluginError(f"Package location '{location}' does not exist.")
    if not (directory / "__init__.py").is_file():
        raise PluginError(f"'{directory}' is not a package (no __init__.py).")
    try:
        parts = directory.relative_to(_REPO_ROOT).parts
    except ValueError as exc:
        raise PluginError(f"'{directory}' lies outside {_REPO_ROOT}.") from exc
    return ".".join(parts), [str(directory)]


def walk_package_modules(search_paths: Sequence[str], package_name: str, recursive: bool) -> Iterator[str]:
    walk = pkgutil.walk_packages if recursive else pkgutil.iter_modules
    for info in walk(search_paths, package_name + "."):
        yield info.name


_REPO_ROOT = Path(__file__).resolve().parent

PLUGIN_MANAGER = PluginManager()
PLUGIN_MANAGER.expose("auto_discover_plugins", PLUGIN_MANAGER.auto_discover)

__all__ = [
    "PLUGIN_MANAGER",
    "PluginError",
    "PluginManager",
    "PluginRecord",
    "looks_like_plugin",
    "resolve_package_location",
    "walk_package_modules",
]
