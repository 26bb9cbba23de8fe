"""Collect externally authored modules from Python packages.

Each direct child of the searched package is one module.  It takes part by
defining an ``animlib_module`` attribute (the name is configurable) holding
either a ready :class:`~animlib.capabilities.Module` or a callable returning
one.  The callable may also return a plain iterable of types and
descriptors, in which case the module is named after the child::

    # mods/alpha/__init__.py
    def animlib_module():
        return (AlphaSource, AlphaController)
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from importlib import import_module
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from plugins import PluginError, resolve_package_location, walk_package_modules

from .capabilities import Module
from .exceptions import ModuleDiscoveryError

LOGGER = logging.getLogger(__name__)

DEFAULT_ATTRIBUTE = "animlib_module"

__all__ = ["DEFAULT_ATTRIBUTE", "discover_modules", "load_module"]


def load_module(module_name: str, attr: str = DEFAULT_ATTRIBUTE) -> Optional[Module]:
    """Import ``module_name`` and build its :class:`Module`, if it declares one."""

    python_module = import_module(module_name)
    declared = getattr(python_module, attr, None)
    if declared is None:
        return None
    if callable(declared) and not isinstance(declared, Module):
        declared = declared()
    if isinstance(declared, Module):
        return declared
    if isinstance(declared, (str, bytes)) or not isinstance(declared, Iterable):
        raise ModuleDiscoveryError(
            f"'{module_name}.{attr}' must be a Module or an iterable of declared types, "
            f"got {type(declared)!r}."
        )
    return Module(module_name.rsplit(".", 1)[-1], tuple(declared))


def discover_modules(
    location: str | Path,
    *,
    attr: str = DEFAULT_ATTRIBUTE,
    match: Optional[Callable[[str], bool]] = None,
) -> Tuple[Module, ...]:
    """Return every module declared by the direct children of ``location``."""

    try:
        package_name, search_paths = resolve_package_location(location)
    except PluginError as exc:
        raise ModuleDiscoveryError(str(exc)) from exc

    modules: Dict[str, Module] = {}
    failures: List[Tuple[str, Exception]] = []
    for module_name in walk_package_modules(search_paths, package_name, recursive=False):
        if match is not None and not match(module_name):
            continue
        try:
            module = load_module(module_name, attr)
        except Exception as exc:
            failures.append((module_name, exc))
            continue
        if module is None:
            LOGGER.debug("%s declares no %s; skipping", module_name, attr)
            continue
        if module.name in modules:
            failures.append(
                (module_name, ModuleDiscoveryError(f"module name '{module.name}' is already taken"))
            )
            continue
        modules[module.name] = module
    if failures:
        reasons = "\n".join(f"- {name}: {error}" for name, error in failures)
        raise ModuleDiscoveryError("Failed to discover modules:\n" + reasons)
    return tuple(modules.values())
