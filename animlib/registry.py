"""Process-wide index of the capabilities every module registered.

The registry has two states.  It starts **empty**; :meth:`Registry.load`
scans and classifies every supplied module in one ordered pass and leaves it
**loaded**; :meth:`Registry.unload` throws everything away again.  A module
only becomes visible to queries once its whole classification pass has
completed, and a load that is cancelled half way leaves the registry empty::

    registry = Registry(DirectoryAssetProvider("assets"))
    registry.load(discover_modules("mods"))
    controller = registry.controller("alpha").unwrap_or(None)

All queries are total.  They answer :class:`~animlib.results.Found` or
:data:`~animlib.results.NOT_APPLICABLE`; most modules register nothing and
that is not an error.
"""
from __future__ import annotations

import threading
import time
from concurrent.futures import Executor
from concurrent.futures import wait as wait_for
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .assets import AssetProvider, Texture
from .capabilities import Capability, Module
from .classifiers import (
    Classification,
    RegisteredController,
    RegisteredManager,
    RegisteredSource,
    RegisteredUnit,
    classify_controllers,
    classify_managers,
    classify_sources,
    classify_units,
)
from .config import RegistryConfig
from .exceptions import LoadCancelledError, RegistryStateError
from .reporting import RegistryReporter
from .results import NOT_APPLICABLE, Error, ErrorKind, Found, NotApplicable, Outcome
from .scanner import Candidate, scan

__all__ = ["ModuleRegistration", "Registry"]

_POLL_INTERVAL = 0.05

ModuleKey = Union[str, Module]


@dataclass(frozen=True)
class ModuleRegistration:
    """Everything one module registered during a load."""

    module: str
    index: int
    sources: Tuple[RegisteredSource, ...] = ()
    controller: Optional[RegisteredController] = None
    manager: Optional[RegisteredManager] = None
    units: Tuple[RegisteredUnit, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.sources or self.controller or self.manager or self.units)

    @property
    def orphaned(self) -> bool:
        """True when sources were registered without a controller to drive them."""

        return bool(self.sources) and self.controller is None


class Registry:
    """Owns every registration for one host session."""

    def __init__(
        self,
        asset_provider: AssetProvider,
        *,
        config: Optional[RegistryConfig] = None,
        reporter: Optional[RegistryReporter] = None,
        render_context: Optional[Executor] = None,
        shutdown: Optional[threading.Event] = None,
    ) -> None:
        self.assets = asset_provider
        self.config = config or RegistryConfig()
        self.reporter = reporter or RegistryReporter()
        self.render_context = render_context
        self.shutdown = shutdown or threading.Event()
        self._modules: Dict[str, ModuleRegistration] = {}
        self._diagnostics: List[Error] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # lifecycle
    # ------------------------------------------------------------------
    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self, modules: Iterable[Module]) -> None:
        """Scan and classify ``modules``, moving the registry to loaded."""

        if self._loaded:
            raise RegistryStateError("Registry is already loaded; call unload() first.")
        modules = tuple(modules)
        seen: set[str] = set()
        for module in modules:
            if module.name in seen:
                raise RegistryStateError(f"Module '{module.name}' was supplied more than once.")
            seen.add(module.name)

        try:
            for module in modules:
                self._check_cancelled()
                registration = self._classify_module(module, len(self._modules))
                if registration:
                    self._modules[module.name] = registration
                    self.reporter.module_registered(module.name, registration)
        except BaseException:
            self._reset()
            self.reporter.unloaded()
            raise
        self._loaded = True

    def unload(self) -> None:
        """Discard every registration.  Safe to call on an empty registry."""

        self._reset()
        self.reporter.unloaded()

    def _reset(self) -> None:
        self._modules.clear()
        self._diagnostics.clear()
        self._loaded = False

    # ------------------------------------------------------------------
    # classification
    # ------------------------------------------------------------------
    def _report(self, error: Error) -> None:
        self._diagnostics.append(error)
        self.reporter.diagnostic(error)

    def _collect(self, classification: Classification) -> None:
        for record in classification.registrations:
            self.reporter.registered(record.module, classification.capability.value, record.qualified_name)
        for error in classification.diagnostics:
            self._report(error)

    def _on_source_outcome(self, candidate: Candidate, outcome: Outcome) -> None:
        if isinstance(outcome, NotApplicable):
            self.reporter.declined(
                candidate.module, Capability.SOURCE.value, candidate.qualified_name, "load hook declined"
            )

    def _classify_module(self, module: Module, index: int) -> Optional[ModuleRegistration]:
        scanned = scan(module)
        for error in scanned.diagnostics:
            self._report(error)
        if not scanned:
            return None

        headless = self.config.headless
        sources: Classification = Classification(Capability.SOURCE)
        controllers: Classification = Classification(Capability.CONTROLLER)
        if not headless:
            sources = classify_sources(
                scanned.of(Capability.SOURCE),
                self._resolve_texture,
                separator=self.config.path_separator,
                on_outcome=self._on_source_outcome,
            )
            controllers = classify_controllers(scanned.of(Capability.CONTROLLER))
        managers = classify_managers(scanned.of(Capability.MANAGER))
        units = classify_units(scanned.of(Capability.UNIT))
        for classification in (sources, controllers, managers, units):
            self._collect(classification)

        controller = controllers.registrations[0] if controllers.registrations else None
        manager = managers.registrations[0] if managers.registrations else None
        registration = ModuleRegistration(
            module=module.name,
            index=index,
            sources=sources.registrations,
            controller=_with_index(controller, index),
            manager=_with_index(manager, index),
            units=units.registrations,
        )
        if registration.orphaned:
            self._report(
                Error(
                    ErrorKind.ORPHANED_SOURCES,
                    f"{len(registration.sources)} source(s) registered without a controller; "
                    "they stay registered but nothing will drive them",
                    module=module.name,
                )
            )
        return registration

    # ------------------------------------------------------------------
    # texture resolution
    # ------------------------------------------------------------------
    def _check_cancelled(self) -> None:
        if self.shutdown.is_set():
            raise LoadCancelledError("Host shutdown requested while loading modules.")

    def _resolve_texture(self, path: str) -> Optional[Texture]:
        self._check_cancelled()
        if self.render_context is None:
            return self.assets.resolve(path)

        future = self.render_context.submit(self.assets.resolve, path)
        timeout = self.config.resolve_timeout
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self.shutdown.is_set():
                future.cancel()
                raise LoadCancelledError(f"Host shutdown requested while resolving texture '{path}'.")
            wait = _POLL_INTERVAL
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    future.cancel()
                    raise LoadCancelledError(
                        f"Timed out after {timeout}s waiting for texture '{path}'."
                    )
                wait = min(wait, remaining)
            done, _ = wait_for((future,), timeout=wait)
            if done:
                return future.result()

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------
    @property
    def diagnostics(self) -> Tuple[Error, ...]:
        return tuple(self._diagnostics)

    def modules(self) -> Tuple[str, ...]:
        """Names of every module with at least one registration, in load order."""

        return tuple(self._modules)

    def registration(self, module: ModuleKey) -> Outcome:
        record = self._modules.get(_key(module))
        return NOT_APPLICABLE if record is None else Found(record)

    def sources(self, module: ModuleKey) -> Outcome:
        record = self._modules.get(_key(module))
        if record is None or not record.sources:
            return NOT_APPLICABLE
        return Found(record.sources)

    def controller(self, module: ModuleKey) -> Outcome:
        record = self._modules.get(_key(module))
        if record is None or record.controller is None:
            return NOT_APPLICABLE
        return Found(record.controller)

    def manager(self, module: ModuleKey) -> Outcome:
        record = self._modules.get(_key(module))
        if record is None or record.manager is None:
            return NOT_APPLICABLE
        return Found(record.manager)

    def units(self, module: ModuleKey) -> Outcome:
        record = self._modules.get(_key(module))
        if record is None or not record.units:
            return NOT_APPLICABLE
        return Found(record.units)

    def snapshot(self) -> MappingProxyType:
        """Immutable copy of every registration keyed by module name."""

        return MappingProxyType(dict(self._modules))

    def __contains__(self, module: object) -> bool:
        if not isinstance(module, (str, Module)):
            return False
        return _key(module) in self._modules

    def __len__(self) -> int:
        return len(self._modules)


def _key(module: ModuleKey) -> str:
    return module.name if isinstance(module, Module) else module


def _with_index(record, index: int):
    if record is None:
        return None
    return type(record)(record.module, record.qualified_name, record.factory, index)
