"""Candidate scanning: pick the declared types a registry cares about."""
from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple

from .capabilities import BASE_TYPES, Capability, CapabilityDescriptor, Module, qualified_name
from .results import Error, ErrorKind

__all__ = ["Candidate", "ScanResult", "has_candidates", "scan"]


@dataclass(frozen=True)
class Candidate:
    """A declared type tagged with exactly one capability family."""

    module: str
    capability: Capability
    qualified_name: str
    factory: Callable[..., Any] = field(compare=False)


@dataclass(frozen=True)
class ScanResult:
    module: Module
    candidates: Tuple[Candidate, ...]
    diagnostics: Tuple[Error, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.candidates)

    def of(self, capability: Capability) -> Tuple[Candidate, ...]:
        return tuple(candidate for candidate in self.candidates if candidate.capability is capability)


def _is_generic(declared: type) -> bool:
    return bool(getattr(declared, "__parameters__", ()))


def _is_concrete(declared: type) -> bool:
    return declared not in BASE_TYPES and not inspect.isabstract(declared) and not _is_generic(declared)


def scan(module: Module) -> ScanResult:
    """Return the capability candidates ``module`` declares.

    Descriptors are trusted as declared.  Classes are tagged by ancestry and
    dropped when they are abstract, generic, one of the capability bases or
    outside every family.  Nothing declared by the module is called.
    """

    candidates: List[Candidate] = []
    diagnostics: List[Error] = []
    for declared in module.types:
        if isinstance(declared, CapabilityDescriptor):
            candidates.append(
                Candidate(module.name, declared.capability, declared.qualified_name, declared.factory)
            )
            continue
        if not isinstance(declared, type) or not _is_concrete(declared):
            continue
        matches = Capability.matches(declared)
        if not matches:
            continue
        name = qualified_name(declared)
        if len(matches) > 1:
            families = ", ".join(capability.value for capability in matches)
            diagnostics.append(
                Error(
                    ErrorKind.AMBIGUOUS_CAPABILITY,
                    f"type derives from several capability families ({families})",
                    module=module.name,
                    candidate=name,
                )
            )
            continue
        candidates.append(Candidate(module.name, matches[0], name, declared))
    return ScanResult(module, tuple(candidates), tuple(diagnostics))


def has_candidates(module: Module) -> bool:
    return bool(scan(module))
