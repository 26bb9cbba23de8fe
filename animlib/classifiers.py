"""Per-family classification of scanned candidates.

Each classifier consumes the candidates of one capability family for one
module and produces a :class:`Classification`.  Classifiers never raise for
misconfigured modules; rejected candidates and families are reported as
:class:`~animlib.results.Error` values so one faulty module cannot stop the
others from loading.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Mapping, Optional, Sequence, Tuple, TypeVar

from .assets import Texture
from .capabilities import AnimationSource, Capability, TexturePath, Track
from .exceptions import LoadCancelledError
from .results import NOT_APPLICABLE, Error, ErrorKind, Found, Outcome
from .scanner import Candidate

T = TypeVar("T")

TextureResolver = Callable[[str], Optional[Texture]]

__all__ = [
    "Classification",
    "RegisteredController",
    "RegisteredManager",
    "RegisteredSource",
    "RegisteredUnit",
    "classify_controllers",
    "classify_managers",
    "classify_source",
    "classify_sources",
    "classify_units",
    "derive_resource_path",
]


def derive_resource_path(qualified_name: str, separator: str = "/") -> str:
    """Turn ``Foo.Bar.Baz`` into ``Foo/Bar/Baz``."""

    return qualified_name.replace(".", separator)


# ---------------------------------------------------------------------------
# registrations
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class RegisteredSource:
    module: str
    qualified_name: str
    path: str
    tracks: Mapping[str, Track] = field(hash=False)
    sprite_size: Tuple[int, int]
    instance: AnimationSource = field(compare=False, repr=False)
    texture: Texture = field(compare=False, repr=False)

    def track(self, name: str) -> Optional[Track]:
        return self.tracks.get(name)


@dataclass(frozen=True)
class RegisteredController:
    module: str
    qualified_name: str
    factory: Callable[..., Any] = field(compare=False)
    index: int = 0


@dataclass(frozen=True)
class RegisteredManager:
    module: str
    qualified_name: str
    factory: Callable[..., Any] = field(compare=False)
    index: int = 0


@dataclass(frozen=True)
class RegisteredUnit:
    module: str
    qualified_name: str
    factory: Callable[..., Any] = field(compare=False)
    index: int = 0


@dataclass(frozen=True)
class Classification(Generic[T]):
    """Outcome of one classifier pass over one module."""

    capability: Capability
    registrations: Tuple[T, ...] = ()
    diagnostics: Tuple[Error, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.registrations)


# ---------------------------------------------------------------------------
# sources
# ---------------------------------------------------------------------------
def _invalid(candidate: Candidate, detail: str) -> Error:
    return Error(
        ErrorKind.INVALID_SOURCE,
        detail,
        module=candidate.module,
        capability=Capability.SOURCE.value,
        candidate=candidate.qualified_name,
    )


def _cell_size(size: Any) -> Optional[Tuple[int, int]]:
    """Return ``size`` as a pair of positive ints, or None if it is not one."""

    try:
        width, height = size
        if width > 0 and height > 0:
            return int(width), int(height)
    except (TypeError, ValueError):
        pass
    return None


def classify_source(
    candidate: Candidate,
    resolve: TextureResolver,
    *,
    separator: str = "/",
) -> Outcome:
    """Construct, validate and resolve a single source candidate."""

    try:
        instance = candidate.factory()
    except Exception as exc:
        return Error(
            ErrorKind.CONSTRUCTION_FAILED,
            f"constructor raised {exc!r}",
            module=candidate.module,
            capability=Capability.SOURCE.value,
            candidate=candidate.qualified_name,
        )

    path = TexturePath(derive_resource_path(candidate.qualified_name, separator))
    try:
        proceed = instance.load(path)
    except Exception as exc:
        return Error(
            ErrorKind.CONSTRUCTION_FAILED,
            f"load hook raised {exc!r}",
            module=candidate.module,
            capability=Capability.SOURCE.value,
            candidate=candidate.qualified_name,
        )
    if not proceed:
        return NOT_APPLICABLE

    tracks = getattr(instance, "tracks", None)
    if not isinstance(tracks, Mapping):
        return _invalid(candidate, f"tracks must map names to tracks, got {type(tracks).__name__}")
    if not tracks:
        return _invalid(candidate, "tracks must not be empty")
    sprite_size = getattr(instance, "sprite_size", None)
    cell_size = _cell_size(sprite_size)
    if cell_size is None:
        return _invalid(candidate, f"sprite_size must be positive in both axes, got {sprite_size!r}")

    try:
        texture = resolve(path.value)
    except LoadCancelledError:
        raise
    except Exception as exc:
        return Error(
            ErrorKind.MISSING_RESOURCE,
            f"asset lookup raised {exc!r}",
            module=candidate.module,
            capability=Capability.SOURCE.value,
            candidate=candidate.qualified_name,
        )
    if texture is None:
        return Error(
            ErrorKind.MISSING_RESOURCE,
            f"no texture found at '{path.value}'",
            module=candidate.module,
            capability=Capability.SOURCE.value,
            candidate=candidate.qualified_name,
        )

    return Found(
        RegisteredSource(
            module=candidate.module,
            qualified_name=candidate.qualified_name,
            path=path.value,
            tracks=dict(tracks),
            sprite_size=cell_size,
            instance=instance,
            texture=texture,
        )
    )


def classify_sources(
    candidates: Sequence[Candidate],
    resolve: TextureResolver,
    *,
    separator: str = "/",
    on_outcome: Optional[Callable[[Candidate, Outcome], None]] = None,
) -> Classification[RegisteredSource]:
    registrations = []
    diagnostics = []
    for candidate in candidates:
        outcome = classify_source(candidate, resolve, separator=separator)
        if on_outcome is not None:
            on_outcome(candidate, outcome)
        if isinstance(outcome, Found):
            registrations.append(outcome.value)
        elif isinstance(outcome, Error):
            diagnostics.append(outcome)
    return Classification(Capability.SOURCE, tuple(registrations), tuple(diagnostics))


# ---------------------------------------------------------------------------
# controllers and managers
# ---------------------------------------------------------------------------
def _classify_single(capability: Capability, record_type: type, candidates: Sequence[Candidate]) -> Classification:
    if not candidates:
        return Classification(capability)
    if len(candidates) > 1:
        names = ", ".join(candidate.qualified_name for candidate in candidates)
        error = Error(
            ErrorKind.DUPLICATE_DECLARATION,
            f"a module may declare at most one {capability.value}, found {len(candidates)}: {names}",
            module=candidates[0].module,
            capability=capability.value,
        )
        return Classification(capability, (), (error,))
    candidate = candidates[0]
    record = record_type(candidate.module, candidate.qualified_name, candidate.factory)
    return Classification(capability, (record,))


def classify_controllers(candidates: Sequence[Candidate]) -> Classification[RegisteredController]:
    return _classify_single(Capability.CONTROLLER, RegisteredController, candidates)


def classify_managers(candidates: Sequence[Candidate]) -> Classification[RegisteredManager]:
    return _classify_single(Capability.MANAGER, RegisteredManager, candidates)


# ---------------------------------------------------------------------------
# units
# ---------------------------------------------------------------------------
def classify_units(candidates: Sequence[Candidate]) -> Classification[RegisteredUnit]:
    registrations = tuple(
        RegisteredUnit(candidate.module, candidate.qualified_name, candidate.factory, index)
        for index, candidate in enumerate(candidates)
    )
    return Classification(Capability.UNIT, registrations)
