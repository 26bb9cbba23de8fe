"""Capability families recognised by the module registry.

A module contributes behaviour to the host by declaring types that belong to
one of four families:

``Capability.SOURCE``
    :class:`AnimationSource` subclasses describing animation tracks and the
    sprite sheet they are drawn from.  Any number per module.
``Capability.CONTROLLER``
    :class:`AnimationController` subclasses that drive a module's animation
    state.  At most one per module.
``Capability.MANAGER``
    :class:`AbilityManager` subclasses that drive a module's ability state.
    At most one per module.
``Capability.UNIT``
    :class:`Ability` subclasses owned by the module's manager.  Any number per
    module.

Types are tagged either by ancestry (subclassing one of the bases above) or
explicitly through a :class:`CapabilityDescriptor`, which lets a module hand
over a factory without exposing a class at all::

    MODULE = Module("alpha", (
        AlphaSource,
        controller_descriptor(AlphaController),
        unit_descriptor(make_dash, "alpha.abilities.Dash"),
    ))
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Tuple, Union

__all__ = [
    "Ability",
    "AbilityManager",
    "AnimationController",
    "AnimationSource",
    "Capability",
    "CapabilityDescriptor",
    "Frame",
    "Module",
    "TexturePath",
    "Track",
    "controller_descriptor",
    "manager_descriptor",
    "qualified_name",
    "source_descriptor",
    "unit_descriptor",
]


def qualified_name(cls: type) -> str:
    """Return ``module.QualName`` for ``cls``."""

    return f"{cls.__module__}.{cls.__qualname__}"


# ---------------------------------------------------------------------------
# animation data
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Frame:
    """One frame of a track: the atlas cell it shows and for how long."""

    atlas_index: int
    duration: float


@dataclass(frozen=True)
class Track:
    """A named animation sequence, as authored in the sprite tool."""

    frames: Tuple[Frame, ...]
    loop_count: int = 0
    reversed: bool = False
    ping_pong: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "frames", tuple(self.frames))

    @property
    def duration(self) -> float:
        return sum(frame.duration for frame in self.frames)


@dataclass
class TexturePath:
    """Mutable texture path suggestion handed to :meth:`AnimationSource.load`."""

    value: str

    def __str__(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# behaviour bases
# ---------------------------------------------------------------------------
class AnimationSource:
    """Provides animation tracks and the sprite sheet layout for one texture.

    Subclasses must be constructible without arguments.  ``tracks`` maps track
    names to :class:`Track` instances and must not be empty; ``sprite_size``
    is the ``(width, height)`` of a single atlas cell and must be positive in
    both axes.
    """

    tracks: Mapping[str, Track] = {}
    sprite_size: Tuple[int, int] = (0, 0)

    def load(self, path: TexturePath) -> bool:
        """Called once before registration.

        ``path`` holds the suggested texture path and may be rewritten in
        place.  Returning ``False`` opts this source out of registration.
        """

        return True


class AnimationController:
    """Drives animation state for one entity on behalf of a module."""

    def __init__(self, entity: Any = None) -> None:
        self.entity = entity


class AbilityManager:
    """Owns and updates the abilities of one entity on behalf of a module."""

    def __init__(self, entity: Any = None) -> None:
        self.entity = entity
        self.abilities: Tuple["Ability", ...] = ()

    def initialize(self) -> None:
        """Called after all abilities have been attached."""


class Ability:
    """A single ability owned by an :class:`AbilityManager`."""

    id: int = 0

    def __init__(self, entity: Any = None) -> None:
        self.entity = entity
        self.manager: Optional[AbilityManager] = None

    def initialize(self) -> None:
        """Called after :meth:`AbilityManager.initialize`, lowest ``id`` first."""


# ---------------------------------------------------------------------------
# capability tags
# ---------------------------------------------------------------------------
class Capability(Enum):
    """Closed set of capability families."""

    SOURCE = "source"
    CONTROLLER = "controller"
    MANAGER = "manager"
    UNIT = "unit"

    @property
    def base(self) -> type:
        return _CAPABILITY_BASES[self]

    @property
    def multi_valued(self) -> bool:
        return self in (Capability.SOURCE, Capability.UNIT)

    @classmethod
    def matches(cls, candidate: type) -> Tuple["Capability", ...]:
        """Return every family ``candidate`` derives from."""

        return tuple(capability for capability in cls if issubclass(candidate, capability.base))


_CAPABILITY_BASES: Dict[Capability, type] = {
    Capability.SOURCE: AnimationSource,
    Capability.CONTROLLER: AnimationController,
    Capability.MANAGER: AbilityManager,
    Capability.UNIT: Ability,
}

BASE_TYPES = frozenset(_CAPABILITY_BASES.values())


@dataclass(frozen=True)
class CapabilityDescriptor:
    """Explicit declaration of one capability candidate."""

    capability: Capability
    factory: Callable[..., Any] = field(compare=False)
    qualified_name: str

    @classmethod
    def from_type(cls, declared: type) -> "CapabilityDescriptor":
        matches = Capability.matches(declared)
        if len(matches) != 1:
            raise TypeError(
                f"{qualified_name(declared)} must derive from exactly one capability base, "
                f"found {len(matches)}."
            )
        return cls(matches[0], declared, qualified_name(declared))


def _descriptor(
    capability: Capability, factory: Callable[..., Any], name: Optional[str]
) -> CapabilityDescriptor:
    if name is None:
        if not isinstance(factory, type):
            raise TypeError("A qualified name is required when the factory is not a class.")
        name = qualified_name(factory)
    return CapabilityDescriptor(capability, factory, name)


def source_descriptor(factory: Callable[[], AnimationSource], name: Optional[str] = None) -> CapabilityDescriptor:
    return _descriptor(Capability.SOURCE, factory, name)


def controller_descriptor(factory: Callable[..., AnimationController], name: Optional[str] = None) -> CapabilityDescriptor:
    return _descriptor(Capability.CONTROLLER, factory, name)


def manager_descriptor(factory: Callable[..., AbilityManager], name: Optional[str] = None) -> CapabilityDescriptor:
    return _descriptor(Capability.MANAGER, factory, name)


def unit_descriptor(factory: Callable[..., Ability], name: Optional[str] = None) -> CapabilityDescriptor:
    return _descriptor(Capability.UNIT, factory, name)


DeclaredType = Union[type, CapabilityDescriptor]


@dataclass(frozen=True)
class Module:
    """An externally authored module: a unique name and its declared types."""

    name: str
    types: Tuple[DeclaredType, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Module names must be non-empty strings.")
        object.__setattr__(self, "types", tuple(self.types))

    @classmethod
    def of(cls, name: str, types: Sequence[DeclaredType]) -> "Module":
        return cls(name, tuple(types))

    def __str__(self) -> str:
        return self.name
