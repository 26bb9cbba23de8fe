"""Per-entity instantiation of registered controllers, managers and abilities.

Registration happens once per session; every entity that enters the world
then gets its own set of behaviour objects built from the registry::

    characters = setup_character_collection(registry, player)
    characters["alpha"].manager.abilities
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional

from .capabilities import AbilityManager, AnimationController
from .classifiers import RegisteredManager, RegisteredUnit
from .registry import ModuleRegistration, Registry

LOGGER = logging.getLogger(__name__)

__all__ = ["CharacterCollection", "ModuleCharacter", "setup_character_collection"]


@dataclass
class ModuleCharacter:
    """Behaviour objects one module contributes to one entity."""

    module: str
    index: int
    controller: Optional[AnimationController] = None
    manager: Optional[AbilityManager] = None


class CharacterCollection(Mapping):
    """Read-only mapping of module name to :class:`ModuleCharacter`."""

    def __init__(self, entity: Any, characters: Dict[str, ModuleCharacter]) -> None:
        self.entity = entity
        self._characters = characters

    def __getitem__(self, module: str) -> ModuleCharacter:
        return self._characters[module]

    def __iter__(self) -> Iterator[str]:
        return iter(self._characters)

    def __len__(self) -> int:
        return len(self._characters)


def _construct(qualified_name: str, factory, entity: Any):
    try:
        return factory(entity)
    except Exception:
        LOGGER.exception("Exception thrown when constructing [%s]", qualified_name)
        raise


def _instantiate_manager(entity: Any, manager: RegisteredManager, units: tuple[RegisteredUnit, ...]) -> AbilityManager:
    instance = _construct(manager.qualified_name, manager.factory, entity)
    abilities = []
    for unit in units:
        ability = _construct(unit.qualified_name, unit.factory, entity)
        ability.manager = instance
        abilities.append(ability)
    abilities.sort(key=lambda ability: ability.id)
    instance.abilities = tuple(abilities)
    try:
        instance.initialize()
        for ability in instance.abilities:
            ability.initialize()
    except Exception:
        LOGGER.exception("Exception thrown when initialising [%s]", manager.qualified_name)
        raise
    return instance


def _instantiate(entity: Any, registration: ModuleRegistration) -> ModuleCharacter:
    character = ModuleCharacter(registration.module, registration.index)
    if registration.controller is not None:
        controller = registration.controller
        character.controller = _construct(controller.qualified_name, controller.factory, entity)
    if registration.manager is not None:
        character.manager = _instantiate_manager(entity, registration.manager, registration.units)
    return character


def setup_character_collection(registry: Registry, entity: Any) -> CharacterCollection:
    """Build fresh behaviour objects for ``entity`` from ``registry``.

    Only modules that registered a controller or a manager take part.
    Abilities are handed to their manager sorted by ``id``; the manager is
    initialised first, then each ability in that order.
    """

    characters: Dict[str, ModuleCharacter] = {}
    for name, registration in registry.snapshot().items():
        if registration.controller is None and registration.manager is None:
            continue
        characters[name] = _instantiate(entity, registration)
    return CharacterCollection(entity, characters)
