"""Capability discovery and registration for externally authored modules.

Modules declare animation sources, an animation controller, an ability
manager and abilities.  :class:`Registry` scans them at host startup,
validates what they declare and answers lookups for the rest of the session.
"""
from __future__ import annotations

from plugins import PLUGIN_MANAGER

from .assets import AssetProvider, DirectoryAssetProvider, MappingAssetProvider, Texture
from .capabilities import (
    Ability,
    AbilityManager,
    AnimationController,
    AnimationSource,
    Capability,
    CapabilityDescriptor,
    Frame,
    Module,
    TexturePath,
    Track,
    controller_descriptor,
    manager_descriptor,
    source_descriptor,
    unit_descriptor,
)
from .characters import CharacterCollection, ModuleCharacter, setup_character_collection
from .classifiers import (
    RegisteredController,
    RegisteredManager,
    RegisteredSource,
    RegisteredUnit,
    derive_resource_path,
)
from .config import RegistryConfig
from .exceptions import AnimLibError, LoadCancelledError, ModuleDiscoveryError, RegistryStateError
from .loader import discover_modules, load_module
from .registry import ModuleRegistration, Registry
from .reporting import RegistryReporter
from .results import NOT_APPLICABLE, Error, ErrorKind, Found, NotApplicable, Severity
from .scanner import Candidate, scan

PLUGIN_MANAGER.expose("Registry", Registry)
PLUGIN_MANAGER.expose("discover_modules", discover_modules)
PLUGIN_MANAGER.expose("setup_character_collection", setup_character_collection)

__all__ = [
    "Ability",
    "AbilityManager",
    "AnimLibError",
    "AnimationController",
    "AnimationSource",
    "AssetProvider",
    "Candidate",
    "Capability",
    "CapabilityDescriptor",
    "CharacterCollection",
    "DirectoryAssetProvider",
    "Error",
    "ErrorKind",
    "Found",
    "Frame",
    "LoadCancelledError",
    "MappingAssetProvider",
    "Module",
    "ModuleCharacter",
    "ModuleDiscoveryError",
    "ModuleRegistration",
    "NOT_APPLICABLE",
    "NotApplicable",
    "RegisteredController",
    "RegisteredManager",
    "RegisteredSource",
    "RegisteredUnit",
    "Registry",
    "RegistryConfig",
    "RegistryReporter",
    "RegistryStateError",
    "Severity",
    "Texture",
    "TexturePath",
    "Track",
    "controller_descriptor",
    "derive_resource_path",
    "discover_modules",
    "load_module",
    "manager_descriptor",
    "scan",
    "setup_character_collection",
    "source_descriptor",
    "unit_descriptor",
]
