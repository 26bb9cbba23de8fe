"""Custom exception hierarchy for the animation module registry."""

from __future__ import annotations


class AnimLibError(RuntimeError):
    """Base exception for registry failures."""


class RegistryStateError(AnimLibError):
    """Raised when the registry lifecycle is driven out of order."""


class LoadCancelledError(AnimLibError):
    """Raised when a load pass is cancelled by a timeout or host shutdown."""


class ModuleDiscoveryError(AnimLibError):
    """Raised when externally supplied modules cannot be imported."""
