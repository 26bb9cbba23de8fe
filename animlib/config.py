"""Configuration helpers for the animation module registry."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

DEFAULT_CONFIG_FILE = Path.home() / ".animlib" / "registry.json"
DEFAULT_TEXTURE_EXTENSION = ".png"
DEFAULT_RESOLVE_TIMEOUT = 30.0

_TRUTHY = {"1", "true", "yes", "on"}


def _parse_timeout(value: object) -> Optional[float]:
    if value is None or value == "":
        return None
    timeout = float(value)  # type: ignore[arg-type]
    if timeout <= 0:
        return None
    return timeout


def _parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in _TRUTHY


@dataclass(slots=True)
class RegistryConfig:
    """Runtime configuration describing how modules are loaded.

    ``asset_root`` is the directory textures are resolved against when no
    explicit asset provider is handed to the registry.  ``resolve_timeout``
    bounds how long a load waits on the rendering context for one texture;
    ``None`` waits forever.  ``headless`` hosts skip every family that needs a
    rendering context (sources and controllers).
    """

    asset_root: Optional[Path] = None
    texture_extension: str = DEFAULT_TEXTURE_EXTENSION
    resolve_timeout: Optional[float] = DEFAULT_RESOLVE_TIMEOUT
    path_separator: str = "/"
    headless: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "RegistryConfig":
        env = os.environ if env is None else env
        root = env.get("ANIMLIB_ASSET_ROOT")
        timeout = env.get("ANIMLIB_RESOLVE_TIMEOUT")
        return cls(
            asset_root=Path(root).expanduser().resolve() if root else None,
            texture_extension=env.get("ANIMLIB_TEXTURE_EXTENSION", DEFAULT_TEXTURE_EXTENSION),
            resolve_timeout=_parse_timeout(timeout) if timeout is not None else DEFAULT_RESOLVE_TIMEOUT,
            headless=_parse_bool(env.get("ANIMLIB_HEADLESS", "")),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "RegistryConfig":
        root = data.get("asset_root")
        timeout = data.get("resolve_timeout", DEFAULT_RESOLVE_TIMEOUT)
        return cls(
            asset_root=Path(str(root)).expanduser().resolve() if root else None,
            texture_extension=str(data.get("texture_extension") or DEFAULT_TEXTURE_EXTENSION),
            resolve_timeout=_parse_timeout(timeout),
            path_separator=str(data.get("path_separator") or "/"),
            headless=_parse_bool(data.get("headless", False)),
        )

    def to_mapping(self) -> MutableMapping[str, object]:
        return {
            "asset_root": str(self.asset_root) if self.asset_root else None,
            "texture_extension": self.texture_extension,
            "resolve_timeout": self.resolve_timeout,
            "path_separator": self.path_separator,
            "headless": self.headless,
        }

    def dump(self, destination: Path | None = None) -> None:
        destination = destination or DEFAULT_CONFIG_FILE
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(json.dumps(self.to_mapping(), indent=2))

    @classmethod
    def load(cls, source: Path | None = None) -> "RegistryConfig":
        source = source or DEFAULT_CONFIG_FILE
        if not source.exists():
            raise FileNotFoundError(f"Configuration file not found: {source}")
        data = json.loads(source.read_text())
        return cls.from_mapping(data)

    def build_asset_provider(self) -> "DirectoryAssetProvider":
        """Return a directory backed asset provider rooted at ``asset_root``."""

        from .assets import DirectoryAssetProvider

        if self.asset_root is None:
            raise ValueError("asset_root must be configured to build a directory asset provider.")
        return DirectoryAssetProvider(self.asset_root, extension=self.texture_extension)


__all__ = ["DEFAULT_CONFIG_FILE", "RegistryConfig"]
