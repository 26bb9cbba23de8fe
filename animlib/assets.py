"""Texture lookup used while registering animation sources.

The registry never decodes sprite sheets itself.  It hands a slash separated
path (``Alpha/Sprites/PlayerSource``) to an :class:`AssetProvider` and keeps
whatever :class:`Texture` handle comes back.  Handles open the underlying
image through Pillow only when pixels are first requested so a load pass
does not pay for decoding textures nobody draws.
"""
from __future__ import annotations

from pathlib import Path
from threading import RLock
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple, runtime_checkable

from PIL import Image

__all__ = [
    "AssetProvider",
    "DirectoryAssetProvider",
    "MappingAssetProvider",
    "Texture",
]


class Texture:
    """Lazily loaded texture handle."""

    def __init__(self, path: str, file: Optional[Path] = None, image: Optional[Image.Image] = None) -> None:
        if file is None and image is None:
            raise ValueError("A texture needs either a backing file or an image.")
        self.path = path
        self.file = file
        self._image = image
        self._lock = RLock()

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        state = "loaded" if self._image is not None else "pending"
        return f"<Texture {self.path} ({state})>"

    @property
    def loaded(self) -> bool:
        return self._image is not None

    @property
    def image(self) -> Image.Image:
        with self._lock:
            if self._image is None:
                assert self.file is not None
                with Image.open(self.file) as handle:
                    handle.load()
                    self._image = handle.copy()
            return self._image

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    def cell_count(self, cell_size: Tuple[int, int]) -> int:
        """Number of whole ``cell_size`` cells that fit on this texture."""

        width, height = self.size
        cell_width, cell_height = cell_size
        return (width // cell_width) * (height // cell_height)


@runtime_checkable
class AssetProvider(Protocol):
    """Path keyed texture lookup."""

    def resolve(self, path: str) -> Optional[Texture]:
        ...


class DirectoryAssetProvider:
    """Resolve ``Foo/Bar/Baz`` to ``<root>/Foo/Bar/Baz.png``."""

    def __init__(self, root: Path | str, *, extension: str = ".png") -> None:
        self.root = Path(root).expanduser().resolve()
        self.extension = extension if extension.startswith(".") else f".{extension}"
        self._cache: Dict[str, Texture] = {}

    def resolve(self, path: str) -> Optional[Texture]:
        cached = self._cache.get(path)
        if cached is not None:
            return cached
        try:
            candidate = (self.root / f"{path}{self.extension}").resolve()
            candidate.relative_to(self.root)
            if not candidate.is_file():
                return None
        except (ValueError, OSError):
            return None
        texture = Texture(path, file=candidate)
        self._cache[path] = texture
        return texture

    def clear(self) -> None:
        self._cache.clear()


class MappingAssetProvider:
    """In-memory provider keyed by texture path."""

    def __init__(self, textures: Optional[Mapping[str, Any]] = None) -> None:
        self._textures: Dict[str, Texture] = {}
        for path, value in (textures or {}).items():
            self.add(path, value)

    def add(self, path: str, value: Any) -> Texture:
        if isinstance(value, Texture):
            texture = value
        elif isinstance(value, Image.Image):
            texture = Texture(path, image=value)
        else:
            texture = Texture(path, file=Path(value))
        self._textures[path] = texture
        return texture

    def resolve(self, path: str) -> Optional[Texture]:
        return self._textures.get(path)

    def __contains__(self, path: object) -> bool:
        return path in self._textures
