"""Read-only asset stores.

The index page, sample documents and sample images are looked up by
logical filename (``index.html``, ``image.png``, ``response.xml``...).
The store is handed to ``create_app`` so tests and deployments can swap
the bundled directory for their own content.
"""

import mimetypes
from collections.abc import Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Protocol, runtime_checkable

# Extension -> content type, for files whose type must not depend on
# the platform's mimetypes database
_CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html; charset=utf-8",
    ".xml": "application/xml; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".txt": "text/plain; charset=utf-8",
    ".png": "image/png",
    ".jpeg": "image/jpeg",
    ".jpg": "image/jpeg",
    ".webp": "image/webp",
    ".svg": "image/svg+xml",
}


def guess_content_type(name: str) -> str:
    """Content type for a logical asset name."""
    suffix = Path(name).suffix.lower()
    if suffix in _CONTENT_TYPES:
        return _CONTENT_TYPES[suffix]
    content_type, _ = mimetypes.guess_type(name)
    return content_type or "application/octet-stream"


@dataclass(frozen=True, slots=True)
class Asset:
    """Asset bytes plus the content type they are served with."""

    body: bytes
    content_type: str


@runtime_checkable
class AssetStore(Protocol):
    """Anything that resolves a logical filename to an ``Asset``."""

    def get(self, name: str) -> Asset | None: ...


class DirectoryAssets:
    """Assets read from a directory on disk.

    Names are resolved relative to the directory; anything that escapes
    it (``../secret``) or is not a regular file is reported missing.
    """

    __slots__ = ("_directory",)

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory).resolve()

    @property
    def directory(self) -> Path:
        return self._directory

    def get(self, name: str) -> Asset | None:
        relative = name.lstrip("/")
        if not relative:
            return None
        file_path = (self._directory / relative).resolve()
        if not file_path.is_relative_to(self._directory) or not file_path.is_file():
            return None
        return Asset(body=file_path.read_bytes(), content_type=guess_content_type(relative))

    def __repr__(self) -> str:
        return f"DirectoryAssets({str(self._directory)!r})"


class MemoryAssets:
    """Assets held in a dict, for tests and embedding.

    Values are raw bytes (content type guessed from the name) or
    ready-made ``Asset`` instances::

        MemoryAssets({"index.html": b"<h1>hi</h1>"})
    """

    __slots__ = ("_assets",)

    def __init__(self, assets: Mapping[str, bytes | Asset]) -> None:
        self._assets: dict[str, Asset] = {
            name.lstrip("/"): value
            if isinstance(value, Asset)
            else Asset(body=value, content_type=guess_content_type(name))
            for name, value in assets.items()
        }

    def get(self, name: str) -> Asset | None:
        return self._assets.get(name.lstrip("/"))

    def __repr__(self) -> str:
        return f"MemoryAssets({sorted(self._assets)!r})"


def bundled_assets() -> DirectoryAssets:
    """The sample assets shipped inside the package."""
    return DirectoryAssets(Path(str(resources.files("edgebin") / "assets")))
