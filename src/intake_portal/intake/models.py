"""Value types shared by the archive reader, reconciliation engine and session."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

JSON_CONTENT_TYPE = "application/json"
ZIP_CONTENT_TYPE = "application/zip"


@dataclass(frozen=True)
class OfferedFile:
    """A candidate file introduced by one user interaction."""

    name: str
    content: bytes = field(repr=False)
    content_type: str = JSON_CONTENT_TYPE

    @classmethod
    def from_path(cls, path: Path) -> "OfferedFile":
        """Read a local file; the offered name is its base name."""
        content_type = ZIP_CONTENT_TYPE if path.suffix.lower() == ".zip" else JSON_CONTENT_TYPE
        return cls(name=path.name, content=path.read_bytes(), content_type=content_type)

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class AcceptedFile:
    """A file staged in a session. Identity is ``name``."""

    name: str
    content: bytes = field(repr=False)
    content_type: str = JSON_CONTENT_TYPE

    @classmethod
    def from_offered(cls, offered: OfferedFile) -> "AcceptedFile":
        return cls(name=offered.name, content=offered.content, content_type=offered.content_type)

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ArchiveEntry:
    """One file inside an archive, with its path normalized to forward slashes."""

    path: str
    _loader: Callable[[], bytes] = field(repr=False, compare=False)

    @property
    def base_name(self) -> str:
        return self.path.rsplit("/", 1)[-1] or self.path

    def read(self) -> bytes:
        return self._loader()


@dataclass(frozen=True)
class ArchiveScan:
    """Result of matching an archive against the manifest.

    ``files`` holds one AcceptedFile per manifest name found (named by the
    manifest name, folders dropped). ``extras`` holds the base names of the
    entries that matched nothing.
    """

    files: tuple[AcceptedFile, ...]
    extras: tuple[str, ...]

    @property
    def found_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.files)
