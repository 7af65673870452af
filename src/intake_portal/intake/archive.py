"""Archive reader: list and extract ZIP entries held in memory.

Nothing is written to disk. Entry paths are normalized to forward slashes
(exports produced on Windows use backslashes) and directory entries are
skipped. Manifest files are located by path suffix, so the folder layout of
the export does not matter.
"""

from __future__ import annotations

import io
import logging
import zipfile
from typing import List, Optional

from intake_portal.intake.errors import CorruptArchive
from intake_portal.intake.models import JSON_CONTENT_TYPE, AcceptedFile, ArchiveEntry, ArchiveScan
from intake_portal.manifest import DEFAULT_MANIFEST, RequiredManifest

logger = logging.getLogger(__name__)


def normalize_entry_path(raw: str) -> str:
    """Return ``raw`` with every backslash replaced by ``/``."""
    return raw.replace("\\", "/")


def _entry_loader(archive: zipfile.ZipFile, info: zipfile.ZipInfo):
    def _read() -> bytes:
        try:
            return archive.read(info)
        except (zipfile.BadZipFile, zipfile.LargeZipFile, NotImplementedError, OSError, EOFError) as exc:
            raise CorruptArchive(f"Cannot extract '{info.filename}': {exc}") from exc

    return _read


def _open_zip(data: bytes) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(io.BytesIO(data))
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError, ValueError) as exc:
        raise CorruptArchive(f"Invalid ZIP: {exc}") from exc


def _file_entries(archive: zipfile.ZipFile) -> List[ArchiveEntry]:
    entries = []
    for info in archive.infolist():
        if info.is_dir():
            continue
        path = normalize_entry_path(info.filename)
        if not path or path.endswith("/"):
            continue
        entries.append(ArchiveEntry(path=path, _loader=_entry_loader(archive, info)))
    return entries


def open_archive(data: bytes) -> List[ArchiveEntry]:
    """Parse ``data`` as a ZIP archive and list its file entries.

    Args:
        data: Raw archive bytes

    Returns:
        ArchiveEntry list in archive order; ``read()`` extracts lazily from
        the in-memory buffer

    Raises:
        CorruptArchive: If the buffer is not a readable ZIP archive
    """
    entries = _file_entries(_open_zip(data))
    logger.debug(f"Archive lists {len(entries)} file entries")
    return entries


def scan_archive(data: bytes, manifest: Optional[RequiredManifest] = None) -> ArchiveScan:
    """Extract the manifest files from an archive and report the rest.

    For each manifest name the first entry whose path ends with that name is
    read in full and staged under the bare manifest name. Entries matching no
    manifest name come back as extras, reduced to their base name. The archive
    is closed before returning.

    Raises:
        CorruptArchive: If the archive or a matched entry cannot be read
    """
    manifest = manifest or DEFAULT_MANIFEST

    files = []
    with _open_zip(data) as archive:
        entries = _file_entries(archive)
        for name in manifest.names:
            match = next((entry for entry in entries if entry.path.endswith(name)), None)
            if match is None:
                continue
            files.append(AcceptedFile(name=name, content=match.read(), content_type=JSON_CONTENT_TYPE))
            logger.debug(f"Extracted {name} from {match.path}")

    extras = tuple(entry.base_name for entry in entries if manifest.match(entry.path) is None)

    logger.info(
        f"Archive scan: {len(files)}/{len(manifest)} required files found, {len(extras)} other entries"
    )
    return ArchiveScan(files=tuple(files), extras=extras)
