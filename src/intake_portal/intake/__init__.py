"""File intake: archive reading, reconciliation against the manifest, and sessions."""

from .errors import CorruptArchive, IncompleteSubmission, IntakeError, SessionLocked, UploadFailed
from .models import AcceptedFile, ArchiveEntry, ArchiveScan, OfferedFile
from .archive import normalize_entry_path, open_archive, scan_archive
from .reconcile import ReconcileResult, dedupe, reconcile
from .session import (
    IntakeSession,
    OfferOutcome,
    SessionState,
    Uploader,
    UploadStatusChecker,
    partition_selection,
)

__all__ = [
    "CorruptArchive",
    "IncompleteSubmission",
    "IntakeError",
    "SessionLocked",
    "UploadFailed",
    "AcceptedFile",
    "ArchiveEntry",
    "ArchiveScan",
    "OfferedFile",
    "normalize_entry_path",
    "open_archive",
    "scan_archive",
    "ReconcileResult",
    "dedupe",
    "reconcile",
    "IntakeSession",
    "OfferOutcome",
    "SessionState",
    "Uploader",
    "UploadStatusChecker",
    "partition_selection",
]
