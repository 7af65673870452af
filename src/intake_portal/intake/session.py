"""Intake session: one participant's incremental upload flow.

The session owns the accepted files and recomputes everything else from them
after each offer or removal. Lifecycle:

    EMPTY -> PARTIALLY_STAGED <-> PARTIALLY_STAGED -> READY -> SUBMITTING -> SUBMITTED

SUBMITTING falls back to the state it came from when the upload fails, so the
participant can retry without staging files again. SUBMITTED is terminal.

Only ``start()`` (the upload pre-check) and ``submit()`` perform I/O, through
the injected checker/uploader. Callers must not re-enter a session while one
of its operations is running.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence

from intake_portal.api.errors import PortalApiError
from intake_portal.intake import status
from intake_portal.intake.archive import scan_archive
from intake_portal.intake.errors import IncompleteSubmission, SessionLocked, UploadFailed
from intake_portal.intake.models import AcceptedFile, OfferedFile
from intake_portal.intake.reconcile import ReconcileResult, reconcile
from intake_portal.manifest import DEFAULT_MANIFEST, RequiredManifest

if TYPE_CHECKING:
    from intake_portal.api.models import UploadStatus

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    EMPTY = "empty"
    PARTIALLY_STAGED = "partially_staged"
    READY = "ready"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"


class Uploader(Protocol):
    def upload(self, participant: str, files: Sequence[AcceptedFile]) -> Any: ...


class UploadStatusChecker(Protocol):
    def check_upload(self, email: str) -> "UploadStatus": ...


@dataclass(frozen=True)
class OfferOutcome:
    """What one offer (or removal) did to the session."""

    result: ReconcileResult
    from_archive: bool = False
    offered_count: int = 0

    @property
    def nothing_added(self) -> bool:
        return self.offered_count > 0 and self.result.nothing_added

    @property
    def progress_message(self) -> str:
        return status.progress_message(
            self.result.found_count, self.result.total, from_archive=self.from_archive
        )

    @property
    def status_message(self) -> str:
        return status.status_message(
            self.result.found_count,
            self.result.total,
            from_archive=self.from_archive,
            nothing_added=self.nothing_added,
        )


def partition_selection(files: Sequence[OfferedFile]) -> tuple[list[OfferedFile], Optional[OfferedFile]]:
    """Split one picker selection into JSON files and the archive to read.

    Matching is on the lower-cased extension. Only the first ZIP is used;
    further ZIPs and other file types are ignored.
    """
    jsons = [f for f in files if f.name.lower().endswith(".json")]
    zips = [f for f in files if f.name.lower().endswith(".zip")]

    for f in zips[1:]:
        logger.warning(f"Only one ZIP archive is read per selection; ignoring {f.name}")
    for f in files:
        if f not in jsons and f not in zips:
            logger.debug(f"Ignoring unsupported file type: {f.name}")

    return jsons, (zips[0] if zips else None)


class IntakeSession:
    """Staged files, derived status and the submit handoff for one participant."""

    def __init__(
        self,
        participant: str,
        manifest: Optional[RequiredManifest] = None,
        *,
        already_submitted: bool = False,
        last_uploaded_date: Optional[str] = None,
    ):
        self.participant = participant
        self.manifest = manifest or DEFAULT_MANIFEST
        self.last_uploaded_date = last_uploaded_date
        self.submitted_names: tuple[str, ...] = ()
        self.last_response: Any = None
        self._submitting = False
        self._submitted = already_submitted
        self._apply(reconcile((), (), self.manifest))

    @classmethod
    def start(
        cls,
        participant: str,
        checker: UploadStatusChecker,
        manifest: Optional[RequiredManifest] = None,
    ) -> "IntakeSession":
        """Open a session, asking the backend once whether the participant already uploaded.

        A failed check is logged and the session opens empty.
        """
        try:
            upload_status = checker.check_upload(participant)
        except PortalApiError as exc:
            logger.warning(f"Error checking upload status for {participant}: {exc}")
            return cls(participant, manifest)

        if upload_status.uploaded:
            logger.info(f"{participant} already uploaded on {upload_status.last_uploaded_date}")
        return cls(
            participant,
            manifest,
            already_submitted=upload_status.uploaded,
            last_uploaded_date=upload_status.last_uploaded_date,
        )

    # ------------------------------------------------------------------
    # Derived state

    @property
    def state(self) -> SessionState:
        if self._submitted:
            return SessionState.SUBMITTED
        if self._submitting:
            return SessionState.SUBMITTING
        if not self._accepted:
            return SessionState.EMPTY
        if not self._missing:
            return SessionState.READY
        return SessionState.PARTIALLY_STAGED

    @property
    def accepted(self) -> tuple[AcceptedFile, ...]:
        return self._accepted

    @property
    def accepted_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self._accepted)

    @property
    def missing(self) -> tuple[str, ...]:
        return self._missing

    @property
    def extra(self) -> tuple[str, ...]:
        return self._extra

    @property
    def found_count(self) -> int:
        return len(self.manifest) - len(self._missing)

    @property
    def ready_to_submit(self) -> bool:
        return not self._missing

    @property
    def is_locked(self) -> bool:
        return self._submitted or self._submitting

    def _apply(self, result: ReconcileResult) -> None:
        self._accepted = result.merged
        self._missing = result.missing
        self._extra = result.extra

    def _ensure_mutable(self) -> None:
        if self._submitted:
            raise SessionLocked(f"Files for {self.participant} were already submitted")
        if self._submitting:
            raise SessionLocked(f"A submission for {self.participant} is in progress")

    # ------------------------------------------------------------------
    # Operations

    def offer(self, files: Sequence[OfferedFile] = (), archive: Optional[bytes] = None) -> OfferOutcome:
        """Stage plain files and/or the manifest files found in an archive.

        The archive is read before anything is merged, so ``CorruptArchive``
        leaves the session exactly as it was.

        Raises:
            SessionLocked: If the session was submitted or is submitting
            CorruptArchive: If ``archive`` cannot be read
        """
        self._ensure_mutable()

        offered: list[Any] = list(files)
        archive_extras: tuple[str, ...] = ()
        if archive is not None:
            scan = scan_archive(archive, self.manifest)
            offered.extend(scan.files)
            archive_extras = scan.extras

        previous_state = self.state
        result = reconcile(self._accepted, offered, self.manifest, archive_extras)
        self._apply(result)

        logger.info(
            f"Offer for {self.participant}: {result.added}/{len(offered)} added, "
            f"{result.found_count}/{len(self.manifest)} required present "
            f"({previous_state.value} -> {self.state.value})"
        )
        return OfferOutcome(result=result, from_archive=archive is not None, offered_count=len(offered))

    def offer_selection(self, files: Sequence[OfferedFile]) -> OfferOutcome:
        """Offer one picker selection of mixed ``.json`` and ``.zip`` files."""
        jsons, archive = partition_selection(files)
        return self.offer(jsons, archive.content if archive is not None else None)

    def remove(self, name: str) -> bool:
        """Unstage ``name``. Returns False (and changes nothing) if it was not staged.

        Raises:
            SessionLocked: If the session was submitted or is submitting
        """
        self._ensure_mutable()

        remaining = [f for f in self._accepted if f.name != name]
        if len(remaining) == len(self._accepted):
            logger.debug(f"Remove ignored, {name} is not staged")
            return False

        self._apply(reconcile(remaining, (), self.manifest))
        logger.info(f"Removed {name} for {self.participant} (state: {self.state.value})")
        return True

    def removal_outcome(self) -> OfferOutcome:
        """Status of the current accepted set, as shown after a removal."""
        return OfferOutcome(result=reconcile(self._accepted, (), self.manifest))

    def submit(self, uploader: Uploader) -> Any:
        """Hand the accepted files to ``uploader`` once nothing is missing.

        Returns:
            Whatever the uploader returned (the backend's response body)

        Raises:
            SessionLocked: If the session was submitted or is submitting
            IncompleteSubmission: If required files are missing (no upload is attempted)
            UploadFailed: If the upload failed; the staged files are kept for a retry
        """
        self._ensure_mutable()

        if self._missing:
            raise IncompleteSubmission(self._missing, self.found_count, len(self.manifest))

        files = self._accepted
        self._submitting = True
        logger.info(f"Submitting {len(files)} files for {self.participant}")
        try:
            response = uploader.upload(self.participant, files)
        except PortalApiError as exc:
            logger.error(f"Upload failed for {self.participant}: {exc}")
            raise UploadFailed(str(exc)) from exc
        finally:
            self._submitting = False

        self._submitted = True
        self.submitted_names = tuple(f.name for f in files)
        self.last_response = response
        self._apply(reconcile((), (), self.manifest))
        logger.info(f"Upload complete for {self.participant}; session locked")
        return response
