"""Errors raised by the intake core."""

from __future__ import annotations

from typing import Sequence


class IntakeError(Exception):
    """Base class for recoverable intake failures."""


class CorruptArchive(IntakeError):
    """Raised when uploaded archive bytes cannot be read as a ZIP."""


class IncompleteSubmission(IntakeError):
    """Raised when submit is attempted while required files are missing."""

    def __init__(self, missing: Sequence[str], found_count: int, total: int):
        self.missing = list(missing)
        self.found_count = found_count
        self.total = total
        super().__init__(
            f"{found_count}/{total} required files staged; missing: {', '.join(self.missing)}"
        )


class UploadFailed(IntakeError):
    """Raised when the upload endpoint rejects or cannot be reached."""


class SessionLocked(IntakeError):
    """Raised when a session is mutated after (or while) submitting."""
