"""User-facing status text for the intake flow.

Each situation gets its own wording so a participant can always tell a
missing file apart from a duplicate offer, an unreadable archive or a failed
upload.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from intake_portal.intake.errors import IncompleteSubmission

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_TIMEZONE = "Asia/Colombo"

CORRUPT_ARCHIVE_MESSAGE = "Unable to read ZIP file. Please upload a valid ZIP file."
NOTHING_ADDED_MESSAGE = "Selected files were already uploaded. No new files added."
UPLOADING_MESSAGE = "All required files are ready. Uploading to server..."
UPLOAD_FAILED_MESSAGE = "Upload failed. Please try again."
UPLOAD_SUCCESS_MESSAGE = "Upload successful!"
ALREADY_UPLOADED_MESSAGE = "You have already uploaded your files."


def progress_message(found_count: int, total: int, *, from_archive: bool = False) -> str:
    if from_archive:
        return f"{found_count}/{total} files found (including ZIP contents)"
    return f"{found_count}/{total} files uploaded"


def status_message(
    found_count: int,
    total: int,
    *,
    from_archive: bool = False,
    nothing_added: bool = False,
) -> str:
    """Headline status after an offer or removal."""
    if found_count == total:
        if from_archive:
            return "All required files found inside ZIP - ready to submit."
        return "All required files selected - ready to submit."
    if nothing_added:
        return NOTHING_ADDED_MESSAGE
    if from_archive:
        return f"{found_count}/{total} required files found inside ZIP. Some files are missing."
    return f"{found_count}/{total} required files uploaded. Some files are still missing."


def incomplete_submission_message(error: IncompleteSubmission) -> str:
    return (
        f"Cannot submit - {error.found_count}/{error.total} files uploaded. "
        "Please upload the missing files."
    )


def _parse_datetime(value: str) -> Optional[datetime]:
    try:
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_upload_date(value: Optional[str], display_timezone: str = DEFAULT_DISPLAY_TIMEZONE) -> str:
    """Render a backend timestamp as a long date, e.g. ``October 19, 2026``.

    Naive timestamps are taken as UTC. Unparseable values are returned as-is.
    """
    if not value:
        return "an unknown date"

    parsed = _parse_datetime(value)
    if parsed is None:
        return value

    try:
        zone = ZoneInfo(display_timezone)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown display timezone '{display_timezone}', using UTC")
        zone = ZoneInfo("UTC")

    local = parsed.astimezone(zone)
    return f"{local:%B} {local.day}, {local.year}"


def already_uploaded_message(
    last_uploaded_date: Optional[str],
    display_timezone: str = DEFAULT_DISPLAY_TIMEZONE,
) -> str:
    return f"{ALREADY_UPLOADED_MESSAGE} Uploaded on: {format_upload_date(last_uploaded_date, display_timezone)}"
