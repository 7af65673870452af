"""Tests for user-facing status text."""

from intake_portal.intake import IncompleteSubmission
from intake_portal.intake import status


class TestStatusMessage:
    def test_ready_from_selection(self):
        """Ready message for individually picked files."""
        assert status.status_message(5, 5) == "All required files selected - ready to submit."

    def test_ready_from_archive(self):
        """Ready message when the archive supplied the files."""
        assert status.status_message(5, 5, from_archive=True) == (
            "All required files found inside ZIP - ready to submit."
        )

    def test_nothing_added(self):
        """A no-op offer has its own message."""
        assert status.status_message(2, 5, nothing_added=True) == status.NOTHING_ADDED_MESSAGE

    def test_missing_from_selection(self):
        """Missing message for individually picked files."""
        assert status.status_message(3, 5) == (
            "3/5 required files uploaded. Some files are still missing."
        )

    def test_missing_from_archive(self):
        """Missing message when files came from an archive."""
        assert status.status_message(1, 5, from_archive=True) == (
            "1/5 required files found inside ZIP. Some files are missing."
        )

    def test_messages_are_distinct(self):
        """Each situation produces different wording."""
        messages = {
            status.status_message(3, 5),
            status.status_message(3, 5, nothing_added=True),
            status.CORRUPT_ARCHIVE_MESSAGE,
            status.UPLOAD_FAILED_MESSAGE,
        }
        assert len(messages) == 4


def test_progress_message():
    """Progress line for plain and archive offers."""
    assert status.progress_message(3, 5) == "3/5 files uploaded"
    assert status.progress_message(5, 5, from_archive=True) == "5/5 files found (including ZIP contents)"


def test_incomplete_submission_message():
    """Incomplete-submit message shows counts."""
    error = IncompleteSubmission(["a.json", "b.json"], found_count=3, total=5)

    assert status.incomplete_submission_message(error) == (
        "Cannot submit - 3/5 files uploaded. Please upload the missing files."
    )
    assert "a.json, b.json" in str(error)


class TestFormatUploadDate:
    def test_utc_timestamp_in_colombo(self):
        """UTC timestamps are shown in Colombo time by default."""
        # 20:00 UTC is 01:30 the next day in Colombo (UTC+5:30)
        assert status.format_upload_date("2026-10-18T20:00:00Z") == "October 19, 2026"

    def test_naive_timestamp_is_utc(self):
        """Naive timestamps are read as UTC."""
        assert status.format_upload_date("2026-10-18T20:00:00", "UTC") == "October 18, 2026"

    def test_offset_timestamp(self):
        """Explicit offsets are honoured."""
        assert status.format_upload_date("2026-03-01T10:00:00+01:00", "UTC") == "March 1, 2026"

    def test_unparseable_value_returned_as_is(self):
        """Unparseable dates are shown unchanged."""
        assert status.format_upload_date("last tuesday") == "last tuesday"

    def test_missing_value(self):
        """A missing date reads as unknown."""
        assert status.format_upload_date(None) == "an unknown date"

    def test_unknown_timezone_falls_back_to_utc(self):
        """An unknown zone falls back to UTC."""
        assert status.format_upload_date("2026-10-18T20:00:00Z", "Mars/Olympus") == "October 18, 2026"


def test_already_uploaded_message():
    """The already-uploaded message includes the date."""
    message = status.already_uploaded_message("2026-10-18T20:00:00Z")

    assert message.startswith("You have already uploaded your files.")
    assert "October 19, 2026" in message
