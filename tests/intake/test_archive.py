"""Tests for the in-memory archive reader."""

import io
import zipfile

import pytest

from intake_portal.intake import CorruptArchive, open_archive, scan_archive
from intake_portal.intake.archive import normalize_entry_path
from intake_portal.manifest import RequiredManifest
from tests.helpers import json_bytes


class TestOpenArchive:
    """Tests for open_archive()."""

    def test_lists_file_entries(self, make_zip):
        """File entries are listed in archive order with their full paths."""
        data = make_zip({"a/one.json": b"1", "a/b/two.json": b"2"})

        entries = open_archive(data)

        assert [e.path for e in entries] == ["a/one.json", "a/b/two.json"]
        assert entries[1].base_name == "two.json"

    def test_entries_read_lazily(self, make_zip):
        """Entry content is read on demand."""
        data = make_zip({"one.json": b'{"k": 1}'})

        (entry,) = open_archive(data)

        assert entry.read() == b'{"k": 1}'

    def test_skips_directory_entries(self):
        """Directory entries are not listed."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr("export/", b"")
            archive.writestr("export/one.json", b"1")

        entries = open_archive(buffer.getvalue())

        assert [e.path for e in entries] == ["export/one.json"]

    def test_normalizes_backslashes(self, make_zip):
        """Windows-style separators become forward slashes."""
        data = make_zip({"export\\activity\\one.json": b"1"})

        (entry,) = open_archive(data)

        assert entry.path == "export/activity/one.json"
        assert entry.base_name == "one.json"

    def test_rejects_non_zip_bytes(self):
        """Arbitrary bytes raise CorruptArchive."""
        with pytest.raises(CorruptArchive, match="Invalid ZIP"):
            open_archive(b"definitely not a zip")

    def test_rejects_empty_buffer(self):
        """An empty buffer raises CorruptArchive."""
        with pytest.raises(CorruptArchive):
            open_archive(b"")

    def test_normalize_entry_path(self):
        """Mixed separators are normalized."""
        assert normalize_entry_path("a\\b/c\\d.json") == "a/b/c/d.json"


class TestScanArchive:
    """Tests for scan_archive()."""

    def test_extracts_nested_required_files_under_base_name(self, full_export_zip, required_names):
        """Nested required files are staged under the bare manifest name."""
        scan = scan_archive(full_export_zip)

        assert scan.found_names == required_names
        for staged in scan.files:
            assert staged.content == json_bytes(staged.name)
            assert staged.content_type == "application/json"

    def test_reports_unrelated_entries_by_base_name(self, full_export_zip):
        """Unrelated entries come back as extras without their folders."""
        scan = scan_archive(full_export_zip)

        assert scan.extras == ("index.html", "photo_1.jpg")

    def test_partial_archive(self, make_zip, required_names):
        """An archive with some required files reports only those."""
        data = make_zip({f"x/{required_names[1]}": b"{}", "x/readme.txt": b"hi"})

        scan = scan_archive(data)

        assert scan.found_names == (required_names[1],)
        assert scan.extras == ("readme.txt",)

    def test_first_matching_entry_wins(self, make_zip, required_names):
        """Only the first entry matching a manifest name is used."""
        name = required_names[0]
        data = make_zip({f"first/{name}": b"first", f"second/{name}": b"second"})

        scan = scan_archive(data)

        assert len(scan.files) == 1
        assert scan.files[0].content == b"first"
        assert scan.extras == ()

    def test_backslash_paths_match_manifest(self, make_zip, required_names):
        """Backslash paths still match by suffix."""
        name = required_names[2]
        data = make_zip({f"export\\activity\\{name}": b"{}"})

        scan = scan_archive(data)

        assert scan.found_names == (name,)

    def test_custom_manifest(self, make_zip):
        """A custom manifest drives extraction and extras."""
        manifest = RequiredManifest(required_files=("a.json",))
        data = make_zip({"dir/a.json": b"{}", "dir/b.json": b"{}"})

        scan = scan_archive(data, manifest)

        assert scan.found_names == ("a.json",)
        assert scan.extras == ("b.json",)

    def test_corrupt_archive(self):
        """Truncated bytes are reported as a corrupt archive."""
        with pytest.raises(CorruptArchive):
            scan_archive(b"PK\x03\x04 truncated")

    def test_archive_is_closed_after_scan(self, full_export_zip, monkeypatch):
        """scan_archive releases the ZipFile it opened."""
        opened = []

        class RecordingZipFile(zipfile.ZipFile):
            def __init__(self, *args, **kwargs):
                super().__init__(*args, **kwargs)
                opened.append(self)

        monkeypatch.setattr(zipfile, "ZipFile", RecordingZipFile)

        scan = scan_archive(full_export_zip)

        assert len(scan.files) == 5
        assert len(opened) == 1
        assert opened[0].fp is None
