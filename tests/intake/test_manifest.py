"""Tests for the required file manifest.

Tests cover:
- Default manifest contents and order
- Suffix matching of archive paths
- Missing-name computation
- YAML overrides and validation
"""

import pytest
from pydantic import ValidationError

from intake_portal.manifest import (
    DEFAULT_MANIFEST,
    DEFAULT_REQUIRED_FILES,
    RequiredManifest,
    load_manifest,
)


class TestDefaultManifest:
    """Test the built-in manifest."""

    def test_has_five_required_files(self):
        """The default manifest lists five files."""
        assert len(DEFAULT_MANIFEST) == 5
        assert DEFAULT_MANIFEST.names == DEFAULT_REQUIRED_FILES

    def test_exact_names(self):
        """Spelling matters for suffix matching."""
        assert DEFAULT_MANIFEST.names[0] == "time_spent_on_facebook.json"
        assert "your_facebook_watch_activity_in_the_last_28_days.json" in DEFAULT_MANIFEST

    def test_manifest_is_immutable(self):
        """Assigning to a manifest field fails."""
        with pytest.raises(ValidationError):
            DEFAULT_MANIFEST.required_files = ("other.json",)

    def test_load_manifest_without_path_returns_default(self):
        """No override path means the built-in manifest."""
        assert load_manifest() is DEFAULT_MANIFEST


class TestMatch:
    """Test suffix matching."""

    def test_match_nested_path(self):
        """A nested path matches its manifest name."""
        path = "export/logged_information/other/time_spent_on_facebook.json"
        assert DEFAULT_MANIFEST.match(path) == "time_spent_on_facebook.json"

    def test_match_bare_name(self):
        """A bare name matches itself."""
        assert DEFAULT_MANIFEST.match("your_comment_active_days.json") == "your_comment_active_days.json"

    def test_no_match_for_unrelated_file(self):
        """Unrelated paths match nothing."""
        assert DEFAULT_MANIFEST.match("export/index.html") is None

    def test_no_match_when_name_is_only_a_prefix(self):
        """A path must end with the name, not merely contain it."""
        assert DEFAULT_MANIFEST.match("time_spent_on_facebook.json.bak") is None


class TestMissing:
    """Test missing-name computation."""

    def test_all_missing_when_nothing_present(self):
        """With nothing present every name is missing."""
        assert DEFAULT_MANIFEST.missing([]) == list(DEFAULT_REQUIRED_FILES)

    def test_missing_preserves_manifest_order(self):
        """Missing names follow manifest order, not input order."""
        present = [DEFAULT_REQUIRED_FILES[3], DEFAULT_REQUIRED_FILES[0]]
        assert DEFAULT_MANIFEST.missing(present) == [
            DEFAULT_REQUIRED_FILES[1],
            DEFAULT_REQUIRED_FILES[2],
            DEFAULT_REQUIRED_FILES[4],
        ]

    def test_unrelated_names_do_not_count(self):
        """Names outside the manifest do not reduce missing."""
        assert len(DEFAULT_MANIFEST.missing(["notes.json"])) == 5


class TestValidation:
    """Test manifest validation rules."""

    def test_rejects_empty_manifest(self):
        """A manifest needs at least one name."""
        with pytest.raises(ValidationError):
            RequiredManifest(required_files=())

    def test_rejects_duplicates(self):
        """Duplicate names are rejected."""
        with pytest.raises(ValidationError, match="Duplicate"):
            RequiredManifest(required_files=("a.json", "a.json"))

    def test_rejects_folder_in_name(self):
        """Names cannot contain folder separators."""
        with pytest.raises(ValidationError, match="folder"):
            RequiredManifest(required_files=("export/a.json",))

    def test_rejects_blank_name(self):
        """Blank names are rejected."""
        with pytest.raises(ValidationError):
            RequiredManifest(required_files=("a.json", "  "))


class TestYamlOverride:
    """Test loading a manifest from YAML."""

    def test_load_from_yaml(self, tmp_path):
        """A YAML required_files list becomes the manifest."""
        path = tmp_path / "required.yaml"
        path.write_text("required_files:\n  - first.json\n  - second.json\n", encoding="utf-8")

        manifest = load_manifest(path)

        assert manifest.names == ("first.json", "second.json")
        assert manifest.match("a/b/second.json") == "second.json"

    def test_yaml_without_required_files_key(self, tmp_path):
        """YAML without required_files is rejected."""
        path = tmp_path / "required.yaml"
        path.write_text("files: []\n", encoding="utf-8")

        with pytest.raises(ValueError, match="required_files"):
            RequiredManifest.from_yaml_file(path)

    def test_missing_yaml_file(self, tmp_path):
        """A missing override file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            RequiredManifest.from_yaml_file(tmp_path / "nope.yaml")
