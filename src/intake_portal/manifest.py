"""Required file manifest for participant submissions.

The manifest is the fixed, ordered list of JSON file names a participant must
supply from their data export. Archive entries are matched against it by path
suffix so that exports nested under arbitrary folders are still recognised.

Key concepts:
- DEFAULT_REQUIRED_FILES: The five file names the portal asks for
- RequiredManifest: Immutable, ordered manifest with suffix matching
- load_manifest(): Built-in manifest or a YAML override (``required_files:`` list)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_FILES: Tuple[str, ...] = (
    "time_spent_on_facebook.json",
    "your_comment_active_days.json",
    "facebook_reels_usage_information.json",
    "your_notifications_tab_activity.json",
    "your_facebook_watch_activity_in_the_last_28_days.json",
)


class RequiredManifest(BaseModel):
    """Ordered set of canonical file names a submission must contain.

    Attributes:
        required_files: File names in display order (no folders, no duplicates)

    Example:
        >>> manifest = RequiredManifest()
        >>> manifest.match("export/activity/time_spent_on_facebook.json")
        'time_spent_on_facebook.json'
    """

    model_config = ConfigDict(frozen=True)

    required_files: Tuple[str, ...] = Field(
        default=DEFAULT_REQUIRED_FILES,
        min_length=1,
        description="Required file names, in the order they are reported as missing",
    )

    @field_validator("required_files")
    @classmethod
    def validate_required_files(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Reject blank names, folder paths and duplicates."""
        seen = set()
        for name in v:
            if not name or not name.strip():
                raise ValueError("Required file names must be non-empty")
            if "/" in name or "\\" in name:
                raise ValueError(f"Required file name must not contain a folder: '{name}'")
            if name in seen:
                raise ValueError(f"Duplicate required file name: '{name}'")
            seen.add(name)
        return v

    @classmethod
    def from_yaml_file(cls, path: Path) -> "RequiredManifest":
        """Load a manifest override from YAML.

        Args:
            path: YAML file containing a ``required_files`` list

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the document does not describe a valid manifest
        """
        import ruamel.yaml

        yaml = ruamel.yaml.YAML(typ="safe")
        with open(path, encoding="utf-8") as f:
            data = yaml.load(f)

        if not isinstance(data, dict) or "required_files" not in data:
            raise ValueError(f"{path} does not define 'required_files'")

        return cls(required_files=tuple(str(name) for name in data["required_files"]))

    @property
    def names(self) -> Tuple[str, ...]:
        return self.required_files

    def __len__(self) -> int:
        return len(self.required_files)

    def __contains__(self, name: object) -> bool:
        return name in self.required_files

    def match(self, path: str) -> Optional[str]:
        """Return the first manifest name that ``path`` ends with, if any."""
        for name in self.required_files:
            if path.endswith(name):
                return name
        return None

    def missing(self, present: Iterable[str]) -> list[str]:
        """Manifest names absent from ``present``, in manifest order."""
        present_names = set(present)
        return [name for name in self.required_files if name not in present_names]


DEFAULT_MANIFEST = RequiredManifest()


def load_manifest(path: Optional[Path] = None) -> RequiredManifest:
    """Return the built-in manifest, or the override stored at ``path``."""
    if path is None:
        return DEFAULT_MANIFEST

    manifest = RequiredManifest.from_yaml_file(path)
    logger.info(f"Loaded manifest override from {path}: {len(manifest)} required files")
    return manifest
