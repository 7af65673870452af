from __future__ import annotations

from typing import Callable, Iterator

import pytest

from intake_portal.config import API_URL_ENV_VAR, TIMEOUT_ENV_VAR
from intake_portal.manifest import DEFAULT_REQUIRED_FILES
from tests.helpers import build_zip, json_bytes


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch) -> Iterator[None]:
    """Keep config lookups away from the real home directory and environment."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(API_URL_ENV_VAR, raising=False)
    monkeypatch.delenv(TIMEOUT_ENV_VAR, raising=False)
    yield


@pytest.fixture()
def required_names() -> tuple[str, ...]:
    return DEFAULT_REQUIRED_FILES


@pytest.fixture()
def make_zip() -> Callable[[dict[str, bytes]], bytes]:
    return build_zip


@pytest.fixture()
def full_export_zip(required_names) -> bytes:
    """All five required files nested in export folders, plus two unrelated files."""
    entries = {
        f"facebook-export/your_activity/{name}": json_bytes(name) for name in required_names
    }
    entries["facebook-export/index.html"] = b"<html></html>"
    entries["facebook-export/media/photo_1.jpg"] = b"\xff\xd8\xff"
    return build_zip(entries)
