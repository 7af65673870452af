"""Builders shared by the test suites."""

from __future__ import annotations

import io
import json
import zipfile

from intake_portal.intake import OfferedFile


def json_bytes(name: str) -> bytes:
    return json.dumps({"source": name, "entries": []}).encode("utf-8")


def offered(name: str, content: bytes | None = None) -> OfferedFile:
    return OfferedFile(name=name, content=content if content is not None else json_bytes(name))


def build_zip(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path, content in entries.items():
            archive.writestr(path, content)
    return buffer.getvalue()
