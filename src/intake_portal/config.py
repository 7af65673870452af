"""Portal client configuration management.

Settings live in ``~/.intake-portal/config.toml``:

    [server]
    url = "https://portal.example.org"
    timeout = 30

    [intake]
    manifest_path = "/path/to/required-files.yaml"
    timezone = "Asia/Colombo"

``INTAKE_PORTAL_API_URL`` and ``INTAKE_PORTAL_TIMEOUT`` override the file.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

import toml  # type: ignore[import-untyped]

from intake_portal.intake.status import DEFAULT_DISPLAY_TIMEZONE
from intake_portal.manifest import RequiredManifest, load_manifest

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "http://localhost:8000"
DEFAULT_TIMEOUT_SECONDS = 30.0
API_URL_ENV_VAR = "INTAKE_PORTAL_API_URL"
TIMEOUT_ENV_VAR = "INTAKE_PORTAL_TIMEOUT"


class ConfigError(RuntimeError):
    """Raised when configuration cannot be read or is invalid."""


class PortalConfig:
    """Manage portal client configuration"""

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        self.config_dir = config_dir or Path.home() / ".intake-portal"
        self.config_file = self.config_dir / "config.toml"

    def _load(self) -> dict[str, Any]:
        if not self.config_file.exists():
            return {}
        try:
            return toml.load(self.config_file)
        except (toml.TomlDecodeError, OSError) as exc:
            raise ConfigError(f"Failed to parse {self.config_file}: {exc}") from exc

    def _section(self, name: str) -> dict[str, Any]:
        section = self._load().get(name)
        return section if isinstance(section, dict) else {}

    def get_server_url(self) -> str:
        """Backend base URL, without a trailing slash."""
        env_value = os.getenv(API_URL_ENV_VAR, "").strip()
        if env_value:
            return env_value.rstrip("/")

        server_url = self._section("server").get("url")
        if isinstance(server_url, str) and server_url.strip():
            return server_url.strip().rstrip("/")
        return DEFAULT_SERVER_URL

    def get_timeout(self) -> float:
        raw: Any = os.getenv(TIMEOUT_ENV_VAR, "").strip() or self._section("server").get("timeout")
        if raw in (None, ""):
            return DEFAULT_TIMEOUT_SECONDS
        try:
            timeout = float(raw)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid timeout value: {raw!r}") from exc
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}")
        return timeout

    def get_manifest_path(self) -> Optional[Path]:
        value = self._section("intake").get("manifest_path")
        if isinstance(value, str) and value.strip():
            return Path(value.strip()).expanduser()
        return None

    def get_display_timezone(self) -> str:
        value = self._section("intake").get("timezone")
        if isinstance(value, str) and value.strip():
            return value.strip()
        return DEFAULT_DISPLAY_TIMEZONE

    def load_manifest(self) -> RequiredManifest:
        """Required-file manifest, honouring ``[intake] manifest_path``."""
        path = self.get_manifest_path()
        try:
            return load_manifest(path)
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Failed to load manifest from {path}: {exc}") from exc

    def set_server_url(self, url: str) -> None:
        """Set server URL in config, preserving other settings."""
        url = url.strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            raise ConfigError(f"Server URL must start with http:// or https://, got '{url}'")

        self.config_dir.mkdir(parents=True, exist_ok=True)
        config = self._load()

        server_section = config.get("server")
        if not isinstance(server_section, dict):
            server_section = {}
            config["server"] = server_section

        server_section["url"] = url

        with open(self.config_file, "w", encoding="utf-8") as f:
            toml.dump(config, f)
        logger.info(f"Server URL set to {url} in {self.config_file}")

    def as_dict(self) -> dict[str, Any]:
        manifest_path = self.get_manifest_path()
        return {
            "config_file": str(self.config_file),
            "server_url": self.get_server_url(),
            "timeout": self.get_timeout(),
            "manifest_path": str(manifest_path) if manifest_path else None,
            "timezone": self.get_display_timezone(),
        }
