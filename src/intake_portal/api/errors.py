"""Errors raised by the portal HTTP clients."""

from __future__ import annotations

from typing import Optional


class PortalApiError(RuntimeError):
    """Raised when a portal endpoint fails or cannot be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
