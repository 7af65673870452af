"""HTTP clients for the intake portal backend."""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence, Type, TypeVar, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from intake_portal.api.errors import PortalApiError
from intake_portal.api.models import EmailDispatchResult, ParticipantPage, UploadStatus, UserFiles
from intake_portal.config import PortalConfig
from intake_portal.intake.models import AcceptedFile

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

EMAIL_ROUND_PATHS = {
    "1": "/email/send-round-1",
    "2": "/email/send-round-2",
    "all": "/email/send-all",
}


def _segment(value: str) -> str:
    """Encode a value for use as a single URL path segment."""
    return quote(value, safe="")


class _PortalHttpClient:
    """Shared connection handling for the portal clients."""

    def __init__(
        self,
        server_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
        config: Optional[PortalConfig] = None,
    ):
        self.config = config or PortalConfig()
        self._server_url = server_url.rstrip("/") if server_url else None
        self._timeout = timeout
        self._http_client = http_client

    @property
    def server_url(self) -> str:
        if self._server_url is None:
            self._server_url = self.config.get_server_url()
        return self._server_url

    def _get_http_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._http_client is None:
            timeout = self._timeout if self._timeout is not None else self.config.get_timeout()
            self._http_client = httpx.Client(timeout=timeout)
        return self._http_client

    def close(self):
        """Close HTTP client."""
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.server_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = self._get_http_client().request(method, url, **kwargs)
        except httpx.RequestError as exc:
            raise PortalApiError(f"Cannot reach server: {exc}") from exc
        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    @staticmethod
    def _json(response: httpx.Response, what: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise PortalApiError(f"Invalid JSON in {what} response", response.status_code) from exc

    @staticmethod
    def _model(model: Type[ModelT], data: Any, response: httpx.Response, what: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise PortalApiError(
                f"Unexpected {what} response: {exc.error_count()} invalid field(s)", response.status_code
            ) from exc


class PortalClient(_PortalHttpClient):
    """Participant-facing endpoints: upload pre-check and file upload."""

    def check_upload(self, email: str) -> UploadStatus:
        """Ask whether ``email`` already completed a submission.

        Raises:
            PortalApiError: On a non-2xx response or network failure
        """
        response = self._request("GET", f"/admin/check-upload/{_segment(email)}")
        if not response.is_success:
            raise PortalApiError("Failed to check upload status", response.status_code)
        return self._model(UploadStatus, self._json(response, "check-upload"), response, "check-upload")

    def upload(self, participant: str, files: Sequence[AcceptedFile]) -> dict[str, Any]:
        """POST the staged files as multipart ``files`` parts with the ``email`` field.

        Returns:
            The decoded response body, or an empty dict if it is not JSON

        Raises:
            PortalApiError: On a non-2xx response or network failure
        """
        if not files:
            raise PortalApiError("No files to upload")

        parts = [("files", (f.name, f.content, f.content_type)) for f in files]
        response = self._request("POST", "/upload/", data={"email": participant}, files=parts)
        if not response.is_success:
            raise PortalApiError(f"Upload failed: server returned {response.status_code}", response.status_code)

        try:
            payload = response.json()
        except ValueError:
            logger.debug("Upload response is not JSON")
            return {}
        return payload if isinstance(payload, dict) else {"result": payload}


class AdminClient(_PortalHttpClient):
    """Admin console endpoints."""

    def list_participants(
        self,
        page: int = 1,
        page_size: int = 10,
        sort_by_status: bool = False,
    ) -> ParticipantPage:
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be >= 1")
        params = {
            "page": page,
            "page_size": page_size,
            "sort_by_status": "true" if sort_by_status else "false",
        }
        response = self._request("GET", "/admin/participants", params=params)
        if not response.is_success:
            raise PortalApiError("Failed to load participants", response.status_code)
        return self._model(ParticipantPage, self._json(response, "participants"), response, "participants")

    def user_files(self, email: str) -> UserFiles:
        """Files stored for ``email``; a 404 means none."""
        response = self._request("GET", f"/admin/files/{_segment(email)}")
        if response.status_code == 404:
            return UserFiles(email=email, uploaded_files=[])
        if not response.is_success:
            raise PortalApiError("Failed to fetch user files", response.status_code)
        data = self._json(response, "files")
        if isinstance(data, dict):
            data.setdefault("email", email)
        return self._model(UserFiles, data, response, "files")

    def delete_user_file(self, email: str, filename: str) -> dict[str, Any]:
        response = self._request("DELETE", f"/admin/files/{_segment(email)}/{_segment(filename)}")
        if not response.is_success:
            raise PortalApiError(response.text or "Failed to delete file", response.status_code)
        return self._json(response, "delete file")

    def delete_user_files(self, email: str) -> dict[str, Any]:
        response = self._request("DELETE", f"/admin/files/{_segment(email)}")
        if not response.is_success:
            raise PortalApiError(response.text or "Failed to delete user files", response.status_code)
        return self._json(response, "delete files")

    def download_all_files(self) -> bytes:
        """Fetch the server-built ZIP of every participant's uploads."""
        response = self._request("GET", "/admin/download/all-files")
        if not response.is_success:
            raise PortalApiError("Failed to create ZIP", response.status_code)
        return response.content

    def send_round(self, round_: Union[int, str]) -> EmailDispatchResult:
        """Trigger notification emails for round 1, round 2 or ``all``."""
        key = str(round_).strip().lower()
        if key not in EMAIL_ROUND_PATHS:
            raise ValueError(f"Invalid email round '{round_}'. Expected one of: 1, 2, all")

        response = self._request("POST", EMAIL_ROUND_PATHS[key])
        if not response.is_success:
            raise PortalApiError("Failed to send emails", response.status_code)
        data = self._json(response, "email dispatch")
        return self._model(EmailDispatchResult, data if isinstance(data, dict) else {}, response, "email dispatch")
