"""HTTP clients and wire models for the intake portal backend."""

from .errors import PortalApiError
from .models import EmailDispatchResult, Participant, ParticipantPage, UploadStatus, UserFiles
from .client import EMAIL_ROUND_PATHS, AdminClient, PortalClient

__all__ = [
    "PortalApiError",
    "EmailDispatchResult",
    "Participant",
    "ParticipantPage",
    "UploadStatus",
    "UserFiles",
    "EMAIL_ROUND_PATHS",
    "AdminClient",
    "PortalClient",
]
