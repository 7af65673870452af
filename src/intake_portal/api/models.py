"""Wire models for the portal backend responses."""

from __future__ import annotations

import math
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class UploadStatus(BaseModel):
    """Response of ``GET /admin/check-upload/{email}``."""

    uploaded: bool = Field(default=False, description="True once the participant completed a submission")
    last_uploaded_date: Optional[str] = Field(
        None,
        description="ISO-8601 timestamp of the last successful upload",
    )


class Participant(BaseModel):
    """One row of the admin participant listing."""

    id: int = Field(..., description="Backend participant ID")
    email: str = Field(..., min_length=1, description="Participant email address")
    file_status: bool = Field(default=False, description="True if the participant uploaded files")
    send_mail_01: bool = Field(default=False, description="Round 1 notification sent")
    send_mail_02: bool = Field(default=False, description="Round 2 notification sent")
    date_uploaded: Optional[str] = Field(None, description="ISO-8601 upload timestamp")


class ParticipantPage(BaseModel):
    """Response of ``GET /admin/participants``."""

    participants: List[Participant] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Participant count across all pages")

    @field_validator("participants", mode="before")
    @classmethod
    def validate_participants(cls, v):
        """Treat a null participant list as empty."""
        return v or []

    def total_pages(self, page_size: int) -> int:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        return math.ceil(self.total / page_size)


class UserFiles(BaseModel):
    """Response of ``GET /admin/files/{email}``."""

    email: str = Field(..., description="Participant email address")
    uploaded_files: List[str] = Field(default_factory=list, description="Stored file names")

    @field_validator("uploaded_files", mode="before")
    @classmethod
    def validate_uploaded_files(cls, v):
        """Treat a null file list as empty."""
        return v or []


class EmailDispatchResult(BaseModel):
    """Response of the ``/email/send-*`` endpoints."""

    message: Optional[str] = Field(None, description="Server-side dispatch summary")

    @property
    def display_message(self) -> str:
        return self.message or "Emails started sending"
