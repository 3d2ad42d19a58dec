"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/models/document.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Domain model for an archived document: the uploaded payload
                plus its metadata. Maps to the 'documents' table.
------------------------------------------------------------------------------
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.types import Folder


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ArchiveDocument(BaseModel):
    """
    A stored file owned by one user and filed into one folder.

    Only 'file_name' changes after creation (rename). 'file_size' is None for
    records written before the column existed; use 'effective_size'.
    """
    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    id: Optional[int] = None
    user_id: str
    folder: Folder
    file_name: str = Field(min_length=1)
    original_file_name: str = ""
    upload_date: str = Field(default_factory=utc_now_iso)
    file_data: bytes = b""
    mime_type: str = ""
    file_size: Optional[int] = None

    @field_validator("file_data", mode="before")
    @classmethod
    def _coerce_buffer(cls, value):
        # sqlite may hand back memoryview for BLOB columns
        if isinstance(value, (memoryview, bytearray)):
            return bytes(value)
        if value is None:
            return b""
        return value

    @field_validator("original_file_name", "mime_type", mode="before")
    @classmethod
    def _null_to_empty(cls, value):
        return "" if value is None else value

    @property
    def effective_size(self) -> int:
        """Stored size, falling back to the payload length for legacy records."""
        if self.file_size is not None:
            return self.file_size
        return len(self.file_data) if self.file_data else 0

    @property
    def download_name(self) -> str:
        return self.original_file_name or self.file_name

    def __repr__(self) -> str:
        return (
            f"ArchiveDocument(id={self.id!r}, user_id={self.user_id!r}, folder={self.folder.value!r}, "
            f"file_name={self.file_name!r}, size={self.effective_size})"
        )


class DownloadedFile(NamedTuple):
    """A payload written to disk together with its stored content type."""
    path: Path
    mime_type: str
