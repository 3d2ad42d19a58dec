"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/models/stats.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Derived per-user archive statistics (never persisted).
------------------------------------------------------------------------------
"""

from typing import Dict

from pydantic import BaseModel, Field

from core.models.types import Folder
from core.utils.formatting import format_bytes


def _empty_counts() -> Dict[Folder, int]:
    return {folder: 0 for folder in Folder}


class ArchiveStats(BaseModel):
    folder_counts: Dict[Folder, int] = Field(default_factory=_empty_counts)
    total_documents: int = 0
    total_bytes: int = 0

    @property
    def formatted_total(self) -> str:
        return format_bytes(self.total_bytes)

    def count_for(self, folder: Folder) -> int:
        return self.folder_counts.get(folder, 0)
