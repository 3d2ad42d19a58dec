"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/models/types.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Centralized enumeration and type definitions.
------------------------------------------------------------------------------
"""

from enum import Enum


class Folder(str, Enum):
    """The fixed archive folders. Not configurable at runtime."""
    PENDIDIKAN = "Pendidikan"  # Education
    PRIBADI = "Pribadi"        # Personal
    LAINNYA = "Lainnya"        # Other

    @classmethod
    def parse(cls, value: "str | Folder") -> "Folder":
        """Returns the member for a literal folder name (exact match)."""
        if isinstance(value, cls):
            return value
        return cls(value)


class SortKey(str, Enum):
    """Sortable document columns."""
    UPLOAD_DATE = "upload_date"
    FILE_NAME = "file_name"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"
