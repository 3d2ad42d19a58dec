"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/models/__init__.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Package initializer for core data models. Exports accounts,
                archived documents, statistics and the shared enumerations.
------------------------------------------------------------------------------
"""

from .types import Folder, SortKey, SortOrder
from .user import User, AuthenticatedUser
from .document import ArchiveDocument, DownloadedFile, utc_now_iso
from .stats import ArchiveStats
