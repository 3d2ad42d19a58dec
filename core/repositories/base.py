"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/repositories/base.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Base class for repository implementations. Provides shared
                access to the central database manager and binds each
                repository to exactly one typed table handle.
------------------------------------------------------------------------------
"""

from typing import ClassVar, Optional

from core.database import DatabaseManager, Table


class BaseRepository:
    """
    Abstract-style base repository providing shared database access.
    Subclasses set 'table' to the handle they manage.
    """

    table: ClassVar[Optional[Table]] = None

    def __init__(self, db_manager: DatabaseManager) -> None:
        """
        Initializes the repository with a database manager.

        Args:
            db_manager: The central database management instance.
        """
        self.db: DatabaseManager = db_manager
