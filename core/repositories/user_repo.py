from typing import Optional

from .base import BaseRepository
from core.database import USERS
from core.models.user import User


class UserRepository(BaseRepository):
    """
    Manages access to the 'users' table.
    """

    table = USERS

    def get_by_email(self, email: str) -> Optional[User]:
        """Fetch by id (the email as entered, case-sensitive)."""
        return self.db.get(self.table, email)

    def exists(self, email: str) -> bool:
        return self.get_by_email(email) is not None

    def create(self, user: User) -> str:
        """
        Insert a new account.

        Raises:
            DuplicateKeyError: If the id is already registered.
        """
        return self.db.add(self.table, user)
