"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/accounts.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Local account service: registration and login against the
                users table. Owns the password digest comparison and drives
                the session context.
------------------------------------------------------------------------------
"""

from typing import Optional

from core.exceptions import AuthFailureError, DuplicateKeyError, ValidationError
from core.logger import get_logger
from core.models.user import AuthenticatedUser, User
from core.repositories.user_repo import UserRepository
from core.session import SessionContext
from core.utils.hashing import hash_password, verify_password

logger = get_logger("accounts")


class AccountService:
    """
    Registration and login. Emails are used as keys exactly as entered
    (no case folding), so 'A@x.org' and 'a@x.org' are different accounts.
    """

    def __init__(self, users: UserRepository, session: SessionContext) -> None:
        self.users = users
        self.session = session

    def register(self, email: str, password: str) -> User:
        """
        Creates a new account.

        Raises:
            ValidationError: If email or password is empty.
            DuplicateKeyError: If the email is already registered.
        """
        if not email:
            raise ValidationError("Email must not be empty", field="email")
        if not password:
            raise ValidationError("Password must not be empty", field="password")

        if self.users.exists(email):
            raise DuplicateKeyError("Email is already registered", table="users", key=email)

        user = User(id=email, email=email, password_hash=hash_password(password))
        # add() still guards against a concurrent registration of the same id
        self.users.create(user)
        logger.info(f"Registered account {email}")
        return user

    def login(self, email: str, password: str) -> AuthenticatedUser:
        """
        Verifies credentials and starts the session.

        Raises:
            AuthFailureError: Unknown email or wrong password (indistinguishable).
        """
        stored = self.users.get_by_email(email) if email else None
        if stored is None or not verify_password(password or "", stored.password_hash):
            logger.info("Login rejected")
            raise AuthFailureError()

        user = stored.to_authenticated()
        self.session.start(user)
        logger.info(f"Login for {user.id}")
        return user

    def logout(self) -> None:
        self.session.clear()

    def restore_session(self) -> Optional[AuthenticatedUser]:
        return self.session.restore()
