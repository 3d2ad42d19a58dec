"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/session.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Explicit session context. Holds the logged-in user and mirrors
                it into the durable session slot of AppConfig so a restart
                resumes the session until logout.
------------------------------------------------------------------------------
"""

import json
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from core.config import AppConfig
from core.logger import get_logger
from core.models.user import AuthenticatedUser

logger = get_logger("session")


class SessionContext:
    """
    Lifecycle: start() on login, clear() on logout, restore() on startup.
    """

    def __init__(self, config: AppConfig) -> None:
        self.config = config
        self._user: Optional[AuthenticatedUser] = None

    @property
    def current_user(self) -> Optional[AuthenticatedUser]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def start(self, user: AuthenticatedUser) -> None:
        self._user = user
        self.config.set_session_user_json(user.model_dump_json())
        logger.debug(f"Session started for {user.id}")

    def clear(self) -> None:
        self._user = None
        self.config.clear_session_user()
        logger.debug("Session cleared")

    def restore(self) -> Optional[AuthenticatedUser]:
        """
        Loads the remembered user from the session slot.
        A corrupt slot is discarded and treated as logged out.
        """
        raw = self.config.get_session_user_json()
        if not raw:
            self._user = None
            return None
        try:
            self._user = AuthenticatedUser.model_validate(json.loads(raw))
        except (json.JSONDecodeError, PydanticValidationError) as e:
            logger.warning(f"Discarding unreadable session slot: {e}")
            self.clear()
            return None
        return self._user
