"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/models/user.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Account models. A User is keyed by its email address exactly
                as entered; AuthenticatedUser is the password-free projection
                kept in the session slot.
------------------------------------------------------------------------------
"""

from pydantic import BaseModel, ConfigDict


class User(BaseModel):
    """
    Registered account. Maps to the 'users' table.
    Created on registration, never mutated, never deleted.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    password_hash: str

    def to_authenticated(self) -> "AuthenticatedUser":
        return AuthenticatedUser(id=self.id, email=self.email)


class AuthenticatedUser(BaseModel):
    """The {id, email} pair remembered across restarts."""
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
