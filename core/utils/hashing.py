"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/utils/hashing.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    One-way password digest. Unsalted SHA-256 to stay compatible
                with accounts created by the browser edition.
------------------------------------------------------------------------------
"""

import hashlib
import hmac

DIGEST_LENGTH = 64


def hash_password(password: str) -> str:
    """
    Returns the lowercase hex SHA-256 digest of the UTF-8 encoded password.
    """
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, password_hash: str) -> bool:
    """Compares a plaintext password against a stored digest in constant time."""
    if not password_hash:
        return False
    return hmac.compare_digest(hash_password(password), password_hash.lower())
