"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/repositories/__init__.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Package initializer for core repositories. Exports UserRepository
                and DocumentRepository for centralized persistence management.
------------------------------------------------------------------------------
"""

from .user_repo import UserRepository
from .document_repo import DocumentRepository
