"""
------------------------------------------------------------------------------
Project:        DokuMini
File:           core/exceptions.py
Version:        1.0.0
Producer:       thorsten.schnebeck@gmx.net
Generator:      Antigravity
Description:    Error taxonomy for DokuMini. Every domain error carries a
                programmatic error code, optional context details and the
                underlying cause (e.g. the sqlite3 error it wraps).
------------------------------------------------------------------------------
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Error codes for programmatic error handling."""

    UNKNOWN_ERROR = 1000

    # Storage (1100-1199)
    STORE_UNAVAILABLE = 1100
    DUPLICATE_KEY = 1101
    NOT_FOUND = 1102

    # Input (1200-1299)
    VALIDATION_FAILED = 1200

    # Authentication (1300-1399)
    AUTH_FAILED = 1300


class DokuMiniError(Exception):
    """
    Base exception for all DokuMini errors.

    Attributes:
        message: Human-readable error message.
        error_code: Programmatic error code.
        details: Additional error context.
        cause: Original exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        result = f"[{self.error_code.name}] {self.message}"
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {type(self.cause).__name__}: {self.cause}"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class StoreUnavailableError(DokuMiniError):
    """
    Raised when the embedded store cannot be opened or used.

    Examples:
        - Database file cannot be created (read-only location)
        - Disk full / quota exhausted on write
        - Operation on a closed store
    """

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs) -> None:
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation
        super().__init__(
            message,
            error_code=ErrorCode.STORE_UNAVAILABLE,
            details=details,
            **kwargs
        )


class DuplicateKeyError(DokuMiniError):
    """
    Raised when an insert collides with an existing primary key,
    e.g. registering an email that is already taken.
    """

    def __init__(self, message: str, table: Optional[str] = None, key: Any = None, **kwargs) -> None:
        details = kwargs.pop("details", {})
        if table:
            details["table"] = table
        if key is not None:
            details["key"] = key
        super().__init__(
            message,
            error_code=ErrorCode.DUPLICATE_KEY,
            details=details,
            **kwargs
        )


class DocumentNotFoundError(DokuMiniError):
    """Raised when a document must exist to be modified but does not."""

    def __init__(self, message: str, document_id: Optional[int] = None, **kwargs) -> None:
        details = kwargs.pop("details", {})
        if document_id is not None:
            details["document_id"] = document_id
        super().__init__(
            message,
            error_code=ErrorCode.NOT_FOUND,
            details=details,
            **kwargs
        )


class ValidationError(DokuMiniError):
    """
    Raised when user input is rejected before any store write.

    Examples:
        - Empty display name on upload or rename
        - Missing file on upload
        - Folder outside the fixed enumeration
    """

    def __init__(self, message: str, field: Optional[str] = None, **kwargs) -> None:
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        super().__init__(
            message,
            error_code=ErrorCode.VALIDATION_FAILED,
            details=details,
            **kwargs
        )


class AuthFailureError(DokuMiniError):
    """Raised on credential mismatch or when an operation requires a logged-in user."""

    def __init__(self, message: str = "Invalid email or password", **kwargs) -> None:
        super().__init__(message, error_code=ErrorCode.AUTH_FAILED, **kwargs)
