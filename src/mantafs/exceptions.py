"""
mantafs Exception Hierarchy

This module defines the error taxonomy raised by the filesystem layer. Every
error carries a stable error code, the caller-facing path and the resolved
object-store key (when known), so failures can be logged and handled
programmatically.

Each concrete error also derives from the closest builtin exception
(``FileNotFoundError``, ``FileExistsError``, ...), which lets callers that
only know the standard library handle them naturally.
"""

import time
from typing import Any, Dict, Optional


class MantaFileSystemError(Exception):
    """
    Base exception class for all mantafs errors.

    Attributes:
        error_code: Unique error code for programmatic handling
        path: Caller-facing path the operation was invoked with (if applicable)
        key: Resolved object-store key (if applicable)
        timestamp: When the error occurred
        context: Additional context information
    """

    default_code = "MANTAFS_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        path: Optional[str] = None,
        key: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the error with context.

        Args:
            message: Technical error message
            error_code: Unique error code, defaults to the class code
            path: Caller-facing path
            key: Resolved object-store key
            context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code
        self.path = path
        self.key = key
        self.timestamp = time.time()
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "path": self.path,
            "key": self.key,
            "timestamp": self.timestamp,
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


# =============================================================================
# LOOKUP ERRORS
# =============================================================================

class NotFoundError(MantaFileSystemError, FileNotFoundError):
    """Raised when the target key is absent or not accessible."""

    default_code = "NOT_FOUND"


class AlreadyExistsError(MantaFileSystemError, FileExistsError):
    """Raised when a write would replace an existing object and overwriting is disabled."""

    default_code = "ALREADY_EXISTS"


class EntryIsDirectoryError(MantaFileSystemError, IsADirectoryError):
    """Raised when a file operation targets a directory."""

    default_code = "IS_A_DIRECTORY"


class EntryNotDirectoryError(MantaFileSystemError, NotADirectoryError):
    """Raised when a directory operation targets a plain object."""

    default_code = "NOT_A_DIRECTORY"


class NoSuchEntryError(MantaFileSystemError, LookupError):
    """Raised when a listing cursor is advanced past its last entry."""

    default_code = "NO_SUCH_ENTRY"


# =============================================================================
# USAGE ERRORS
# =============================================================================

class InvalidPathError(MantaFileSystemError, ValueError):
    """
    Raised when a path expression cannot be resolved to a key.

    Examples:
    - Empty path strings
    - Relative paths while no working directory is set
    - ``..`` segments that climb above the root
    """

    default_code = "INVALID_PATH"


class UnsupportedOperationError(MantaFileSystemError, NotImplementedError):
    """Raised for operations the object store cannot express (append, partial truncate)."""

    default_code = "UNSUPPORTED"

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        self.operation = operation
        context = kwargs.pop("context", None) or {}
        if operation:
            context["operation"] = operation
        super().__init__(message, context=context, **kwargs)


class FileSystemClosedError(MantaFileSystemError):
    """Raised when an operation is attempted after ``close()``."""

    default_code = "FILESYSTEM_CLOSED"


# =============================================================================
# COLLABORATOR ERRORS
# =============================================================================

class CollaboratorError(MantaFileSystemError):
    """
    Raised by object-store clients for any remote failure that is not a
    plain "not found".

    The filesystem layer never wraps or reinterprets these; they reach the
    caller exactly as the client raised them.
    """

    default_code = "COLLABORATOR_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None, **kwargs):
        self.status_code = status_code
        context = kwargs.pop("context", None) or {}
        if status_code is not None:
            context["status_code"] = status_code
        super().__init__(message, context=context, **kwargs)
