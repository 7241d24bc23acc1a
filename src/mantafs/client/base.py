"""
Abstract object-store client interface.

This module defines the narrow interface the filesystem layer consumes. HTTP
transport, retries, authentication and TLS all live behind it; the
filesystem layer treats every call as a single attempt.

Failure contract:
- ``head`` never raises for remote conditions; it returns a HeadResult
  tagged FOUND, NOT_FOUND or FAILED.
- Every other method raises ``NotFoundError`` for a missing key and
  ``CollaboratorError`` for any other remote failure.
"""

from abc import ABC, abstractmethod
from typing import BinaryIO, Mapping, Optional

from mantafs.filesystem.data_models import HeadResult, ListingPage


class ObjectStoreClient(ABC):
    """
    Abstract base class for object-store clients.

    Keys passed to every method are canonical keys (leading slash, no scheme,
    no trailing slash).
    """

    @abstractmethod
    def head(self, key: str) -> HeadResult:
        """
        Fetch metadata for a key.

        Args:
            key: Canonical key

        Returns:
            HeadResult tagged FOUND (with record), NOT_FOUND, or FAILED (with error)
        """
        pass

    @abstractmethod
    def exists_and_accessible(self, key: str) -> bool:
        """Check whether the key exists and can be read by the current user."""
        pass

    @abstractmethod
    def get_read_channel(self, key: str) -> BinaryIO:
        """Open a seekable binary channel over the object's content."""
        pass

    @abstractmethod
    def get_write_stream(self, key: str, headers: Optional[Mapping[str, str]] = None) -> BinaryIO:
        """
        Open a write stream that stores the object when closed.

        Args:
            key: Canonical key
            headers: Request headers (``durability-level``, ``content-type``, ...)
        """
        pass

    @abstractmethod
    def put(self, key: str, data: bytes, headers: Optional[Mapping[str, str]] = None) -> None:
        """Store ``data`` at ``key`` in a single request."""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Delete exactly one object or empty directory."""
        pass

    @abstractmethod
    def delete_recursive(self, key: str) -> None:
        """Delete a directory and everything under it."""
        pass

    @abstractmethod
    def move(self, source: str, destination: str) -> None:
        """Move an object or directory tree to a new key."""
        pass

    @abstractmethod
    def put_directory(self, key: str) -> bool:
        """
        Ensure a directory exists at ``key``, creating missing parents.

        Returns:
            True when a directory exists at ``key`` after the call
        """
        pass

    @abstractmethod
    def list_page(
        self, key: str, continuation_token: Optional[str] = None, limit: Optional[int] = None
    ) -> ListingPage:
        """
        Fetch one page of a directory listing.

        Args:
            key: Directory key
            continuation_token: Token from the previous page, None for the first page
            limit: Maximum records wanted in the page; the server may return fewer

        Returns:
            ListingPage; a None continuation token marks the final page
        """
        pass

    def close(self) -> None:
        """Release connections held by the client."""
        pass
