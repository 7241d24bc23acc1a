"""
In-memory object-store client.

Implements the ObjectStoreClient interface over a dictionary, reproducing the
object store's observable behaviour: directories are explicit entries, HEAD
responses and listing pages are produced in the store's wire shapes and
parsed back through RemoteEntryRecord, and listings are paginated.

Used by the test suite and for local experiments without network access.
"""

import io
import logging
import posixpath
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from mantafs.exceptions import CollaboratorError, NotFoundError
from mantafs.filesystem.data_models import (
    DIRECTORY_CONTENT_TYPE,
    EntryType,
    HeadResult,
    ListingPage,
    RemoteEntryRecord,
)

from .base import ObjectStoreClient

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_DURABILITY = 2


@dataclass
class StoredEntry:
    """A stored object or directory."""
    type: EntryType
    data: bytes = b""
    content_type: str = DEFAULT_CONTENT_TYPE
    durability: int = DEFAULT_DURABILITY
    etag: str = field(default_factory=lambda: uuid.uuid4().hex)
    last_modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class _MemoryWriteStream(io.BytesIO):
    """Buffers written bytes and stores them when closed."""

    def __init__(self, client: "InMemoryObjectStoreClient", key: str, headers: Mapping[str, str]):
        super().__init__()
        self._client = client
        self._key = key
        self._headers = dict(headers)

    def close(self) -> None:
        if not self.closed:
            data = self.getvalue()
            super().close()
            self._client.put(self._key, data, self._headers)


class InMemoryObjectStoreClient(ObjectStoreClient):
    """
    Dictionary-backed ObjectStoreClient.

    Not thread-safe. The root directory ``/`` always exists; missing parent
    directories are created on write.

    Attributes:
        page_size: Maximum records per listing page
        calls: ``(method, key)`` pairs in call order, for inspection in tests
    """

    def __init__(self, page_size: int = 1000) -> None:
        if page_size < 1:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.page_size = page_size
        self.calls: List[Tuple[str, str]] = []
        self.closed = False
        self._entries: Dict[str, StoredEntry] = {
            "/": StoredEntry(type=EntryType.DIRECTORY, content_type=DIRECTORY_CONTENT_TYPE)
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _record_call(self, method: str, key: str) -> None:
        if self.closed:
            raise CollaboratorError("Client is closed", key=key)
        self.calls.append((method, key))

    def _require(self, key: str) -> StoredEntry:
        entry = self._entries.get(key)
        if entry is None:
            raise NotFoundError(f"Resource not found: {key}", key=key)
        return entry

    def _children(self, key: str) -> List[str]:
        return sorted(
            child for child in self._entries
            if child != "/" and posixpath.dirname(child) == key
        )

    def _descendants(self, key: str) -> List[str]:
        prefix = key.rstrip("/") + "/"
        return [child for child in self._entries if child.startswith(prefix)]

    def _ensure_directory(self, key: str) -> None:
        existing = self._entries.get(key)
        if existing is not None:
            if existing.type != EntryType.DIRECTORY:
                raise CollaboratorError(
                    f"An object already exists at directory path: {key}", status_code=400, key=key
                )
            return
        self._ensure_directory(posixpath.dirname(key))
        self._entries[key] = StoredEntry(type=EntryType.DIRECTORY, content_type=DIRECTORY_CONTENT_TYPE)

    def _headers_for(self, key: str, entry: StoredEntry) -> Dict[str, str]:
        headers = {
            "Content-Type": entry.content_type,
            "Last-Modified": format_datetime(entry.last_modified, usegmt=True),
            "ETag": entry.etag,
        }
        if entry.type == EntryType.DIRECTORY:
            headers["Result-Set-Size"] = str(len(self._children(key)))
            headers["Content-Length"] = headers["Result-Set-Size"]
        else:
            headers["Content-Length"] = str(len(entry.data))
            headers["Durability-Level"] = str(entry.durability)
        return headers

    def _listing_item(self, key: str, entry: StoredEntry) -> Dict[str, Any]:
        item: Dict[str, Any] = {
            "name": posixpath.basename(key),
            "type": "directory" if entry.type == EntryType.DIRECTORY else "object",
            "mtime": entry.last_modified.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        }
        if entry.type == EntryType.FILE:
            item.update(
                size=len(entry.data),
                etag=entry.etag,
                contentType=entry.content_type,
                durability=entry.durability,
            )
        return item

    # ------------------------------------------------------------------
    # ObjectStoreClient
    # ------------------------------------------------------------------

    def head(self, key: str) -> HeadResult:
        try:
            self._record_call("head", key)
        except CollaboratorError as e:
            return HeadResult.failed(e)
        entry = self._entries.get(key)
        if entry is None:
            return HeadResult.not_found()
        return HeadResult.found(RemoteEntryRecord.from_headers(key, self._headers_for(key, entry)))

    def exists_and_accessible(self, key: str) -> bool:
        self._record_call("exists_and_accessible", key)
        return key in self._entries

    def get_read_channel(self, key: str) -> io.BytesIO:
        self._record_call("get_read_channel", key)
        entry = self._require(key)
        if entry.type == EntryType.DIRECTORY:
            raise CollaboratorError(f"Cannot read a directory: {key}", status_code=400, key=key)
        return io.BytesIO(entry.data)

    def get_write_stream(self, key: str, headers: Optional[Mapping[str, str]] = None) -> io.BytesIO:
        self._record_call("get_write_stream", key)
        existing = self._entries.get(key)
        if existing is not None and existing.type == EntryType.DIRECTORY:
            raise CollaboratorError(f"Cannot overwrite a directory: {key}", status_code=400, key=key)
        return _MemoryWriteStream(self, key, headers or {})

    def put(self, key: str, data: bytes, headers: Optional[Mapping[str, str]] = None) -> None:
        self._record_call("put", key)
        existing = self._entries.get(key)
        if existing is not None and existing.type == EntryType.DIRECTORY:
            raise CollaboratorError(f"Cannot overwrite a directory: {key}", status_code=400, key=key)

        normalized = {str(name).lower(): value for name, value in (headers or {}).items()}
        durability = normalized.get("durability-level")
        self._ensure_directory(posixpath.dirname(key))
        self._entries[key] = StoredEntry(
            type=EntryType.FILE,
            data=bytes(data),
            content_type=normalized.get("content-type") or DEFAULT_CONTENT_TYPE,
            durability=int(durability) if durability else DEFAULT_DURABILITY,
        )
        logger.debug(f"Stored {len(data)} bytes at {key}")

    def delete(self, key: str) -> None:
        self._record_call("delete", key)
        entry = self._require(key)
        if key == "/":
            raise CollaboratorError("Cannot delete the root directory", status_code=403, key=key)
        if entry.type == EntryType.DIRECTORY and self._children(key):
            raise CollaboratorError(f"Directory not empty: {key}", status_code=400, key=key)
        del self._entries[key]

    def delete_recursive(self, key: str) -> None:
        self._record_call("delete_recursive", key)
        self._require(key)
        if key == "/":
            raise CollaboratorError("Cannot delete the root directory", status_code=403, key=key)
        for child in self._descendants(key):
            del self._entries[child]
        del self._entries[key]

    def move(self, source: str, destination: str) -> None:
        self._record_call("move", source)
        self._require(source)
        if destination == source or destination.startswith(source.rstrip("/") + "/"):
            raise CollaboratorError(
                f"Cannot move {source} into itself: {destination}", status_code=400, key=source
            )
        self._ensure_directory(posixpath.dirname(destination))
        moved = [source] + self._descendants(source)
        for old_key in moved:
            new_key = destination + old_key[len(source):]
            self._entries[new_key] = self._entries.pop(old_key)

    def put_directory(self, key: str) -> bool:
        self._record_call("put_directory", key)
        self._ensure_directory(key)
        return True

    def list_page(
        self, key: str, continuation_token: Optional[str] = None, limit: Optional[int] = None
    ) -> ListingPage:
        self._record_call("list_page", key)
        entry = self._require(key)
        if entry.type != EntryType.DIRECTORY:
            raise CollaboratorError(f"Not a directory: {key}", status_code=400, key=key)

        children = self._children(key)
        if continuation_token is not None:
            children = [child for child in children if posixpath.basename(child) > continuation_token]

        page_size = min(self.page_size, limit) if limit else self.page_size
        batch = children[:page_size]
        records = tuple(
            RemoteEntryRecord.from_listing_json(key, self._listing_item(child, self._entries[child]))
            for child in batch
        )
        token = posixpath.basename(batch[-1]) if len(children) > page_size else None
        return ListingPage(records=records, continuation_token=token)

    def close(self) -> None:
        self.closed = True
