"""
Data models for the mantafs filesystem layer.

This module defines the value objects that flow between the object-store
client and the filesystem facade: remote metadata records, caller-facing
entries, listing pages and the tagged result returned by metadata lookups.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from dateutil import parser as date_parser

# Content type Manta reports for directory objects
DIRECTORY_CONTENT_TYPE = "application/x-json-stream; type=directory"


class EntryType(str, Enum):
    """Type of entry stored under a key."""
    FILE = "file"
    DIRECTORY = "directory"


class HeadStatus(str, Enum):
    """Outcome tag of a metadata lookup."""
    FOUND = "found"
    NOT_FOUND = "not_found"
    FAILED = "failed"


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse ISO-8601 or RFC 1123 timestamps into aware datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = date_parser.parse(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


@dataclass(frozen=True)
class RemoteEntryRecord:
    """
    Metadata the object store returned for a single key.

    Records are the source of truth for one call and are never cached.
    """
    key: str  # Canonical key of the object or directory
    type: EntryType
    size: int = 0
    last_modified: Optional[datetime] = None
    content_type: Optional[str] = None
    etag: Optional[str] = None  # Opaque version tag
    durability: Optional[int] = None  # Number of copies the store keeps

    @property
    def name(self) -> str:
        """Last segment of the key."""
        return posixpath.basename(self.key.rstrip("/")) or "/"

    @property
    def is_directory(self) -> bool:
        return self.type == EntryType.DIRECTORY

    @classmethod
    def from_listing_json(cls, parent_key: str, item: Mapping[str, Any]) -> "RemoteEntryRecord":
        """
        Build a record from one item of a directory listing response.

        Args:
            parent_key: Key of the listed directory
            item: Listing item, e.g. ``{"name": "a.csv", "type": "object",
                "size": 12, "mtime": "2017-01-01T00:00:00.000Z", "etag": "..."}``

        Returns:
            RemoteEntryRecord for ``parent_key/name``
        """
        entry_type = EntryType.DIRECTORY if item.get("type") == "directory" else EntryType.FILE
        return cls(
            key=posixpath.join(parent_key, item["name"]),
            type=entry_type,
            size=int(item.get("size") or 0),
            last_modified=_parse_timestamp(item.get("mtime")),
            content_type=item.get("contentType"),
            etag=item.get("etag"),
            durability=_optional_int(item.get("durability")),
        )

    @classmethod
    def from_headers(cls, key: str, headers: Mapping[str, Any]) -> "RemoteEntryRecord":
        """
        Build a record from the headers of a HEAD response.

        Header names are matched case-insensitively. Directories are
        recognised by their ``type=directory`` content type.
        """
        normalized = {str(name).lower(): value for name, value in headers.items()}
        content_type = normalized.get("content-type")
        is_directory = bool(content_type) and "type=directory" in content_type
        return cls(
            key=key,
            type=EntryType.DIRECTORY if is_directory else EntryType.FILE,
            size=int(normalized.get("content-length") or 0),
            last_modified=_parse_timestamp(normalized.get("last-modified")),
            content_type=content_type,
            etag=normalized.get("etag"),
            durability=_optional_int(normalized.get("durability-level")),
        )


@dataclass(frozen=True)
class FilesystemEntry:
    """
    Caller-facing descriptor of a file or directory.

    Derived 1:1 from a RemoteEntryRecord; ``path`` is the path the caller
    asked for, not the canonical key.
    """
    path: str
    is_directory: bool
    length: int
    modification_time: Optional[datetime]
    replication: int
    content_type: Optional[str] = None
    etag: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return not self.is_directory

    @property
    def name(self) -> str:
        return posixpath.basename(self.path.rstrip("/")) or self.path

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "path": self.path,
            "is_directory": self.is_directory,
            "length": self.length,
            "modification_time": (
                self.modification_time.isoformat() if self.modification_time else None
            ),
            "replication": self.replication,
            "content_type": self.content_type,
            "etag": self.etag,
        }


@dataclass(frozen=True)
class ListingPage:
    """One page of a paginated directory listing."""
    records: Tuple[RemoteEntryRecord, ...] = field(default_factory=tuple)
    continuation_token: Optional[str] = None  # None marks the final page

    @property
    def is_last(self) -> bool:
        return self.continuation_token is None

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class HeadResult:
    """
    Tagged result of a metadata lookup.

    Exactly one of ``record`` (FOUND) or ``error`` (FAILED) is set;
    NOT_FOUND carries neither.
    """
    status: HeadStatus
    record: Optional[RemoteEntryRecord] = None
    error: Optional[Exception] = None

    @classmethod
    def found(cls, record: RemoteEntryRecord) -> "HeadResult":
        return cls(status=HeadStatus.FOUND, record=record)

    @classmethod
    def not_found(cls) -> "HeadResult":
        return cls(status=HeadStatus.NOT_FOUND)

    @classmethod
    def failed(cls, error: Exception) -> "HeadResult":
        return cls(status=HeadStatus.FAILED, error=error)

    @property
    def is_found(self) -> bool:
        return self.status == HeadStatus.FOUND

    def unwrap(self) -> Optional[RemoteEntryRecord]:
        """
        Return the record, None for NOT_FOUND, or raise the carried error.
        """
        if self.status == HeadStatus.FAILED:
            raise self.error
        return self.record
