"""Hierarchical filesystem layer over a flat object store.

This package resolves caller-facing paths to canonical object-store keys,
maps remote metadata to filesystem entries and lists directories lazily.

Example:
    >>> from mantafs.filesystem import resolve
    >>> resolve("~~/reports", cwd="/bob/stor", home="/bob")
    '/bob/reports'
"""

from .core import MantaFileSystem, WorkingState
from .data_models import (
    EntryType,
    FilesystemEntry,
    HeadResult,
    HeadStatus,
    ListingPage,
    RemoteEntryRecord,
)
from .listing import ListingCursor, ListingSource, RemoteListingSource
from .mapper import EntryMapper
from .paths import HOME_ALIAS, PathExpression, PathKind, resolve
from .streams import SeekableInputStream

__all__ = [
    "MantaFileSystem",
    "WorkingState",
    "EntryType",
    "FilesystemEntry",
    "HeadResult",
    "HeadStatus",
    "ListingPage",
    "RemoteEntryRecord",
    "ListingCursor",
    "ListingSource",
    "RemoteListingSource",
    "EntryMapper",
    "HOME_ALIAS",
    "PathExpression",
    "PathKind",
    "resolve",
    "SeekableInputStream",
]
