"""
mantafs - Hierarchical filesystem interface for the Manta object store

Lets callers open, create, list, delete, rename and stat remote objects with
familiar filesystem operations while the objects themselves are addressed by
flat string keys.

License: Apache-2.0
"""

__version__ = "0.1.0"

# Errors
from .exceptions import (
    AlreadyExistsError,
    CollaboratorError,
    EntryIsDirectoryError,
    EntryNotDirectoryError,
    FileSystemClosedError,
    InvalidPathError,
    MantaFileSystemError,
    NoSuchEntryError,
    NotFoundError,
    UnsupportedOperationError,
)

# Configuration and events
from .config import MantaConfig
from .events import CollectingEventSink, EventSink, FilesystemEvent

# Filesystem layer
from .filesystem import (
    EntryMapper,
    EntryType,
    FilesystemEntry,
    HeadResult,
    HeadStatus,
    ListingCursor,
    ListingPage,
    MantaFileSystem,
    PathExpression,
    RemoteEntryRecord,
    SeekableInputStream,
    resolve,
)

# Clients
from .client import InMemoryObjectStoreClient, ObjectStoreClient

__all__ = [
    "__version__",
    # Errors
    "MantaFileSystemError",
    "NotFoundError",
    "AlreadyExistsError",
    "EntryIsDirectoryError",
    "EntryNotDirectoryError",
    "InvalidPathError",
    "UnsupportedOperationError",
    "NoSuchEntryError",
    "CollaboratorError",
    "FileSystemClosedError",
    # Configuration and events
    "MantaConfig",
    "EventSink",
    "FilesystemEvent",
    "CollectingEventSink",
    # Filesystem layer
    "MantaFileSystem",
    "EntryMapper",
    "EntryType",
    "FilesystemEntry",
    "HeadResult",
    "HeadStatus",
    "ListingCursor",
    "ListingPage",
    "PathExpression",
    "RemoteEntryRecord",
    "SeekableInputStream",
    "resolve",
    # Clients
    "ObjectStoreClient",
    "InMemoryObjectStoreClient",
]
