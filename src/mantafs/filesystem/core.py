"""Filesystem facade over a flat object store.

Caller-facing paths are resolved to canonical object-store keys (see
``paths.resolve``) and every operation is delegated to an ObjectStoreClient.

Example:
    >>> from mantafs import InMemoryObjectStoreClient, MantaConfig, MantaFileSystem
    >>> fs = MantaFileSystem(InMemoryObjectStoreClient(), MantaConfig(user="bob"))
    >>> fs.mkdirs("~~/stor/reports")
    True
    >>> with fs.create("~~/stor/reports/q1.csv") as out:
    ...     _ = out.write(b"a,b\\n1,2\\n")
    >>> [entry.path for entry in fs.list_status("~~/stor/reports")]
    ['~~/stor/reports/q1.csv']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, BinaryIO, Dict, List, Optional, Union

from mantafs.config import MantaConfig
from mantafs.events import EventSink, FilesystemEvent
from mantafs.exceptions import (
    AlreadyExistsError,
    EntryIsDirectoryError,
    FileSystemClosedError,
    NotFoundError,
    UnsupportedOperationError,
)

from .data_models import FilesystemEntry, HeadStatus, RemoteEntryRecord
from .listing import EntryFilter, ListingCursor, RemoteListingSource
from .mapper import EntryMapper
from .paths import PathExpression, resolve
from .streams import SeekableInputStream

if TYPE_CHECKING:
    from mantafs.client.base import ObjectStoreClient

logger = logging.getLogger(__name__)

PathLike = Union[str, PathExpression]


@dataclass(frozen=True)
class WorkingState:
    """Working and home directory keys owned by one filesystem session.

    Immutable; changing directory swaps in a new state with ``replace``.

    Attributes:
        home_directory: Home directory key, fixed at initialization
        working_directory: Current working directory key
    """

    home_directory: str
    working_directory: Optional[str] = None


class MantaFileSystem:
    """Hierarchical filesystem operations over an object store.

    Paths may be absolute (``/bob/stor/a``), home-relative (``~~/stor/a``)
    or relative to the working directory, which starts at the home directory.

    The working directory is plain single-owner state; callers sharing one
    instance across threads must serialize ``set_working_directory`` calls.
    """

    scheme = "manta"
    uri = "manta:///"

    def __init__(
        self,
        client: "ObjectStoreClient",
        config: Optional[MantaConfig] = None,
        event_sink: Optional[EventSink] = None,
    ) -> None:
        """Initialize the filesystem.

        Args:
            client: Object-store client the filesystem delegates to
            config: Configuration; read from the environment when omitted
            event_sink: Optional callable receiving a FilesystemEvent per operation
        """
        self.config = config or MantaConfig.from_env()
        self.client = client
        self.event_sink = event_sink
        self.mapper = EntryMapper(default_durability=self.config.default_durability)
        self._state = WorkingState(
            home_directory=self.config.home_directory,
            working_directory=self.config.home_directory,
        )
        self._closed = False
        logger.debug(f"Initialized {self.scheme} filesystem with home {self._state.home_directory}")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the filesystem and the underlying client. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        logger.debug("Closing filesystem")
        self.client.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "MantaFileSystem":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise FileSystemClosedError("Filesystem is closed")

    def _emit(self, operation: str, path: Optional[PathLike], key: Optional[str], **metadata: Any) -> None:
        if self.event_sink is None:
            return
        self.event_sink(
            FilesystemEvent(
                operation=operation,
                path=str(path) if path is not None else None,
                key=key,
                metadata=metadata,
            )
        )

    # ------------------------------------------------------------------
    # Paths and working state
    # ------------------------------------------------------------------

    def resolve_key(self, path: PathLike) -> str:
        """Resolve a caller-facing path to a canonical object-store key."""
        return resolve(path, self._state.working_directory, self._state.home_directory)

    def get_working_directory(self) -> Optional[str]:
        return self._state.working_directory

    def set_working_directory(self, path: PathLike) -> str:
        """Change the working directory; relative paths resolve against the current one.

        Returns:
            The new working directory key
        """
        key = self.resolve_key(path)
        self._state = replace(self._state, working_directory=key)
        return key

    def get_home_directory(self) -> str:
        return self._state.home_directory

    def _head_record(self, path: PathLike, key: str) -> RemoteEntryRecord:
        result = self.client.head(key)
        if result.status == HeadStatus.NOT_FOUND:
            raise NotFoundError(f"No such file or directory: {path}", path=str(path), key=key)
        return result.unwrap()

    # ------------------------------------------------------------------
    # Reading and writing
    # ------------------------------------------------------------------

    def open(self, path: PathLike) -> SeekableInputStream:
        """Open an object for random-access reading.

        Raises:
            NotFoundError: If nothing exists at the path
            EntryIsDirectoryError: If the path is a directory
        """
        self._check_open()
        logger.debug(f"Opening '{path}' for reading.")
        key = self.resolve_key(path)
        record = self._head_record(path, key)
        if record.is_directory:
            raise EntryIsDirectoryError(
                f"Can't open {path} because it is a directory", path=str(path), key=key
            )

        stream = SeekableInputStream(self.client.get_read_channel(key), key=key)
        self._emit("open", path, key, length=record.size)
        return stream

    def create(self, path: PathLike, overwrite: bool = True, replication: int = 0) -> BinaryIO:
        """Open a write stream; the object is stored when the stream is closed.

        Args:
            path: Target path
            overwrite: When False, fail if an accessible object already exists
            replication: Durability level requested from the store; 0 keeps the store default

        Raises:
            AlreadyExistsError: If ``overwrite`` is False and the target exists
        """
        self._check_open()
        key = self.resolve_key(path)

        if not overwrite and self.client.exists_and_accessible(key):
            raise AlreadyExistsError(f"File already exists at path: {path}", path=str(path), key=key)

        headers: Dict[str, str] = {}
        if replication > 0:
            headers["durability-level"] = str(replication)

        logger.debug(f"Creating new file with {replication} replicas at path: {path}")
        stream = self.client.get_write_stream(key, headers)
        self._emit("create", path, key, overwrite=overwrite, replication=replication)
        return stream

    def append(self, path: PathLike) -> BinaryIO:
        """Appending is not supported by the object store."""
        self._check_open()
        raise UnsupportedOperationError(
            f"Append is not supported: {path}", operation="append", path=str(path)
        )

    def truncate(self, path: PathLike, new_length: int) -> bool:
        """Truncate an object to zero length, keeping its content type.

        Raises:
            NotFoundError: If nothing exists at the path
            UnsupportedOperationError: For any length other than 0
        """
        self._check_open()
        key = self.resolve_key(path)
        record = self._head_record(path, key)

        if new_length != 0:
            raise UnsupportedOperationError(
                "Truncating to an arbitrary length higher than zero is not supported",
                operation="truncate",
                path=str(path),
                key=key,
                context={"new_length": new_length},
            )

        headers: Dict[str, str] = {}
        if record.content_type:
            headers["content-type"] = record.content_type

        logger.debug(f"Truncating {key} to zero length")
        self.client.put(key, b"", headers)
        self._emit("truncate", path, key, new_length=0)
        return True

    # ------------------------------------------------------------------
    # Namespace operations
    # ------------------------------------------------------------------

    def delete(self, path: PathLike, recursive: bool = False) -> bool:
        """Delete an object, or a whole directory tree when ``recursive``.

        Returns:
            False if nothing existed at the path, otherwise whether the key is
            gone afterwards
        """
        self._check_open()
        key = self.resolve_key(path)

        result = self.client.head(key)
        if result.status == HeadStatus.NOT_FOUND:
            return False
        record = result.unwrap()

        if recursive and record.is_directory:
            logger.debug(f"Recursively deleting path: {key}")
            self.client.delete_recursive(key)
        else:
            logger.debug(f"Deleting path: {key}")
            self.client.delete(key)

        deleted = not self.client.exists_and_accessible(key)
        self._emit("delete", path, key, recursive=recursive, deleted=deleted)
        return deleted

    def rename(self, source: PathLike, destination: PathLike) -> bool:
        """Rename ``source`` to ``destination``; see ``move``."""
        return self.move(source, destination)

    def move(self, source: PathLike, destination: PathLike) -> bool:
        """Move an object or directory tree to a new path.

        Returns:
            Whether the destination is accessible afterwards

        Raises:
            NotFoundError: If the source does not exist
            AlreadyExistsError: If something already exists at the destination
        """
        self._check_open()
        source_key = self.resolve_key(source)
        destination_key = self.resolve_key(destination)

        if not self.client.exists_and_accessible(source_key):
            raise NotFoundError(f"No such file or directory: {source}", path=str(source), key=source_key)
        if self.client.exists_and_accessible(destination_key):
            raise AlreadyExistsError(
                f"Destination already exists: {destination}", path=str(destination), key=destination_key
            )

        logger.debug(f"Moving [{source_key}] to [{destination_key}]")
        self.client.move(source_key, destination_key)

        moved = self.client.exists_and_accessible(destination_key)
        self._emit("move", source, source_key, destination=destination_key, moved=moved)
        return moved

    def mkdirs(self, path: PathLike) -> bool:
        """Ensure a directory exists at the path, creating missing parents."""
        self._check_open()
        key = self.resolve_key(path)
        logger.debug(f"Creating directory: {key}")
        created = self.client.put_directory(key)
        self._emit("mkdirs", path, key)
        return created

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def get_file_status(self, path: PathLike) -> FilesystemEntry:
        """Return the entry describing the path.

        Raises:
            NotFoundError: If nothing exists at the path
        """
        self._check_open()
        key = self.resolve_key(path)
        logger.debug(f"Getting path status for: {key}")
        return self.mapper.map(self._head_record(path, key), path)

    def exists(self, path: PathLike) -> bool:
        self._check_open()
        return self.client.exists_and_accessible(self.resolve_key(path))

    def is_directory(self, path: PathLike) -> bool:
        """Return True for directories; a missing path is not a directory."""
        self._check_open()
        result = self.client.head(self.resolve_key(path))
        if result.status == HeadStatus.NOT_FOUND:
            return False
        return result.unwrap().is_directory

    def is_file(self, path: PathLike) -> bool:
        return not self.is_directory(path)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list_located_status(
        self, path: PathLike, path_filter: Optional[EntryFilter] = None
    ) -> ListingCursor:
        """List a directory lazily, one remote page at a time.

        Args:
            path: Directory to list
            path_filter: Optional predicate selecting the entries to yield

        Raises:
            NotFoundError: If the directory does not exist
            EntryNotDirectoryError: If the path is a plain object
        """
        self._check_open()
        logger.debug(f"List located status for path: {path}")
        key = self.resolve_key(path)
        cursor = ListingCursor(
            RemoteListingSource(self.client, key, path, page_size=self.config.page_size),
            path_filter=path_filter,
            mapper=self.mapper,
        )
        self._emit("list", path, key, lazy=True)
        return cursor

    def list_status(self, path: PathLike) -> List[FilesystemEntry]:
        """List every entry of a directory.

        Raises:
            NotFoundError: If the directory does not exist
            EntryNotDirectoryError: If the path is a plain object
        """
        self._check_open()
        logger.debug(f"List status for path: {path}")
        key = self.resolve_key(path)
        source = RemoteListingSource(self.client, key, path, page_size=self.config.page_size)
        cursor = ListingCursor(source, mapper=self.mapper)
        entries = list(cursor)
        self._emit("list", path, key, lazy=False, count=len(entries))
        return entries
