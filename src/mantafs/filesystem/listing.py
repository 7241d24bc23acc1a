"""
Lazy, filterable directory listings over paginated remote sources.

A ListingCursor keeps at most one remote page in memory and fetches the next
one only when the current page is exhausted, so listing a directory with
millions of entries costs one page of memory.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Iterator, Optional, Union

from mantafs.exceptions import EntryNotDirectoryError, NoSuchEntryError, NotFoundError

from .data_models import FilesystemEntry, HeadResult, HeadStatus, ListingPage
from .mapper import EntryMapper
from .paths import PathExpression, child_path

if TYPE_CHECKING:
    from mantafs.client.base import ObjectStoreClient

logger = logging.getLogger(__name__)

EntryFilter = Callable[[FilesystemEntry], bool]


class ListingSource(ABC):
    """
    A remote directory listing bound to one directory key.

    Attributes:
        key: Canonical key of the listed directory
        requested_path: Path the caller asked to list
    """

    key: str
    requested_path: str

    @abstractmethod
    def stat(self) -> HeadResult:
        """Look up the listed directory itself."""
        pass

    @abstractmethod
    def fetch(self, continuation_token: Optional[str] = None) -> ListingPage:
        """Fetch the page following ``continuation_token``."""
        pass


class RemoteListingSource(ListingSource):
    """ListingSource backed by an ObjectStoreClient."""

    def __init__(
        self,
        client: "ObjectStoreClient",
        key: str,
        requested_path: Union[str, PathExpression, None] = None,
        page_size: Optional[int] = None,
    ) -> None:
        self.client = client
        self.key = key
        self.page_size = page_size
        self.requested_path = str(requested_path) if requested_path is not None else key

    def stat(self) -> HeadResult:
        return self.client.head(self.key)

    def fetch(self, continuation_token: Optional[str] = None) -> ListingPage:
        logger.debug(f"Fetching listing page for {self.key} (token={continuation_token!r})")
        return self.client.list_page(self.key, continuation_token, limit=self.page_size)


class ListingCursor:
    """
    Forward-only iterator over the entries of a remote directory.

    The target directory is checked when the cursor is constructed, so a
    missing directory fails with NotFoundError instead of producing an empty
    sequence. Entries are yielded in the order the source returns them;
    entries rejected by ``path_filter`` are skipped while advancing.

    Example:
        >>> cursor = ListingCursor(source, lambda e: e.path.endswith(".csv"))
        >>> while cursor.has_next():
        ...     entry = cursor.next()
    """

    def __init__(
        self,
        source: ListingSource,
        path_filter: Optional[EntryFilter] = None,
        mapper: Optional[EntryMapper] = None,
    ) -> None:
        """
        Args:
            source: Remote listing bound to the directory being listed
            path_filter: Optional predicate; only matching entries are yielded
            mapper: EntryMapper used to build entries (default durability 2)

        Raises:
            NotFoundError: If the directory does not exist or is not accessible
            EntryNotDirectoryError: If the key holds a plain object
        """
        self.source = source
        self.path_filter = path_filter
        self.mapper = mapper or EntryMapper()

        self._page: Optional[ListingPage] = None
        self._index = 0
        self._pending: Optional[FilesystemEntry] = None
        self._exhausted = False
        self.pages_fetched = 0

        self._check_target()

    def _check_target(self) -> None:
        result = self.source.stat()
        if result.status == HeadStatus.NOT_FOUND:
            raise NotFoundError(
                f"No such directory: {self.source.requested_path}",
                path=self.source.requested_path,
                key=self.source.key,
            )
        record = result.unwrap()
        if not record.is_directory:
            raise EntryNotDirectoryError(
                f"Not a directory: {self.source.requested_path}",
                path=self.source.requested_path,
                key=self.source.key,
            )

    def _load_next_page(self) -> bool:
        """Replace the buffer with the next page. Returns False at the end of the listing."""
        if self._page is not None and self._page.is_last:
            return False
        token = self._page.continuation_token if self._page is not None else None
        self._page = self.source.fetch(token)
        self._index = 0
        self.pages_fetched += 1
        return True

    def _advance(self) -> Optional[FilesystemEntry]:
        """Find the next entry accepted by the filter, fetching pages as needed."""
        while True:
            if self._page is None or self._index >= len(self._page.records):
                if not self._load_next_page():
                    return None
                continue

            record = self._page.records[self._index]
            self._index += 1
            entry = self.mapper.map(record, child_path(self.source.requested_path, record.name))
            if self.path_filter is None or self.path_filter(entry):
                return entry

    def has_next(self) -> bool:
        """Return True if another entry is available."""
        if self._pending is not None:
            return True
        if self._exhausted:
            return False
        self._pending = self._advance()
        if self._pending is None:
            self._exhausted = True
            # Release the last page
            self._page = None
            return False
        return True

    def next(self) -> FilesystemEntry:
        """
        Return the next entry.

        Raises:
            NoSuchEntryError: If the listing has no remaining entries
        """
        if not self.has_next():
            raise NoSuchEntryError(
                f"No more entries in {self.source.requested_path}",
                path=self.source.requested_path,
                key=self.source.key,
            )
        entry = self._pending
        self._pending = None
        return entry

    def __iter__(self) -> Iterator[FilesystemEntry]:
        return self

    def __next__(self) -> FilesystemEntry:
        if not self.has_next():
            raise StopIteration
        return self.next()
