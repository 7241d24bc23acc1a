"""Mapping of remote metadata records to caller-facing filesystem entries."""

from typing import Union

from .data_models import FilesystemEntry, RemoteEntryRecord
from .paths import PathExpression

DEFAULT_DURABILITY = 2


class EntryMapper:
    """
    Converts RemoteEntryRecord instances into FilesystemEntry instances.

    The directory flag comes from the record's declared type; a trailing
    slash on the key is not a reliable signal from every listing source.
    Directories always report a length of 0.
    """

    def __init__(self, default_durability: int = DEFAULT_DURABILITY) -> None:
        """
        Args:
            default_durability: Replication reported when the record carries
                no durability level
        """
        self.default_durability = default_durability

    def map(
        self,
        record: RemoteEntryRecord,
        requested_path: Union[str, PathExpression],
    ) -> FilesystemEntry:
        """
        Map a record to an entry.

        Args:
            record: Metadata returned by the object store
            requested_path: Path the caller used to reach the record

        Returns:
            FilesystemEntry whose ``path`` is ``requested_path``
        """
        is_directory = record.is_directory
        replication = record.durability if record.durability is not None else self.default_durability
        return FilesystemEntry(
            path=str(requested_path),
            is_directory=is_directory,
            length=0 if is_directory else max(record.size, 0),
            modification_time=record.last_modified,
            replication=replication,
            content_type=record.content_type,
            etag=record.etag,
        )

    __call__ = map
