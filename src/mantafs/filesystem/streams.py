"""Random-access read stream over an object-store channel."""

import io
import logging
import os
from typing import BinaryIO, Optional

logger = logging.getLogger(__name__)


class SeekableInputStream(io.RawIOBase):
    """
    Seekable, readable binary stream bound to a single remote object.

    Wraps the seekable channel returned by ``ObjectStoreClient.get_read_channel``
    and adds positioned reads that leave the current offset untouched.

    Example:
        >>> with fs.open("~~/stor/data.bin") as stream:
        ...     header = stream.read_fully(0, 16)
        ...     stream.seek(1024)
        ...     chunk = stream.read(4096)
    """

    def __init__(self, channel: BinaryIO, key: Optional[str] = None) -> None:
        """
        Args:
            channel: Seekable binary channel over the object content
            key: Canonical key the channel is bound to
        """
        super().__init__()
        self._channel = channel
        self.key = key

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        self._checkClosed()
        data = self._channel.read(len(buffer))
        n = len(data)
        buffer[:n] = data
        return n

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._checkClosed()
        if whence == os.SEEK_SET and offset < 0:
            raise ValueError(f"Negative seek position {offset}")
        return self._channel.seek(offset, whence)

    def tell(self) -> int:
        self._checkClosed()
        return self._channel.tell()

    def read_at(self, position: int, size: int) -> bytes:
        """
        Read up to ``size`` bytes starting at ``position``.

        The current stream offset is restored afterwards.
        """
        if position < 0:
            raise ValueError(f"Negative read position {position}")
        current = self.tell()
        try:
            self._channel.seek(position)
            return self._channel.read(size)
        finally:
            self._channel.seek(current)

    def read_fully(self, position: int, size: int) -> bytes:
        """
        Read exactly ``size`` bytes starting at ``position``.

        Raises:
            EOFError: If the object ends before ``size`` bytes were read
        """
        data = self.read_at(position, size)
        if len(data) < size:
            raise EOFError(
                f"Reached end of {self.key or 'stream'} after {len(data)} of {size} bytes "
                f"at position {position}"
            )
        return data

    def close(self) -> None:
        if not self.closed:
            logger.debug(f"Closing read stream for {self.key}")
            try:
                self._channel.close()
            finally:
                super().close()
