"""Block store implementation.

Owns the IDX2 file handle. The file is opened lazily and a failed open is
remembered so repeated queries do not keep hitting the filesystem.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from ..core.errors import IndexFormatError, IndexIOError
from .layout import FILE_HEADER, STORE_MAGIC, SUPPORTED_VERSIONS, TOTAL_VALUE_COUNT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreHeader:
    """Parsed IDX2 file header."""

    version: int
    block_count: int
    total_value_count: int = 0


class BlockStore:
    """Lazily opened reader over the block file.

    Args:
        path: Path to the IDX2 file

    Invariants:
        - At most one open attempt per instance; a failure is replayed
        - Reads are exact: short reads raise instead of returning partial data
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._fd = None
        self._open_attempted = False
        self._open_error: str | None = None

    @property
    def is_open(self) -> bool:
        return self._fd is not None

    def ensure_open(self) -> None:
        """Open the block file on first use, or replay the recorded failure."""
        if self._fd is not None:
            return
        if self._open_attempted:
            raise IndexIOError(self._open_error or f"index2 file is closed: {self.path}")

        self._open_attempted = True
        try:
            self._fd = open(self.path, "rb")
        except OSError as e:
            self._open_error = f"Failed to open index2 file: {self.path}"
            logger.error(f"{self._open_error} ({e})")
            raise IndexIOError(self._open_error) from e
        logger.debug(f"Opened index2 file {self.path}")

    def read_at(self, offset: int, size: int) -> bytes:
        """Read exactly size bytes at offset."""
        self.ensure_open()
        try:
            self._fd.seek(offset)
            data = self._fd.read(size)
        except OSError as e:
            raise IndexIOError(f"Failed reading index2 at offset {offset}: {e}") from e
        if len(data) != size:
            raise IndexIOError(
                f"Failed reading index2 block: wanted {size} bytes at offset {offset}, "
                f"got {len(data)}"
            )
        return data

    def read_header(self) -> StoreHeader:
        """Read and validate the file header.

        Raises:
            IndexIOError: File cannot be opened or the header is truncated
            IndexFormatError: Bad magic or unsupported version
        """
        try:
            base = self.read_at(0, FILE_HEADER.size)
        except IndexIOError as e:
            if not self.is_open:
                raise
            raise IndexIOError(f"Failed to read index2 header: {self.path}") from e

        magic, version, _reserved, block_count = FILE_HEADER.unpack(base)
        if magic != STORE_MAGIC:
            raise IndexFormatError(f"index2 magic mismatch (expected IDX2, got {magic!r})")
        if version not in SUPPORTED_VERSIONS:
            raise IndexFormatError(f"Unsupported index2 version: {version}")

        total_value_count = 0
        if version >= 2:
            try:
                buf = self.read_at(FILE_HEADER.size, TOTAL_VALUE_COUNT.size)
            except IndexIOError as e:
                raise IndexIOError("Failed to read index2 total value count") from e
            (total_value_count,) = TOTAL_VALUE_COUNT.unpack(buf)

        return StoreHeader(version, block_count, total_value_count)

    def close(self) -> None:
        """Release the file descriptor."""
        if self._fd:
            self._fd.close()
            self._fd = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
