"""Routing table implementation.

Loads the coarse IDX1 index fully into memory and routes keys to blocks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from operator import attrgetter
from pathlib import Path

from sortedcontainers import SortedKeyList

from ..core.errors import IndexCorruptionError, IndexFormatError, IndexIOError
from ..core.types import Rva, RoutingEntry
from .layout import FILE_HEADER, ROUTING_ENTRY, ROUTING_MAGIC, SUPPORTED_VERSIONS

logger = logging.getLogger(__name__)


class RoutingTable:
    """Sorted, immutable table of block descriptors.

    Args:
        entries: Routing entries, non-decreasing by start_key
        version: Format version read from the file header

    Invariants:
        - Non-empty once loaded
        - Entries are non-decreasing by start_key (validated, never assumed)
    """

    def __init__(self, entries: list[RoutingEntry], version: int):
        for prev, cur in zip(entries, entries[1:]):
            if cur.start_key < prev.start_key:
                raise IndexCorruptionError(
                    f"index1 entries are not sorted by start key: "
                    f"{prev.start_key:#x} > {cur.start_key:#x}"
                )

        self.version = version
        self._entries: SortedKeyList = SortedKeyList(entries, key=attrgetter("start_key"))

    @classmethod
    def load(cls, path: str | Path) -> RoutingTable:
        """Parse and validate a routing file.

        Raises:
            IndexIOError: File cannot be opened or a read comes up short
            IndexFormatError: Bad magic, unsupported version or no entries
            IndexCorruptionError: Entries are not sorted by start_key
        """
        path = Path(path)
        try:
            with open(path, "rb") as f:
                header = f.read(FILE_HEADER.size)
                if len(header) < FILE_HEADER.size:
                    raise IndexIOError(f"Failed to read index1 header: {path}")

                magic, version, _reserved, entry_count = FILE_HEADER.unpack(header)
                if magic != ROUTING_MAGIC:
                    raise IndexFormatError(f"index1 magic mismatch (expected IDX1, got {magic!r})")
                if version not in SUPPORTED_VERSIONS:
                    raise IndexFormatError(f"Unsupported index1 version: {version}")

                entries = []
                for _ in range(entry_count):
                    buf = f.read(ROUTING_ENTRY.size)
                    if len(buf) < ROUTING_ENTRY.size:
                        raise IndexIOError(
                            f"Failed to read index1 entry {len(entries)} of {entry_count}"
                        )
                    entries.append(RoutingEntry(*ROUTING_ENTRY.unpack(buf)))
        except OSError as e:
            raise IndexIOError(f"Failed to open index1 file: {path}") from e

        if not entries:
            raise IndexFormatError("index1 has no entries")

        table = cls(entries, version)
        logger.debug(f"Loaded {len(entries)} routing entries from {path} (v{version})")
        return table

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> RoutingEntry:
        return self._entries[index]

    def __iter__(self) -> Iterator[RoutingEntry]:
        return iter(self._entries)

    @property
    def first_key(self) -> Rva:
        return self._entries[0].start_key

    def floor_index(self, key: Rva) -> int | None:
        """Return the index of the last entry whose start_key <= key.

        Returns None if key is below the first entry. The selected block is a
        candidate only: its first stored key may still exceed key.
        """
        i = self._entries.bisect_key_right(key)
        if i == 0:
            return None
        return i - 1

    def scan_start_index(self, key: Rva) -> int:
        """Return the first block that may hold keys >= key."""
        return max(self._entries.bisect_key_left(key) - 1, 0)
