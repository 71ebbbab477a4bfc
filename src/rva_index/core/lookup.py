"""RVA index lookup - main public API.

Composes the routing table, block store, decoder and single-slot cache to
answer floor queries against a pair of index files.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ..components.block_store import BlockStore
from ..components.cache import SingleBlockCache
from ..components.decoder import BlockDecoder
from ..components.routing import RoutingTable
from ..interfaces.cache import BlockCache
from ..interfaces.lookup import FloorLookup
from .config import IndexConfig
from .errors import IndexCorruptionError, RvaIndexError
from .locked import LockedRvaIndexLookup
from .types import DecodedBlock, IndexMetadata, Rva, Value

logger = logging.getLogger(__name__)


class RvaIndexLookup:
    """Floor lookup over a two-level sparse RVA index.

    Args:
        cache: Decoded block cache (defaults to a single-slot cache)

    Public API:
        - load(index1_path, index2_path): Load and validate both files
        - find_floor(key): Value of the greatest indexed key <= key, or None
        - iter_range(start, end): Key-ordered scan over stored pairs
        - total_value_count(): Dump line count declared by v2+ files
        - close(): Release the block file

    Invariants:
        - A failed load leaves the instance unloaded; queries then miss
        - find_floor never raises for data-shape reasons once loaded
        - Not thread-safe: the file handle and cache change on every query.
          Use LockedRvaIndexLookup or one instance per thread.
    """

    def __init__(self, cache: BlockCache | None = None):
        self._cache = cache if cache is not None else SingleBlockCache()
        self._routing: RoutingTable | None = None
        self._store: BlockStore | None = None
        self._decoder: BlockDecoder | None = None
        self._metadata: IndexMetadata | None = None
        self.last_error: RvaIndexError | None = None

    def _reset(self) -> None:
        """Drop all loaded state and close the block file."""
        if self._store is not None:
            self._store.close()
        self._routing = None
        self._store = None
        self._decoder = None
        self._metadata = None
        self._cache.clear()
        self.last_error = None

    def load(self, index1_path: str | Path, index2_path: str | Path) -> None:
        """Load the routing table and validate the block file header.

        Raises:
            IndexIOError: Either file is missing, unreadable or truncated
            IndexFormatError: Bad magic, unsupported version or empty table
            IndexCorruptionError: Unsorted table or block count mismatch
        """
        self._reset()

        try:
            routing = RoutingTable.load(index1_path)

            self._store = BlockStore(index2_path)
            header = self._store.read_header()
            if header.block_count != len(routing):
                raise IndexCorruptionError(
                    f"index1 entry count ({len(routing)}) does not match "
                    f"index2 block count ({header.block_count})"
                )
        except RvaIndexError as e:
            self._reset()
            self.last_error = e
            logger.error(f"Failed to load RVA index: {e}")
            raise

        self._routing = routing
        self._decoder = BlockDecoder(self._store)
        self._metadata = IndexMetadata(
            routing_version=routing.version,
            store_version=header.version,
            block_count=header.block_count,
            total_value_count=header.total_value_count,
        )
        logger.info(
            f"Loaded RVA index {index1_path} ({len(routing)} blocks, "
            f"v{header.version}, {self._metadata.value_kind} values)"
        )

    @property
    def is_loaded(self) -> bool:
        return self._routing is not None

    @property
    def metadata(self) -> IndexMetadata | None:
        return self._metadata

    @property
    def cache(self) -> BlockCache:
        return self._cache

    def total_value_count(self) -> int:
        """Dump line count from the v2+ header, 0 for v1 or when unloaded."""
        if self._metadata is None:
            return 0
        return self._metadata.total_value_count

    def _load_block(self, index: int) -> DecodedBlock:
        """Return the decoded block at routing index, from cache if possible."""
        block = self._cache.get(index)
        if block is not None:
            return block

        block = self._decoder.decode(self._routing[index])
        self._cache.put(index, block)
        return block

    def find_floor(self, key: Rva) -> Value | None:
        """Return the value paired with the greatest indexed key <= key.

        The routing table only picks a candidate block. When every key in that
        block is above the query, the previous block's last record is the
        floor. Read or decode failures are recorded in last_error and treated
        as a miss; any other outcome leaves last_error as None.
        """
        if self._routing is None:
            return None

        self.last_error = None
        if key < self._routing.first_key:
            return None

        index = self._routing.floor_index(key)
        if index is None:
            return None

        try:
            value = self._load_block(index).floor(key)
            if value is not None:
                return value

            # Boundary fallback
            if index == 0:
                return None
            return self._load_block(index - 1).last_value
        except RvaIndexError as e:
            self.last_error = e
            logger.warning(f"Lookup of {key:#x} in block {index} failed: {e}")
            return None

    def iter_range(
        self, start: Rva | None = None, end: Rva | None = None
    ) -> Iterator[tuple[Rva, Value]]:
        """Iterate (key, value) pairs with start <= key < end in key order.

        Unlike find_floor, a corrupt block raises here since a scan cannot
        skip part of the index silently.
        """
        if self._routing is None:
            return

        first = 0 if start is None else self._routing.scan_start_index(start)
        for index in range(first, len(self._routing)):
            if end is not None and self._routing[index].start_key >= end:
                break

            block = self._load_block(index)
            for key, value in zip(block.keys, block.values):
                if start is not None and key < start:
                    continue
                if end is not None and key >= end:
                    return
                yield (key, value)

    def close(self) -> None:
        """Close the block file and unload the index."""
        self._reset()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def open_index(config: IndexConfig) -> FloorLookup:
    """Load the index described by config.

    Returns a LockedRvaIndexLookup when config.thread_safe is set.
    """
    lookup = RvaIndexLookup()
    lookup.load(config.index1_path, config.index2_path)
    if config.thread_safe:
        return LockedRvaIndexLookup(lookup)
    return lookup


def load_index(
    index1_path: str | Path, index2_path: str | Path, *, thread_safe: bool = False
) -> FloorLookup:
    """Load a pair of index files."""
    return open_index(IndexConfig(index1_path, index2_path, thread_safe=thread_safe))
