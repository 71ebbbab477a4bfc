"""Block decoder implementation.

Turns one delta-encoded block into parallel key/value lists.

Known ambiguity: the first record stores value 0 to mean "use the block
header's start_value". A first record whose real value is 0 therefore decodes
as start_value. The format cannot tell the two apart, so the rule is kept as
the encoder defines it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..core.errors import IndexCorruptionError
from ..core.types import DecodedBlock, RoutingEntry
from .layout import BLOCK_HEADER, BLOCK_RECORD, U64_MASK, expected_block_size

if TYPE_CHECKING:
    from .block_store import BlockStore

logger = logging.getLogger(__name__)


def decode_block(data: bytes, block_size: int | None = None) -> DecodedBlock:
    """Decode raw block bytes.

    Args:
        data: Block bytes, header included
        block_size: Size declared by the routing entry (defaults to len(data))

    Raises:
        IndexCorruptionError: Size/record count mismatch or keys out of order
    """
    if block_size is None:
        block_size = len(data)
    if block_size < BLOCK_HEADER.size or len(data) < BLOCK_HEADER.size:
        raise IndexCorruptionError("Corrupt block: size smaller than block header")

    start_key, start_value, record_count = BLOCK_HEADER.unpack_from(data)
    if expected_block_size(record_count) != block_size or len(data) != block_size:
        raise IndexCorruptionError(
            f"Corrupt block: record count {record_count} does not match block size {block_size}"
        )

    keys: list[int] = []
    values: list[int] = []
    current = start_key
    records = BLOCK_RECORD.iter_unpack(memoryview(data)[BLOCK_HEADER.size:])
    for i, (delta, raw_value) in enumerate(records):
        if i == 0:
            current = (start_key + delta) & U64_MASK
            values.append(raw_value or start_value)
        else:
            # u64 wraparound surfaces as an inversion below
            current = (current + delta) & U64_MASK
            values.append(raw_value)
        keys.append(current)

    for i in range(1, len(keys)):
        if keys[i] < keys[i - 1]:
            raise IndexCorruptionError(f"Corrupt block: keys are not sorted at record {i}")

    return DecodedBlock(keys, values)


class BlockDecoder:
    """Reads routed blocks from a BlockStore and decodes them.

    Args:
        store: Block store holding the IDX2 file
    """

    def __init__(self, store: BlockStore):
        self.store = store

    def decode(self, entry: RoutingEntry) -> DecodedBlock:
        """Read and decode the block described by entry."""
        if entry.block_size < BLOCK_HEADER.size:
            raise IndexCorruptionError("Corrupt block: size smaller than block header")

        data = self.store.read_at(entry.block_offset, entry.block_size)
        block = decode_block(data, entry.block_size)
        logger.debug(
            f"Decoded block at offset {entry.block_offset}: {len(block)} records "
            f"from {entry.start_key:#x}"
        )
        return block
