"""Binary layouts of the two index files.

All integers are little-endian.

Routing file (IDX1):
    [magic "IDX1" (4B)] [version u16] [reserved (2B)] [entry_count u32]
    entry_count x [start_key u64] [block_offset u64] [block_size u32] [reserved (4B)]

Block file (IDX2):
    [magic "IDX2" (4B)] [version u16] [reserved (2B)] [block_count u32]
    [total_value_count u32]   (version >= 2 only)
    blocks, each: [start_key u64] [start_value u32] [record_count u32]
                  record_count x [address_delta u32] [raw_value u32]
"""

from __future__ import annotations

import struct

ROUTING_MAGIC = b"IDX1"
STORE_MAGIC = b"IDX2"
SUPPORTED_VERSIONS = frozenset({1, 2, 3})

FILE_HEADER = struct.Struct("<4sHHI")
ROUTING_ENTRY = struct.Struct("<QQI4x")
TOTAL_VALUE_COUNT = struct.Struct("<I")
BLOCK_HEADER = struct.Struct("<QII")
BLOCK_RECORD = struct.Struct("<II")

U64_MASK = (1 << 64) - 1


def expected_block_size(record_count: int) -> int:
    """Byte size a block with record_count records must declare."""
    return BLOCK_HEADER.size + record_count * BLOCK_RECORD.size
