"""Common type definitions for the RVA index reader.

Defines the routing entries, decoded blocks and metadata shared by all components.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field

# Core primitive types
Rva = int
Value = int


@dataclass(frozen=True)
class RoutingEntry:
    """One routing table record: where a block lives in the block file."""

    start_key: Rva
    block_offset: int
    block_size: int


@dataclass
class DecodedBlock:
    """Parallel key/value sequences decoded from a single block.

    Invariants:
        - keys and values have the same length
        - keys are non-decreasing
    """

    keys: list[Rva] = field(default_factory=list)
    values: list[Value] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.keys)

    @property
    def first_key(self) -> Rva | None:
        return self.keys[0] if self.keys else None

    @property
    def last_value(self) -> Value | None:
        return self.values[-1] if self.values else None

    def floor(self, key: Rva) -> Value | None:
        """Return the value paired with the greatest key <= key, or None."""
        i = bisect_right(self.keys, key)
        if i == 0:
            return None
        return self.values[i - 1]


@dataclass(frozen=True)
class IndexMetadata:
    """Header information surfaced after a successful load.

    Attributes:
        routing_version: Format version of the routing (IDX1) file
        store_version: Format version of the block (IDX2) file
        block_count: Number of blocks, equal to the routing entry count
        total_value_count: Dump line count declared by v2+ block files, else 0
    """

    routing_version: int
    store_version: int
    block_count: int
    total_value_count: int = 0

    @property
    def value_kind(self) -> str:
        """'line' for v1/v2 indexes, 'offset' for v3 (dump byte offsets)."""
        return "offset" if self.store_version >= 3 else "line"
