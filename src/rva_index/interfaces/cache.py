"""Protocol definition for the decoded block cache."""

from __future__ import annotations
from typing import Protocol
from ..core.types import DecodedBlock


class BlockCache(Protocol):
    """Cache of decoded blocks keyed by routing index."""

    def get(self, index: int) -> DecodedBlock | None:
        """Return the decoded block at index if cached."""
        ...

    def put(self, index: int, block: DecodedBlock) -> None:
        """Store a freshly decoded block."""
        ...

    def clear(self) -> None:
        """Drop all cached blocks."""
        ...
