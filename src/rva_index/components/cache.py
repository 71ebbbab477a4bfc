"""Single-slot decoded block cache."""

from __future__ import annotations

import logging

from ..core.types import DecodedBlock

logger = logging.getLogger(__name__)


class SingleBlockCache:
    """Remembers the most recently decoded block.

    Sequential or clustered queries into one block skip the read and decode.
    Queries alternating between blocks replace the slot every time.
    """

    def __init__(self):
        self._index: int | None = None
        self._block: DecodedBlock | None = None
        self.hits = 0
        self.misses = 0

    @property
    def block_index(self) -> int | None:
        return self._index

    def get(self, index: int) -> DecodedBlock | None:
        """Return the cached block if it is the one at index."""
        if self._block is not None and self._index == index:
            self.hits += 1
            return self._block
        self.misses += 1
        return None

    def put(self, index: int, block: DecodedBlock) -> None:
        """Replace the slot unconditionally."""
        if self._index is not None and self._index != index:
            logger.debug(f"Evicting cached block {self._index} for block {index}")
        self._index = index
        self._block = block

    def clear(self) -> None:
        self._index = None
        self._block = None
