"""Protocol definition for floor lookups."""

from __future__ import annotations
from typing import Protocol, Iterator
from ..core.types import Rva, Value


class FloorLookup(Protocol):
    """Read side of an RVA index, as consumed by dump annotators."""

    def find_floor(self, key: Rva) -> Value | None:
        """Return the value of the greatest indexed key <= key.

        Returns None when no such key exists or the block holding it is unreadable.
        """
        ...

    def iter_range(self, start: Rva | None, end: Rva | None) -> Iterator[tuple[Rva, Value]]:
        """Iterate key-ordered (key, value) pairs from start to end."""
        ...

    def total_value_count(self) -> int:
        """Dump line count declared by the index, or 0 for v1 files."""
        ...

    def close(self) -> None:
        """Release file descriptors."""
        ...

    def __enter__(self) -> FloorLookup:
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        ...
