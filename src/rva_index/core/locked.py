"""Thread-safe wrapper around a floor lookup.

The plain lookup mutates its file handle and cache on every query. This
wrapper serializes all access with one lock.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..interfaces.lookup import FloorLookup
    from .types import Rva, Value


class LockedRvaIndexLookup:
    """Serializes access to a wrapped lookup.

    Args:
        lookup: Loaded lookup to guard
    """

    def __init__(self, lookup: FloorLookup):
        self._lookup = lookup
        self._lock = threading.Lock()

    @property
    def lookup(self) -> FloorLookup:
        return self._lookup

    def find_floor(self, key: Rva) -> Value | None:
        with self._lock:
            return self._lookup.find_floor(key)

    def iter_range(
        self, start: Rva | None = None, end: Rva | None = None
    ) -> Iterator[tuple[Rva, Value]]:
        """Iterate pairs from a snapshot taken under the lock."""
        with self._lock:
            pairs = list(self._lookup.iter_range(start, end))
        return iter(pairs)

    def total_value_count(self) -> int:
        with self._lock:
            return self._lookup.total_value_count()

    def close(self) -> None:
        with self._lock:
            self._lookup.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
