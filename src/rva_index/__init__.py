"""rva_index - floor lookups over a two-level sparse RVA index."""

from .core.config import IndexConfig
from .core.errors import (
    RvaIndexError,
    IndexIOError,
    IndexFormatError,
    IndexCorruptionError,
)
from .core.locked import LockedRvaIndexLookup
from .core.lookup import RvaIndexLookup, load_index, open_index
from .core.types import Rva, Value, RoutingEntry, DecodedBlock, IndexMetadata

__all__ = [
    "IndexConfig",
    "RvaIndexError",
    "IndexIOError",
    "IndexFormatError",
    "IndexCorruptionError",
    "LockedRvaIndexLookup",
    "RvaIndexLookup",
    "load_index",
    "open_index",
    "Rva",
    "Value",
    "RoutingEntry",
    "DecodedBlock",
    "IndexMetadata",
]
