"""RVA index core package."""

from .locked import LockedRvaIndexLookup
from .lookup import RvaIndexLookup, load_index, open_index

__all__ = ["RvaIndexLookup", "LockedRvaIndexLookup", "load_index", "open_index"]
