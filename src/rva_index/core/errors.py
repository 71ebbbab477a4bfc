"""Exception hierarchy for the RVA index reader.

Defines all custom exceptions raised while loading or decoding index files.
"""

from __future__ import annotations


class RvaIndexError(Exception):
    """Base exception for all RVA index errors."""
    pass


class IndexIOError(RvaIndexError):
    """Raised when an index file is missing, unreadable or shorter than declared."""
    pass


class IndexFormatError(RvaIndexError):
    """Raised on bad magic, unsupported versions or an empty routing table."""
    pass


class IndexCorruptionError(RvaIndexError):
    """Raised when index contents are structurally inconsistent."""
    pass
