"""Configuration for the RVA index reader.

Defines where the two index files live and how the lookup is wrapped.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DEFAULT_INDEX1_NAME = "rva.idx1"
DEFAULT_INDEX2_NAME = "rva.idx2"


@dataclass
class IndexConfig:
    """Configuration parameters for an RVA index lookup.

    Attributes:
        index1_path: Path to the routing (IDX1) file
        index2_path: Path to the block (IDX2) file
        thread_safe: Wrap the lookup in a lock for use from several threads
    """

    index1_path: str | Path
    index2_path: str | Path
    thread_safe: bool = False

    @classmethod
    def from_directory(
        cls,
        directory: str | Path,
        index1_name: str = DEFAULT_INDEX1_NAME,
        index2_name: str = DEFAULT_INDEX2_NAME,
        thread_safe: bool = False,
    ) -> IndexConfig:
        """Build a config for index files stored side by side in one directory."""
        directory = Path(directory)
        return cls(
            index1_path=directory / index1_name,
            index2_path=directory / index2_name,
            thread_safe=thread_safe,
        )
