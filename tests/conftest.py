"""Shared fixtures: a test-side writer for synthetic IDX1/IDX2 file pairs."""

import shutil
import struct
import tempfile
from pathlib import Path

import pytest


class IndexFileWriter:
    """Writes routing/block index pairs the way the dump encoder lays them out.

    Args:
        directory: Where to place generated files
    """

    def __init__(self, directory):
        self.directory = Path(directory)
        self._counter = 0

    @staticmethod
    def encode_block(
        records,
        start_key=None,
        start_value=None,
        zero_first_value=False,
        record_count=None,
    ):
        """Encode sorted (rva, value) records as one block."""
        if start_key is None:
            start_key = records[0][0] if records else 0
        if start_value is None:
            start_value = records[0][1] if records else 0
        if record_count is None:
            record_count = len(records)

        out = struct.pack("<QII", start_key, start_value, record_count)
        prev = start_key
        for i, (rva, value) in enumerate(records):
            raw = 0 if (i == 0 and zero_first_value) else value
            out += struct.pack("<II", rva - prev, raw)
            prev = rva
        return out

    def write(
        self,
        blocks,
        version=3,
        total_value_count=0,
        routing_keys=None,
        routing_version=None,
        block_count=None,
        block_sizes=None,
    ):
        """Write encoded blocks and a matching routing table; return both paths."""
        self._counter += 1
        index1_path = self.directory / f"rva-{self._counter}.idx1"
        index2_path = self.directory / f"rva-{self._counter}.idx2"

        store_header = struct.pack(
            "<4sHHI", b"IDX2", version, 0, len(blocks) if block_count is None else block_count
        )
        if version >= 2:
            store_header += struct.pack("<I", total_value_count)

        entries = []
        offset = len(store_header)
        body = b""
        for i, block in enumerate(blocks):
            start_key = struct.unpack_from("<Q", block)[0] if len(block) >= 8 else 0
            if routing_keys is not None:
                start_key = routing_keys[i]
            size = len(block) if block_sizes is None else block_sizes[i]
            entries.append((start_key, offset, size))
            body += block
            offset += len(block)
        index2_path.write_bytes(store_header + body)

        routing = struct.pack(
            "<4sHHI", b"IDX1", version if routing_version is None else routing_version, 0, len(entries)
        )
        for start_key, block_offset, size in entries:
            routing += struct.pack("<QQI4x", start_key, block_offset, size)
        index1_path.write_bytes(routing)

        return index1_path, index2_path

    def write_records(self, records, per_block=4, **kwargs):
        """Sort records, chunk them into blocks and write the pair."""
        records = sorted(records)
        blocks = [
            self.encode_block(records[i : i + per_block])
            for i in range(0, len(records), per_block)
        ]
        return self.write(blocks, **kwargs)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def index_writer(temp_dir):
    """Writer for synthetic index file pairs."""
    return IndexFileWriter(temp_dir)
