"""Unit tests for the opt-in thread-safe lookup wrapper."""

import threading

import pytest

from rva_index import IndexConfig, LockedRvaIndexLookup, RvaIndexLookup, load_index, open_index
from rva_index.interfaces.lookup import FloorLookup


@pytest.fixture
def records():
    return [(0x1000 + i * 0x40, i + 1) for i in range(256)]


@pytest.fixture
def index_paths(index_writer, records):
    return index_writer.write_records(records, per_block=8, total_value_count=512)


def test_thread_safe_is_opt_in(index_paths):
    index1, index2 = index_paths
    plain = load_index(index1, index2)
    locked = load_index(index1, index2, thread_safe=True)

    assert isinstance(plain, RvaIndexLookup)
    assert isinstance(locked, LockedRvaIndexLookup)
    assert isinstance(locked.lookup, RvaIndexLookup)

    plain.close()
    locked.close()


def test_wrapper_delegates(index_paths, records):
    index1, index2 = index_paths
    with open_index(IndexConfig(index1, index2, thread_safe=True)) as lookup:
        assert lookup.find_floor(records[10][0] + 1) == records[10][1]
        assert lookup.total_value_count() == 512
        assert list(lookup.iter_range(records[3][0], records[6][0])) == records[3:6]


def test_concurrent_queries(index_paths, records):
    """Test parallel threads alternating between blocks all get correct answers."""
    index1, index2 = index_paths
    lookup = load_index(index1, index2, thread_safe=True)
    errors = []

    def worker(offset):
        for i in range(offset, len(records), 7):
            rva, value = records[i]
            got = lookup.find_floor(rva)
            if got != value:
                errors.append((rva, value, got))

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(7)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    lookup.close()
    assert errors == []


def test_floor_lookup_protocol_declares_context_manager():
    """Test the declared return type of load_index supports `with`."""
    assert "__enter__" in vars(FloorLookup)
    assert "__exit__" in vars(FloorLookup)
    assert callable(LockedRvaIndexLookup.__enter__)
    assert callable(RvaIndexLookup.__exit__)
