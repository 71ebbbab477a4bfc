"""Unit tests for index configuration."""

from pathlib import Path

from rva_index import IndexConfig


def test_defaults():
    config = IndexConfig("a.idx1", "a.idx2")
    assert config.thread_safe is False


def test_from_directory(temp_dir):
    config = IndexConfig.from_directory(temp_dir)
    assert config.index1_path == Path(temp_dir) / "rva.idx1"
    assert config.index2_path == Path(temp_dir) / "rva.idx2"


def test_from_directory_custom_names(temp_dir):
    config = IndexConfig.from_directory(
        temp_dir, index1_name="dump.idx1", index2_name="dump.idx2", thread_safe=True
    )
    assert config.index1_path.name == "dump.idx1"
    assert config.index2_path.name == "dump.idx2"
    assert config.thread_safe is True
