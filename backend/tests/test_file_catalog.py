"""Tests for metadata records and directory listings."""

import os
import sys
from unittest.mock import MagicMock, patch

import pytest

from asset_files.services.file_catalog import InvalidNameError, describe, list_all, newest_first
from conftest import write_file


class TestDescribe:
    def test_regular_file(self, root_dir):
        path = write_file(root_dir, "a.txt", b"0123456789", mtime_ms=1_700_000_000_123)
        item = describe(path)
        assert item.name == "a.txt"
        assert item.size == 10
        assert item.timestamp == 1_700_000_000_123

    def test_missing_entry(self, root_dir):
        with pytest.raises(FileNotFoundError):
            describe(root_dir / "ghost.txt")

    def test_directory_entry(self, root_dir):
        (root_dir / "photos").mkdir()
        assert describe(root_dir / "photos").name == "photos"

    def test_mtime_before_epoch(self, root_dir):
        path = write_file(root_dir, "old.txt", b"x")
        fake = MagicMock(st_mtime_ns=-1_000_000, st_size=1)
        with patch("asset_files.services.file_catalog.os.stat", return_value=fake):
            with pytest.raises(InvalidNameError):
                describe(path)

    def test_unnamed_path(self):
        with pytest.raises(InvalidNameError):
            describe("/")


class TestListAll:
    def test_scenario_two_files(self, root_dir):
        write_file(root_dir, "a.txt", b"x" * 10, mtime_ms=1_000_000)
        write_file(root_dir, "b.txt", b"y" * 20, mtime_ms=2_000_000)

        items = list_all(root_dir)
        by_name = {i.name: i for i in items}
        assert set(by_name) == {"a.txt", "b.txt"}
        assert by_name["a.txt"].size == 10
        assert by_name["b.txt"].size == 20

        assert [i.name for i in newest_first(items)] == ["b.txt", "a.txt"]

    def test_no_recursion(self, root_dir):
        sub = root_dir / "sub"
        sub.mkdir()
        write_file(sub, "inner.txt", b"x")
        assert [i.name for i in list_all(root_dir)] == ["sub"]

    def test_broken_symlink_skipped(self, root_dir):
        write_file(root_dir, "ok.txt", b"x")
        os.symlink(root_dir / "nowhere", root_dir / "dangling")
        assert [i.name for i in list_all(root_dir)] == ["ok.txt"]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs byte filenames")
    def test_non_utf8_name_skipped(self, root_dir):
        write_file(root_dir, "ok.txt", b"x")
        try:
            fd = os.open(os.path.join(os.fsencode(root_dir), b"bad-\xff.bin"), os.O_CREAT | os.O_WRONLY)
        except OSError:
            pytest.skip("filesystem rejects non-UTF-8 names")
        os.close(fd)
        assert [i.name for i in list_all(root_dir)] == ["ok.txt"]

    def test_empty_root(self, root_dir):
        assert list_all(root_dir) == []

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(OSError):
            list_all(tmp_path / "absent")


def test_newest_first_keeps_all():
    from asset_files.schemas.files import FileItem

    items = [
        FileItem(name="a", size=1, timestamp=5),
        FileItem(name="b", size=1, timestamp=9),
        FileItem(name="c", size=1, timestamp=7),
    ]
    assert [i.name for i in newest_first(items)] == ["b", "c", "a"]
