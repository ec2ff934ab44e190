"""
Tests for listing saved snapshots.
"""

import os
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from gover.catalog import CatalogEntry, format_entry, list_snapshots
from gover.commit import CommitInfo
from gover.errors import CommitParseError, StoreError

from conftest import requires_posix


T1 = int(datetime(2020, 1, 1, tzinfo=timezone.utc).timestamp())
T2 = int(datetime(2021, 6, 15, tzinfo=timezone.utc).timestamp())
T3 = int(datetime(2023, 11, 30, tzinfo=timezone.utc).timestamp())


def commit_object(author_time: int, summary: str) -> bytes:
    return (
        f"tree 4b825dc642cb6eb9a060e54bf8d69288fbee4904\n"
        f"author Gopher <gopher@example.com> {author_time} +0000\n"
        f"committer Gopher <gopher@example.com> {author_time} +0000\n"
        f"\n"
        f"{summary}\n"
    ).encode()


def make_snapshot(store_dir, identity, author_time=None, summary=""):
    path = store_dir / identity
    (path / "bin").mkdir(parents=True)
    if author_time is not None:
        (path / "commit").write_bytes(commit_object(author_time, summary))
    return path


def local_time(secs: int) -> str:
    return datetime.fromtimestamp(secs).strftime("%Y-%m-%dT%H:%M:%S")


class TestListSnapshots:
    """Tests for list_snapshots."""

    def test_missing_store_dir_is_empty(self, tmp_path):
        """Test a store that was never written to lists nothing."""
        assert list_snapshots(tmp_path / "does-not-exist") == []

    def test_empty_store_dir(self, tmp_path):
        assert list_snapshots(tmp_path) == []

    def test_sorted_by_author_time(self, tmp_path):
        """Test ordering follows author time, not directory names."""
        make_snapshot(tmp_path, "aaaaaaa", T3, "newest")
        make_snapshot(tmp_path, "bbbbbbb", T1, "oldest")
        make_snapshot(tmp_path, "ccccccc", T2, "middle")

        entries = list_snapshots(tmp_path)

        assert [e.identity for e in entries] == ["bbbbbbb", "ccccccc", "aaaaaaa"]
        assert [e.commit.summary for e in entries] == ["oldest", "middle", "newest"]

    def test_sort_ignores_enumeration_order(self, tmp_path):
        """Test the result is the same whatever order the OS returns."""
        make_snapshot(tmp_path, "aaaaaaa", T3)
        make_snapshot(tmp_path, "bbbbbbb", T1)
        make_snapshot(tmp_path, "ccccccc", T2)
        children = list(tmp_path.iterdir())

        with patch("pathlib.Path.iterdir", return_value=iter(reversed(sorted(children)))):
            entries = list_snapshots(tmp_path)

        assert [e.identity for e in entries] == ["bbbbbbb", "ccccccc", "aaaaaaa"]

    def test_missing_commit_file_still_listed(self, tmp_path):
        """Test snapshots without metadata come first, in name order."""
        make_snapshot(tmp_path, "zzzzzzz", T1, "has commit")
        make_snapshot(tmp_path, "yyyyyyy")
        make_snapshot(tmp_path, "xxxxxxx")

        entries = list_snapshots(tmp_path)

        assert [e.identity for e in entries] == ["xxxxxxx", "yyyyyyy", "zzzzzzz"]
        assert entries[0].commit == CommitInfo()

    def test_files_in_store_are_ignored(self, tmp_path):
        make_snapshot(tmp_path, "aaaaaaa", T1)
        (tmp_path / "notes.txt").write_text("not a snapshot")
        assert [e.identity for e in list_snapshots(tmp_path)] == ["aaaaaaa"]

    @requires_posix
    def test_aliases_attached_to_snapshot(self, tmp_path):
        make_snapshot(tmp_path, "aaaaaaa", T1)
        make_snapshot(tmp_path, "bbbbbbb", T2)
        os.symlink("aaaaaaa", tmp_path / "go1.4")
        os.symlink("bbbbbbb", tmp_path / "go1.5")
        os.symlink("bbbbbbb", tmp_path / "tip")

        entries = list_snapshots(tmp_path)

        assert [(e.identity, e.names) for e in entries] == [
            ("aaaaaaa", ["go1.4"]),
            ("bbbbbbb", ["go1.5", "tip"]),
        ]

    @requires_posix
    def test_alias_is_not_listed_as_snapshot(self, tmp_path):
        """Test a symlink to a snapshot directory is not itself a snapshot."""
        make_snapshot(tmp_path, "aaaaaaa", T1)
        os.symlink("aaaaaaa", tmp_path / "stable")
        assert [e.identity for e in list_snapshots(tmp_path)] == ["aaaaaaa"]

    @requires_posix
    def test_dangling_and_foreign_links_ignored(self, tmp_path):
        make_snapshot(tmp_path, "aaaaaaa", T1)
        os.symlink("deleted", tmp_path / "old")
        os.symlink(str(tmp_path / "aaaaaaa"), tmp_path / "absolute")

        entries = list_snapshots(tmp_path)

        assert len(entries) == 1
        assert entries[0].names == []

    @requires_posix
    def test_alias_on_snapshot_without_commit(self, tmp_path):
        make_snapshot(tmp_path, "aaaaaaa")
        os.symlink("aaaaaaa", tmp_path / "broken-build")

        entry = list_snapshots(tmp_path)[0]

        assert format_entry(entry) == "aaaaaaa [broken-build]"

    def test_malformed_commit_raises(self, tmp_path):
        path = make_snapshot(tmp_path, "aaaaaaa")
        (path / "commit").write_bytes(b"author A <a@b> soon +0000\n\nmsg\n")
        with pytest.raises(CommitParseError):
            list_snapshots(tmp_path)

    def test_unreadable_store_raises(self, tmp_path):
        with patch("pathlib.Path.iterdir", side_effect=PermissionError(13, "denied")):
            with pytest.raises(StoreError, match="Cannot read store directory"):
                list_snapshots(tmp_path)


class TestFormatEntry:
    """Tests for listing lines."""

    def test_identity_only(self):
        assert format_entry(CatalogEntry("1a2b3c4")) == "1a2b3c4"

    def test_all_fields(self):
        entry = CatalogEntry(
            "1a2b3c4+0123456789",
            CommitInfo(datetime.fromtimestamp(T2, tz=timezone.utc), "cmd/go: fix build"),
            ["mine", "tip"],
        )
        assert format_entry(entry) == f"1a2b3c4+0123456789 {local_time(T2)} [mine tip] cmd/go: fix build"

    def test_timestamp_without_summary(self):
        entry = CatalogEntry("1a2b3c4", CommitInfo(datetime.fromtimestamp(T1, tz=timezone.utc), ""))
        assert format_entry(entry) == f"1a2b3c4 {local_time(T1)}"

    def test_summary_without_timestamp(self):
        entry = CatalogEntry("1a2b3c4", CommitInfo(None, "summary"))
        assert format_entry(entry) == "1a2b3c4 summary"
