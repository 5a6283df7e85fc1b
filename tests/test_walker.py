"""Tests for the directory walker."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import pytest

from dupes import walker
from dupes.walker import walk


class TestWalk:
    def test_yields_every_regular_file_once(self, make_tree):
        root = make_tree({
            "a.txt": b"a",
            "sub/b.txt": b"b",
            "sub/deeper/c.txt": b"c",
            "other/d.txt": b"d",
        })

        found = list(walk(root))

        assert sorted(found) == sorted(
            str(root / rel) for rel in ("a.txt", "sub/b.txt", "sub/deeper/c.txt", "other/d.txt")
        )
        assert len(found) == len(set(found))

    def test_visitor_sees_files_in_yield_order(self, make_tree):
        root = make_tree({"x/1": b"1", "x/y/2": b"2", "3": b"3"})
        visited = []

        yielded = list(walk(root, visited.append))

        assert visited == yielded

    def test_is_lazy(self, make_tree):
        root = make_tree({"one": b"1"})
        visited = []

        gen = walk(root, visited.append)

        assert visited == []
        next(gen)
        assert len(visited) == 1

    def test_directories_are_entered_before_later_siblings(self, make_tree):
        """Every file of a sub-directory is contiguous in the output (pre-order DFS)."""
        root = make_tree({
            "d1/a": b"a", "d1/b": b"b", "d1/inner/c": b"c",
            "d2/e": b"e", "d2/f": b"f",
            "g": b"g",
        })

        found = [Path(p).relative_to(root).parts[0] for p in walk(root)]

        for top in ("d1", "d2"):
            positions = [i for i, name in enumerate(found) if name == top]
            assert positions == list(range(positions[0], positions[0] + len(positions)))

    def test_trailing_separator_is_not_doubled(self, make_tree):
        root = make_tree({"file": b"x"})

        found = list(walk(str(root) + os.sep))

        assert found == [str(root / "file")]

    def test_symlinks_are_skipped_with_diagnostic(self, make_tree, caplog):
        root = make_tree({"real.txt": b"data", "dir/inner.txt": b"more"})
        os.symlink(root / "real.txt", root / "link.txt")
        os.symlink(root / "dir", root / "dirlink")
        caplog.set_level(logging.INFO, logger="dupes.walker")

        found = set(walk(root))

        assert found == {str(root / "real.txt"), str(root / "dir" / "inner.txt")}
        assert "link.txt of type symlink" in caplog.text
        assert "dirlink of type symlink" in caplog.text

    def test_fifo_is_skipped(self, make_tree, caplog):
        root = make_tree({"plain": b"p"})
        os.mkfifo(root / "pipe")
        caplog.set_level(logging.INFO, logger="dupes.walker")

        assert list(walk(root)) == [str(root / "plain")]
        assert "of type fifo" in caplog.text

    def test_missing_root_yields_nothing(self, tmp_path: Path):
        assert list(walk(tmp_path / "does-not-exist")) == []

    def test_unreadable_subdirectory_does_not_stop_the_walk(self, make_tree, monkeypatch):
        root = make_tree({"locked/secret": b"s", "open/visible": b"v"})
        real_scandir = os.scandir
        locked = str(root / "locked")

        def fake_scandir(path):
            if os.fspath(path) == locked:
                raise PermissionError(13, "Permission denied", path)
            return real_scandir(path)

        monkeypatch.setattr(walker.os, "scandir", fake_scandir)

        assert list(walk(root)) == [str(root / "open" / "visible")]

    def test_overlong_path_fails_only_that_entry(self, make_tree, caplog):
        root = make_tree({"ok": b"1", "a-much-longer-file-name": b"2"})
        limit = len(os.fsencode(str(root / "ok"))) + 2

        found = list(walk(root, max_path_length=limit))

        assert found == [str(root / "ok")]
        assert "path longer than" in caplog.text
