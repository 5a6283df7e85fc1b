"""Tests for the file probe."""

from __future__ import annotations

import os
import stat
from datetime import datetime, timedelta, timezone
from pathlib import Path

from dupes.probe import FileKind, describe_mode, format_timestamp, probe


def test_regular_file(tmp_path: Path):
    target = tmp_path / "f.bin"
    target.write_bytes(b"12345")
    os.utime(target, (1_700_000_000, 1_700_000_000))

    info = probe(target)

    assert info.kind is FileKind.REGULAR
    assert info.is_regular
    assert info.size == 5
    assert info.last_modified == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert info.timestamp == "2023-11-14 22:13:20"
    assert info.block_size is None or info.block_size > 0


def test_directory(tmp_path: Path):
    info = probe(tmp_path)
    assert info.is_directory
    assert not info.is_regular


def test_other_kind(tmp_path: Path):
    os.mkfifo(tmp_path / "pipe")
    assert probe(tmp_path / "pipe").kind is FileKind.OTHER


def test_missing_path(tmp_path: Path):
    assert probe(tmp_path / "absent") is None


def test_mtime_out_of_range_is_a_probe_failure(tmp_path: Path, monkeypatch):
    far_future = os.stat_result((stat.S_IFREG | 0o644, 0, 0, 1, 0, 0, 5, 0, 10**12, 0))
    monkeypatch.setattr("dupes.probe.os.stat", lambda path: far_future)

    assert probe(tmp_path / "f.bin") is None


def test_timestamp_is_rendered_in_utc():
    local = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_timestamp(local) == "2024-05-01 10:00:00"


def test_describe_mode(tmp_path: Path):
    os.symlink(tmp_path, tmp_path / "link")
    assert describe_mode(os.lstat(tmp_path / "link").st_mode) == "symlink"
    assert describe_mode(os.lstat(tmp_path).st_mode) == "directory"
