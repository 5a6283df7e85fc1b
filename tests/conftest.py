"""Shared fixtures for the dupes test suite."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Callable, Dict, List

import pytest

from dupes.digest import get_strategy
from dupes.indexer import Indexer
from dupes.store import DigestIndex


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, bytes]], Path]:
    """Create files below tmp_path/"tree" from a {relative path: content} mapping."""

    def _make(files: Dict[str, bytes], root_name: str = "tree") -> Path:
        root = tmp_path / root_name
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        return root

    return _make


@pytest.fixture
def index(tmp_path: Path):
    with DigestIndex.open(tmp_path / "index" / "dupes.db") as idx:
        yield idx


@pytest.fixture
def progress_lines() -> List[str]:
    return []


@pytest.fixture
def indexer(index: DigestIndex, progress_lines: List[str]) -> Indexer:
    return Indexer(index, get_strategy("md5"), echo=progress_lines.append)


def set_mtime(path: Path, epoch: int) -> None:
    os.utime(path, (epoch, epoch))


@pytest.fixture(autouse=True)
def clean_dupes_env(monkeypatch):
    # setenv first so values written later by load_dotenv are undone on teardown
    for name in ("DUPES_DB", "DUPES_ALGORITHM", "DUPES_SORT"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
