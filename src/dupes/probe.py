from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class FileKind(str, Enum):
    REGULAR = "regular"
    DIRECTORY = "directory"
    OTHER = "other"


@dataclass(frozen=True)
class FileInfo:
    path: str
    kind: FileKind
    size: int
    last_modified: datetime
    block_size: Optional[int] = None

    @property
    def is_regular(self) -> bool:
        return self.kind is FileKind.REGULAR

    @property
    def is_directory(self) -> bool:
        return self.kind is FileKind.DIRECTORY

    @property
    def timestamp(self) -> str:
        return format_timestamp(self.last_modified)


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).strftime(TIMESTAMP_FORMAT)


def _kind_of(mode: int) -> FileKind:
    if stat.S_ISREG(mode):
        return FileKind.REGULAR
    if stat.S_ISDIR(mode):
        return FileKind.DIRECTORY
    return FileKind.OTHER


def describe_mode(mode: int) -> str:
    # Human name for the entry types the walker refuses to follow
    if stat.S_ISLNK(mode):
        return "symlink"
    if stat.S_ISFIFO(mode):
        return "fifo"
    if stat.S_ISSOCK(mode):
        return "socket"
    if stat.S_ISCHR(mode):
        return "character device"
    if stat.S_ISBLK(mode):
        return "block device"
    if stat.S_ISDIR(mode):
        return "directory"
    if stat.S_ISREG(mode):
        return "regular file"
    return "unknown"


def probe(path: str | os.PathLike[str]) -> Optional[FileInfo]:
    """
    Stat path (following symlinks, like the roots given on the command line).

    Returns None when the entry is missing, cannot be stat'ed, or carries an
    mtime outside the range datetime can represent.
    """
    try:
        st = os.stat(path)
        last_modified = datetime.fromtimestamp(int(st.st_mtime), tz=timezone.utc)
    except (OSError, ValueError, OverflowError) as exc:
        logger.debug("stat failed for %s: %s", path, exc)
        return None
    block_size = getattr(st, "st_blksize", None) or None
    return FileInfo(
        path=os.fspath(path),
        kind=_kind_of(st.st_mode),
        size=st.st_size,
        last_modified=last_modified,
        block_size=block_size,
    )
