from __future__ import annotations

import logging
import os
import sqlite3
from dataclasses import dataclass, field
from itertools import groupby
from operator import itemgetter
from pathlib import Path
from typing import Dict, List, Optional

from .config import SortOrder
from .errors import IndexSetupError, RecordError


logger = logging.getLogger(__name__)

TABLE_NAME = "dupes"

PRAGMAS = (
    "PRAGMA synchronous=OFF",
    "PRAGMA journal_mode=MEMORY",
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS dupes (
  id            INTEGER PRIMARY KEY NOT NULL,
  path          TEXT NOT NULL UNIQUE,
  digest        TEXT NOT NULL,
  size          UNSIGNED INTEGER NOT NULL,
  last_modified TEXT NOT NULL
)
"""

VERIFY_SQL = "SELECT id, path, digest, size, last_modified FROM dupes LIMIT 0"

LOOKUP_SQL = "SELECT 1 FROM dupes WHERE path = ? LIMIT 1"

GET_SQL = "SELECT path, digest, size, last_modified FROM dupes WHERE path = ?"

COUNT_SQL = "SELECT COUNT(*) FROM dupes"

UPSERT_SQL: Dict[bool, str] = {
    False: "INSERT OR IGNORE INTO dupes (path, digest, size, last_modified) VALUES (?, ?, ?, ?)",
    True: "INSERT OR REPLACE INTO dupes (path, digest, size, last_modified) VALUES (?, ?, ?, ?)",
}

_DUPLICATES_BASE = """
SELECT totals.total, totals.total_size, dupes.digest, dupes.path, dupes.size, dupes.last_modified
FROM dupes
INNER JOIN (
  SELECT digest, COUNT(*) AS total, SUM(size) AS total_size
  FROM dupes
  GROUP BY digest
  HAVING COUNT(*) > 1
) AS totals USING (digest)
"""

DUPLICATES_SQL: Dict[SortOrder, str] = {
    SortOrder.SIZE: _DUPLICATES_BASE
    + "ORDER BY totals.total_size DESC, dupes.digest, dupes.last_modified, dupes.path",
    SortOrder.COUNT: _DUPLICATES_BASE
    + "ORDER BY totals.total DESC, dupes.digest, dupes.last_modified, dupes.path",
}


@dataclass(frozen=True)
class FileRecord:
    path: str
    digest_hex: str
    size: int
    last_modified: str


@dataclass(frozen=True)
class DuplicateMember:
    path: str
    last_modified: str
    size: int


@dataclass
class DuplicateGroup:
    digest_hex: str
    member_count: int
    members: List[DuplicateMember] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(m.size for m in self.members)

    @property
    def paths(self) -> List[str]:
        return [m.path for m in self.members]


class DigestIndex:
    """
    Persistent path -> digest table backed by a sqlite3 file.

    Each statement commits on its own (autocommit), so an interrupted run only
    loses the record in flight.
    """

    def __init__(self, conn: sqlite3.Connection, path: Path) -> None:
        self._conn = conn
        self.path = path

    @classmethod
    def open(cls, path: str | os.PathLike[str]) -> "DigestIndex":
        resolved = Path(path).expanduser()
        conn: Optional[sqlite3.Connection] = None
        try:
            if resolved.parent and not resolved.parent.exists():
                resolved.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(resolved), isolation_level=None)
            for pragma in PRAGMAS:
                conn.execute(pragma)
            conn.execute(SCHEMA)
            conn.execute(VERIFY_SQL)
        except (sqlite3.Error, OSError) as exc:
            if conn is not None:
                conn.close()
            raise IndexSetupError(f"Can't open database: {resolved}: {exc}") from exc
        logger.debug("Opened digest index %s", resolved)
        return cls(conn, resolved)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None  # type: ignore[assignment]

    def __enter__(self) -> "DigestIndex":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def exists(self, path: str) -> bool:
        try:
            row = self._conn.execute(LOOKUP_SQL, (path,)).fetchone()
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            raise RecordError(f"Failed to lookup record for file {path}: {exc}", path) from exc
        return row is not None

    def get(self, path: str) -> Optional[FileRecord]:
        try:
            row = self._conn.execute(GET_SQL, (path,)).fetchone()
        except (sqlite3.Error, UnicodeEncodeError) as exc:
            raise RecordError(f"Failed to lookup record for file {path}: {exc}", path) from exc
        if row is None:
            return None
        return FileRecord(path=row[0], digest_hex=row[1], size=int(row[2]), last_modified=row[3])

    def count(self) -> int:
        return int(self._conn.execute(COUNT_SQL).fetchone()[0])

    def upsert(self, record: FileRecord, *, replace: bool) -> None:
        """Insert record; an existing path is kept unless replace is set."""
        params = (record.path, record.digest_hex, record.size, record.last_modified)
        try:
            self._conn.execute(UPSERT_SQL[replace], params)
        except (sqlite3.Error, UnicodeEncodeError, OverflowError) as exc:
            raise RecordError(
                f"Failed to insert digest: {record.digest_hex}, path: {record.path}; error: {exc}",
                record.path,
            ) from exc

    def duplicates(self, sort_by: SortOrder | str = SortOrder.COUNT) -> List[DuplicateGroup]:
        order = SortOrder.parse(sort_by)
        rows = self._conn.execute(DUPLICATES_SQL[order]).fetchall()

        groups: List[DuplicateGroup] = []
        # Rows of one digest are contiguous: digest is the first tie-breaker
        for digest, members in groupby(rows, key=itemgetter(2)):
            members = list(members)
            groups.append(
                DuplicateGroup(
                    digest_hex=digest,
                    member_count=int(members[0][0]),
                    members=[
                        DuplicateMember(path=row[3], last_modified=row[5], size=int(row[4]))
                        for row in members
                    ],
                )
            )
        return groups
