from __future__ import annotations

import logging
import os
from typing import Callable, Iterable, Iterator, Optional

from tqdm import tqdm

from .digest import DEFAULT_CHUNK_SIZE, DigestStrategy, to_hex
from .errors import RecordError
from .probe import FileInfo, probe
from .store import DigestIndex, FileRecord
from .walker import walk


logger = logging.getLogger(__name__)

Echo = Callable[[str], None]


class Indexer:
    """
    Feed regular files into a DigestIndex.

    In skip mode (the default) a path that is already indexed is left alone
    without even a stat; replace mode recomputes and overwrites every record.
    """

    def __init__(
        self,
        index: DigestIndex,
        strategy: DigestStrategy,
        *,
        replace: bool = False,
        include_empty: bool = False,
        echo: Optional[Echo] = None,
    ) -> None:
        self.index = index
        self.strategy = strategy
        self.replace = replace
        self.include_empty = include_empty
        self.echo: Echo = echo or tqdm.write
        self.indexed = 0
        self._chunk_size = DEFAULT_CHUNK_SIZE
        self._buffer = bytearray()

    def _buffer_for(self, info: FileInfo) -> int:
        # Grow-only buffer shared by every file of the run
        chunk_size = info.block_size or self._chunk_size
        if chunk_size > len(self._buffer):
            self._buffer = bytearray(chunk_size)
        return chunk_size

    def _digest(self, info: FileInfo) -> Optional[str]:
        chunk_size = self._buffer_for(info)
        try:
            with open(info.path, "rb") as handle:
                digest = self.strategy.compute(handle, self._buffer, chunk_size)
        except OSError as exc:
            logger.warning("Failed to read %s: %s", info.path, exc)
            return None
        self._chunk_size = chunk_size
        return to_hex(digest)

    def process(self, path: str) -> bool:
        """Index one regular file. Returns True when a record was written."""
        if not self.replace:
            try:
                if self.index.exists(path):
                    logger.debug("Already indexed: %s", path)
                    return False
            except RecordError as exc:
                logger.warning("%s", exc)
                return False

        info = probe(path)
        if info is None:
            logger.warning("Failed to get stat information for %s", path)
            return False
        if not info.is_regular:
            logger.warning("Entry %s is not a file", path)
            return False
        if info.size == 0 and not self.include_empty:
            logger.info("Skipping empty file %s", path)
            return False

        digest_hex = self._digest(info)
        if digest_hex is None:
            return False

        record = FileRecord(path=path, digest_hex=digest_hex, size=info.size, last_modified=info.timestamp)
        try:
            self.index.upsert(record, replace=self.replace)
        except RecordError as exc:
            logger.warning("%s", exc)
            return False

        self.echo(f"{self.strategy.label} ({path}) = {digest_hex}")
        self.indexed += 1
        return True

    def candidates(self, roots: Iterable[str | os.PathLike[str]]) -> Iterator[str]:
        """Expand command line roots into regular file paths."""
        for root in roots:
            root = os.fspath(root)
            info = probe(root)
            if info is None:
                logger.warning("Failed to get stat information for %s", root)
            elif info.is_directory:
                yield from walk(root)
            elif info.is_regular:
                yield root
            else:
                logger.warning("Skipping %s: not a file or directory", root)

    def scan(self, roots: Iterable[str | os.PathLike[str]], *, progress: bool = True) -> int:
        """Index everything below roots; returns how many files were indexed by this call."""
        before = self.indexed
        for path in tqdm(self.candidates(roots), desc="Indexing", unit="file", disable=not progress):
            self.process(path)
        return self.indexed - before
