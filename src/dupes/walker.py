from __future__ import annotations

import logging
import os
from typing import Callable, Iterator, List, Optional

from .probe import describe_mode


logger = logging.getLogger(__name__)

# Longest path (in bytes) accepted for a single entry, matches Linux PATH_MAX
MAX_PATH_LENGTH = 4096

Visitor = Callable[[str], None]


def _open_dir(path: str) -> Optional[Iterator[os.DirEntry]]:
    try:
        return os.scandir(path)
    except OSError as exc:
        logger.debug("Cannot open directory %s: %s", path, exc)
        return None


def _too_long(path: str, limit: int) -> bool:
    return len(os.fsencode(path)) > limit


def walk(
    root: str | os.PathLike[str],
    visitor: Optional[Visitor] = None,
    *,
    max_path_length: int = MAX_PATH_LENGTH,
) -> Iterator[str]:
    """
    Yield every regular file below root, depth-first and pre-order.

    Entries come in the order the filesystem lists them. A sub-directory is
    entered as soon as it is listed, before its later siblings. Symlinks and
    other special entries are reported and skipped; unreadable directories
    are skipped without failing the walk.
    """
    top = _open_dir(os.fspath(root))
    if top is None:
        return

    stack: List[Iterator[os.DirEntry]] = [top]
    try:
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop().close()
                continue

            path = entry.path
            if _too_long(path, max_path_length):
                logger.warning("Skipping entry %s: path longer than %d bytes", path, max_path_length)
                continue

            try:
                if entry.is_dir(follow_symlinks=False):
                    child = _open_dir(path)
                    if child is not None:
                        stack.append(child)
                    continue
                if entry.is_file(follow_symlinks=False):
                    if visitor is not None:
                        visitor(path)
                    yield path
                    continue
                kind = describe_mode(entry.stat(follow_symlinks=False).st_mode)
            except OSError as exc:
                logger.warning("Skipping entry %s: %s", path, exc)
                continue
            logger.info("Skipping entry %s of type %s", path, kind)
    finally:
        for handle in stack:
            handle.close()
