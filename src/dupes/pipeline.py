from __future__ import annotations

import contextlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from tqdm.contrib.logging import logging_redirect_tqdm

from .config import RunConfig
from .digest import get_strategy
from .errors import DupesError
from .indexer import Indexer
from .report import DuplicateReporter
from .store import DigestIndex, DuplicateGroup


@dataclass
class RunSummary:
    scanned: bool = False
    indexed: int = 0
    groups: Optional[List[DuplicateGroup]] = None


def _logging_context(progress: bool):
    return logging_redirect_tqdm() if progress else contextlib.nullcontext()


def run(
    config: RunConfig,
    paths: Sequence[str | os.PathLike[str]] = (),
    *,
    echo: Optional[Callable[[str], None]] = None,
    as_json: bool = False,
    report_file: Optional[Path] = None,
) -> RunSummary:
    """
    One invocation: index paths (if any), then list duplicates when config.show is set.

    The index is closed on every exit path, including KeyboardInterrupt.
    """
    out = echo or print
    strategy = get_strategy(config.algorithm)
    summary = RunSummary()

    with DigestIndex.open(config.db_path) as index:
        if paths:
            indexer = Indexer(
                index,
                strategy,
                replace=config.replace,
                include_empty=config.include_empty,
                echo=echo,
            )
            with _logging_context(config.progress):
                summary.indexed = indexer.scan(paths, progress=config.progress)
            summary.scanned = True
            out(f"Indexed {summary.indexed} files")

        if config.show:
            lines: List[str] = []

            def emit(line: str) -> None:
                lines.append(line)
                out(line)

            reporter = DuplicateReporter(index, echo=emit)
            summary.groups = reporter.report(config.sort_by, as_json=as_json)
            if report_file is not None:
                try:
                    report_file.parent.mkdir(parents=True, exist_ok=True)
                    report_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
                except OSError as exc:
                    raise DupesError(f"Failed to write report {report_file}: {exc}") from exc
                out(f"Report written to {report_file}")

    return summary
