from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List

from . import __version__
from .config import DEFAULT_DB_FILE, ENV_ALGORITHM, ENV_DB, SortOrder, build_config, load_env
from .errors import DupesError
from .pipeline import run


PROG = "dupes"


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog=PROG,
        description="Index files by content digest and list the ones that are duplicates",
    )
    p.add_argument("paths", nargs="*", help="Files or directories to index")

    algo = p.add_mutually_exclusive_group()
    algo.add_argument("--md5", dest="algorithm", action="store_const", const="md5",
                      help=f"Use MD5 digests (default, or ${ENV_ALGORITHM})")
    algo.add_argument("--sha1", dest="algorithm", action="store_const", const="sha1", help="Use SHA-1 digests")

    p.add_argument("--db", default=None, help=f"Index file (default: ${ENV_DB} or ./{DEFAULT_DB_FILE})")
    p.add_argument("-r", "--replace", action="store_true", help="Recompute and replace existing digests")
    p.add_argument("-z", "--zero", action="store_true", help="Also index zero-size files")
    p.add_argument("-s", "--show", action="store_true", help="Show digests with duplicates")
    p.add_argument(
        "--sort",
        default=None,
        choices=[s.value for s in SortOrder],
        help="Order duplicate groups by total size or by count (implies --show)",
    )
    p.add_argument("--json", action="store_true", help="Output duplicate groups as JSON (implies --show)")
    p.add_argument("--report", default=None, help="Also write the duplicate listing to this file (implies --show)")
    p.add_argument("--env", default=None, help="Path to .env file to load (DUPES_DB, DUPES_ALGORITHM, DUPES_SORT)")
    p.add_argument("--no-progress", action="store_true", help="Do not show a progress bar while indexing")

    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Show debug diagnostics")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only show warnings and errors")

    p.add_argument("-V", "--version", action="version", version=f"%(prog)s version {__version__}")
    return p


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def main(argv: List[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    show = bool(args.show or args.json or args.report)
    if not args.paths and not show and args.sort is None:
        parser.print_help()
        return 1

    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        load_env(Path(args.env) if args.env else None)
        config = build_config(
            algorithm=args.algorithm,
            replace=bool(args.replace),
            include_empty=bool(args.zero),
            show=show,
            sort_by=args.sort,
            db_path=args.db,
            progress=not bool(args.no_progress),
        )
        run(
            config,
            args.paths,
            as_json=bool(args.json),
            report_file=Path(args.report) if args.report else None,
        )
    except DupesError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
