from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .digest import DEFAULT_ALGORITHM, STRATEGIES
from .errors import ConfigError


DEFAULT_DB_FILE = "dupes.db"

ENV_DB = "DUPES_DB"
ENV_ALGORITHM = "DUPES_ALGORITHM"
ENV_SORT = "DUPES_SORT"


class SortOrder(str, Enum):
    SIZE = "size"
    COUNT = "count"

    @classmethod
    def parse(cls, value: "str | SortOrder") -> "SortOrder":
        if isinstance(value, SortOrder):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise ConfigError(f"Unknown sort order: {value} (expected one of {choices})") from None


@dataclass(frozen=True)
class RunConfig:
    algorithm: str = DEFAULT_ALGORITHM
    replace: bool = False
    include_empty: bool = False
    show: bool = False
    sort_by: SortOrder = SortOrder.COUNT
    db_path: Path = Path(DEFAULT_DB_FILE)
    progress: bool = True

    def __post_init__(self) -> None:
        if self.algorithm not in STRATEGIES:
            raise ConfigError(
                f"Unsupported digest algorithm: {self.algorithm} (expected one of {', '.join(STRATEGIES)})"
            )
        if not isinstance(self.sort_by, SortOrder):
            raise ConfigError(f"Unknown sort order: {self.sort_by}")


def load_env(env_file: Optional[Path] = None) -> Optional[Path]:
    """
    Load a .env file without overriding variables already set.

    An explicit env_file must exist; otherwise ./.env is used when present.
    Returns the file that was loaded, if any.
    """
    if env_file is not None:
        if not env_file.exists():
            raise ConfigError(f"Env file not found: {env_file}")
        load_dotenv(dotenv_path=env_file, override=False)
        return env_file
    default = Path(".env")
    if default.exists():
        load_dotenv(dotenv_path=default, override=False)
        return default
    return None


def build_config(
    *,
    algorithm: Optional[str] = None,
    replace: bool = False,
    include_empty: bool = False,
    show: bool = False,
    sort_by: Optional[str] = None,
    db_path: Optional[str] = None,
    progress: bool = True,
    environ: Optional[Mapping[str, str]] = None,
) -> RunConfig:
    """Merge explicit settings with DUPES_* environment defaults."""
    env = os.environ if environ is None else environ

    algo = (algorithm or env.get(ENV_ALGORITHM) or DEFAULT_ALGORITHM).strip().lower()
    sort_value = sort_by or env.get(ENV_SORT) or SortOrder.COUNT.value
    db = db_path or env.get(ENV_DB) or DEFAULT_DB_FILE

    return RunConfig(
        algorithm=algo,
        replace=replace,
        include_empty=include_empty,
        # an explicit sort order implies listing
        show=show or sort_by is not None,
        sort_by=SortOrder.parse(sort_value),
        db_path=Path(db).expanduser(),
        progress=progress,
    )
