__version__ = "0.2.0"

from .config import RunConfig, SortOrder, build_config
from .digest import STRATEGIES, DigestStrategy, from_hex, get_strategy, to_hex
from .errors import ConfigError, DupesError, IndexSetupError, RecordError
from .indexer import Indexer
from .report import DuplicateReporter
from .store import DigestIndex, DuplicateGroup, DuplicateMember, FileRecord
from .walker import walk

__all__ = [
    "__version__",
    "RunConfig",
    "SortOrder",
    "build_config",
    "STRATEGIES",
    "DigestStrategy",
    "get_strategy",
    "to_hex",
    "from_hex",
    "DupesError",
    "ConfigError",
    "IndexSetupError",
    "RecordError",
    "Indexer",
    "DuplicateReporter",
    "DigestIndex",
    "DuplicateGroup",
    "DuplicateMember",
    "FileRecord",
    "walk",
]
