from __future__ import annotations


class DupesError(RuntimeError):
    pass


class ConfigError(DupesError):
    """Invalid run configuration (unknown sort order, digest algorithm, ...)."""


class IndexSetupError(DupesError):
    """The digest index could not be opened, created or prepared."""


class RecordError(DupesError):
    """A single index record could not be looked up or written."""

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path
