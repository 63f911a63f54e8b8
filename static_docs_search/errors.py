from __future__ import annotations

from pathlib import Path


class SearchEngineError(Exception):
    """Base class for every error raised by the search engine."""


class ContentReadError(SearchEngineError):
    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")


class IndexStoreError(SearchEngineError):
    """Persisted index could not be loaded; callers rebuild."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        super().__init__(f"{message}: {self.path}")


class IndexNotFound(IndexStoreError):
    pass


class IndexParseError(IndexStoreError):
    pass


class IndexVersionMismatch(IndexParseError):
    pass


class EmptyCorpusWarning(UserWarning):
    """Content root produced no chunks. Logged, never raised."""
