"""Errors raised by the cache discovery and deletion engine."""

from pathlib import Path
from typing import Optional


class CacheCleanerError(Exception):
    """Base class for all cache cleaner errors."""


class PreconditionUnmet(CacheCleanerError):
    """A tool is not installed, not running, or its install root is missing.

    Reported as a skipped target rather than a failure.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class EnumerationError(CacheCleanerError):
    """A cache location exists but its contents could not be listed."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Cannot read {path}{detail}")


class DeletionError(CacheCleanerError):
    """An entry could not be removed under a strict deletion policy."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Failed to remove {path}{detail}")


class UnknownTargetError(CacheCleanerError, KeyError):
    """A caller asked for a target id the registry does not know."""

    def __init__(self, target_id: str) -> None:
        super().__init__(target_id)
        self.target_id = target_id

    def __str__(self) -> str:
        return f"Unknown cache target: '{self.target_id}'"
