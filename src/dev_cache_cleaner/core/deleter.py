"""Handles deleting cache entries with safety checks and options."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import DeletionError, EnumerationError
from .models import DeleteStats, ResolvedLocation
from .validators import PathValidator
from dev_cache_cleaner.utils.filesystem import FileSystemAdapter, RealFileSystem
from dev_cache_cleaner.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeleteOptions:
    """Configuration options for deleting cache entries."""

    best_effort: bool = False  # log per-entry failures instead of raising
    dry_run: bool = False  # count and measure without removing
    measure_size: bool = True  # sum entry sizes into bytes_freed
    home: Optional[Path] = None  # never deleted, whatever a spec resolves to


class EntryDeleter:
    """Deletes the entries of resolved locations under a declared policy."""

    def __init__(
        self,
        options: Optional[DeleteOptions] = None,
        fs: Optional[FileSystemAdapter] = None,
    ) -> None:
        """Initialises the EntryDeleter with given options.

        Args:
            options (Optional[DeleteOptions]): Configuration options for deletion.
            fs (Optional[FileSystemAdapter]): The filesystem adapter to use. Defaults to RealFileSystem.
        """
        self.options = options or DeleteOptions()
        self.fs = fs or RealFileSystem()

    def clean_location(
        self, location: ResolvedLocation, stats: Optional[DeleteStats] = None
    ) -> DeleteStats:
        """Deletes a whole location, or the children of it that pass its filter.

        Args:
            location (ResolvedLocation): The location to clean.
            stats (Optional[DeleteStats]): Tally to add to. A new one if None.

        Returns:
            DeleteStats: The updated tally.

        Raises:
            EnumerationError: If the location is unsafe or its children cannot be listed.
            DeletionError: If an entry cannot be removed and the policy is strict.
        """
        stats = stats if stats is not None else DeleteStats()

        try:
            PathValidator.validate_deletion_target(
                location.path, self.options.home, follow_symlinks=not location.whole
            )
        except ValueError as e:
            raise EnumerationError(location.path, e) from e

        if location.whole:
            self._delete_entry(location.path, stats)
            return stats

        try:
            children = self.fs.list_dir(location.path)
        except FileNotFoundError:
            logger.debug(f"Location vanished before cleaning: {location.path}")
            return stats
        except OSError as e:
            logger.error(f"Cannot list {location.path}: {e}")
            raise EnumerationError(location.path, e) from e

        for child in sorted(children):
            if not location.accepts(child.name):
                logger.debug(f"Keeping {child} (filtered)")
                continue
            self._delete_entry(child, stats)

        return stats

    def _delete_entry(self, path: Path, stats: DeleteStats) -> None:
        """Removes one entry and records it, honouring the best-effort policy.

        Args:
            path (Path): The entry to remove.
            stats (DeleteStats): Tally to update.

        Raises:
            DeletionError: If removal fails and the policy is strict.
        """
        size = self._measure(path)

        if self.options.dry_run:
            logger.info(f"[Dry Run] Would remove {path}")
            stats.record_removed(size)
            return

        try:
            self.fs.remove(path)

        except FileNotFoundError:
            logger.debug(f"Already absent: {path}")
            return

        except OSError as e:
            if self.options.best_effort:
                logger.warning(f"Could not remove {path}: {e}")
                stats.record_suppressed(path, e)
                return
            logger.error(f"Failed to remove {path}: {e}")
            raise DeletionError(path, e) from e

        logger.debug(f"Removed {path}")
        stats.record_removed(size)

    def _measure(self, path: Path) -> int:
        if not self.options.measure_size:
            return 0
        try:
            return self.fs.get_size(path)
        except OSError:
            return 0
