"""Base classes for clean strategies and run reporters."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar, Iterable, Optional

from dev_cache_cleaner.core.availability import AlwaysAvailable, AvailabilityCheck
from dev_cache_cleaner.core.deleter import EntryDeleter
from dev_cache_cleaner.core.models import (
    CacheTarget,
    DeleteStats,
    ExecutionReport,
    RunOutcome,
)
from dev_cache_cleaner.core.resolver import LocationSpec, PathResolver


class CleanStrategy(ABC):
    """Abstract base class for the cleaning procedure of one tool.

    A strategy is created once, never mutated, and combines a precondition,
    the cache locations to resolve, and a deletion policy.
    """

    best_effort: ClassVar[bool] = False

    def __init__(self, home: Optional[Path] = None) -> None:
        """Initialises the strategy.

        Args:
            home (Optional[Path]): Home directory cache paths are relative to. Defaults to the current user's.
        """
        self.home = Path(home) if home is not None else Path.home()

    @property
    @abstractmethod
    def target(self) -> CacheTarget:
        """Returns the target metadata for the strategy."""
        ...

    @property
    def availability(self) -> AvailabilityCheck:
        """Returns the precondition evaluated before each clean."""
        return AlwaysAvailable()

    def base_path(self) -> Path:
        """Returns the directory that location specs are resolved against."""
        return self.home

    @abstractmethod
    def location_specs(self) -> Iterable[LocationSpec]:
        """Returns the cache locations to clean, in deletion order."""
        ...

    def clean(
        self, resolver: PathResolver, deleter: EntryDeleter, base: Optional[Path] = None
    ) -> DeleteStats:
        """Resolves every location and deletes its entries in order.

        Args:
            resolver (PathResolver): Resolver used to find existing locations.
            deleter (EntryDeleter): Deleter configured with this strategy's policy.
            base (Optional[Path]): Already resolved base path. Looked up if None.

        Returns:
            DeleteStats: What was removed.

        Raises:
            PreconditionUnmet: If the strategy finds it cannot run after all.
            EnumerationError: If a location cannot be listed.
            DeletionError: If an entry cannot be removed under a strict policy.
        """
        stats = DeleteStats()
        if base is None:
            base = self.base_path()

        for spec in self.location_specs():
            for location in resolver.resolve(base, spec):
                deleter.clean_location(location, stats)

        return stats

    def __repr__(self) -> str:
        return f"{type(self).__name__}(home={self.home!s})"


class ReporterPlugin:
    """Base class for run progress reporters. Every hook is optional."""

    def on_start(self, total_targets: int) -> None:
        """Called when a run starts.

        Args:
            total_targets (int): The number of selected targets.
        """
        pass

    def on_target_start(self, target: CacheTarget) -> None:
        """Called before a target's availability is checked.

        Args:
            target (CacheTarget): The target about to run.
        """
        pass

    def on_target_complete(self, outcome: RunOutcome) -> None:
        """Called once a target has an outcome.

        Args:
            outcome (RunOutcome): The target's outcome.
        """
        pass

    def on_complete(self, report: ExecutionReport) -> None:
        """Called when the run is complete, including when it was cancelled.

        Args:
            report (ExecutionReport): The full report.
        """
        pass
