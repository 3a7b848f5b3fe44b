"""Registry of clean strategies and the entry point for batch runs."""

import threading
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .base import CleanStrategy, ReporterPlugin
from dev_cache_cleaner.core.availability import AvailabilityChecker
from dev_cache_cleaner.core.deleter import DeleteOptions, EntryDeleter
from dev_cache_cleaner.core.errors import (
    CacheCleanerError,
    PreconditionUnmet,
    UnknownTargetError,
)
from dev_cache_cleaner.core.models import (
    Availability,
    CacheTarget,
    ExecutionReport,
    RunOutcome,
    RunStatus,
    TargetStatus,
)
from dev_cache_cleaner.core.resolver import PathResolver
from dev_cache_cleaner.utils.filesystem import FileSystemAdapter, RealFileSystem
from dev_cache_cleaner.utils.logging import OperationLogger, get_logger

logger = get_logger(__name__)


class CleanerRegistry:
    """Ordered registry of clean strategies keyed by target id."""

    def __init__(
        self,
        fs: Optional[FileSystemAdapter] = None,
        checker: Optional[AvailabilityChecker] = None,
    ) -> None:
        """Initialises an empty registry.

        Args:
            fs (Optional[FileSystemAdapter]): Filesystem used for resolving and deleting. Defaults to RealFileSystem.
            checker (Optional[AvailabilityChecker]): Precondition evaluator. Defaults to AvailabilityChecker.
        """
        self.fs = fs or RealFileSystem()
        self.resolver = PathResolver(self.fs)
        self.checker = checker or AvailabilityChecker()
        self._strategies: Dict[str, CleanStrategy] = {}

    def register(self, strategy: CleanStrategy) -> None:
        """Registers a strategy; registration order is run order.

        Args:
            strategy (CleanStrategy): The strategy instance to register.
        """
        target_id = strategy.target.id

        if target_id in self._strategies:
            logger.warning(f"Strategy '{target_id}' already registered - replacing.")

        self._strategies[target_id] = strategy
        logger.debug(f"Registered strategy: {target_id}")

    def unregister(self, target_id: str) -> None:
        """Unregisters a strategy by target id.

        Args:
            target_id (str): The id of the strategy to remove.

        Raises:
            UnknownTargetError: If no strategy has that id.
        """
        if target_id not in self._strategies:
            raise UnknownTargetError(target_id)

        del self._strategies[target_id]
        logger.debug(f"Unregistered strategy: {target_id}")

    def get(self, target_id: str) -> CleanStrategy:
        """Retrieves a strategy by target id.

        Raises:
            UnknownTargetError: If no strategy has that id.
        """
        try:
            return self._strategies[target_id]
        except KeyError:
            raise UnknownTargetError(target_id) from None

    def __contains__(self, target_id: str) -> bool:
        return target_id in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

    def list_targets(self) -> List[CacheTarget]:
        """Returns the registered targets in registry order."""
        return [strategy.target for strategy in self._strategies.values()]

    def check_available(self, target_id: str) -> Availability:
        """Runs a fresh availability check for one target.

        Args:
            target_id (str): The target to check.

        Returns:
            Availability: The current availability.
        """
        return self.checker.check_available(self.get(target_id))

    def refresh(self) -> List[TargetStatus]:
        """Re-checks the availability of every target without deleting anything.

        Returns:
            List[TargetStatus]: One status per target, in registry order.
        """
        return [
            TargetStatus(strategy.target, self.checker.check_available(strategy))
            for strategy in self._strategies.values()
        ]

    def run(
        self,
        selected: Iterable[str],
        *,
        dry_run: bool = False,
        cancel_event: Optional[threading.Event] = None,
        reporter: Optional[ReporterPlugin] = None,
    ) -> ExecutionReport:
        """Cleans the selected targets sequentially in registry order.

        Args:
            selected (Iterable[str]): Target ids to clean.
            dry_run (bool, optional): If True, reports what would be removed without removing it.
            cancel_event (Optional[threading.Event]): When set, no further targets are started.
            reporter (Optional[ReporterPlugin]): Receives progress hooks.

        Returns:
            ExecutionReport: One outcome per attempted target.

        Raises:
            UnknownTargetError: If any selected id is not registered. Nothing is cleaned.
            TypeError: If selected is a single string rather than a collection of ids.
            KeyboardInterrupt: If the run is interrupted by the user.
        """
        if isinstance(selected, str):
            raise TypeError(
                f"selected must be a collection of target ids, not a string: {selected!r}"
            )

        selected_ids = set(selected)
        for target_id in sorted(selected_ids):
            if target_id not in self._strategies:
                raise UnknownTargetError(target_id)

        report = ExecutionReport(dry_run=dry_run)

        if not selected_ids:
            report.finish()
            return report

        strategies = [
            s for s in self._strategies.values() if s.target.id in selected_ids
        ]
        reporter = reporter or ReporterPlugin()

        logger.info(
            f"Cleaning {len(strategies)} target(s) {'(dry run)' if dry_run else ''}"
        )
        reporter.on_start(total_targets=len(strategies))

        try:
            for strategy in strategies:
                if cancel_event is not None and cancel_event.is_set():
                    logger.warning("Cache cleaning cancelled - remaining targets not started.")
                    report.cancelled = True
                    break

                reporter.on_target_start(strategy.target)
                outcome = self._run_strategy(strategy, dry_run)
                report.record(outcome)
                reporter.on_target_complete(outcome)

        except KeyboardInterrupt:
            logger.warning("Cache cleaning interrupted by user.")
            report.cancelled = True
            raise

        finally:
            report.finish()
            reporter.on_complete(report)

            logger.info(
                f"Cleaning complete: {report.entries_removed} entries removed, "
                f"{len(report.skipped)} skipped, {len(report.failures)} failed"
            )

        return report

    def _run_strategy(self, strategy: CleanStrategy, dry_run: bool) -> RunOutcome:
        """Checks one strategy's precondition and runs it, capturing any failure.

        Args:
            strategy (CleanStrategy): The strategy to run.
            dry_run (bool): If True, nothing is removed.

        Returns:
            RunOutcome: Success, Skipped or Failed.
        """
        target = strategy.target

        availability = self.checker.check_available(strategy)
        if not availability.available:
            logger.info(f"Skipped {target.display_name}: {availability.reason}")
            return RunOutcome(
                target=target, status=RunStatus.SKIPPED, reason=availability.reason
            )

        deleter = EntryDeleter(
            DeleteOptions(
                best_effort=strategy.best_effort, dry_run=dry_run, home=strategy.home
            ),
            self.fs,
        )
        try:
            base = strategy.base_path()
        except PreconditionUnmet as e:
            logger.info(f"Skipped {target.display_name}: {e.reason}")
            return RunOutcome(target=target, status=RunStatus.SKIPPED, reason=e.reason)

        operation = OperationLogger(f"clean {target.id}", logger)

        try:
            with operation:
                stats = strategy.clean(self.resolver, deleter, base)

        except PreconditionUnmet as e:
            return RunOutcome(
                target=target,
                status=RunStatus.SKIPPED,
                reason=e.reason,
                duration_seconds=operation.duration,
            )

        except CacheCleanerError as e:
            return RunOutcome(
                target=target,
                status=RunStatus.FAILED,
                reason=str(e),
                duration_seconds=operation.duration,
            )

        except Exception as e:
            logger.exception(f"Unexpected error cleaning {target.display_name}")
            return RunOutcome(
                target=target,
                status=RunStatus.FAILED,
                reason=str(e) or type(e).__name__,
                duration_seconds=operation.duration,
            )

        return RunOutcome.from_stats(target, stats, operation.duration)

    def describe(self) -> Dict[str, Dict]:
        """Describes all registered strategies by id.

        Returns:
            Dict[str, Dict]: Display metadata and policy per target.
        """
        return {
            target_id: {
                "name": strategy.target.display_name,
                "description": strategy.target.description,
                "best_effort": strategy.best_effort,
                "type": type(strategy).__name__,
            }
            for target_id, strategy in self._strategies.items()
        }

    @classmethod
    def create_default(
        cls, home: Optional[Path] = None, fs: Optional[FileSystemAdapter] = None
    ) -> "CleanerRegistry":
        """Creates a registry holding every built-in strategy.

        Args:
            home (Optional[Path]): Home directory for all strategies. Defaults to the current user's.
            fs (Optional[FileSystemAdapter]): Filesystem adapter for the registry.

        Returns:
            CleanerRegistry: A new registry in the built-in order.
        """
        from .builtin import default_strategies

        registry = cls(fs=fs)
        for strategy in default_strategies(home):
            registry.register(strategy)

        return registry
