"""Precondition checks deciding whether a target should be cleaned."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Sequence, Union

import psutil

from .models import Availability
from dev_cache_cleaner.utils.logging import get_logger

if TYPE_CHECKING:
    from dev_cache_cleaner.plugins.base import CleanStrategy

logger = get_logger(__name__)

ProcessLister = Callable[[], Iterable[str]]


def running_process_names() -> Iterable[str]:
    """Yields the names of the processes currently running."""
    for process in psutil.process_iter(["name"]):
        name = process.info.get("name")
        if name:
            yield name


class AvailabilityCheck(ABC):
    """Abstract base class for a single precondition."""

    @abstractmethod
    def check(self) -> Availability:
        """Evaluates the precondition now.

        Returns:
            Availability: Available, or Unavailable with a reason.
        """
        ...


class AlwaysAvailable(AvailabilityCheck):
    """Precondition for caches under the user's own directories."""

    def check(self) -> Availability:
        return Availability.ok()

    def __repr__(self) -> str:
        return "AlwaysAvailable()"


class PathExists(AvailabilityCheck):
    """Available when an install marker, such as an app bundle, exists."""

    def __init__(self, path: Union[str, Path], label: str) -> None:
        self.path = Path(path)
        self.label = label

    def check(self) -> Availability:
        if self.path.exists():
            return Availability.ok()
        return Availability.unavailable(f"{self.label} is not installed")


class FirstExistingPath(AvailabilityCheck):
    """Available when any candidate install root exists, tried in order."""

    def __init__(self, candidates: Sequence[Union[str, Path]], label: str) -> None:
        self.candidates = tuple(Path(c) for c in candidates)
        self.label = label

    def find(self) -> Optional[Path]:
        """Returns the first existing candidate, or None."""
        for candidate in self.candidates:
            if candidate.exists():
                return candidate
        return None

    def check(self) -> Availability:
        if self.find() is not None:
            return Availability.ok()
        return Availability.unavailable(f"{self.label} is not installed")


class ProcessRunning(AvailabilityCheck):
    """Available when a process with one of the given names is running."""

    def __init__(
        self,
        names: Iterable[str],
        label: str,
        process_names: Optional[ProcessLister] = None,
    ) -> None:
        self.names = {name.lower() for name in names}
        self.label = label
        self.process_names = process_names or running_process_names

    def check(self) -> Availability:
        for name in self.process_names():
            if name.lower() in self.names:
                return Availability.ok()
        return Availability.unavailable(f"{self.label} is not running")


class AllOf(AvailabilityCheck):
    """Runs checks in order, stopping at the first that is unavailable."""

    def __init__(self, *checks: AvailabilityCheck) -> None:
        self.checks = checks

    def check(self) -> Availability:
        for check in self.checks:
            availability = check.check()
            if not availability.available:
                return availability
        return Availability.ok()


class AvailabilityChecker:
    """Evaluates strategy preconditions without ever raising."""

    def check_available(self, strategy: "CleanStrategy") -> Availability:
        """Checks whether a strategy's clean action should be attempted.

        Args:
            strategy (CleanStrategy): The strategy to check.

        Returns:
            Availability: The fresh result; errors become Unavailable.
        """
        try:
            availability = strategy.availability.check()
        except (psutil.Error, OSError) as e:
            logger.warning(
                f"Availability check for '{strategy.target.id}' failed: {e}"
            )
            return Availability.unavailable(f"availability check failed: {e}")
        except Exception as e:
            logger.error(
                f"Unexpected error checking availability of '{strategy.target.id}': {e}"
            )
            return Availability.unavailable(f"availability check failed: {e}")

        if not availability.available:
            logger.debug(f"{strategy.target.display_name} unavailable: {availability.reason}")
        return availability
