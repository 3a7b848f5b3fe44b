"""Models for cache targets, cleaning outcomes and run reports."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from pathlib import Path
from typing import Callable, List, Optional, Tuple

EntryFilter = Callable[[str], bool]


@dataclass(frozen=True)
class CacheTarget:
    """Display metadata for one tool whose cache can be cleaned."""

    id: str
    display_name: str
    description: str


@dataclass(frozen=True)
class Availability:
    """Whether a target's precondition currently holds."""

    available: bool
    reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "Availability":
        return cls(available=True)

    @classmethod
    def unavailable(cls, reason: str) -> "Availability":
        return cls(available=False, reason=reason)

    def __bool__(self) -> bool:
        return self.available


@dataclass(frozen=True)
class NameContains:
    """Matches entry names containing a token (case-sensitive)."""

    token: str

    def __call__(self, name: str) -> bool:
        return self.token in name


@dataclass(frozen=True)
class NameExcludes:
    """Matches every entry name except the listed ones."""

    names: Tuple[str, ...]

    def __init__(self, *names: str) -> None:
        object.__setattr__(self, "names", tuple(names))

    def __call__(self, name: str) -> bool:
        return name not in self.names


@dataclass(frozen=True)
class HasExtension:
    """Matches entry names with the given extension, e.g. ``.pyc``."""

    extension: str

    def __call__(self, name: str) -> bool:
        return Path(name).suffix == self.extension


@dataclass(frozen=True)
class ResolvedLocation:
    """An existing path produced by the resolver for one clean action.

    When ``whole`` is set the path itself is deleted, otherwise only its
    direct children accepted by ``entry_filter`` are.
    """

    path: Path
    entry_filter: Optional[EntryFilter] = None
    whole: bool = False

    def accepts(self, name: str) -> bool:
        """Indicates if a child entry name passes this location's filter."""
        return self.entry_filter is None or self.entry_filter(name)


@dataclass
class DeleteStats:
    """Tally of what a strategy removed, or would remove on a dry run."""

    entries_removed: int = 0
    bytes_freed: int = 0
    suppressed_errors: List[str] = field(default_factory=list)

    def record_removed(self, size: int) -> None:
        self.entries_removed += 1
        self.bytes_freed += size

    def record_suppressed(self, path: Path, error: Exception) -> None:
        self.suppressed_errors.append(f"{path}: {error}")


class RunStatus(Enum):
    """Enumeration for per-target run status."""

    SUCCESS = auto()
    SKIPPED = auto()
    FAILED = auto()


@dataclass(frozen=True)
class RunOutcome:
    """Data class to hold the result of running one target's strategy."""

    target: CacheTarget
    status: RunStatus
    reason: Optional[str] = None
    entries_removed: int = 0
    bytes_freed: int = 0
    suppressed_errors: Tuple[str, ...] = ()
    duration_seconds: float = 0.0

    @property
    def target_id(self) -> str:
        return self.target.id

    @property
    def success(self) -> bool:
        """Indicates if the strategy ran to completion."""
        return self.status == RunStatus.SUCCESS

    @property
    def skipped(self) -> bool:
        """Indicates if the strategy was not attempted."""
        return self.status == RunStatus.SKIPPED

    @property
    def failed(self) -> bool:
        """Indicates if the strategy failed."""
        return self.status == RunStatus.FAILED

    @classmethod
    def from_stats(
        cls, target: CacheTarget, stats: DeleteStats, duration_seconds: float = 0.0
    ) -> "RunOutcome":
        """Creates a successful RunOutcome from DeleteStats."""
        return cls(
            target=target,
            status=RunStatus.SUCCESS,
            entries_removed=stats.entries_removed,
            bytes_freed=stats.bytes_freed,
            suppressed_errors=tuple(stats.suppressed_errors),
            duration_seconds=duration_seconds,
        )


@dataclass(frozen=True)
class TargetStatus:
    """A target paired with its freshly checked availability."""

    target: CacheTarget
    availability: Availability


@dataclass
class ExecutionReport:
    """Ordered outcomes of one batch run, one per attempted target."""

    outcomes: List[RunOutcome] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None
    dry_run: bool = False
    cancelled: bool = False

    def record(self, outcome: RunOutcome) -> None:
        self.outcomes.append(outcome)

    def finish(self) -> None:
        self.finished_at = datetime.now()

    def __len__(self) -> int:
        return len(self.outcomes)

    def __iter__(self):
        return iter(self.outcomes)

    @property
    def success(self) -> bool:
        """Indicates if no attempted target failed."""
        return not self.failures

    @property
    def failures(self) -> List[RunOutcome]:
        return [o for o in self.outcomes if o.failed]

    @property
    def skipped(self) -> List[RunOutcome]:
        return [o for o in self.outcomes if o.skipped]

    @property
    def entries_removed(self) -> int:
        return sum(o.entries_removed for o in self.outcomes)

    @property
    def bytes_freed(self) -> int:
        return sum(o.bytes_freed for o in self.outcomes)

    def get(self, target_id: str) -> Optional[RunOutcome]:
        """Returns the outcome for a target id, if it was attempted."""
        return next((o for o in self.outcomes if o.target.id == target_id), None)

    def error_message(self) -> Optional[str]:
        """Joins ``<display name>: <reason>`` lines for failed then skipped targets.

        Returns:
            Optional[str]: The message, or None when every target succeeded.
        """
        lines = [
            f"{o.target.display_name}: {o.reason}"
            for o in self.failures + self.skipped
        ]
        return "\n".join(lines) if lines else None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "dry_run": self.dry_run,
            "cancelled": self.cancelled,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "entries_removed": self.entries_removed,
            "bytes_freed": self.bytes_freed,
            "outcomes": [
                {
                    "id": o.target.id,
                    "name": o.target.display_name,
                    "status": o.status.name.lower(),
                    "reason": o.reason,
                    "entries_removed": o.entries_removed,
                    "bytes_freed": o.bytes_freed,
                    "suppressed_errors": list(o.suppressed_errors),
                    "duration_seconds": round(o.duration_seconds, 3),
                }
                for o in self.outcomes
            ],
        }
