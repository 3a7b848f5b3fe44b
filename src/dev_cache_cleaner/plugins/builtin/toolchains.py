"""Build tool and language runtime cache strategies."""

from typing import Iterable

from dev_cache_cleaner.core.models import CacheTarget
from dev_cache_cleaner.core.resolver import (
    ExtensionScan,
    Fixed,
    LocationSpec,
    MultiFixed,
)
from ..base import CleanStrategy


class GradleStrategy(CleanStrategy):
    """Cleans the Gradle dependency and build cache."""

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="gradle",
            display_name="Gradle",
            description="Clean Gradle cache",
        )

    def location_specs(self) -> Iterable[LocationSpec]:
        return (Fixed(".gradle/caches"),)


class PythonStrategy(CleanStrategy):
    """Cleans pip caches, then every ``.pyc`` file under home.

    Both steps are best-effort: files in read-only virtualenvs or owned by
    another user are logged and skipped.
    """

    best_effort = True

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="python",
            display_name="Python",
            description="Clean Python pip and pyc caches",
        )

    def location_specs(self) -> Iterable[LocationSpec]:
        return (
            MultiFixed.of("Library/Caches/pip", ".cache/pip"),
            ExtensionScan(".pyc"),
        )
