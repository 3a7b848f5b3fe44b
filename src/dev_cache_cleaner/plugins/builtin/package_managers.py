"""Package manager cache strategies."""

from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from dev_cache_cleaner.core.availability import AvailabilityCheck, FirstExistingPath
from dev_cache_cleaner.core.errors import PreconditionUnmet
from dev_cache_cleaner.core.models import CacheTarget, NameContains
from dev_cache_cleaner.core.resolver import Fixed, LocationSpec, MultiFixed
from ..base import CleanStrategy

# Apple Silicon first, then Intel
HOMEBREW_ROOTS = (Path("/opt/homebrew"), Path("/usr/local/Homebrew"))


class HomebrewStrategy(CleanStrategy):
    """Cleans Homebrew's download and bottle caches under its install root."""

    def __init__(
        self,
        home: Optional[Path] = None,
        roots: Optional[Sequence[Union[str, Path]]] = None,
    ) -> None:
        super().__init__(home)
        self._root_check = FirstExistingPath(roots or HOMEBREW_ROOTS, "Homebrew")

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="homebrew",
            display_name="Homebrew",
            description="Clean Homebrew cache",
        )

    @property
    def availability(self) -> AvailabilityCheck:
        return self._root_check

    def base_path(self) -> Path:
        root = self._root_check.find()
        if root is None:
            raise PreconditionUnmet("Homebrew is not installed")
        return root

    def location_specs(self) -> Iterable[LocationSpec]:
        return (MultiFixed.of("Library/Homebrew/Cache", "Library/Caches/Homebrew"),)


class NpmStrategy(CleanStrategy):
    """Cleans the npm content-addressable cache."""

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(id="npm", display_name="NPM", description="Clean NPM cache")

    def location_specs(self) -> Iterable[LocationSpec]:
        return (Fixed(".npm/_cacache"),)


class CocoaPodsStrategy(CleanStrategy):
    best_effort = True

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="cocoapods",
            display_name="CocoaPods",
            description="Clean CocoaPods cache",
        )

    def location_specs(self) -> Iterable[LocationSpec]:
        return (Fixed("Library/Caches/CocoaPods"),)


class RubyGemsStrategy(CleanStrategy):
    """Cleans gem cache directories, leaving installed gems alone."""

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="rubygems",
            display_name="Ruby Gems",
            description="Clean Ruby Gems cache",
        )

    def location_specs(self) -> Iterable[LocationSpec]:
        return (Fixed(".gem/ruby", NameContains("cache")),)
