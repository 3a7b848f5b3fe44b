"""IDE and editor cache strategies."""

from typing import Iterable

from dev_cache_cleaner.core.models import CacheTarget
from dev_cache_cleaner.core.resolver import (
    LocationSpec,
    MultiFixed,
    WildcardScan,
    path_contains_all,
)
from ..base import CleanStrategy


class XcodeStrategy(CleanStrategy):
    """Cleans Xcode DerivedData and Archives."""

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="xcode",
            display_name="Xcode",
            description="Clean Xcode derived data and archives",
        )

    def location_specs(self) -> Iterable[LocationSpec]:
        return (
            MultiFixed.of(
                "Library/Developer/Xcode/DerivedData",
                "Library/Developer/Xcode/Archives",
            ),
        )


class AndroidStudioStrategy(CleanStrategy):
    """Removes Android Studio cache directories found under ``~/Library``.

    The Library tree is walked, skipping hidden entries, and every path that
    mentions both ``AndroidStudio`` and ``cache`` is deleted. The scan stays
    out of the rest of home so project folders such as
    ``~/AndroidStudioProjects`` are never matched.
    """

    best_effort = True

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="android_studio",
            display_name="Android Studio",
            description="Clean Android Studio caches",
        )

    def location_specs(self) -> Iterable[LocationSpec]:
        return (
            WildcardScan(path_contains_all("AndroidStudio", "cache"), root="Library"),
        )


class VSCodeStrategy(CleanStrategy):
    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="vscode",
            display_name="VS Code",
            description="Clean VS Code caches",
        )

    def location_specs(self) -> Iterable[LocationSpec]:
        return (
            MultiFixed.of(
                "Library/Application Support/Code/Cache",
                "Library/Application Support/Code/CachedData",
                "Library/Application Support/Code/CachedExtensions",
                ".vscode/extensions",
            ),
        )
