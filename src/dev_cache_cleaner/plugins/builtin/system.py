"""Operating system level cache strategies."""

from pathlib import Path
from typing import Iterable, Optional, Union

from dev_cache_cleaner.core.models import CacheTarget
from dev_cache_cleaner.core.resolver import Fixed, LocationSpec
from dev_cache_cleaner.utils.filesystem import user_cache_dir
from ..base import CleanStrategy


class LibraryCacheStrategy(CleanStrategy):
    """Empties the per-user cache directory the operating system defines.

    Entries held open by running applications may refuse removal; those are
    logged and left behind.
    """

    best_effort = True

    def __init__(
        self,
        home: Optional[Path] = None,
        cache_dir: Optional[Union[str, Path]] = None,
    ) -> None:
        super().__init__(home)
        self.cache_dir = Path(cache_dir) if cache_dir is not None else None

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="library",
            display_name="General Library Cache",
            description="Clean Library cache files",
        )

    def base_path(self) -> Path:
        return self.cache_dir or user_cache_dir(self.home)

    def location_specs(self) -> Iterable[LocationSpec]:
        return (Fixed(""),)
