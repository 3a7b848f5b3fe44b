"""Container runtime cache strategies."""

from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

from dev_cache_cleaner.core.availability import (
    AllOf,
    AvailabilityCheck,
    PathExists,
    ProcessLister,
    ProcessRunning,
)
from dev_cache_cleaner.core.models import CacheTarget, NameContains, NameExcludes
from dev_cache_cleaner.core.resolver import Fixed, LocationSpec
from ..base import CleanStrategy

DOCKER_APP = Path("/Applications/Docker.app")
DOCKER_PROCESS_NAMES = ("com.docker.docker", "com.docker.backend", "Docker Desktop", "Docker")


class DockerStrategy(CleanStrategy):
    """Cleans Docker Desktop VM images and cache entries.

    Docker Desktop must be installed and running. The ``hyperkit`` VM in
    ``vms`` is kept, and in the group container and ``~/.docker`` only
    entries with "cache" in their name are removed.
    """

    def __init__(
        self,
        home: Optional[Path] = None,
        app_path: Optional[Union[str, Path]] = None,
        process_names: Sequence[str] = DOCKER_PROCESS_NAMES,
        process_lister: Optional[ProcessLister] = None,
    ) -> None:
        super().__init__(home)
        self._availability = AllOf(
            PathExists(app_path or DOCKER_APP, "Docker.app"),
            ProcessRunning(process_names, "Docker.app", process_lister),
        )

    @property
    def target(self) -> CacheTarget:
        return CacheTarget(
            id="docker",
            display_name="Docker",
            description="Clean Docker system and unused images",
        )

    @property
    def availability(self) -> AvailabilityCheck:
        return self._availability

    def location_specs(self) -> Iterable[LocationSpec]:
        return (
            Fixed(
                "Library/Containers/com.docker.docker/Data/vms",
                NameExcludes("hyperkit"),
            ),
            Fixed("Library/Group Containers/group.com.docker", NameContains("cache")),
            Fixed(".docker", NameContains("cache")),
        )
