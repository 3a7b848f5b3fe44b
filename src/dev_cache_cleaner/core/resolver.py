"""Expands logical cache locations into existing filesystem paths."""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator, Optional, Tuple, Union

from .models import EntryFilter, HasExtension, ResolvedLocation
from dev_cache_cleaner.utils.filesystem import FileSystemAdapter, RealFileSystem
from dev_cache_cleaner.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Fixed:
    """A single directory relative to the base path."""

    relative: Union[str, Path]
    entry_filter: Optional[EntryFilter] = None


@dataclass(frozen=True)
class MultiFixed:
    """Several fixed directories, resolved and cleaned in the given order."""

    paths: Tuple[Fixed, ...]

    @classmethod
    def of(cls, *relatives: Union[str, Path], entry_filter: Optional[EntryFilter] = None) -> "MultiFixed":
        """Builds a MultiFixed sharing one filter across all paths."""
        return cls(tuple(Fixed(relative, entry_filter) for relative in relatives))


@dataclass(frozen=True)
class WildcardScan:
    """Every non-hidden descendant whose relative path satisfies ``predicate``."""

    predicate: Callable[[str], bool]
    root: Union[str, Path] = ""


@dataclass(frozen=True)
class ExtensionScan:
    """Every non-hidden file below the root with the given extension."""

    extension: str
    root: Union[str, Path] = ""


LocationSpec = Union[Fixed, MultiFixed, WildcardScan, ExtensionScan]


def path_contains_all(*tokens: str) -> Callable[[str], bool]:
    """Builds a scan predicate requiring every token in the relative path."""

    def predicate(relative: str) -> bool:
        return all(token in relative for token in tokens)

    predicate.__name__ = f"contains_{'_'.join(tokens)}"
    return predicate


class PathResolver:
    """Resolves LocationSpecs against a base directory.

    Resolution is lazy and never creates anything: paths that are missing
    simply produce no locations.
    """

    def __init__(self, fs: Optional[FileSystemAdapter] = None) -> None:
        self.fs = fs or RealFileSystem()

    def resolve(self, base: Path, spec: LocationSpec) -> Iterator[ResolvedLocation]:
        """Yields the existing locations a spec refers to.

        Args:
            base (Path): Directory that relative paths are joined to.
            spec (LocationSpec): The logical location.

        Yields:
            Iterator[ResolvedLocation]: Existing concrete locations.
        """
        if isinstance(spec, Fixed):
            yield from self._resolve_fixed(base, spec)
        elif isinstance(spec, MultiFixed):
            for fixed in spec.paths:
                yield from self._resolve_fixed(base, fixed)
        elif isinstance(spec, WildcardScan):
            yield from self._scan(base / spec.root, spec.predicate, files_only=False)
        elif isinstance(spec, ExtensionScan):
            matches = HasExtension(spec.extension)
            yield from self._scan(
                base / spec.root,
                lambda relative: matches(Path(relative).name),
                files_only=True,
            )
        else:
            raise TypeError(f"Unsupported location spec: {spec!r}")

    def _resolve_fixed(self, base: Path, spec: Fixed) -> Iterator[ResolvedLocation]:
        path = base / spec.relative
        if not self.fs.is_dir(path):
            logger.debug(f"Cache location not present: {path}")
            return
        yield ResolvedLocation(path=path, entry_filter=spec.entry_filter)

    def _scan(
        self, root: Path, predicate: Callable[[str], bool], files_only: bool
    ) -> Iterator[ResolvedLocation]:
        """Walks ``root`` skipping hidden entries and yields matches.

        A matched directory is not descended into since deleting it takes
        its descendants along.
        """
        if not self.fs.is_dir(root):
            return

        logger.debug(f"Scanning {root}")

        for dirpath, dirnames, filenames in self.fs.walk(root):
            relative_dir = dirpath.relative_to(root)

            kept = []
            for name in sorted(dirnames):
                if name.startswith("."):
                    continue
                if not files_only and predicate(str(relative_dir / name)):
                    yield ResolvedLocation(path=dirpath / name, whole=True)
                    continue
                kept.append(name)
            dirnames[:] = kept

            for name in sorted(filenames):
                if name.startswith("."):
                    continue
                if predicate(str(relative_dir / name)):
                    yield ResolvedLocation(path=dirpath / name, whole=True)
