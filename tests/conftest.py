"""Shared fixtures for the cache cleaner test suite."""

from pathlib import Path
from typing import Iterable, List

import pytest

from dev_cache_cleaner.plugins.registry import CleanerRegistry
from dev_cache_cleaner.utils.filesystem import RealFileSystem


class FlakyFileSystem(RealFileSystem):
    """Real filesystem that refuses to remove or list chosen entry names."""

    def __init__(self, fail_remove: Iterable[str] = (), fail_list: Iterable[str] = ()) -> None:
        self.fail_remove = set(fail_remove)
        self.fail_list = set(fail_list)
        self.removed: List[Path] = []

    def list_dir(self, directory: Path) -> List[Path]:
        if directory.name in self.fail_list:
            raise PermissionError(13, "Permission denied", str(directory))
        return super().list_dir(directory)

    def remove(self, path: Path) -> None:
        if path.name in self.fail_remove:
            raise PermissionError(13, "Permission denied", str(path))
        super().remove(path)
        self.removed.append(path)


def make_tree(root: Path, *relatives: str) -> None:
    """Creates files (and their parent directories) under root."""
    for relative in relatives:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(relative)


@pytest.fixture
def home(tmp_path, monkeypatch) -> Path:
    """A fake home directory with cache environment variables pointed inside it."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("XDG_CACHE_HOME", str(home_dir / ".cache"))
    monkeypatch.setenv("LOCALAPPDATA", str(home_dir / "AppData" / "Local"))
    return home_dir


@pytest.fixture
def run_strategy():
    """Runs a single strategy through a registry and returns its outcome."""

    def _run(strategy, fs=None, dry_run=False):
        registry = CleanerRegistry(fs=fs)
        registry.register(strategy)
        report = registry.run([strategy.target.id], dry_run=dry_run)
        assert len(report) == 1
        return report.outcomes[0]

    return _run
