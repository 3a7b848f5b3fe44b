"""Filesystem utilities and abstractions."""

import os
import shutil
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from dev_cache_cleaner.utils.logging import get_logger

logger = get_logger(__name__)

WalkEntry = Tuple[Path, List[str], List[str]]


class FileSystemAdapter(ABC):
    """Abstract base class for filesystem operations."""

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Checks if a path is a directory.

        Args:
            path (Path): The path to check.

        Returns:
            bool: True if the path is a directory, False otherwise.
        """
        ...

    @abstractmethod
    def list_dir(self, directory: Path) -> List[Path]:
        """Lists the direct children of a directory.

        Args:
            directory (Path): The directory to list.

        Returns:
            List[Path]: The child paths.

        Raises:
            OSError: If the directory cannot be read.
        """
        ...

    @abstractmethod
    def walk(self, root: Path) -> Iterator[WalkEntry]:
        """Walks a directory tree top-down without following symlinks.

        Callers may prune ``dirnames`` in place to stop descent. Directories
        that cannot be read are skipped.

        Args:
            root (Path): The directory to walk.

        Returns:
            Iterator[WalkEntry]: ``(dirpath, dirnames, filenames)`` tuples.
        """
        ...

    @abstractmethod
    def remove(self, path: Path) -> None:
        """Removes a file, symlink or whole directory tree.

        Args:
            path (Path): The path to remove.

        Raises:
            FileNotFoundError: If the path does not exist.
            OSError: If the path cannot be removed.
        """
        ...

    @abstractmethod
    def get_size(self, path: Path) -> int:
        """Gets the size of a path in bytes, recursing into directories.

        Args:
            path (Path): The path to measure.

        Returns:
            int: The total size in bytes.
        """
        ...


class RealFileSystem(FileSystemAdapter):
    """Real filesystem implementation of FileSystemAdapter."""

    def is_dir(self, path: Path) -> bool:
        """Checks if a path is a directory."""
        return path.is_dir()

    def list_dir(self, directory: Path) -> List[Path]:
        """Lists the direct children of a directory."""
        return list(directory.iterdir())

    def walk(self, root: Path) -> Iterator[WalkEntry]:
        """Walks a directory tree, logging and skipping unreadable directories."""

        def _on_error(error: OSError) -> None:
            logger.debug(f"Skipping unreadable directory {error.filename}: {error}")

        for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
            yield Path(dirpath), dirnames, filenames

    def remove(self, path: Path) -> None:
        """Removes a file, symlink or whole directory tree."""
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path)
        else:
            path.unlink()

    def get_size(self, path: Path) -> int:
        """Gets the size of a path in bytes, recursing into directories."""
        if path.is_symlink() or not path.is_dir():
            return path.lstat().st_size
        return get_directory_size(path, self)


def get_directory_size(directory: Path, fs: Optional[FileSystemAdapter] = None) -> int:
    """Calculates the total size of all files in a directory.

    Files that vanish or cannot be read while measuring are not counted.

    Args:
        directory (Path): The directory path.
        fs (Optional[FileSystemAdapter]): The filesystem adapter to use. Defaults to RealFileSystem.

    Returns:
        int: The total size of files in bytes.
    """
    if fs is None:
        fs = RealFileSystem()

    total_size = 0
    for dirpath, _dirnames, filenames in fs.walk(directory):
        for filename in filenames:
            try:
                total_size += (dirpath / filename).lstat().st_size
            except OSError:
                continue

    return total_size


def user_cache_dir(home: Optional[Path] = None, platform: Optional[str] = None) -> Path:
    """Returns the operating system's per-user cache directory.

    Args:
        home (Optional[Path]): Home directory to resolve against. Defaults to the current user's.
        platform (Optional[str]): Platform name in ``sys.platform`` form. Defaults to the running one.

    Returns:
        Path: ``~/Library/Caches`` on macOS, ``%LOCALAPPDATA%`` on Windows,
        otherwise ``$XDG_CACHE_HOME`` or ``~/.cache``.
    """
    home = home or Path.home()
    platform = platform or sys.platform

    if platform == "darwin":
        return home / "Library" / "Caches"

    if platform == "win32":
        local_app_data = os.environ.get("LOCALAPPDATA")
        if local_app_data:
            return Path(local_app_data)
        return home / "AppData" / "Local"

    xdg_cache = os.environ.get("XDG_CACHE_HOME")
    if xdg_cache:
        return Path(xdg_cache)
    return home / ".cache"


def format_size(num_bytes: int) -> str:
    """Formats a byte count for display, e.g. ``1.5 MB``."""
    if num_bytes < 1024:
        return f"{num_bytes} B"

    size = num_bytes / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"
