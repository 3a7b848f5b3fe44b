"""Validators guarding deletion against system paths and the home directory."""

import os
import sys
from pathlib import Path
from typing import Optional, Set


class PathValidator:
    """A class to validate deletion targets for security and safety."""

    FORBIDDEN_PATHS: Set[Path] = {
        Path("/"),
        Path("/etc"),
        Path("/usr"),
        Path("/bin"),
        Path("/sbin"),
        Path("/boot"),
        Path("/sys"),
        Path("/proc"),
        Path("/dev"),
        Path("/var"),
        Path("/tmp"),
        Path("/opt"),
        Path("/Applications"),
        Path("/Library"),
        Path("/System"),  # macOS system folder
        Path("/Users"),
        Path("/home"),
    }

    if sys.platform == "win32":
        FORBIDDEN_PATHS.update(
            {
                Path("C:\\"),
                Path("C:\\Windows"),
                Path("C:\\Program Files"),
                Path("C:\\Program Files (x86)"),
                Path("C:\\ProgramData"),
                Path("C:\\Users"),
                Path("C:\\Users\\Default"),
                Path("C:\\Users\\Public"),
            }
        )

    @classmethod
    def validate_deletion_target(
        cls, path: Path, home: Optional[Path] = None, follow_symlinks: bool = True
    ) -> None:
        """
        Validates that a path is safe to delete or to empty

        Args:
            path (Path): The path that will be removed or have its children removed
            home (Optional[Path]): The user's home directory, which is never deleted
            follow_symlinks (bool): Check where the path points. When False only its parent is
                resolved, for an entry that is unlinked rather than emptied.

        Raises:
            ValueError: If the path is a system directory, contains one, or is the home directory
        """
        path = cls._normalise(path, follow_symlinks)

        cls._check_forbidden_paths(path)

        if home is not None and path in {
            cls._normalise(home, follow_symlinks),
            cls._normalise(home, True),
        }:
            raise ValueError(
                f"Refusing to clean the home directory itself: {path}"
            )

    @staticmethod
    def _normalise(path: Path, follow_symlinks: bool) -> Path:
        """Returns the location a path refers to, resolving the last part only if asked."""
        path = Path(os.path.abspath(path))
        try:
            if follow_symlinks:
                return path.resolve()
            return path.parent.resolve() / path.name
        except (OSError, RuntimeError) as e:
            raise ValueError(f"Cannot resolve {path}: {e}") from e

    @classmethod
    def _check_forbidden_paths(cls, path: Path) -> None:
        """
        Checks if the given path is, or contains, a forbidden path.

        Args:
            path (Path): The path to check.

        Raises:
            ValueError: If the path is forbidden or contains forbidden paths.
        """
        for forbidden in cls.FORBIDDEN_PATHS:
            if path == forbidden:
                raise ValueError(f"Refusing to clean system directory: {path}")

            if forbidden.is_relative_to(path):
                raise ValueError(f"Path contains system path {forbidden}: {path}")
