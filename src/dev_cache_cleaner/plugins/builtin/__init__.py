"""Built-in clean strategies and reporters."""

from pathlib import Path
from typing import List, Optional

from ..base import CleanStrategy
from .containers import DockerStrategy
from .ides import AndroidStudioStrategy, VSCodeStrategy, XcodeStrategy
from .package_managers import (
    CocoaPodsStrategy,
    HomebrewStrategy,
    NpmStrategy,
    RubyGemsStrategy,
)
from .reporters import JSONReporterPlugin, RichReporterPlugin, SilentReporterPlugin
from .system import LibraryCacheStrategy
from .toolchains import GradleStrategy, PythonStrategy


def default_strategies(home: Optional[Path] = None) -> List[CleanStrategy]:
    """Builds every built-in strategy in display order.

    Args:
        home (Optional[Path]): Home directory shared by all strategies.

    Returns:
        List[CleanStrategy]: One strategy per supported tool.
    """
    return [
        DockerStrategy(home),
        HomebrewStrategy(home),
        LibraryCacheStrategy(home),
        XcodeStrategy(home),
        NpmStrategy(home),
        CocoaPodsStrategy(home),
        GradleStrategy(home),
        AndroidStudioStrategy(home),
        VSCodeStrategy(home),
        PythonStrategy(home),
        RubyGemsStrategy(home),
    ]


__all__ = [
    "AndroidStudioStrategy",
    "CocoaPodsStrategy",
    "DockerStrategy",
    "GradleStrategy",
    "HomebrewStrategy",
    "LibraryCacheStrategy",
    "NpmStrategy",
    "PythonStrategy",
    "RubyGemsStrategy",
    "VSCodeStrategy",
    "XcodeStrategy",
    "JSONReporterPlugin",
    "RichReporterPlugin",
    "SilentReporterPlugin",
    "default_strategies",
]
