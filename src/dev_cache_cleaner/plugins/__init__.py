"""Clean strategies, reporters and the registry that runs them."""

from .base import CleanStrategy, ReporterPlugin
from .registry import CleanerRegistry

__all__ = ["CleanStrategy", "CleanerRegistry", "ReporterPlugin"]
