"""Discovers and removes cache directories left by developer tools."""

__version__ = "0.1.0"
