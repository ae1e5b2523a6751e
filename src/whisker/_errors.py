"""Whisker error hierarchy.

All whisker-specific errors inherit from WhiskerError for easy catching.
"""


class WhiskerError(Exception):
    """Base error for all whisker operations."""


class ConfigError(WhiskerError):
    """Invalid or unreadable configuration."""


class DependencyTrackingError(WhiskerError):
    """Dependency tracker used out of order (unbalanced enter/exit)."""


class InvalidContentRefError(DependencyTrackingError, TypeError):
    """Dependency tracker given something other than an item or a layout."""

