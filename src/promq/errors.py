# promq.errors - Exceptions
"""
Exceptions raised by promq.

Completion itself never raises to the host; these only surface while
setting promq up.
"""


class PromqError(Exception):
    """Base class for promq errors."""


class ConfigError(PromqError):
    """Raised when an explicitly requested configuration can't be loaded."""
