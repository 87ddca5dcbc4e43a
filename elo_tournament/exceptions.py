"""
Exception classes for the elo tournament system.

Centralized location for all custom exceptions to avoid circular imports.
"""


class ValidationError(Exception):
    """Base exception for invalid result data (counts, matrix shape, ids)."""
    pass


class ConfigurationError(Exception):
    """Base exception for invalid fitting parameters."""
    pass


class ResultSourceError(Exception):
    """Raised when a result source cannot be read."""
    pass
