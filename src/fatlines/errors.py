"""
Exception types for the fatlines engine.
"""


class FatLinesError(Exception):
    """Base class for all fatlines errors."""


class InvalidInputError(FatLinesError, ValueError):
    """
    Raised when a segment cannot be added to an index.

    The offending payload is kept on the exception so callers can tell
    which input was rejected.
    """

    def __init__(self, message, payload=None):
        super().__init__(message)
        self.payload = payload


class ConfigError(FatLinesError, ValueError):
    """Raised for out-of-range tolerances or epsilons."""
