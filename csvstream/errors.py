"""
Exceptions raised by csvstream.

Errors coming from the underlying byte streams are never wrapped; they reach
the caller exactly as the stream raised them.
"""


class CsvError(Exception):
    """Base exception for csvstream errors."""
    pass


class CsvValidationError(CsvError, ValueError):
    """Raised when a dialect value, argument or path fails validation."""
    pass


class CsvUsageError(CsvError, RuntimeError):
    """Raised when the API is used out of order (e.g. a record left open)."""
    pass
