"""
Exceptions raised by bracket generation and result recording.
"""


class BracketError(Exception):
    """Base exception for bracket errors."""


class InvalidInput(BracketError, ValueError):
    """Raised when the caller supplies input a bracket cannot be built from."""


class BrokenBracket(BracketError, RuntimeError):
    """Raised when an expected match is missing or a slot is claimed twice while linking."""
