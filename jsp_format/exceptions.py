"""Package-specific exception types."""

from __future__ import annotations


class FormatError(ValueError):
    """Base class for formatting-related errors."""


class MalformedDirectiveError(FormatError):
    """Raised when a directive's attributes cannot be laid out one per line.

    Only used internally: the directive reformatter catches it and keeps the
    directive unchanged.

    Args:
        directive: The offending directive text.
        reason: Short description of what failed to match.
    """

    def __init__(self, directive: str, reason: str):
        self.directive = directive
        self.reason = reason
        super().__init__(f"Malformed directive ({reason}): {directive[:40]!r}")


class FormatFileError(Exception):
    """Raised when a JSP file cannot be read, formatted, or written."""
