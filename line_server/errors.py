#!/usr/bin/env python3
# line_server/errors.py
"""
Line Server Exceptions

Exceptions raised by the line server. None of them are fatal to the
listener: every failure is contained in the session that raised it.
"""


class LineServerError(Exception):
    """Base class for all line server errors."""


class SessionSetupError(LineServerError):
    """Raised when a session cannot be prepared (e.g. its log sink cannot be opened)."""


class LineTooLongError(LineServerError):
    """Raised when an input line overruns the stream buffer limit."""

    def __init__(self, size: int):
        super().__init__(f"Line exceeds the read buffer limit ({size}+ bytes)")
        self.size = size


class ConfigError(LineServerError, ValueError):
    """Raised when a server configuration is invalid."""
