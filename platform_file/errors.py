from __future__ import annotations

__all__ = ("PlatformFileException", "InvalidOperation", "InvalidState")


class PlatformFileException(Exception):
    """Base exception."""


class InvalidOperation(PlatformFileException):
    """Exception raised when an operation is not supported on the current platform.

    For example, reading the path of a file picked on web.
    """


class InvalidState(PlatformFileException):
    """Exception raised when the file has no data source to read from."""
