"""Errors raised by path construction and disk operations."""

from __future__ import annotations


class PathError(Exception):
    """Base exception for path operations."""


class InvalidPathError(PathError, ValueError):
    """Raised when text is not a syntactically valid path for the host."""

    def __init__(self, text: str) -> None:
        super().__init__(f"Invalid path: {text!r}")
        self.text = text


class PathIOError(PathError, OSError):
    """Raised when the operating system reports a hard failure.

    Wraps the originating ``OSError`` (available as ``__cause__``) and copies
    its ``errno`` and ``filename``.
    """

    @classmethod
    def from_os_error(cls, message: str, exc: OSError) -> "PathIOError":
        if exc.errno is None:
            return cls(f"{message}: {exc}")
        error = cls(exc.errno, f"{message}: {exc.strerror or exc}")
        error.filename = exc.filename
        return error


__all__ = ["InvalidPathError", "PathError", "PathIOError"]
