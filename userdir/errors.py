"""Exceptions raised by the user directory."""
from __future__ import annotations


class DirectoryError(RuntimeError):
    """Base class for user directory failures."""


class DirectoryConfigError(DirectoryError, ValueError):
    """Raised when the directory configuration is invalid."""


class RecordIndexError(DirectoryError, IndexError):
    """Raised when a strict removal targets a position outside the directory."""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Cannot remove position {index}; directory holds {size} record(s)")
        self.index = index
        self.size = size


__all__ = ["DirectoryError", "DirectoryConfigError", "RecordIndexError"]
