"""In-memory user directory with add, authenticate, remove and report operations."""

from __future__ import annotations

from .config import DirectoryConfig, load_directory_config, resolve_config_path
from .directory import UserDirectory
from .errors import DirectoryConfigError, DirectoryError, RecordIndexError
from .models import AddStatus, AuthStatus, RemovalStatus, UserCandidate, UserRecord


def create_directory(config: DirectoryConfig | None = None, **kwargs) -> UserDirectory:
    """Factory returning an empty :class:`UserDirectory`."""

    return UserDirectory(config, **kwargs)


__all__ = [
    "AddStatus",
    "AuthStatus",
    "DirectoryConfig",
    "DirectoryConfigError",
    "DirectoryError",
    "RecordIndexError",
    "RemovalStatus",
    "UserCandidate",
    "UserDirectory",
    "UserRecord",
    "create_directory",
    "load_directory_config",
    "resolve_config_path",
]
