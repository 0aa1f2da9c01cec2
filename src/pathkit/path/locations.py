"""Lookups for well-known locations: root, home, temporary and library directories."""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from typing import Iterable, List, Optional

from pathkit.config import PathkitConfig, active_config

from .errors import PathIOError

LOGGER = logging.getLogger(__name__)


def _config(config: Optional[PathkitConfig]) -> PathkitConfig:
    return config if config is not None else active_config()


def root_directory(config: Optional[PathkitConfig] = None) -> str:
    """Return the top-level directory of the filesystem.

    ``/`` on POSIX, the system drive on Windows; ``locations.default_root``
    (or ``/``) elsewhere.
    """
    settings = _config(config)
    if os.name == "posix":
        return "/"
    if os.name == "nt":
        return os.environ.get("SystemDrive", "C:") + "\\"
    return settings.locations.default_root or "/"


def temporary_directory(config: Optional[PathkitConfig] = None) -> str:
    """Create a new, uniquely named directory in the system temporary location.

    Raises:
        PathIOError: If the directory cannot be created.
    """
    prefix = _config(config).temporary.directory_prefix
    try:
        created = tempfile.mkdtemp(prefix=prefix)
    except OSError as exc:
        raise PathIOError.from_os_error("Cannot create a temporary directory", exc) from exc
    LOGGER.debug("Created temporary directory %s", created)
    return created


def user_home() -> Optional[str]:
    """Return the current user's home directory, or None when it is unknown."""
    home = os.path.expanduser("~")
    if home == "~" or not home:
        return None
    return home


def default_config_dir(config: Optional[PathkitConfig] = None) -> str:
    """Return the static system-wide configuration directory."""
    return _config(config).locations.default_config_dir


def installed_config_dir(config: Optional[PathkitConfig] = None) -> str:
    """Return the installation's configuration directory when it exists.

    Falls back to :func:`default_config_dir` when the installed directory is absent.
    """
    settings = _config(config)
    candidate = settings.installed_config_dir()
    if os.path.isdir(candidate):
        return candidate
    return settings.locations.default_config_dir


def dynamic_library_suffix() -> str:
    """Return the shared-library file suffix without its leading period."""
    if sys.platform == "win32":
        return "dll"
    if sys.platform == "darwin":
        return "dylib"
    return "so"


def static_library_suffix() -> str:
    """Return the static-library (archive) file suffix without its leading period."""
    return "lib" if sys.platform == "win32" else "a"


def library_prefix() -> str:
    """Return the conventional prefix of library file names."""
    return "" if sys.platform == "win32" else "lib"


def search_path_override(config: Optional[PathkitConfig] = None) -> List[str]:
    """Return directories named by the library search-path environment variable.

    The variable may hold several entries separated by ``os.pathsep``; entries
    that do not name an existing directory are ignored.
    """
    variable = _config(config).libraries.search_path_env
    value = os.environ.get(variable)
    if not value:
        return []
    directories = [entry for entry in value.split(os.pathsep) if entry and os.path.isdir(entry)]
    if not directories:
        LOGGER.debug("Ignoring %s=%r: no entry names a directory", variable, value)
    return directories


def system_library_dirs(config: Optional[PathkitConfig] = None) -> List[str]:
    """Return the shared-library search directories, override first."""
    settings = _config(config)
    return _unique([*search_path_override(settings), *settings.libraries.default_search_paths])


def aux_library_dirs(config: Optional[PathkitConfig] = None) -> List[str]:
    """Return the override, the auxiliary library directory, then the system directories."""
    settings = _config(config)
    return _unique(
        [
            *search_path_override(settings),
            settings.aux_library_dir(),
            *system_library_dirs(settings),
        ]
    )


def _unique(entries: Iterable[str]) -> List[str]:
    seen: set[str] = set()
    ordered: List[str] = []
    for entry in entries:
        if entry not in seen:
            seen.add(entry)
            ordered.append(entry)
    return ordered


__all__ = [
    "aux_library_dirs",
    "default_config_dir",
    "dynamic_library_suffix",
    "installed_config_dir",
    "library_prefix",
    "root_directory",
    "search_path_override",
    "static_library_suffix",
    "system_library_dirs",
    "temporary_directory",
    "user_home",
]
