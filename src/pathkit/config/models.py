"""Configuration models describing pathkit settings."""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _default_search_paths() -> List[str]:
    if os.name == "nt":
        system_root = os.environ.get("SystemRoot", "C:\\Windows")
        return [os.path.join(system_root, "System32")]
    return ["/usr/local/lib", "/usr/lib", "/lib"]


class PathkitBaseModel(BaseModel):
    """Shared configuration for pathkit Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class LocationSettings(PathkitBaseModel):
    """Well-known location defaults.

    Attributes:
        default_root: Root used when the platform has no root directory concept.
        default_config_dir: System-wide configuration directory.
        installed_config_dir: Configuration directory of the running installation;
            derived from ``sys.prefix`` when unset.
    """

    default_root: Optional[str] = None
    default_config_dir: str = "/etc/pathkit"
    installed_config_dir: Optional[str] = None


class LibrarySettings(PathkitBaseModel):
    """Shared-library search configuration.

    Attributes:
        search_path_env: Environment variable consulted before the defaults.
        default_search_paths: Directories searched when no override applies.
        aux_library_dir: Additional library directory for auxiliary searches;
            derived from ``sys.prefix`` when unset.
    """

    search_path_env: str = "PATHKIT_LIB_SEARCH_PATH"
    default_search_paths: List[str] = Field(default_factory=_default_search_paths)
    aux_library_dir: Optional[str] = None


class TemporarySettings(PathkitBaseModel):
    """Temporary path generation settings.

    Attributes:
        directory_prefix: Name prefix for directories made by ``from_temporary_directory``.
        unique_suffix_length: Number of random characters used to uniquify names.
        max_attempts: Attempts made before giving up on finding an unused name.
    """

    directory_prefix: str = "pathkit_"
    unique_suffix_length: int = Field(default=6, ge=1, le=64)
    max_attempts: int = Field(default=10_000, ge=1)


class LoggingSettings(PathkitBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unknown logging level {value!r}")
        return normalized


class PathkitConfig(PathkitBaseModel):
    """Top-level configuration struct for pathkit.

    Attributes:
        locations: Well-known location defaults.
        libraries: Shared-library search settings.
        temporary: Temporary name generation settings.
        logging: Logging configuration.
    """

    locations: LocationSettings = Field(default_factory=LocationSettings)
    libraries: LibrarySettings = Field(default_factory=LibrarySettings)
    temporary: TemporarySettings = Field(default_factory=TemporarySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def installed_config_dir(self) -> str:
        """Return the configured or ``sys.prefix`` derived installed config directory."""
        if self.locations.installed_config_dir:
            return self.locations.installed_config_dir
        return os.path.join(sys.prefix, "etc", "pathkit")

    def aux_library_dir(self) -> str:
        """Return the configured or ``sys.prefix`` derived auxiliary library directory."""
        if self.libraries.aux_library_dir:
            return self.libraries.aux_library_dir
        return os.path.join(sys.prefix, "lib")


__all__ = [
    "PathkitBaseModel",
    "LocationSettings",
    "LibrarySettings",
    "TemporarySettings",
    "LoggingSettings",
    "PathkitConfig",
]
