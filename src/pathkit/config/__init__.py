"""Configuration management for pathkit."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from .exceptions import ConfigError
from .models import (
    LibrarySettings,
    LocationSettings,
    LoggingSettings,
    PathkitConfig,
    TemporarySettings,
)
from .resolver import ENV_PREFIX, assign_dotted, flatten_for_env, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.pathkit/config.yaml")
_CONFIG_HEADER = textwrap.dedent(
    """\
    # pathkit configuration file
    # Generated automatically; manage via `pathkit config edit` or `pathkit config set`.
    """
)

_active_config: PathkitConfig | None = None


def configure(config: PathkitConfig | None) -> None:
    """Install ``config`` as the settings used by well-known location lookups.

    Passing ``None`` restores the built-in defaults.
    """
    global _active_config
    _active_config = config


def active_config() -> PathkitConfig:
    """Return the installed configuration, or defaults when none was installed."""
    if _active_config is None:
        return PathkitConfig()
    return _active_config


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
        ensure_file: bool = False,
        env_overrides: Mapping[str, str] | None = None,
    ) -> PathkitConfig:
        """Load configuration data from disk, applying precedence rules.

        Args:
            cli_overrides: Dotted-key overrides with the highest precedence.
            include_env: Whether ``PATHKIT__`` environment variables are honored.
            ensure_file: Create a default configuration file when none exists.
            env_overrides: Environment mapping used instead of the process environment.

        Returns:
            PathkitConfig: The merged, validated configuration.

        Raises:
            ConfigError: If the file cannot be parsed or values fail validation.
        """
        if ensure_file:
            self.ensure_exists()

        env_data: Mapping[str, str] | None = None
        if include_env:
            env_data = env_overrides if env_overrides is not None else self._env

        return resolve_with_precedence(
            defaults=PathkitConfig(),
            file_overrides=self._read_file(),
            env_overrides=self._extract_env(env_data) if env_data else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return raw overrides stored on disk."""
        return self._read_file()

    def save(self, config: PathkitConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, PathkitConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)
        self._write_file(data)

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            self._write_file(PathkitConfig().model_dump(mode="python"))
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    # Internal helpers -------------------------------------------------

    def _read_file(self) -> dict[str, Any]:
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")

        return raw

    def _write_file(self, data: Mapping[str, Any]) -> None:
        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = yaml.safe_dump(dict(data), sort_keys=False)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{serialized}", encoding="utf-8"
        )

    def _extract_env(self, env: Mapping[str, str]) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in env.items():
            if not key.startswith(ENV_PREFIX):
                continue
            segments = [segment.lower() for segment in key[len(ENV_PREFIX) :].split("__")]
            if not all(segments):
                continue
            try:
                parsed_value = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                parsed_value = raw_value
            assign_dotted(overrides, segments, parsed_value)
        return overrides


__all__ = [
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "LibrarySettings",
    "LocationSettings",
    "LoggingSettings",
    "PathkitConfig",
    "TemporarySettings",
    "active_config",
    "configure",
    "flatten_for_env",
    "resolve_with_precedence",
]
