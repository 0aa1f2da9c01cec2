"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Dict, Mapping, Sequence

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError
from .models import PathkitConfig

ENV_PREFIX = "PATHKIT__"


def resolve_with_precedence(
    *,
    defaults: PathkitConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> PathkitConfig:
    """Layer file, environment and CLI overrides (in that order) over ``defaults``.

    Raises:
        ConfigError: If an override is malformed or the merged result fails validation.
    """
    merged = defaults.model_dump(mode="python")
    sources = (("file", file_overrides), ("environment", env_overrides), ("cli", cli_overrides))
    for name, source in sources:
        if source is not None:
            merged = _deep_merge(merged, _expand_dotted(source, source_name=name))

    try:
        return PathkitConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def flatten_for_env(config: PathkitConfig) -> Dict[str, str]:
    """Flatten the config into `PATHKIT__SECTION__KEY` environment variable mappings."""
    flat: Dict[str, str] = {}

    def _walk(prefix: list[str], value: Any) -> None:
        if isinstance(value, dict):
            for key, child in value.items():
                _walk([*prefix, str(key)], child)
            return
        env_key = ENV_PREFIX + "__".join(part.upper() for part in prefix)
        if isinstance(value, list):
            flat[env_key] = yaml.safe_dump(value, default_flow_style=True).strip()
        else:
            flat[env_key] = "null" if value is None else str(value)

    _walk([], config.model_dump(mode="python"))
    return flat


def assign_dotted(target: dict[str, Any], path: Sequence[str], value: Any) -> None:
    """Assign ``value`` at the nested location named by ``path``.

    Raises:
        ConfigError: If a non-mapping value sits along the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.get(segment)
        if existing is None:
            existing = {}
            node[segment] = existing
        elif not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign {'.'.join(path)}: '{segment}' is not a mapping."
            )
        node = existing
    node[path[-1]] = value


def _expand_dotted(source: Mapping[str, Any], *, source_name: str) -> dict[str, Any]:
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    result: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = _expand_dotted(value, source_name=source_name)
        path = key.split(".")
        existing = _lookup(result, path)
        if isinstance(existing, dict) and isinstance(value, dict):
            value = _deep_merge(existing, value)
        assign_dotted(result, path, value)
    return result


def _lookup(target: Mapping[str, Any], path: Sequence[str]) -> Any:
    node: Any = target
    for segment in path:
        if not isinstance(node, MappingABC):
            return None
        node = node.get(segment)
    return node


def _deep_merge(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    merged = {key: deepcopy(value) for key, value in base.items()}
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["ENV_PREFIX", "assign_dotted", "flatten_for_env", "resolve_with_precedence"]
