"""Command line interface for pathkit."""

from __future__ import annotations

import json
import logging
from typing import Any, List

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from pathkit.config import (
    ConfigError,
    ConfigManager,
    PathkitConfig,
    configure,
    resolve_with_precedence,
)
from pathkit.config.resolver import assign_dotted
from pathkit.path import PathError, SystemPath, copy_file

console = Console()


def _configure_logging(level: str) -> None:
    """Attach a stream handler to the ``pathkit`` logger at ``level``."""
    logger = logging.getLogger("pathkit")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level.upper())


def _to_path(text: str) -> SystemPath:
    """Convert a CLI argument into a SystemPath or fail with a usage error."""
    try:
        return SystemPath(text)
    except PathError as exc:
        raise click.BadParameter(str(exc)) from exc


def _status_payload(path: SystemPath) -> dict[str, Any]:
    info = path.status_info()
    payload: dict[str, Any] = {
        "path": path.text,
        "exists": info is not None,
        "last_component": path.last_component(),
        "base_name": path.base_name(),
        "suffix": path.suffix(),
    }
    if info is None:
        return payload
    payload.update(
        {
            "kind": "directory" if info.is_dir else "file" if path.is_file() else "other",
            "size": info.file_size,
            "modified": info.mod_time.isoformat(),
            "mode": oct(info.mode),
            "user": info.user,
            "group": info.group,
            "hidden": path.is_hidden(),
            "readable": path.can_read(),
            "writable": path.can_write(),
            "executable": path.can_execute(),
            "file_type": path.file_type().value,
        }
    )
    return payload


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pathkit")
@click.option("--log-level", type=str, help="Override the configured logging level.")
def cli(log_level: str | None) -> None:
    """pathkit inspects and manipulates filesystem paths portably."""
    overrides = {"logging.level": log_level} if log_level else None
    try:
        config = ConfigManager().load(cli_overrides=overrides)
    except ConfigError as exc:
        console.print(f"[yellow]Ignoring configuration: {exc}[/yellow]")
        config = PathkitConfig()
    configure(config)
    _configure_logging(config.logging.level)


@cli.command()
@click.argument("path")
@click.option("--json", "json_output", is_flag=True, help="Emit status information as JSON.")
def info(path: str, json_output: bool) -> None:
    """Show status and content classification for PATH."""
    target = _to_path(path)
    try:
        payload = _status_payload(target)
    except PathError as exc:
        raise click.ClickException(str(exc)) from exc

    if json_output:
        click.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=target.text, show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for key, value in payload.items():
        table.add_row(key, str(value))
    console.print(table)


@cli.command("ls")
@click.argument("path")
def list_directory(path: str) -> None:
    """List the entries of directory PATH."""
    target = _to_path(path)
    entries: set[SystemPath] = set()
    try:
        listed = target.list_directory(entries)
    except PathError as exc:
        raise click.ClickException(str(exc)) from exc
    if not listed:
        raise click.ClickException(f"{target} is not a directory.")
    for entry in sorted(entries):
        suffix = "/" if entry.is_directory() else ""
        click.echo(f"{entry.last_component()}{suffix}")


@cli.command()
@click.option("--dir", "as_directory", is_flag=True, help="Create a directory instead of a file.")
@click.option("--name", default="tmp", show_default=True, help="Base name for temporary files.")
def mktemp(as_directory: bool, name: str) -> None:
    """Create a unique temporary file or directory and print its path."""
    try:
        directory = SystemPath.from_temporary_directory()
        if as_directory:
            click.echo(directory.text)
            return
        target = directory.copy()
        if not target.append_component(name):
            raise click.BadParameter(f"{name!r} is not a valid file name.", param_hint="--name")
        target.create_unique_temporary_file()
    except PathError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(target.text)


@cli.command()
@click.option("--aux", is_flag=True, help="Include auxiliary library directories.")
def libs(aux: bool) -> None:
    """Print the library search directories in search order."""
    paths: List[SystemPath] = []
    if aux:
        SystemPath.aux_library_paths(paths)
    else:
        SystemPath.system_library_paths(paths)
    for entry in paths:
        marker = "" if entry.is_directory() else "  (missing)"
        click.echo(f"{entry.text}{marker}")


@cli.command("find-lib")
@click.argument("name")
def find_lib(name: str) -> None:
    """Locate the library NAME (e.g. ``z`` for libz) on the search path."""
    found = SystemPath.find_library(name)
    if found.is_empty():
        raise click.ClickException(f"Library '{name}' not found.")
    click.echo(found.text)


@cli.command("cp")
@click.argument("source")
@click.argument("destination")
def copy(source: str, destination: str) -> None:
    """Copy the bytes of SOURCE to DESTINATION."""
    try:
        copy_file(_to_path(destination), _to_path(source))
    except PathError as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Copied {source} -> {destination}.[/green]")


@cli.group()
def config() -> None:
    """Manage pathkit configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules."""
    manager = ConfigManager()
    try:
        loaded = manager.load(include_env=not no_env, ensure_file=True)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


def _dotted_settings(data: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten a configuration dump into ``section.key`` entries."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_dotted_settings(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def _changed_settings(before: PathkitConfig, after: PathkitConfig) -> list[tuple[str, Any, Any]]:
    old = _dotted_settings(before.model_dump(mode="python"))
    new = _dotted_settings(after.model_dump(mode="python"))
    return [(key, old[key], new[key]) for key in new if old.get(key) != new[key]]


def _report_changes(changes: list[tuple[str, Any, Any]]) -> None:
    for key, old, new in changes:
        console.print(f"[green]Updated {key}:[/green] {escape(repr(old))} -> {escape(repr(new))}")


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY (parsed as YAML).")
def config_set(key: str, value: str) -> None:
    """Persist one setting, named by a dotted KEY such as ``temporary.max_attempts``."""
    known = _dotted_settings(PathkitConfig().model_dump(mode="python"))
    if key not in known:
        raise click.ClickException(
            f"Unknown setting '{key}'. Run 'pathkit config view' to list the available settings."
        )

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value for {key}: {exc}") from exc

    manager = ConfigManager()
    try:
        file_data = manager.load_file_overrides()
        before = resolve_with_precedence(defaults=PathkitConfig(), file_overrides=file_data)
        assign_dotted(file_data, key.split("."), parsed_value)
        after = resolve_with_precedence(defaults=PathkitConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(f"Rejected {key}={value!r}: {exc}") from exc

    changes = _changed_settings(before, after)
    if not changes:
        current = escape(repr(parsed_value))
        console.print(f"[yellow]No changes applied; {key} is already {current}.[/yellow]")
        return

    manager.save(file_data)
    _report_changes(changes)


@config.command("edit")
def config_edit() -> None:
    """Edit the configuration file and apply it once it validates."""
    manager = ConfigManager()
    manager.ensure_exists()

    edited = click.edit(manager.read_text(), extension=".yaml")
    if edited is None:
        console.print("[yellow]Edit cancelled; no changes applied.[/yellow]")
        return

    try:
        parsed = yaml.safe_load(edited) or {}
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Invalid YAML: {exc}") from exc
    if not isinstance(parsed, dict):
        raise click.ClickException("The pathkit configuration must be a mapping of sections.")

    try:
        after = resolve_with_precedence(defaults=PathkitConfig(), file_overrides=parsed)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        before: PathkitConfig | None = manager.load(include_env=False)
    except ConfigError:
        # The file on disk is broken; the edit replaces it.
        before = None

    changes = _changed_settings(before or PathkitConfig(), after)
    if before is not None and not changes:
        console.print("[yellow]No settings changed.[/yellow]")
        return

    manager.save(parsed)
    if changes:
        _report_changes(changes)
    else:
        console.print("[green]Configuration file repaired.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
