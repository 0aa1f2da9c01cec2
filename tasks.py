"""Invoke tasks for the pathkit development workflow.

Every task shells out to `uv` so local runs match CI: environment sync,
distribution builds, the pytest suite, Ruff and MyPy.
"""

from __future__ import annotations

import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"
SOURCES = ("src", "tests")


def _uv(ctx: Context, args: Sequence[str], *, dry_run: bool = False) -> None:
    """Run ``uv`` with ``args``, or only print the command when ``dry_run`` is set.

    Args:
        ctx: Invoke execution context.
        args: Arguments placed after the `uv` executable.
        dry_run: Print instead of executing.
    """
    command = shlex.join(("uv", *args))
    if dry_run:
        print(f"[dry-run] {command}")
        return
    ctx.run(command, echo=True, pty=True)


@task
def sync(ctx: Context, dev: bool = True) -> None:
    """Install the project and (by default) its dev extra into the uv environment."""
    _uv(ctx, ["sync", "--extra", "dev"] if dev else ["sync"])


@task(help={"clean": "Empty dist/ before building."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build the sdist and wheel into `dist/`."""
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _uv(ctx, ["build"])


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "path": "Test path or module (defaults to tests/).",
        "options": "Extra flags forwarded verbatim to pytest.",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests", options: str = "") -> None:
    """Run the pytest suite."""
    args = ["run", "pytest"]
    if k:
        args += ["-k", k]
    args += shlex.split(options)
    args.append(path)
    _uv(ctx, args)


@task(help={"all_files": "Run hooks against the entire repository."})
def precommit(ctx: Context, all_files: bool = False) -> None:
    """Run the pre-commit hooks (Ruff, whitespace checks) through uv."""
    _uv(ctx, ["run", "pre-commit", "run", *(["--all-files"] if all_files else [])])


@task(help={"fix": "Let Ruff apply safe fixes."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _uv(ctx, ["run", "ruff", "format", "--check", *SOURCES])
    _uv(ctx, ["run", "ruff", "check", *SOURCES, *(["--fix"] if fix else [])])


@task
def typecheck(ctx: Context) -> None:
    """Type-check the package with MyPy."""
    _uv(ctx, ["run", "mypy", "src/pathkit"])


@task
def ci(ctx: Context) -> None:
    """Run lint, typecheck and tests as CI does."""
    ctx.invoke(lint)
    ctx.invoke(typecheck)
    ctx.invoke(tests)


namespace = Collection(sync, build, tests, precommit, lint, typecheck, ci)
