"""Byte-for-byte file copying between two paths."""

from __future__ import annotations

import logging
import os
import shutil

from .errors import InvalidPathError, PathIOError
from .value import SystemPath

LOGGER = logging.getLogger(__name__)


def copy_file(dest: SystemPath, src: SystemPath) -> None:
    """Stream the contents of ``src`` into ``dest``.

    ``dest`` is created or truncated. If copying fails after ``dest`` was opened,
    ``dest`` is removed so no partial copy remains.

    Args:
        dest: Destination file path.
        src: Source file path.

    Raises:
        InvalidPathError: If either path is empty.
        PathIOError: If ``src`` cannot be read or ``dest`` cannot be written.
    """
    if dest.is_empty() or src.is_empty():
        raise InvalidPathError("")

    try:
        source = open(src.text, "rb")
    except OSError as exc:
        raise PathIOError.from_os_error(f"Cannot open {src} for reading", exc) from exc

    with source:
        try:
            target = open(dest.text, "wb")
        except OSError as exc:
            raise PathIOError.from_os_error(f"Cannot open {dest} for writing", exc) from exc
        try:
            with target:
                shutil.copyfileobj(source, target)
        except OSError as exc:
            _discard(dest)
            raise PathIOError.from_os_error(f"Cannot copy {src} to {dest}", exc) from exc

    LOGGER.debug("Copied %s to %s", src, dest)


def _discard(path: SystemPath) -> None:
    try:
        os.unlink(path.text)
    except FileNotFoundError:
        pass
    except OSError as exc:
        LOGGER.warning("Could not remove partial copy %s: %s", path, exc)


__all__ = ["copy_file"]
