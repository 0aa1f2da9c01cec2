"""Top-level package for pathkit: cross-platform paths and disk operations."""

from importlib import metadata as _metadata

from pathkit.filetype import FileType, identify_file_type
from pathkit.path import (
    InvalidPathError,
    PathError,
    PathIOError,
    StatusInfo,
    SystemPath,
    copy_file,
)

__all__ = [
    "FileType",
    "InvalidPathError",
    "PathError",
    "PathIOError",
    "StatusInfo",
    "SystemPath",
    "__version__",
    "copy_file",
    "identify_file_type",
]


def __getattr__(name: str):
    if name == "__version__":
        return _metadata.version("pathkit")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(list(globals().keys()) + ["__version__"])
