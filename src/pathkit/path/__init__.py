"""Operating-system paths and the disk operations performed through them."""

from .copying import copy_file
from .errors import InvalidPathError, PathError, PathIOError
from .models import UNKNOWN_ID, StatusInfo
from .syntax import HOST_SYNTAX, POSIX_SYNTAX, WINDOWS_SYNTAX, PathSyntax
from .value import SystemPath

__all__ = [
    "HOST_SYNTAX",
    "InvalidPathError",
    "POSIX_SYNTAX",
    "PathError",
    "PathIOError",
    "PathSyntax",
    "StatusInfo",
    "SystemPath",
    "UNKNOWN_ID",
    "WINDOWS_SYNTAX",
    "copy_file",
]
