"""The SystemPath value: a syntactically valid path string and the operations on it."""

from __future__ import annotations

import errno
import functools
import logging
import os
import secrets
import shutil
import stat
import sys
from datetime import datetime
from typing import Iterator, List, MutableSet, Optional, Tuple

from pathkit.config import active_config
from pathkit.filetype import MAGIC_PREFIX_LENGTH, FileType, identify_file_type

from . import locations
from .errors import InvalidPathError, PathError, PathIOError
from .models import StatusInfo
from .syntax import HOST_SYNTAX, PathSyntax

LOGGER = logging.getLogger(__name__)

_UNIQUE_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"


@functools.total_ordering
class SystemPath:
    """An operating-system path that is always either empty or syntactically valid.

    The empty path is the single permitted invalid value and signals "no path".
    Every other value has passed the host's syntax rules; operations that would
    produce an invalid string fail and leave the path unchanged.

    Operations fall into four groups:

    * path accessors, which inspect the text only;
    * disk accessors, which query the operating system on every call;
    * path mutators, which rewrite the text without touching the disk;
    * disk mutators (``*_on_disk``, ``create_*``, ``erase_from_disk``), which change
      the filesystem entry the path names.

    Negative outcomes such as "does not exist" are reported as ``False``/``None``.
    Hard operating-system failures raise :class:`PathIOError`; invalid text raises
    :class:`InvalidPathError`.

    Paths hash and compare by their text. A path used as a set member or dict key
    must not be mutated while it is stored there.
    """

    syntax: PathSyntax = HOST_SYNTAX

    __slots__ = ("_text",)

    def __init__(self, text: str = "") -> None:
        if text and not self.syntax.is_valid_path(text):
            raise InvalidPathError(text)
        self._text = text

    # Construction -----------------------------------------------------

    @classmethod
    def from_string(cls, text: str) -> "SystemPath":
        """Return a path holding ``text``.

        Raises:
            InvalidPathError: If ``text`` is non-empty and not a valid path.
        """
        return cls(text)

    @classmethod
    def from_root(cls) -> "SystemPath":
        """Return the filesystem's top-level directory."""
        return cls(locations.root_directory())

    @classmethod
    def from_temporary_directory(cls) -> "SystemPath":
        """Create a new, unique, existing temporary directory and return its path.

        Raises:
            PathIOError: If the directory cannot be created.
        """
        return cls(locations.temporary_directory())

    @classmethod
    def from_user_home(cls) -> "SystemPath":
        """Return the user's home directory, or the root directory if there is none."""
        path = cls()
        home = locations.user_home()
        if home is not None and path.set(home):
            return path
        return cls.from_root()

    @classmethod
    def from_config_dir(cls) -> "SystemPath":
        """Return the static system-wide configuration directory."""
        return cls(locations.default_config_dir())

    @classmethod
    def from_installed_config_dir(cls) -> "SystemPath":
        """Return the configuration directory of this installation."""
        return cls(locations.installed_config_dir())

    @classmethod
    def system_library_paths(cls, paths: List["SystemPath"]) -> None:
        """Append the shared-library search directories to ``paths``.

        The directories named by the search-path environment variable come first,
        followed by the configured defaults.
        """
        cls._extend_valid(paths, locations.system_library_dirs())

    @classmethod
    def aux_library_paths(cls, paths: List["SystemPath"]) -> None:
        """Append the auxiliary library directories to ``paths``.

        Includes every directory :meth:`system_library_paths` would add.
        """
        cls._extend_valid(paths, locations.aux_library_dirs())

    @classmethod
    def find_library(cls, short_name: str) -> "SystemPath":
        """Locate a library by its short name (``m`` for ``libm.so``).

        Each system library directory is tried for a shared library, then for a
        static archive. Returns the empty path when nothing matches.
        """
        directories: List[SystemPath] = []
        cls.system_library_paths(directories)
        file_name = locations.library_prefix() + short_name
        for directory in directories:
            candidate = directory.copy()
            if not candidate.append_component(file_name):
                continue
            shared = candidate.copy()
            if shared.append_suffix(locations.dynamic_library_suffix()) and shared.is_dynamic_library():
                return shared
            static = candidate.copy()
            if static.append_suffix(locations.static_library_suffix()) and static.is_archive():
                return static
        LOGGER.debug("Library %r not found in %d directories", short_name, len(directories))
        return cls()

    @staticmethod
    def dynamic_library_suffix() -> str:
        """Return the host's shared-library suffix, without a leading period."""
        return locations.dynamic_library_suffix()

    @classmethod
    def _extend_valid(cls, paths: List["SystemPath"], entries: List[str]) -> None:
        for entry in entries:
            path = cls()
            if path.set(entry):
                paths.append(path)
            else:
                LOGGER.debug("Skipping invalid library directory %r", entry)

    # Value protocol ---------------------------------------------------

    @property
    def text(self) -> str:
        """The path as a string."""
        return self._text

    def copy(self) -> "SystemPath":
        """Return an independent path holding the same text."""
        clone = type(self)()
        clone._text = self._text
        return clone

    def __str__(self) -> str:
        return self._text

    def __fspath__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._text!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SystemPath):
            return NotImplemented
        return self._text == other._text

    def __lt__(self, other: "SystemPath") -> bool:
        if not isinstance(other, SystemPath):
            return NotImplemented
        return self._text < other._text

    def __hash__(self) -> int:
        return hash(self._text)

    # Path accessors ---------------------------------------------------

    def is_valid(self) -> bool:
        """Return True if the path is non-empty and syntactically legal."""
        return bool(self._text) and self.syntax.is_valid_path(self._text)

    def is_empty(self) -> bool:
        """Return True for the empty (invalid) path."""
        return not self._text

    def last_component(self) -> str:
        """Return the final component, ignoring trailing separators."""
        return self._split()[1]

    def base_name(self) -> str:
        """Return the final component without its suffix."""
        name = self.last_component()
        dot = name.rfind(".")
        return name[:dot] if dot >= 0 else name

    def suffix(self) -> str:
        """Return the text after the final component's suffix period, or ``""``."""
        name = self.last_component()
        dot = name.rfind(".")
        return name[dot + 1 :] if dot >= 0 else ""

    def is_directory_style(self) -> bool:
        """Return True if the text can only name a directory (``a/``, ``/``)."""
        if not self._text:
            return False
        return self._text[-1] in self.syntax.separators or self.syntax.is_anchor(self._text)

    def is_file_style(self) -> bool:
        """Return True if the text ends in a named component."""
        return bool(self._text) and not self.is_directory_style()

    def _split(self) -> Tuple[str, str, str]:
        """Split the text into (head, last component, trailing separators)."""
        text = self._text
        anchor = self.syntax.anchor_length(text)
        end = len(text)
        while end > anchor and text[end - 1] in self.syntax.separators:
            end -= 1
        start = anchor + self.syntax.last_separator(text[anchor:end]) + 1
        return text[:start], text[start:end], text[end:]

    # Disk accessors ---------------------------------------------------

    def _stat(self, *, follow_symlinks: bool = True) -> Optional[os.stat_result]:
        if not self._text:
            return None
        try:
            return os.stat(self._text, follow_symlinks=follow_symlinks)
        except (FileNotFoundError, NotADirectoryError):
            return None
        except OSError as exc:
            raise PathIOError.from_os_error(f"Cannot query {self._text}", exc) from exc

    def exists(self) -> bool:
        """Return True if an entry with this name exists."""
        return self._stat() is not None

    def is_file(self) -> bool:
        """Return True if the path names a regular file."""
        result = self._stat()
        return result is not None and stat.S_ISREG(result.st_mode)

    def is_directory(self) -> bool:
        """Return True if the path names a directory."""
        result = self._stat()
        return result is not None and stat.S_ISDIR(result.st_mode)

    def is_hidden(self) -> bool:
        """Return True if the entry is hidden by the platform's convention."""
        if sys.platform == "win32":
            result = self._stat()
            attributes = getattr(result, "st_file_attributes", 0) if result else 0
            return bool(attributes & stat.FILE_ATTRIBUTE_HIDDEN)
        name = self.last_component()
        return name.startswith(".") and name not in (".", "..")

    def is_root_directory(self) -> bool:
        """Return True if the path names the root of a filesystem hierarchy."""
        if not self.is_directory():
            return False
        resolved = os.path.realpath(self._text)
        return os.path.dirname(resolved) == resolved

    def can_read(self) -> bool:
        """Return True if the entry exists and is readable."""
        return bool(self._text) and os.access(self._text, os.R_OK)

    def can_write(self) -> bool:
        """Return True if the entry exists and is writable."""
        return bool(self._text) and os.access(self._text, os.W_OK)

    def can_execute(self) -> bool:
        """Return True if the entry is an executable regular file."""
        if not self._text or not os.access(self._text, os.X_OK):
            return False
        return self.is_file()

    def list_directory(self, entries: MutableSet["SystemPath"]) -> bool:
        """Add one path per directory entry to ``entries``.

        Returns:
            bool: False if this path is not a directory, True otherwise.

        Raises:
            PathIOError: If the directory exists but cannot be read.
            InvalidPathError: If an entry name does not form a valid path;
                ``entries`` is then left unchanged.
        """
        if not self.is_directory():
            return False
        try:
            names = os.listdir(self._text)
        except OSError as exc:
            raise PathIOError.from_os_error(f"Cannot list {self._text}", exc) from exc
        children: List[SystemPath] = []
        for name in names:
            child = self.copy()
            if not child.append_component(name):
                raise InvalidPathError(os.path.join(self._text, name))
            children.append(child)
        entries.update(children)
        return True

    def status_info(self) -> Optional[StatusInfo]:
        """Return a fresh status snapshot, or None if the entry does not exist."""
        result = self._stat()
        if result is None:
            return None
        return StatusInfo.from_stat(result)

    def timestamp(self) -> Optional[datetime]:
        """Return the modification time, or None if the entry does not exist."""
        info = self.status_info()
        return info.mod_time if info else None

    def size(self) -> Optional[int]:
        """Return the size in bytes, or None if the entry does not exist."""
        info = self.status_info()
        return info.file_size if info else None

    def magic_number(self, length: int) -> Optional[bytes]:
        """Return up to ``length`` leading bytes of the file.

        Returns None when the path is not an existing, readable regular file,
        or when ``length`` is negative.
        """
        if length < 0 or not self._text or not os.path.isfile(self._text):
            return None
        try:
            with open(self._text, "rb") as handle:
                return handle.read(length)
        except OSError as exc:
            LOGGER.debug("Cannot read magic number of %s: %s", self._text, exc)
            return None

    def has_magic_number(self, expected: bytes) -> bool:
        """Return True if the file starts with exactly ``expected``."""
        return self.magic_number(len(expected)) == expected

    def file_type(self) -> FileType:
        """Classify the file by its magic number; directories are ``UNKNOWN``."""
        data = self.magic_number(MAGIC_PREFIX_LENGTH)
        if data is None:
            return FileType.UNKNOWN
        return identify_file_type(data)

    def is_archive(self) -> bool:
        return self.file_type() is FileType.ARCHIVE

    def is_bytecode_file(self) -> bool:
        return self.file_type() is FileType.BYTECODE

    def is_compressed_bytecode_file(self) -> bool:
        return self.file_type() is FileType.COMPRESSED_BYTECODE

    def is_dynamic_library(self) -> bool:
        """Return True for shared objects, dylibs, and ``MZ`` images named ``*.dll``."""
        if self.file_type() is FileType.DYNAMIC_LIBRARY:
            return True
        return self.suffix().lower() == "dll" and self.has_magic_number(b"MZ")

    # Path mutators ----------------------------------------------------

    def clear(self) -> None:
        """Reset to the empty path."""
        self._text = ""

    def set(self, text: str) -> bool:
        """Replace the text with ``text`` if it is a valid path.

        Returns:
            bool: False (leaving the path unchanged) if ``text`` is invalid.
        """
        if not self.syntax.is_valid_path(text):
            return False
        self._text = text
        return True

    def erase_last_component(self) -> bool:
        """Remove the final component and its preceding separator.

        A leading root survives (``/usr`` becomes ``/``); a single relative
        component, or the root itself, becomes the empty path.
        """
        if not self._text:
            return True
        head, name, _ = self._split()
        if not name:
            self._text = ""
            return True
        anchor = self.syntax.anchor_length(head)
        end = len(head)
        while end > anchor and head[end - 1] in self.syntax.separators:
            end -= 1
        self._text = head[:end]
        return True

    def append_component(self, name: str) -> bool:
        """Append ``name`` as a new final component.

        Returns:
            bool: False (leaving the path unchanged) if ``name`` is not a legal
            component (e.g. it embeds a separator) or the result is invalid.
        """
        if not self.syntax.is_valid_component(name):
            return False
        text = self._text
        if text and not self.is_directory_style():
            text += self.syntax.separator
        return self.set(text + name)

    def append_suffix(self, suffix: str) -> bool:
        """Append a period and ``suffix`` to a file-style path."""
        if not self.is_file_style() or not self.syntax.is_valid_component(suffix):
            return False
        return self.set(f"{self._text}.{suffix}")

    def erase_suffix(self) -> bool:
        """Remove the final component's suffix, including its period.

        Returns:
            bool: False if the path has no period after its final separator, or if
            removing the suffix would leave the empty path (``.profile``).
        """
        head, name, trailing = self._split()
        dot = name.rfind(".")
        if trailing or dot < 0:
            return False
        return self.set(head + name[:dot])

    def make_unique(self, reuse_existing: bool = True) -> None:
        """Rename (in text only) to a name that no filesystem entry uses.

        Random characters are inserted before the suffix: ``out.txt`` becomes
        ``out-k3x9q2.txt``. With ``reuse_existing`` an unused current name is kept.

        Raises:
            PathError: If no unused name is found within the configured attempts.
        """
        if reuse_existing and self._text and not os.path.lexists(self._text):
            return
        for candidate in self._unique_candidates():
            if not os.path.lexists(candidate.text):
                self._text = candidate.text
                return
        raise PathError(f"Unable to find an unused name for {self._text!r}")

    def _unique_candidates(self) -> Iterator["SystemPath"]:
        """Yield uniquified variants of this path, bounded by the configured attempts."""
        head, name, trailing = self._split()
        if not name:
            raise PathError(f"Cannot make {self._text!r} unique: it has no final component")
        settings = active_config().temporary
        dot = name.rfind(".")
        stem, suffix = (name[:dot], name[dot:]) if dot >= 0 else (name, "")
        for _ in range(settings.max_attempts):
            token = "".join(
                secrets.choice(_UNIQUE_ALPHABET) for _ in range(settings.unique_suffix_length)
            )
            candidate = type(self)()
            if candidate.set(f"{head}{stem}-{token}{suffix}{trailing}"):
                yield candidate

    # Disk mutators ----------------------------------------------------

    def _add_permission_bits(self, bits: int) -> None:
        """Add ``bits`` (less the umask) to the entry's permissions.

        Reading the umask sets it briefly, which is process-wide state: a file
        created by another thread at that moment gets no permission bits.
        """
        if not self._text:
            return
        # Grant only what the process umask allows.
        mask = os.umask(0o777)
        os.umask(mask)
        try:
            current = os.stat(self._text).st_mode
            os.chmod(self._text, stat.S_IMODE(current) | (bits & ~mask))
        except OSError as exc:
            LOGGER.debug("Could not change permissions of %s: %s", self._text, exc)

    def make_readable_on_disk(self) -> None:
        """Best-effort: add read permission; verify with :meth:`can_read`.

        The process umask is changed briefly while it is read.
        """
        self._add_permission_bits(0o444)

    def make_writeable_on_disk(self) -> None:
        """Best-effort: add write permission; verify with :meth:`can_write`.

        The process umask is changed briefly while it is read.
        """
        self._add_permission_bits(0o222)

    def make_executable_on_disk(self) -> None:
        """Best-effort: add execute permission; verify with :meth:`can_execute`.

        The process umask is changed briefly while it is read.
        """
        self._add_permission_bits(0o111)

    def set_disk_status(self, info: StatusInfo) -> None:
        """Apply the modification time and permission bits of ``info`` to the entry.

        Raises:
            InvalidPathError: If the path is empty.
            PathIOError: If the operating system rejects either change.
        """
        self._require_valid()
        stamp = info.mod_time.timestamp()
        try:
            os.utime(self._text, (stamp, stamp))
            os.chmod(self._text, stat.S_IMODE(info.mode))
        except OSError as exc:
            raise PathIOError.from_os_error(f"Cannot update status of {self._text}", exc) from exc
        LOGGER.debug("Applied status (mode %o) to %s", info.mode, self._text)

    def create_directory(self, create_parents: bool = False) -> bool:
        """Create the directory named by this path.

        Args:
            create_parents: Also create missing intermediate directories; an
                already existing directory is then accepted.

        Returns:
            bool: False for the empty path, True once the directory exists.

        Raises:
            PathIOError: If the operating system cannot create the directory.
        """
        if not self._text:
            return False
        try:
            if create_parents:
                os.makedirs(self._text, exist_ok=True)
            else:
                os.mkdir(self._text)
        except OSError as exc:
            raise PathIOError.from_os_error(f"Cannot create directory {self._text}", exc) from exc
        LOGGER.debug("Created directory %s", self._text)
        return True

    def create_file(self) -> bool:
        """Create an empty file; parent directories must already exist.

        Returns:
            bool: False if the path is empty or directory-style.

        Raises:
            PathIOError: If the operating system cannot create the file.
        """
        if not self.is_file_style():
            return False
        try:
            descriptor = os.open(self._text, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o666)
        except OSError as exc:
            raise PathIOError.from_os_error(f"Cannot create file {self._text}", exc) from exc
        os.close(descriptor)
        LOGGER.debug("Created file %s", self._text)
        return True

    def create_unique_temporary_file(self, reuse_existing: bool = False) -> bool:
        """Move to an unused name and create an empty file there.

        Creation uses ``O_EXCL`` so the name check and the creation are a single
        operating-system call; a name taken in between is retried.

        Returns:
            bool: False if the path is empty or directory-style.

        Raises:
            PathIOError: If creation fails for a reason other than a name collision.
            PathError: If no unused name is found within the configured attempts.
        """
        if not self.is_file_style():
            return False
        candidates = self._unique_candidates()
        if reuse_existing:
            candidates = _prepend(self.copy(), candidates)
        flags = os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_NOINHERIT", 0)
        for candidate in candidates:
            try:
                descriptor = os.open(candidate.text, flags, 0o600)
            except FileExistsError:
                continue
            except OSError as exc:
                raise PathIOError.from_os_error(
                    f"Cannot create temporary file {candidate.text}", exc
                ) from exc
            os.close(descriptor)
            self._text = candidate.text
            LOGGER.debug("Created temporary file %s", self._text)
            return True
        raise PathError(f"Unable to find an unused name for {self._text!r}")

    def rename_on_disk(self, new_path: "SystemPath") -> bool:
        """Rename the entry to ``new_path``, replacing any file already there.

        The receiver keeps its text; use ``new_path`` to refer to the entry afterwards.

        Raises:
            InvalidPathError: If either path is empty.
            PathIOError: If the entry does not exist or cannot be renamed.
        """
        self._require_valid()
        new_path._require_valid()
        if not self.exists():
            raise PathIOError(errno.ENOENT, f"Cannot rename {self._text}: no such entry")
        try:
            os.replace(self._text, new_path.text)
        except OSError as exc:
            raise PathIOError.from_os_error(
                f"Cannot rename {self._text} to {new_path.text}", exc
            ) from exc
        LOGGER.debug("Renamed %s to %s", self._text, new_path.text)
        return True

    def erase_from_disk(self, destroy_contents: bool = False) -> bool:
        """Remove the file or directory named by this path.

        Args:
            destroy_contents: Remove a directory's contents recursively first.

        Returns:
            bool: False if the path names neither a file nor a directory.

        Raises:
            PathIOError: If removal fails (including a non-empty directory when
                ``destroy_contents`` is False).
        """
        result = self._stat(follow_symlinks=False)
        if result is None:
            return False
        try:
            if stat.S_ISDIR(result.st_mode):
                if destroy_contents:
                    shutil.rmtree(self._text)
                else:
                    os.rmdir(self._text)
            elif stat.S_ISREG(result.st_mode) or stat.S_ISLNK(result.st_mode):
                os.unlink(self._text)
            else:
                return False
        except OSError as exc:
            raise PathIOError.from_os_error(f"Cannot remove {self._text}", exc) from exc
        LOGGER.debug("Removed %s", self._text)
        return True

    def _require_valid(self) -> None:
        if not self._text:
            raise InvalidPathError(self._text)


def _prepend(first: SystemPath, rest: Iterator[SystemPath]) -> Iterator[SystemPath]:
    yield first
    yield from rest


__all__ = ["SystemPath"]
