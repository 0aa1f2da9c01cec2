"""Syntactic rules for path text on each supported operating system family.

A rule set answers questions about text alone: whether a string is a legal path,
whether a name is a legal single component, and where the anchor (root or drive)
of a path ends. Nothing here touches the filesystem.
"""

from __future__ import annotations

import os
from typing import Tuple


class PathSyntax:
    """Common behaviour shared by the concrete rule sets."""

    separator: str = "/"
    separators: Tuple[str, ...] = ("/",)
    max_length: int = 4096
    max_component_length: int = 256

    def is_valid_path(self, text: str) -> bool:
        """Return True when ``text`` is a legal, non-empty path."""
        if not text or len(text) >= self.max_length:
            return False
        if not self._has_legal_characters(text, allow_separators=True):
            return False
        if not self._has_legal_anchor(text):
            return False
        body = text[self.anchor_length(text) :]
        for separator in self.separators[1:]:
            body = body.replace(separator, self.separator)
        return all(self._component_fits(part) for part in body.split(self.separator))

    def is_valid_component(self, name: str) -> bool:
        """Return True when ``name`` is a legal single path component."""
        if not name or any(separator in name for separator in self.separators):
            return False
        return self._component_fits(name) and self._has_legal_characters(
            name, allow_separators=False
        )

    def anchor_length(self, text: str) -> int:
        """Return the length of the root/drive prefix of ``text``."""
        return 1 if text.startswith(self.separator) else 0

    def is_anchor(self, text: str) -> bool:
        """Return True when ``text`` consists only of its anchor, such as ``/``."""
        return bool(text) and self.anchor_length(text) == len(text)

    def last_separator(self, text: str) -> int:
        """Return the index of the final separator in ``text`` or -1."""
        return max(text.rfind(separator) for separator in self.separators)

    def _component_fits(self, name: str) -> bool:
        return len(name) < self.max_component_length

    def _has_legal_characters(self, text: str, *, allow_separators: bool) -> bool:
        return "\0" not in text

    def _has_legal_anchor(self, text: str) -> bool:
        return True


class PosixSyntax(PathSyntax):
    """POSIX rules: anything but NUL, bounded by ``PATH_MAX`` and ``NAME_MAX`` bytes."""

    def _component_fits(self, name: str) -> bool:
        try:
            return len(name.encode("utf-8", "surrogateescape")) < self.max_component_length
        except UnicodeEncodeError:
            return False

    def is_valid_path(self, text: str) -> bool:
        try:
            encoded = text.encode("utf-8", "surrogateescape")
        except UnicodeEncodeError:
            return False
        return len(encoded) < self.max_length and super().is_valid_path(text)


class WindowsSyntax(PathSyntax):
    """Win32 rules: drive letters, UNC shares and a set of reserved characters."""

    separator = "\\"
    separators = ("\\", "/")
    max_length = 32767
    reserved_characters = frozenset('<>"|?*')

    def anchor_length(self, text: str) -> int:
        if len(text) >= 2 and text[0] in self.separators and text[1] in self.separators:
            return self._unc_anchor_length(text)
        if len(text) >= 2 and text[1] == ":" and text[0].isascii() and text[0].isalpha():
            if len(text) >= 3 and text[2] in self.separators:
                return 3
            return 2
        if text[:1] in self.separators:
            return 1
        return 0

    def _unc_anchor_length(self, text: str) -> int:
        # \\server\share\ is a single anchor.
        index = 2
        for _ in range(2):
            while index < len(text) and text[index] not in self.separators:
                index += 1
            if index < len(text):
                index += 1
        return index

    def _has_legal_characters(self, text: str, *, allow_separators: bool) -> bool:
        for position, char in enumerate(text):
            if ord(char) < 32 or char in self.reserved_characters:
                return False
            if char == ":" and not (allow_separators and position == 1):
                return False
        return True

    def _has_legal_anchor(self, text: str) -> bool:
        colon = text.find(":")
        if colon == 1:
            return text[0].isascii() and text[0].isalpha()
        if colon != -1:
            return False
        if text[0] in self.separators and text[1:2] in self.separators:
            # A UNC anchor needs both a server and a share name.
            parts = text[2 : self.anchor_length(text)].replace("/", "\\").split("\\")
            return len(parts) >= 2 and bool(parts[0]) and bool(parts[1])
        return True


POSIX_SYNTAX = PosixSyntax()
WINDOWS_SYNTAX = WindowsSyntax()
HOST_SYNTAX: PathSyntax = WINDOWS_SYNTAX if os.name == "nt" else POSIX_SYNTAX

__all__ = [
    "HOST_SYNTAX",
    "POSIX_SYNTAX",
    "PathSyntax",
    "PosixSyntax",
    "WINDOWS_SYNTAX",
    "WindowsSyntax",
]
