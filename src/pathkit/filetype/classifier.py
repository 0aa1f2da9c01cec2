"""Magic-number based file type identification."""

from __future__ import annotations

import struct
from enum import Enum
from typing import Optional, Tuple

MAGIC_PREFIX_LENGTH = 64
"""Number of leading bytes read from a file before classifying it."""


class FileType(str, Enum):
    """Coarse classification of a file's contents."""

    UNKNOWN = "unknown"
    BYTECODE = "bytecode"
    COMPRESSED_BYTECODE = "compressed_bytecode"
    ARCHIVE = "archive"
    DYNAMIC_LIBRARY = "dynamic_library"


# Longer sequences first so a signature never shadows a more specific one.
SIGNATURES: Tuple[Tuple[bytes, FileType], ...] = (
    (b"!<arch>\n", FileType.ARCHIVE),
    (b"llvc", FileType.COMPRESSED_BYTECODE),
    (b"llvm", FileType.BYTECODE),
)

_ELF_MAGIC = b"\x7fELF"
_ELF_ET_DYN = 3
_MACHO_MH_DYLIB = 6
_MACHO_MAGICS = {
    b"\xfe\xed\xfa\xce": ">",
    b"\xfe\xed\xfa\xcf": ">",
    b"\xce\xfa\xed\xfe": "<",
    b"\xcf\xfa\xed\xfe": "<",
}


def identify_file_type(data: bytes) -> FileType:
    """Classify ``data`` by comparing its leading bytes against known signatures.

    Args:
        data: Leading bytes of a file; any length is accepted.

    Returns:
        FileType: First matching classification, or ``FileType.UNKNOWN``.
    """
    for magic, file_type in SIGNATURES:
        if data.startswith(magic):
            return file_type
    if _is_shared_object(data):
        return FileType.DYNAMIC_LIBRARY
    return FileType.UNKNOWN


def _is_shared_object(data: bytes) -> bool:
    """Return True for ELF shared objects and Mach-O dylibs."""
    if data.startswith(_ELF_MAGIC):
        # EI_DATA: 1 little endian, 2 big endian; e_type sits right after e_ident.
        order = _elf_byte_order(data)
        if order is None or len(data) < 18:
            return False
        (e_type,) = struct.unpack_from(order + "H", data, 16)
        return e_type == _ELF_ET_DYN

    order = _MACHO_MAGICS.get(data[:4])
    if order is None or len(data) < 16:
        return False
    (filetype,) = struct.unpack_from(order + "I", data, 12)
    return filetype == _MACHO_MH_DYLIB


def _elf_byte_order(data: bytes) -> Optional[str]:
    if len(data) < 6:
        return None
    return {1: "<", 2: ">"}.get(data[5])


__all__ = ["FileType", "MAGIC_PREFIX_LENGTH", "SIGNATURES", "identify_file_type"]
