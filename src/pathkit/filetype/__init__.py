"""File type identification from magic numbers."""

from .classifier import MAGIC_PREFIX_LENGTH, SIGNATURES, FileType, identify_file_type

__all__ = ["FileType", "MAGIC_PREFIX_LENGTH", "SIGNATURES", "identify_file_type"]
