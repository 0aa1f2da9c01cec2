"""Status data models for filesystem entries."""

from __future__ import annotations

import os
import stat
from datetime import datetime, timezone

from pydantic import BaseModel, Field

UNKNOWN_ID = 999
"""Owner/group value reported where the platform has no such concept."""


class StatusInfo(BaseModel):
    """Snapshot of an entry's status, patterned after ``stat(2)``.

    Attributes:
        file_size: Size of the entry in bytes.
        mod_time: Last modification time (UTC).
        mode: Permission bits of the entry.
        user: Owner identifier, or 999 where not applicable.
        group: Group identifier, or 999 where not applicable.
        is_dir: True when the entry is a directory.
    """

    file_size: int = 0
    mod_time: datetime = Field(default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc))
    mode: int = 0o777
    user: int = UNKNOWN_ID
    group: int = UNKNOWN_ID
    is_dir: bool = False

    @classmethod
    def from_stat(cls, result: os.stat_result) -> "StatusInfo":
        """Build a snapshot from an ``os.stat`` result."""
        owned = os.name == "posix"
        return cls(
            file_size=result.st_size,
            mod_time=datetime.fromtimestamp(result.st_mtime, tz=timezone.utc),
            mode=stat.S_IMODE(result.st_mode),
            user=result.st_uid if owned else UNKNOWN_ID,
            group=result.st_gid if owned else UNKNOWN_ID,
            is_dir=stat.S_ISDIR(result.st_mode),
        )


__all__ = ["StatusInfo", "UNKNOWN_ID"]
