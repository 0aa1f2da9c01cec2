"""copy_file tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from pathkit.path import InvalidPathError, PathIOError, SystemPath, copy_file

from .conftest import system_path


def test_copy_file_streams_contents(tmp_path: Path) -> None:
    source = tmp_path / "source.bin"
    payload = bytes(range(256)) * 1024
    source.write_bytes(payload)
    destination = tmp_path / "destination.bin"
    destination.write_bytes(b"stale")

    copy_file(system_path(destination), system_path(source))

    assert destination.read_bytes() == payload


def test_copy_file_missing_source_leaves_destination_absent(tmp_path: Path) -> None:
    destination = tmp_path / "destination.bin"

    with pytest.raises(PathIOError):
        copy_file(system_path(destination), system_path(tmp_path / "missing.bin"))

    assert not destination.exists()


def test_copy_file_removes_partial_destination(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "source.bin"
    source.write_bytes(b"abcdef")
    destination = tmp_path / "destination.bin"

    def _failing_copy(src, dst) -> None:
        dst.write(src.read(3))
        raise OSError(28, "No space left on device")

    monkeypatch.setattr("pathkit.path.copying.shutil.copyfileobj", _failing_copy)

    with pytest.raises(PathIOError) as excinfo:
        copy_file(system_path(destination), system_path(source))

    assert excinfo.value.errno == 28
    assert isinstance(excinfo.value.__cause__, OSError)
    assert not destination.exists()


def test_copy_file_requires_paths(tmp_path: Path) -> None:
    with pytest.raises(InvalidPathError):
        copy_file(SystemPath(), system_path(tmp_path / "x"))
