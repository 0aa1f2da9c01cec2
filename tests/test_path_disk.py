"""Disk accessor and mutator tests run against pytest's temporary directory."""

from __future__ import annotations

import os
import stat
from datetime import datetime, timezone
from pathlib import Path

import pytest

from pathkit.config import PathkitConfig, configure
from pathkit.filetype import FileType
from pathkit.path import InvalidPathError, PathError, PathIOError, SystemPath

from .conftest import posix_only, system_path


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    target = tmp_path / "sample.txt"
    target.write_bytes(b"hello world")
    return target


def test_entry_kind_predicates(tmp_path: Path, sample_file: Path) -> None:
    file_path = system_path(sample_file)
    dir_path = system_path(tmp_path)
    missing = system_path(tmp_path / "missing")

    assert file_path.exists() and file_path.is_file() and not file_path.is_directory()
    assert dir_path.exists() and dir_path.is_directory() and not dir_path.is_file()
    assert not missing.exists() and not missing.is_file() and not missing.is_directory()


def test_missing_parent_component_is_a_negative_result(sample_file: Path) -> None:
    through_file = system_path(sample_file / "child")

    assert through_file.exists() is False
    assert through_file.status_info() is None


def test_empty_path_disk_queries_are_negative() -> None:
    empty = SystemPath()

    assert not empty.exists()
    assert not empty.can_read()
    assert empty.status_info() is None
    assert empty.magic_number(4) is None
    assert empty.erase_from_disk() is False
    assert empty.create_directory() is False
    assert empty.create_file() is False


@posix_only
def test_is_hidden_follows_dot_convention(tmp_path: Path) -> None:
    hidden = tmp_path / ".secret"
    hidden.touch()

    assert system_path(hidden).is_hidden()
    assert not system_path(tmp_path / "visible").is_hidden()
    assert not SystemPath(".").is_hidden()


def test_is_root_directory(tmp_path: Path) -> None:
    assert SystemPath.from_root().is_root_directory()
    assert not system_path(tmp_path).is_root_directory()
    assert not system_path(tmp_path / "missing").is_root_directory()


def test_access_predicates(tmp_path: Path, sample_file: Path) -> None:
    file_path = system_path(sample_file)
    missing = system_path(tmp_path / "missing")

    assert file_path.can_read()
    assert file_path.can_write()
    assert not missing.can_read()
    assert not missing.can_write()
    assert not missing.can_execute()
    assert not system_path(tmp_path).can_execute()


@posix_only
def test_permission_mutators_add_bits(sample_file: Path) -> None:
    path = system_path(sample_file)
    os.chmod(sample_file, 0o600)
    previous = os.umask(0o022)
    try:
        assert not path.can_execute()
        path.make_executable_on_disk()
        path.make_readable_on_disk()
    finally:
        os.umask(previous)

    mode = stat.S_IMODE(sample_file.stat().st_mode)
    assert mode == 0o755
    assert path.can_execute()


@posix_only
def test_permission_mutators_restore_process_umask(sample_file: Path) -> None:
    previous = os.umask(0o027)
    try:
        system_path(sample_file).make_writeable_on_disk()
        current = os.umask(0o027)
    finally:
        os.umask(previous)

    assert current == 0o027


def test_permission_mutators_ignore_missing_entries(tmp_path: Path) -> None:
    missing = system_path(tmp_path / "missing")

    missing.make_readable_on_disk()
    missing.make_writeable_on_disk()

    assert not missing.exists()


def test_list_directory_returns_full_paths(tmp_path: Path) -> None:
    (tmp_path / "a.txt").touch()
    (tmp_path / "sub").mkdir()
    root = system_path(tmp_path)
    entries: set[SystemPath] = set()

    assert root.list_directory(entries) is True
    assert entries == {system_path(tmp_path / "a.txt"), system_path(tmp_path / "sub")}


def test_list_directory_leaves_entries_unchanged_on_invalid_name(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr("pathkit.path.value.os.listdir", lambda _: ["a.txt", "bad/name", "z.txt"])
    marker = SystemPath("marker")
    entries: set[SystemPath] = {marker}

    with pytest.raises(InvalidPathError):
        system_path(tmp_path).list_directory(entries)

    assert entries == {marker}


def test_list_directory_on_file_is_negative(sample_file: Path) -> None:
    entries: set[SystemPath] = set()

    assert system_path(sample_file).list_directory(entries) is False
    assert entries == set()


def test_status_info_snapshot(tmp_path: Path, sample_file: Path) -> None:
    info = system_path(sample_file).status_info()

    assert info is not None
    assert info.file_size == len(b"hello world")
    assert info.is_dir is False
    assert info.mod_time.tzinfo is not None
    assert system_path(sample_file).size() == 11
    assert system_path(sample_file).timestamp() == info.mod_time

    dir_info = system_path(tmp_path).status_info()
    assert dir_info is not None and dir_info.is_dir
    assert system_path(tmp_path / "missing").status_info() is None
    assert system_path(tmp_path / "missing").size() is None


def test_status_info_is_never_cached(sample_file: Path) -> None:
    path = system_path(sample_file)
    first = path.status_info()

    sample_file.write_bytes(b"longer contents than before")
    second = path.status_info()

    assert first is not None and second is not None
    assert second.file_size != first.file_size


@posix_only
def test_set_disk_status_applies_time_and_mode(sample_file: Path) -> None:
    path = system_path(sample_file)
    info = path.status_info()
    assert info is not None
    info.mod_time = datetime(2001, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
    info.mode = 0o640

    path.set_disk_status(info)

    updated = path.status_info()
    assert updated is not None
    assert updated.mod_time == info.mod_time
    assert updated.mode == 0o640


def test_set_disk_status_failures(tmp_path: Path, sample_file: Path) -> None:
    info = system_path(sample_file).status_info()
    assert info is not None

    with pytest.raises(PathIOError):
        system_path(tmp_path / "missing").set_disk_status(info)
    with pytest.raises(InvalidPathError):
        SystemPath().set_disk_status(info)


def test_magic_number_reads_prefix(tmp_path: Path, sample_file: Path) -> None:
    path = system_path(sample_file)

    assert path.magic_number(5) == b"hello"
    assert path.magic_number(100) == b"hello world"
    assert system_path(tmp_path).magic_number(4) is None
    assert system_path(tmp_path / "missing").magic_number(4) is None


def test_magic_number_rejects_negative_length(sample_file: Path) -> None:
    assert system_path(sample_file).magic_number(-1) is None


def test_has_magic_number(tmp_path: Path, sample_file: Path) -> None:
    path = system_path(sample_file)

    assert path.has_magic_number(b"hello")
    assert not path.has_magic_number(b"world")
    assert not path.has_magic_number(b"hello world and more")
    assert not system_path(tmp_path / "missing").has_magic_number(b"hello")


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        (b"!<arch>\nmember", FileType.ARCHIVE),
        (b"llvm\x00\x01", FileType.BYTECODE),
        (b"llvc\x00\x01", FileType.COMPRESSED_BYTECODE),
        (b"plain text", FileType.UNKNOWN),
        (b"", FileType.UNKNOWN),
    ],
)
def test_file_type_classification(tmp_path: Path, content: bytes, expected: FileType) -> None:
    target = tmp_path / "blob"
    target.write_bytes(content)
    path = system_path(target)

    assert path.file_type() is expected
    assert path.is_archive() is (expected is FileType.ARCHIVE)
    assert path.is_bytecode_file() is (expected is FileType.BYTECODE)
    assert path.is_compressed_bytecode_file() is (expected is FileType.COMPRESSED_BYTECODE)


def test_directories_classify_as_unknown(tmp_path: Path) -> None:
    assert system_path(tmp_path).file_type() is FileType.UNKNOWN


def test_dll_suffix_with_mz_header_is_dynamic_library(tmp_path: Path) -> None:
    target = tmp_path / "helper.dll"
    target.write_bytes(b"MZ\x90\x00")

    assert system_path(target).is_dynamic_library()
    assert not system_path(tmp_path / "missing.dll").is_dynamic_library()


def test_create_directory_without_parents(tmp_path: Path) -> None:
    nested = system_path(tmp_path / "one" / "two")

    with pytest.raises(PathIOError):
        nested.create_directory()
    assert not nested.exists()

    single = system_path(tmp_path / "one")
    assert single.create_directory() is True
    with pytest.raises(PathIOError):
        single.create_directory()


def test_create_directory_with_parents(tmp_path: Path) -> None:
    nested = system_path(tmp_path / "one" / "two" / "three")

    assert nested.create_directory(create_parents=True) is True
    assert nested.is_directory()
    assert nested.create_directory(create_parents=True) is True


def test_create_file(tmp_path: Path) -> None:
    target = system_path(tmp_path / "new.txt")

    assert target.create_file() is True
    assert target.is_file()
    assert target.size() == 0


def test_create_file_rejects_directory_style_and_missing_parents(tmp_path: Path) -> None:
    directory_style = SystemPath(str(tmp_path) + os.sep + "dir" + os.sep)

    assert directory_style.create_file() is False
    assert not directory_style.exists()
    with pytest.raises(PathIOError):
        system_path(tmp_path / "absent" / "file.txt").create_file()


def test_make_unique_reuses_unused_name(tmp_path: Path) -> None:
    path = system_path(tmp_path / "fresh.txt")

    path.make_unique(reuse_existing=True)

    assert path == system_path(tmp_path / "fresh.txt")


@posix_only
def test_make_unique_treats_dangling_symlink_as_taken(tmp_path: Path) -> None:
    link = tmp_path / "link.txt"
    os.symlink(tmp_path / "nowhere", link)
    path = system_path(link)

    path.make_unique(reuse_existing=True)

    assert path != system_path(link)
    assert not os.path.lexists(path.text)
    assert path.base_name().startswith("link-")


def test_make_unique_without_reuse_always_renames(tmp_path: Path) -> None:
    path = system_path(tmp_path / "fresh.txt")

    path.make_unique(reuse_existing=False)

    assert path != system_path(tmp_path / "fresh.txt")
    assert not path.exists()


def test_make_unique_produces_fresh_names(tmp_path: Path, sample_file: Path) -> None:
    seen = {system_path(sample_file)}
    for _ in range(5):
        path = system_path(sample_file)
        path.make_unique()

        assert not path.exists()
        assert path not in seen
        assert path.suffix() == "txt"
        assert path.base_name().startswith("sample-")
        assert path.create_file()
        seen.add(path)


def test_make_unique_gives_up_after_configured_attempts(
    sample_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    configure(PathkitConfig.model_validate({"temporary": {"max_attempts": 3, "unique_suffix_length": 1}}))
    monkeypatch.setattr("pathkit.path.value.secrets.choice", lambda alphabet: "z")
    (sample_file.parent / "sample-z.txt").touch()
    path = system_path(sample_file)

    with pytest.raises(PathError):
        path.make_unique()
    assert path == system_path(sample_file)


def test_create_unique_temporary_file_twice_yields_distinct_files(tmp_path: Path) -> None:
    start = system_path(tmp_path / "scratch.tmp")
    first = start.copy()
    second = start.copy()

    assert first.create_unique_temporary_file(reuse_existing=False)
    assert second.create_unique_temporary_file(reuse_existing=False)

    assert first != second
    assert first.is_file() and second.is_file()
    assert not start.exists()


def test_create_unique_temporary_file_reuses_unused_name(tmp_path: Path) -> None:
    path = system_path(tmp_path / "scratch.tmp")

    assert path.create_unique_temporary_file(reuse_existing=True)
    assert path == system_path(tmp_path / "scratch.tmp")
    assert path.is_file()

    again = system_path(tmp_path / "scratch.tmp")
    assert again.create_unique_temporary_file(reuse_existing=True)
    assert again != path


def test_create_unique_temporary_file_rejects_directory_style(tmp_path: Path) -> None:
    assert SystemPath(str(tmp_path) + os.sep).create_unique_temporary_file() is False


def test_rename_on_disk(tmp_path: Path, sample_file: Path) -> None:
    source = system_path(sample_file)
    destination = system_path(tmp_path / "renamed.txt")

    assert source.rename_on_disk(destination) is True

    assert source.text == str(sample_file)
    assert not source.exists()
    assert destination.is_file()
    with pytest.raises(PathIOError):
        source.rename_on_disk(destination)


def test_erase_from_disk(tmp_path: Path, sample_file: Path) -> None:
    assert system_path(sample_file).erase_from_disk() is True
    assert not sample_file.exists()
    assert system_path(sample_file).erase_from_disk() is False

    populated = tmp_path / "populated"
    populated.mkdir()
    (populated / "inner.txt").touch()
    with pytest.raises(PathIOError):
        system_path(populated).erase_from_disk()
    assert system_path(populated).erase_from_disk(destroy_contents=True) is True
    assert not populated.exists()


def test_directory_lifecycle_end_to_end() -> None:
    parent = SystemPath.from_temporary_directory()
    child = parent.copy()
    assert child.append_component("sub")

    assert child.create_directory(create_parents=True)
    entries: set[SystemPath] = set()
    assert parent.list_directory(entries)
    assert {entry.last_component() for entry in entries} == {"sub"}

    assert parent.erase_from_disk(destroy_contents=True)
    assert not parent.exists()
    assert not child.exists()
