# tests/core/test_fileops.py
"""Tests for locking and staged writes."""

import sys
from pathlib import Path

import pytest

from localconfig.core.fileops import (
    append_text,
    file_size,
    lock_path_for,
    restore_size,
    settings_lock,
    staged_write,
)


class TestStagedWrite:
    def test_commits_on_success(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig"

        with staged_write(target) as fh:
            fh.write("a = 1\n")
            assert not target.exists()

        assert target.read_text() == "a = 1\n"

    def test_discards_on_error(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig"
        target.write_text("a = 0\n")

        with pytest.raises(RuntimeError), staged_write(target) as fh:
            fh.write("a = 1\n")
            raise RuntimeError("boom")

        assert target.read_text() == "a = 0\n"
        assert [p.name for p in tmp_path.iterdir()] == ["localconfig"]

    def test_writes_unix_newlines(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig"

        with staged_write(target) as fh:
            fh.write("a = 1\nb = 2\n")

        assert target.read_bytes() == b"a = 1\nb = 2\n"


class TestAppendText:
    def test_creates_and_appends(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig.old"

        append_text(target, "a = 1\n")
        append_text(target, "b = 2\n")

        assert target.read_text() == "a = 1\nb = 2\n"


class TestRestoreSize:
    def test_file_size_of_missing_file(self, tmp_path: Path) -> None:
        assert file_size(tmp_path / "missing") is None

    def test_truncates_appended_text(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig.old"
        target.write_text("a = 1\n")
        size = file_size(target)
        append_text(target, "b = 2\n")

        restore_size(target, size)

        assert target.read_text() == "a = 1\n"

    def test_removes_file_that_did_not_exist(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig.old"
        size = file_size(target)
        append_text(target, "b = 2\n")

        restore_size(target, size)

        assert not target.exists()


class TestSettingsLock:
    def test_lock_path_is_sibling(self) -> None:
        assert lock_path_for(Path("/srv/localconfig")) == Path("/srv/localconfig.lock")

    @pytest.mark.skipif(sys.platform.startswith("win"), reason="fcntl is POSIX only")
    def test_creates_lock_file(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig"

        with settings_lock(target):
            assert lock_path_for(target).exists()

    def test_lock_is_reentrant_across_sequential_uses(self, tmp_path: Path) -> None:
        target = tmp_path / "localconfig"

        with settings_lock(target):
            pass
        with settings_lock(target):
            pass
