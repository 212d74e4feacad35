"""Tests for atomic writes, trash and delete."""

from __future__ import annotations

import errno
import os
import stat

import pytest

from claudeshelf.core import file_operations
from claudeshelf.core.file_operations import FileOperationError


def _mode(path) -> int:
    return stat.S_IMODE(os.stat(path).st_mode)


@pytest.fixture
def zero_umask():
    old = os.umask(0)
    yield
    os.umask(old)


class TestSaveFile:
    def test_replaces_content(self, make_file):
        path = make_file("settings.json", "old")
        file_operations.save_file(path, '{"new": true}')
        assert path.read_text() == '{"new": true}'

    def test_preserves_permissions(self, make_file):
        path = make_file("settings.json", "old")
        os.chmod(path, 0o640)
        file_operations.save_file(path, "new")
        assert _mode(path) == 0o640

    def test_preserves_executable_bit(self, make_file):
        path = make_file(".claude/hooks/run.sh", "#!/bin/sh\n")
        os.chmod(path, 0o755)
        file_operations.save_file(path, "#!/bin/sh\necho hi\n")
        assert _mode(path) == 0o755

    def test_leaves_no_temp_files(self, tmp_path, make_file):
        path = make_file("notes/a.md", "old")
        file_operations.save_file(path, "new")
        assert sorted(p.name for p in path.parent.iterdir()) == ["a.md"]

    def test_keeps_line_endings(self, make_file):
        path = make_file("a.md", "")
        file_operations.save_file(path, "one\r\ntwo\n")
        assert path.read_bytes() == b"one\r\ntwo\n"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileOperationError) as exc:
            file_operations.save_file(tmp_path / "missing.json", "{}")
        assert exc.value.action == "save"
        assert "missing.json" in str(exc.value)


class TestCreateFile:
    def test_default_mode(self, tmp_path, zero_umask):
        path = tmp_path / "new.md"
        file_operations.create_file(path, "hello")
        assert path.read_text() == "hello"
        assert _mode(path) == 0o600

    def test_creates_parents(self, tmp_path):
        path = tmp_path / "a" / "b" / ".claude" / "CLAUDE.md"
        file_operations.create_file(path)
        assert path.exists()
        assert path.read_text() == ""

    def test_refuses_existing_file(self, make_file):
        path = make_file("CLAUDE.md", "keep me")
        with pytest.raises(FileOperationError):
            file_operations.create_file(path, "overwrite")
        assert path.read_text() == "keep me"

    def test_leaves_no_temp_files(self, tmp_path, make_file):
        path = make_file("dir/CLAUDE.md", "x")
        with pytest.raises(FileOperationError):
            file_operations.create_file(path, "y")
        file_operations.create_file(tmp_path / "dir" / "other.md", "z")
        assert sorted(p.name for p in path.parent.iterdir()) == ["CLAUDE.md", "other.md"]

    def test_without_hard_links(self, tmp_path, zero_umask, monkeypatch):
        def no_link(src, dst, *args, **kwargs):
            raise PermissionError(errno.EPERM, "Operation not permitted")

        monkeypatch.setattr(os, "link", no_link)
        path = tmp_path / "exfat" / "CLAUDE.md"
        file_operations.create_file(path, "# New")
        assert path.read_text() == "# New"
        assert _mode(path) == 0o600
        assert sorted(p.name for p in path.parent.iterdir()) == ["CLAUDE.md"]

    def test_without_hard_links_refuses_existing_file(self, make_file, monkeypatch):
        def no_link(src, dst, *args, **kwargs):
            raise OSError(errno.ENOTSUP, "Operation not supported")

        monkeypatch.setattr(os, "link", no_link)
        path = make_file("CLAUDE.md", "keep me")
        with pytest.raises(FileOperationError):
            file_operations.create_file(path, "overwrite")
        assert path.read_text() == "keep me"
        assert sorted(p.name for p in path.parent.iterdir() if p.name.endswith(".tmp")) == []


class TestFilePermissions:
    def test_reads_mode(self, make_file):
        path = make_file("a.md")
        os.chmod(path, 0o604)
        assert file_operations.file_permissions(path) == 0o604

    def test_missing_raises(self, tmp_path):
        with pytest.raises(FileOperationError):
            file_operations.file_permissions(tmp_path / "nope")


class TestTrash:
    def test_moves_to_trash(self, make_file, fake_trash):
        path = make_file("old.md")
        file_operations.trash_file(path)
        assert not path.exists()
        assert fake_trash == [str(path)]

    def test_missing_file_raises(self, tmp_path, fake_trash):
        with pytest.raises(FileOperationError) as exc:
            file_operations.trash_file(tmp_path / "gone.md")
        assert exc.value.action == "trash"
        assert fake_trash == []

    def test_bulk_trash_continues_past_failures(self, tmp_path, make_file, fake_trash):
        a = make_file("a.md")
        b = make_file("b.md")
        result = file_operations.trash_files([str(a), str(tmp_path / "missing.md"), str(b)])
        assert result.action == "trash"
        assert result.succeeded == [str(a), str(b)]
        assert result.failed_count == 1
        assert not result.ok


class TestDelete:
    def test_deletes_file(self, make_file):
        path = make_file("a.md")
        file_operations.delete_file(path)
        assert not path.exists()

    def test_deletes_directory_tree(self, tmp_path, make_file):
        make_file("tree/sub/a.md")
        file_operations.delete_file(tmp_path / "tree")
        assert not (tmp_path / "tree").exists()

    def test_missing_raises(self, tmp_path):
        with pytest.raises(FileOperationError) as exc:
            file_operations.delete_file(tmp_path / "nope.md")
        assert str(exc.value).startswith("Failed to delete")

    def test_bulk_delete_counts(self, tmp_path, make_file):
        existing = [str(make_file(f"f{i}.md")) for i in range(5)]
        missing = [str(tmp_path / f"missing{i}.md") for i in range(2)]
        result = file_operations.delete_files(existing + missing)
        assert result.succeeded_count == 5
        assert result.failed_count == 2
        assert result.summary == "5 file(s) processed, 2 file(s) failed"
        assert all(not os.path.exists(p) for p in existing)

    def test_bulk_delete_empty(self):
        result = file_operations.delete_files([])
        assert result.ok
        assert result.succeeded == []
