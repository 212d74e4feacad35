"""Safe file mutations: atomic writes, trash and permanent delete.

Writes always go to a hidden temporary file next to the target, get their
final permission bits, and only then appear at the target path, so the file
is never visible with the wrong mode or partial content.
"""

from __future__ import annotations

import contextlib
import errno
import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Callable

from send2trash import send2trash

from claudeshelf.models.operation_result import OperationResult

log = logging.getLogger(__name__)

# Mode for newly created files: owner read/write only.
DEFAULT_FILE_MODE = 0o600

# errno values from link() on filesystems without hard links (exFAT, FUSE, SMB).
_NO_HARD_LINKS = frozenset({errno.EPERM, errno.ENOTSUP, errno.EOPNOTSUPP})


class FileOperationError(Exception):
    """Raised when a single-file operation fails."""

    def __init__(self, action: str, path: str, message: str) -> None:
        super().__init__(f"Failed to {action} {path}: {message}")
        self.action = action
        self.path = path
        self.message = message


def save_file(path: str | Path, content: str) -> None:
    """Replace the content of an existing file, keeping its permission bits."""
    target = Path(path)
    try:
        mode = stat.S_IMODE(target.stat().st_mode)
    except OSError as e:
        raise FileOperationError("save", str(target), e.strerror or str(e)) from e

    tmp = _write_temp(target, content, "save")
    try:
        os.chmod(tmp, mode)
        os.replace(tmp, target)
    except OSError as e:
        _discard(tmp)
        raise FileOperationError("save", str(target), e.strerror or str(e)) from e
    log.info("Saved %s", target)


def create_file(path: str | Path, content: str = "") -> None:
    """Create a new file with ``DEFAULT_FILE_MODE``, creating parents as needed.

    Fails if the target already exists.
    """
    target = Path(path)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileOperationError("create", str(target), e.strerror or str(e)) from e

    tmp = _write_temp(target, content, "create")
    try:
        os.chmod(tmp, DEFAULT_FILE_MODE)
        _link_new(tmp, target)
    except OSError as e:
        raise FileOperationError("create", str(target), e.strerror or str(e)) from e
    finally:
        _discard(tmp)
    log.info("Created %s with mode %o", target, DEFAULT_FILE_MODE)


def file_permissions(path: str | Path) -> int:
    """Return the permission bits of a file."""
    try:
        return stat.S_IMODE(Path(path).stat().st_mode)
    except OSError as e:
        raise FileOperationError("stat", str(path), e.strerror or str(e)) from e


def trash_file(path: str | Path) -> None:
    """Move a file to the desktop trash (reversible)."""
    target = Path(path)
    if not target.exists() and not target.is_symlink():
        raise FileOperationError("trash", str(target), "No such file or directory")
    try:
        send2trash(str(target))
    except OSError as e:
        raise FileOperationError("trash", str(target), e.strerror or str(e)) from e
    log.info("Moved to trash: %s", target)


def delete_file(path: str | Path) -> None:
    """Permanently remove a file or directory tree (irreversible)."""
    target = Path(path)
    try:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
    except OSError as e:
        raise FileOperationError("delete", str(target), e.strerror or str(e)) from e
    log.info("Permanently deleted: %s", target)


def trash_files(paths: list[str]) -> OperationResult:
    """Trash every path, continuing past failures."""
    return _bulk("trash", trash_file, paths)


def delete_files(paths: list[str]) -> OperationResult:
    """Permanently delete every path, continuing past failures."""
    return _bulk("delete", delete_file, paths)


def _bulk(action: str, operation: Callable[[str], None], paths: list[str]) -> OperationResult:
    result = OperationResult(action=action)
    for path in paths:
        try:
            operation(path)
            result.succeeded.append(path)
        except FileOperationError as e:
            log.error("%s", e)
            result.errors.append(str(e))
    if result.errors:
        log.warning("Bulk %s: %s", action, result.summary)
    return result


def _write_temp(target: Path, content: str, action: str) -> str:
    """Write *content* to a hidden temp file beside *target* and return its path."""
    try:
        fd, tmp = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=target.parent)
    except OSError as e:
        raise FileOperationError(action, str(target), e.strerror or str(e)) from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
    except (OSError, UnicodeEncodeError) as e:
        _discard(tmp)
        raise FileOperationError(action, str(target), str(e)) from e
    return tmp


def _link_new(tmp: str, target: Path) -> None:
    """Move *tmp* to *target*, failing if *target* already exists.

    link() refuses to overwrite, unlike rename(). Where hard links are not
    supported the name is reserved with O_EXCL and then replaced.
    """
    try:
        os.link(tmp, target)
        return
    except OSError as e:
        if e.errno not in _NO_HARD_LINKS:
            raise
    log.debug("No hard links for %s, reserving the name instead", target)
    fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_EXCL, DEFAULT_FILE_MODE)
    os.close(fd)
    try:
        os.replace(tmp, target)
    except OSError:
        _discard(str(target))
        raise


def _discard(tmp: str) -> None:
    with contextlib.suppress(FileNotFoundError):
        os.unlink(tmp)
