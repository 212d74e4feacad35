"""Directory walker that discovers Claude configuration files."""

from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from pathlib import Path

from claudeshelf.core.categories import assign_category, file_extension
from claudeshelf.core.path_decoder import detect_scope, display_name
from claudeshelf.models.scan_location import ScanLocation
from claudeshelf.models.scan_result import DiscoveredFile, FileEntry, ScanResult, generate_id

log = logging.getLogger(__name__)

MARKER_DIR = ".claude"

# Extensions (without dot) picked up inside a .claude directory.
KNOWN_EXTENSIONS = frozenset({"md", "json", "yaml", "yml", "txt", "toml", "log", "sh"})

# Filenames picked up anywhere.
SPECIAL_FILES = frozenset({"CLAUDE.md", ".clauderc"})

SKIP_DIRECTORIES = frozenset({".git", "node_modules", ".venv", "__pycache__"})

# Deepest directory entered outside .claude: 0 = location itself, 2 = grandchildren.
MAX_DEPTH = 2


class FileScanner:
    """Walks scan locations and collects configuration files.

    Outside ``.claude`` the walk stops below ``MAX_DEPTH`` and only
    ``SPECIAL_FILES`` are collected. Entering ``.claude`` lifts the depth limit
    and collects every file with a known extension. Symbolic links to
    directories are never followed.
    """

    def __init__(self, home: Path | str | None = None) -> None:
        self.home = str(home or Path.home())

    def scan(self, locations: list[ScanLocation]) -> ScanResult:
        """Scan locations and classify every discovered file, each path once."""
        files, duration, errors = self.scan_locations(locations)
        entries: list[FileEntry] = []
        seen: set[str] = set()
        # Overlapping locations (~ and ~/.claude) reach the same file twice.
        for discovered in files:
            entry = self.build_entry(discovered)
            if entry.id in seen:
                continue
            seen.add(entry.id)
            entries.append(entry)
        log.info("Scan found %d files in %.3fs (%d errors)", len(entries), duration, len(errors))
        return ScanResult(
            files=entries,
            scanned_at=datetime.now(timezone.utc),
            duration=duration,
            errors=errors,
        )

    def scan_locations(
        self, locations: list[ScanLocation]
    ) -> tuple[list[DiscoveredFile], float, list[str]]:
        """Walk all enabled locations.

        Returns:
            (files, duration_seconds, errors) tuple. Missing locations are
            skipped without an error.
        """
        start = time.monotonic()
        files: list[DiscoveredFile] = []
        errors: list[str] = []

        for location in locations:
            if not location.enabled:
                continue
            root = Path(location.path).expanduser()
            if not root.is_dir():
                log.debug("Skipping missing location: %s", root)
                continue
            marker_base = root if root.name == MARKER_DIR else None
            self._scan_directory(root, 0, marker_base, files, errors)

        return files, time.monotonic() - start, errors

    def build_entry(self, discovered: DiscoveredFile) -> FileEntry:
        """Classify a discovered file into an indexed entry."""
        path = str(discovered.path)
        scope, project = detect_scope(path, self.home)
        return FileEntry(
            id=generate_id(path),
            name=discovered.name,
            path=path,
            display_name=display_name(discovered.name, project),
            category=assign_category(discovered.name, path, discovered.inside_marker),
            scope=scope,
            project=project,
            size=discovered.size,
            modified=discovered.modified,
            read_only=discovered.read_only,
        )

    def _scan_directory(
        self,
        directory: Path,
        depth: int,
        marker_base: Path | None,
        files: list[DiscoveredFile],
        errors: list[str],
    ) -> None:
        """Recursively collect files below *directory*.

        *marker_base* is the nearest ``.claude`` ancestor, or None outside one.
        """
        inside_marker = marker_base is not None
        try:
            with os.scandir(directory) as it:
                items = list(it)
        except OSError as e:
            message = f"Failed to read directory {directory}: {e.strerror or e}"
            log.error(message)
            errors.append(message)
            return

        for item in items:
            try:
                is_dir = item.is_dir(follow_symlinks=False)
            except OSError as e:
                message = f"Failed to read attributes for {item.path}: {e.strerror or e}"
                log.error(message)
                errors.append(message)
                continue

            if is_dir:
                if item.name in SKIP_DIRECTORIES:
                    continue
                if item.name == MARKER_DIR:
                    self._scan_directory(Path(item.path), 0, Path(item.path), files, errors)
                elif item.name.startswith("."):
                    continue
                elif inside_marker:
                    self._scan_directory(Path(item.path), depth + 1, marker_base, files, errors)
                elif depth < MAX_DEPTH:
                    self._scan_directory(Path(item.path), depth + 1, None, files, errors)
                continue

            if not _should_include(item.name, inside_marker):
                continue

            try:
                st = item.stat()
            except OSError as e:
                message = f"Failed to read attributes for {item.path}: {e.strerror or e}"
                log.error(message)
                errors.append(message)
                continue

            path = Path(item.path)
            relative = path.relative_to(marker_base).as_posix() if marker_base is not None else None
            files.append(
                DiscoveredFile(
                    path=path,
                    name=item.name,
                    size=st.st_size,
                    modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
                    read_only=not os.access(item.path, os.W_OK),
                    inside_marker=inside_marker,
                    marker_relative_path=relative,
                )
            )


def _should_include(name: str, inside_marker: bool) -> bool:
    if name in SPECIAL_FILES:
        return True
    return inside_marker and file_extension(name) in KNOWN_EXTENSIONS
