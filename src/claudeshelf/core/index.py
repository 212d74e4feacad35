"""In-memory index of the files found by the last scan."""

from __future__ import annotations

import logging
import os
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Iterator

from claudeshelf.models.category import Category
from claudeshelf.models.scan_result import FileEntry

log = logging.getLogger(__name__)


class FileIndex:
    """Holds the current entries keyed by id, in scan order."""

    def __init__(self, entries: Iterable[FileEntry] = ()) -> None:
        self._entries: dict[str, FileEntry] = {}
        self.replace(entries)

    def replace(self, entries: Iterable[FileEntry]) -> None:
        """Swap in the result of a fresh scan."""
        self._entries = {entry.id: entry for entry in entries}

    @property
    def entries(self) -> list[FileEntry]:
        return list(self._entries.values())

    def get(self, entry_id: str) -> FileEntry | None:
        return self._entries.get(entry_id)

    def find_by_path(self, path: str) -> FileEntry | None:
        for entry in self._entries.values():
            if entry.path == path:
                return entry
        return None

    def filtered(self, category: Category | None = None, search: str = "") -> list[FileEntry]:
        """Entries in *category* (all if None) matching *search* case-insensitively.

        The query is matched against name, display name, path and project.
        """
        result = self.entries
        if category is not None:
            result = [e for e in result if e.category is category]
        if search:
            query = search.lower()
            result = [
                e for e in result
                if query in e.name.lower()
                or query in e.display_name.lower()
                or query in e.path.lower()
                or (e.project is not None and query in e.project.lower())
            ]
        return result

    def category_counts(self) -> dict[Category, int]:
        counts: dict[Category, int] = {}
        for entry in self._entries.values():
            counts[entry.category] = counts.get(entry.category, 0) + 1
        return counts

    def category_sizes(self) -> dict[Category, int]:
        sizes: dict[Category, int] = {}
        for entry in self._entries.values():
            sizes[entry.category] = sizes.get(entry.category, 0) + entry.size
        return sizes

    def remove(self, paths: Iterable[str]) -> int:
        """Drop entries whose path is in *paths*. Returns how many were removed."""
        doomed = set(paths)
        before = len(self._entries)
        self._entries = {k: e for k, e in self._entries.items() if e.path not in doomed}
        removed = before - len(self._entries)
        log.debug("Removed %d entries from index", removed)
        return removed

    def refresh(self, path: str) -> FileEntry | None:
        """Re-read size, mtime and writability of an indexed file after a save."""
        entry = self.find_by_path(path)
        if entry is None:
            return None
        try:
            st = os.stat(path)
        except OSError:
            log.debug("Refresh failed, dropping %s", path)
            self.remove([path])
            return None
        updated = replace(
            entry,
            size=st.st_size,
            modified=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            read_only=not os.access(path, os.W_OK),
        )
        self._entries[entry.id] = updated
        return updated

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(list(self._entries.values()))

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self._entries
