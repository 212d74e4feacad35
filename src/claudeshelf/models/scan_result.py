"""Scan result dataclasses."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from claudeshelf.models.category import Category, Scope


def generate_id(path: str) -> str:
    """Return a stable 16-character id for an absolute path.

    First 8 bytes of the SHA-256 digest of the UTF-8 path, hex encoded.
    """
    return hashlib.sha256(path.encode("utf-8")).hexdigest()[:16]


@dataclass(slots=True)
class DiscoveredFile:
    """A file found by the scanner, before classification.

    ``marker_relative_path`` is the path below the nearest ``.claude``
    ancestor and is ``None`` for files outside any ``.claude`` directory.
    """

    path: Path
    name: str
    size: int
    modified: datetime
    read_only: bool
    inside_marker: bool
    marker_relative_path: str | None = None


@dataclass(frozen=True, slots=True)
class FileEntry:
    """Single indexed configuration file."""

    id: str
    name: str
    path: str
    display_name: str
    category: Category
    scope: Scope
    project: str | None
    size: int
    modified: datetime
    read_only: bool

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "display_name": self.display_name,
            "category": self.category.value,
            "scope": self.scope.value,
            "project": self.project,
            "size": self.size,
            "modified": self.modified.isoformat(),
            "read_only": self.read_only,
        }


@dataclass(slots=True)
class ScanResult:
    """Result of scanning all enabled locations."""

    files: list[FileEntry] = field(default_factory=list)
    scanned_at: datetime | None = None
    duration: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def total_bytes(self) -> int:
        return sum(f.size for f in self.files)
