"""Cleanup candidate dataclass."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from claudeshelf.models.scan_result import FileEntry


class CleanupReason(str, Enum):
    """Why a file was flagged for cleanup."""

    EMPTY_FILE = "empty-file"
    EMPTY_CONTENT = "empty-content"
    STALE = "stale"

    @property
    def tag(self) -> str:
        """Suffix used in the composite cleanup item id."""
        return _TAGS[self]


_TAGS = {
    CleanupReason.EMPTY_FILE: "empty",
    CleanupReason.EMPTY_CONTENT: "content",
    CleanupReason.STALE: "stale",
}


@dataclass(frozen=True, slots=True)
class CleanupItem:
    """A file flagged as a cleanup candidate.

    One entry may appear in several items, once per reason.
    """

    id: str
    entry: FileEntry
    reason: CleanupReason
    detail: str
