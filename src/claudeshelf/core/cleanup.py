"""Heuristic detection of files that are likely safe to discard."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from pathlib import Path

from claudeshelf.models.cleanup_item import CleanupItem, CleanupReason
from claudeshelf.models.scan_result import FileEntry

log = logging.getLogger(__name__)

STALE_THRESHOLD = timedelta(days=30)

# Only files smaller than this are read for the empty-content check.
CONTENT_CHECK_LIMIT = 1024

EMPTY_CONTENT_PATTERNS = frozenset({"[]", "{}", "null"})

_GROUP_ORDER = (CleanupReason.EMPTY_FILE, CleanupReason.EMPTY_CONTENT, CleanupReason.STALE)


def analyze(entries: list[FileEntry], now: datetime | None = None) -> list[CleanupItem]:
    """Flag empty, effectively empty and stale files.

    Each check runs independently, so one entry can yield several items.
    """
    now = now or datetime.now(timezone.utc)
    items: list[CleanupItem] = []

    for entry in entries:
        if entry.size == 0:
            items.append(_item(entry, CleanupReason.EMPTY_FILE, "File is empty (0 bytes)"))

        if 0 < entry.size < CONTENT_CHECK_LIMIT:
            detail = _empty_content_detail(entry.path)
            if detail is not None:
                items.append(_item(entry, CleanupReason.EMPTY_CONTENT, detail))

        age = now - entry.modified
        if age > STALE_THRESHOLD:
            items.append(_item(entry, CleanupReason.STALE, f"Not modified in {age.days} days"))

    log.info("Cleanup analysis found %d items from %d files", len(items), len(entries))
    return items


def grouped(items: list[CleanupItem]) -> list[tuple[CleanupReason, list[CleanupItem]]]:
    """Group items by reason in display order, omitting empty groups."""
    groups = []
    for reason in _GROUP_ORDER:
        matching = [item for item in items if item.reason is reason]
        if matching:
            groups.append((reason, matching))
    return groups


def unique_entries(items: list[CleanupItem]) -> list[FileEntry]:
    """Return each flagged entry once, in first-occurrence order."""
    seen: set[str] = set()
    result: list[FileEntry] = []
    for item in items:
        if item.entry.id not in seen:
            seen.add(item.entry.id)
            result.append(item.entry)
    return result


def _item(entry: FileEntry, reason: CleanupReason, detail: str) -> CleanupItem:
    return CleanupItem(id=f"{entry.id}-{reason.tag}", entry=entry, reason=reason, detail=detail)


def _empty_content_detail(path: str) -> str | None:
    """Describe a file whose trimmed content is empty or a bare literal."""
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        log.debug("Cannot read for content check: %s", path)
        return None

    trimmed = content.strip()
    if not trimmed:
        return "File contains only whitespace"
    if trimmed in EMPTY_CONTENT_PATTERNS:
        return f'File contains only "{trimmed}"'
    return None
