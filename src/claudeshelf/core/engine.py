"""Scanning, indexing and file operation orchestration engine."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from claudeshelf.core import cleanup, file_operations
from claudeshelf.core.index import FileIndex
from claudeshelf.core.scanner import FileScanner
from claudeshelf.core.watcher import ChangeCallback, FileWatcher
from claudeshelf.models.cleanup_item import CleanupItem
from claudeshelf.models.operation_result import OperationResult
from claudeshelf.models.scan_location import ScanLocation
from claudeshelf.models.scan_result import FileEntry, ScanResult

log = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]  # status: "scanning", "done", "error"
ResultCallback = Callable[[ScanResult], None]


class ShelfEngine:
    """Keeps the file index in sync with the filesystem.

    At most one scan runs at a time. Requests made while a scan is in flight
    are dropped rather than queued. File operations update the index with
    whatever subset succeeded.
    """

    def __init__(
        self,
        locations: list[ScanLocation],
        scanner: FileScanner | None = None,
        watcher: FileWatcher | None = None,
    ) -> None:
        self.locations = locations
        self.scanner = scanner or FileScanner()
        self.watcher = watcher or FileWatcher()
        self.index = FileIndex()
        self.last_scan: ScanResult | None = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="claudeshelf-scan")
        self._lock = threading.Lock()
        self._scanning = False

    @property
    def is_scanning(self) -> bool:
        return self._scanning

    # ── scanning ─────────────────────────────────────────────────────────

    def scan(self, on_progress: ProgressCallback | None = None) -> ScanResult | None:
        """Scan in the calling thread. Returns None if a scan is already running."""
        if not self._begin_scan():
            return None
        try:
            return self._run_scan(on_progress)
        finally:
            self._end_scan()

    def scan_async(
        self,
        on_progress: ProgressCallback | None = None,
        on_result: ResultCallback | None = None,
    ) -> Future[ScanResult | None] | None:
        """Scan on the worker thread.

        Returns the future of the scan, or None when the request was dropped
        because another scan is in flight.
        """
        if not self._begin_scan():
            log.debug("Scan already in progress, dropping request")
            return None
        return self._executor.submit(self._scan_worker, on_progress, on_result)

    def _scan_worker(
        self,
        on_progress: ProgressCallback | None,
        on_result: ResultCallback | None,
    ) -> ScanResult | None:
        try:
            result = self._run_scan(on_progress)
            if on_result:
                on_result(result)
            return result
        except Exception:
            log.exception("Scan failed")
            if on_progress:
                on_progress("error")
            return None
        finally:
            self._end_scan()

    def _run_scan(self, on_progress: ProgressCallback | None) -> ScanResult:
        if on_progress:
            on_progress("scanning")
        result = self.scanner.scan(self.locations)
        self.index.replace(result.files)
        self.last_scan = result
        if on_progress:
            on_progress("done")
        return result

    def _begin_scan(self) -> bool:
        with self._lock:
            if self._scanning:
                return False
            self._scanning = True
            return True

    def _end_scan(self) -> None:
        with self._lock:
            self._scanning = False

    # ── analysis ─────────────────────────────────────────────────────────

    def cleanup_candidates(self) -> list[CleanupItem]:
        """Analyze the current index for cleanup candidates."""
        return cleanup.analyze(self.index.entries)

    # ── file operations ──────────────────────────────────────────────────

    def trash(self, paths: list[str]) -> OperationResult:
        """Move files to the trash and drop the trashed ones from the index."""
        result = file_operations.trash_files(paths)
        self.index.remove(result.succeeded)
        return result

    def delete(self, paths: list[str]) -> OperationResult:
        """Permanently delete files and drop the deleted ones from the index."""
        result = file_operations.delete_files(paths)
        self.index.remove(result.succeeded)
        return result

    def save(self, path: str, content: str) -> FileEntry | None:
        """Save new content to an existing file and refresh its index entry.

        Raises:
            FileOperationError: If the file could not be written.
        """
        file_operations.save_file(path, content)
        return self.index.refresh(path)

    def create(self, path: str, content: str = "") -> None:
        """Create a new file. It joins the index on the next scan.

        Raises:
            FileOperationError: If the file exists or could not be written.
        """
        file_operations.create_file(path, content)

    # ── watching ─────────────────────────────────────────────────────────

    def watch(self, on_change: ChangeCallback | None = None) -> list[str]:
        """Watch all enabled locations; by default every change burst rescans.

        Returns the directories actually being watched.
        """
        directories = [
            str(Path(loc.path).expanduser()) for loc in self.locations if loc.enabled
        ]
        self.watcher.start(directories, on_change or self.scan_async)
        return self.watcher.watched_directories

    def unwatch(self) -> None:
        self.watcher.stop()

    def shutdown(self) -> None:
        """Stop the watcher and wait for any running scan to finish."""
        self.unwatch()
        self._executor.shutdown(wait=True)
