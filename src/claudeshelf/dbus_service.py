"""D-Bus service for GUI communication.

D-Bus methods use PascalCase per D-Bus convention, and type signatures
like "as" and "(ss)" are D-Bus protocol types, not Python syntax.
"""

from __future__ import annotations

import asyncio
import json
import logging

from dbus_next import BusType
from dbus_next.aio import MessageBus
from dbus_next.service import ServiceInterface, method, signal

from claudeshelf.core.engine import ShelfEngine
from claudeshelf.core.file_operations import FileOperationError
from claudeshelf.core.watcher import FileWatcher
from claudeshelf.models.category import Category
from claudeshelf.models.operation_result import OperationResult
from claudeshelf.models.scan_result import ScanResult
from claudeshelf.settings import Settings
from claudeshelf.storage import load_locations

log = logging.getLogger(__name__)

_BUS_NAME = "io.github.claudeshelf"
_OBJECT_PATH = "/io/github/claudeshelf"
_INTERFACE = "io.github.claudeshelf.Manager"


def _scan_payload(result: ScanResult) -> str:
    return json.dumps({
        "duration": result.duration,
        "errors": result.errors,
        "files": [f.to_dict() for f in result.files],
    })


def _operation_payload(result: OperationResult) -> str:
    return json.dumps({
        "action": result.action,
        "succeeded": result.succeeded,
        "failed": result.failed_count,
        "errors": result.errors,
    })


# noinspection PyPep8Naming
class ShelfDBusService(ServiceInterface):
    """D-Bus service interface for ClaudeShelf."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__(_INTERFACE)
        self._loop = loop
        interval = float(Settings.instance().get("watcher.debounce_interval"))
        self._engine = ShelfEngine(
            load_locations(),
            watcher=FileWatcher(debounce_interval=interval, loop=loop),
        )

    def start_watching(self) -> None:
        """Rescan in the background whenever watched files change."""
        self._engine.watch(self._on_files_changed)

    def shutdown(self) -> None:
        self._engine.shutdown()

    async def _on_files_changed(self) -> None:
        self.FilesChanged()
        self._request_scan()

    def _request_scan(self) -> bool:
        def on_result(result: ScanResult) -> None:
            self._loop.call_soon_threadsafe(self.ScanFinished, len(result.files), len(result.errors))

        return self._engine.scan_async(on_result=on_result) is not None

    @method()
    def Scan(self) -> "b":  # type: ignore[override]
        """Start a background scan. False if one is already running."""
        return self._request_scan()

    @method()
    def IsScanning(self) -> "b":  # type: ignore[override]
        return self._engine.is_scanning

    @method()
    def LastScan(self) -> "s":  # type: ignore[override]
        """Return the last full scan result as JSON, or an empty object."""
        if self._engine.last_scan is None:
            return json.dumps({})
        return _scan_payload(self._engine.last_scan)

    @method()
    def ListFiles(self, category: "s", search: "s") -> "s":  # type: ignore[override]
        """Return indexed files filtered by category (empty for all) and search text."""
        try:
            selected = Category(category) if category else None
        except ValueError:
            return json.dumps({"error": f"Unknown category '{category}'"})
        files = self._engine.index.filtered(category=selected, search=search)
        return json.dumps([f.to_dict() for f in files])

    @method()
    def CategoryCounts(self) -> "s":  # type: ignore[override]
        counts = self._engine.index.category_counts()
        return json.dumps({c.value: n for c, n in counts.items()})

    @method()
    def CleanupCandidates(self) -> "s":  # type: ignore[override]
        """Analyze the current index for cleanup candidates."""
        items = self._engine.cleanup_candidates()
        return json.dumps([
            {"id": i.id, "entry_id": i.entry.id, "path": i.entry.path, "reason": i.reason.value, "detail": i.detail}
            for i in items
        ])

    @method()
    def Trash(self, paths: "as") -> "s":  # type: ignore[override]
        return _operation_payload(self._engine.trash(list(paths)))

    @method()
    def Delete(self, paths: "as") -> "s":  # type: ignore[override]
        return _operation_payload(self._engine.delete(list(paths)))

    @method()
    def SaveFile(self, path: "s", content: "s") -> "s":  # type: ignore[override]
        try:
            entry = self._engine.save(path, content)
        except FileOperationError as e:
            return json.dumps({"error": str(e)})
        return json.dumps({"entry": entry.to_dict() if entry else None})

    @method()
    def CreateFile(self, path: "s", content: "s") -> "s":  # type: ignore[override]
        try:
            self._engine.create(path, content)
        except FileOperationError as e:
            return json.dumps({"error": str(e)})
        return json.dumps({"path": path})

    @signal()
    def ScanFinished(self, file_count: int, error_count: int) -> "(uu)":  # type: ignore[override]
        return [file_count, error_count]

    @signal()
    def FilesChanged(self) -> "b":  # type: ignore[override]
        return True


async def run_service() -> None:
    """Start the D-Bus service."""
    bus = await MessageBus(bus_type=BusType.SESSION).connect()
    service = ShelfDBusService(asyncio.get_running_loop())
    bus.export(_OBJECT_PATH, service)
    await bus.request_name(_BUS_NAME)
    service.start_watching()
    log.info("D-Bus service started on %s", _BUS_NAME)
    try:
        await bus.wait_for_disconnect()
    finally:
        service.shutdown()


def start_service() -> None:
    """Entry point to start the D-Bus service."""
    asyncio.run(run_service())
