"""Debounced filesystem watcher.

watchdog observer threads only push a token into a length-1 queue. A single
debounce thread owns the quiet-period timer: every token restarts it, and the
change callback runs once the directories have been quiet for a full
interval.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
import queue
import threading
import time
from typing import Any, Awaitable, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from claudeshelf.core.scanner import MARKER_DIR, SKIP_DIRECTORIES

log = logging.getLogger(__name__)

ChangeCallback = Callable[[], Any]

# Access-only events; reading a file during a rescan must not retrigger one.
_IGNORED_EVENT_TYPES = frozenset({"opened", "closed", "closed_no_write"})

_JOIN_TIMEOUT = 5.0


def is_relevant_path(path: str, root: str) -> bool:
    """Whether a change at *path* below the watched *root* can affect a scan.

    Changes inside skipped directories and hidden directories other than
    ``.claude`` are not.
    """
    relative = os.path.relpath(path, root)
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        return True
    for part in relative.split(os.sep)[:-1]:
        if part in SKIP_DIRECTORIES:
            return False
        if part.startswith(".") and part != MARKER_DIR:
            return False
    return True


class _ChangeHandler(FileSystemEventHandler):
    """Forwards relevant watchdog events below *root* to the debounce queue."""

    def __init__(self, root: str, notify: Callable[[], None]) -> None:
        super().__init__()
        self._root = root
        self._notify = notify

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type in _IGNORED_EVENT_TYPES:
            return
        paths = [os.fsdecode(event.src_path)]
        if getattr(event, "dest_path", ""):
            paths.append(os.fsdecode(event.dest_path))
        if not any(is_relevant_path(p, self._root) for p in paths):
            return
        self._notify()


class _Session:
    """One start() worth of watcher state: observer, queue and debounce thread."""

    def __init__(self, directories: list[str]) -> None:
        self.directories = directories
        self.events: queue.Queue[bool] = queue.Queue(maxsize=1)
        self.stopped = threading.Event()
        self.observer = Observer()
        self.thread: threading.Thread | None = None

    def notify(self) -> None:
        try:
            self.events.put_nowait(True)
        except queue.Full:
            # A token is already pending; the timer restarts when it is taken.
            pass


class FileWatcher:
    """Watches directories recursively and reports bursts of changes once.

    Args:
        debounce_interval: Seconds of silence required before the callback fires.
        loop: Event loop that coroutine callbacks are submitted to. Without
            one, coroutines run on a private loop in the debounce thread.
    """

    def __init__(
        self,
        debounce_interval: float = 1.0,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.debounce_interval = debounce_interval
        self._loop = loop
        self._session: _Session | None = None

    @property
    def is_running(self) -> bool:
        return self._session is not None

    @property
    def watched_directories(self) -> list[str]:
        return list(self._session.directories) if self._session else []

    def start(self, directories: list[str], on_change: ChangeCallback) -> None:
        """Start watching, replacing any previous subscription set."""
        self.stop()

        session = _Session([])
        session.observer.start()

        for directory in directories:
            if not os.path.isdir(directory):
                log.debug("Not watching missing directory: %s", directory)
                continue
            try:
                session.observer.schedule(
                    _ChangeHandler(directory, session.notify), directory, recursive=True
                )
            except OSError as e:
                log.warning("Cannot watch %s: %s", directory, e)
                continue
            session.directories.append(directory)

        session.thread = threading.Thread(
            target=self._debounce_loop,
            args=(session, on_change),
            name="claudeshelf-watcher",
            daemon=True,
        )
        session.thread.start()
        self._session = session
        log.info("File watcher started for %d directories", len(session.directories))

    def stop(self) -> None:
        """Stop watching and cancel any pending callback."""
        session, self._session = self._session, None
        if session is None:
            return

        session.stopped.set()
        session.notify()
        session.observer.stop()
        if session.observer.is_alive():
            session.observer.join(timeout=_JOIN_TIMEOUT)
        if session.thread is not None and session.thread is not threading.current_thread():
            session.thread.join(timeout=_JOIN_TIMEOUT)
        log.info("File watcher stopped")

    def _debounce_loop(self, session: _Session, on_change: ChangeCallback) -> None:
        deadline: float | None = None
        while True:
            timeout = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                session.events.get(timeout=timeout)
            except queue.Empty:
                if session.stopped.is_set():
                    return
                deadline = None
                self._fire(on_change)
                continue
            if session.stopped.is_set():
                return
            deadline = time.monotonic() + self.debounce_interval

    def _fire(self, on_change: ChangeCallback) -> None:
        log.info("File changes detected, triggering refresh")
        try:
            result = on_change()
            if inspect.isawaitable(result):
                if self._loop is not None:
                    asyncio.run_coroutine_threadsafe(_await(result), self._loop)
                else:
                    asyncio.run(_await(result))
        except Exception:
            log.exception("Change callback failed")


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable
