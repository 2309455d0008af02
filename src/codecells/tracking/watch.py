"""Filesystem change subscriptions backed by watchdog observers."""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import BaseObserver, ObservedWatch
from watchdog.observers.polling import PollingObserver


class WatchSubscription(Protocol):
    """Change notifications for one path."""

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the next change or cancellation; return False on timeout."""

    def cancel(self) -> None:
        """Wake any waiter and make every later wait return immediately."""

    def close(self) -> None:
        """Release the underlying watch."""


class _PathEventHandler(FileSystemEventHandler):
    """Forward directory events that concern a single file path."""

    def __init__(self, path: Path, changed: threading.Event) -> None:
        super().__init__()
        self._path = os.fsdecode(path)
        self._changed = changed

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        candidates = {os.fsdecode(event.src_path)}
        dest_path = getattr(event, "dest_path", "")
        if dest_path:
            candidates.add(os.fsdecode(dest_path))
        if self._path in candidates:
            self._changed.set()


class WatchdogSubscription:
    """Subscription for one file on a shared watchdog observer."""

    def __init__(self, observer: BaseObserver, path: Path) -> None:
        self._observer = observer
        self._changed = threading.Event()
        self._cancelled = False
        self._handler = _PathEventHandler(path, self._changed)
        self._watch: ObservedWatch | None = observer.schedule(
            self._handler, str(path.parent), recursive=False
        )

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the file changes or the subscription is cancelled."""
        woke = self._changed.wait(timeout)
        if not self._cancelled:
            self._changed.clear()
        return woke

    def cancel(self) -> None:
        """Wake the waiter permanently."""
        self._cancelled = True
        self._changed.set()

    def close(self) -> None:
        """Detach this subscription's handler from the observer."""
        if self._watch is None:
            return
        watch, self._watch = self._watch, None
        try:
            self._observer.remove_handler_for_watch(self._handler, watch)
        except KeyError:
            pass


class WatchHub:
    """Lazily started observer shared by every subscription of one tracker."""

    def __init__(self, polling: bool = False, poll_interval_seconds: float = 0.5) -> None:
        self._polling = polling
        self._poll_interval_seconds = poll_interval_seconds
        self._observer: BaseObserver | None = None
        self._lock = threading.Lock()

    def subscribe(self, path: Path) -> WatchdogSubscription:
        """Open a subscription for path, starting the observer on first use."""
        with self._lock:
            if self._observer is None:
                if self._polling:
                    observer: BaseObserver = PollingObserver(timeout=self._poll_interval_seconds)
                else:
                    observer = Observer()
                observer.daemon = True
                observer.start()
                self._observer = observer
            return WatchdogSubscription(self._observer, path)

    def stop(self) -> None:
        """Stop the observer thread, if it was started."""
        with self._lock:
            observer, self._observer = self._observer, None
        if observer is not None:
            observer.stop()
            observer.join(timeout=1.0)
