"""Per-file watch loops that re-declare cells when a source file changes."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from types import ModuleType

from codecells.errors import CodeCellsError, FileMissingTransient
from codecells.logging import JsonlEventJournal
from codecells.tracking.registry import TrackedFile, TrackedFileRegistry
from codecells.tracking.watch import WatchSubscription

logger = logging.getLogger(__name__)

Redeclare = Callable[[Path, bytes, ModuleType], object]
WatchFactory = Callable[[Path], WatchSubscription]


class FileTracker:
    """Keep cell definitions in tracked files in step with their source.

    Each tracked path gets one daemon thread. The thread blocks on its watch
    subscription and, whenever the file content differs from the last
    snapshot, re-declares the file's cells into the owning module without
    running any cell body. Untracking sets the entry's cancellation token and
    cancels its subscription, so the loop exits on its next wake.
    """

    def __init__(
        self,
        registry: TrackedFileRegistry,
        redeclare: Redeclare,
        watch_factory: WatchFactory,
        backoff_seconds: float = 0.1,
        journal: JsonlEventJournal | None = None,
    ) -> None:
        self._registry = registry
        self._redeclare = redeclare
        self._watch_factory = watch_factory
        self._backoff_seconds = backoff_seconds
        self._journal = journal
        self._counter_lock = threading.Lock()
        self._loop_starts = 0

    @property
    def registry(self) -> TrackedFileRegistry:
        """Return the registry this tracker mutates."""
        return self._registry

    @property
    def loop_starts(self) -> int:
        """Return how many watch loops this tracker has started."""
        with self._counter_lock:
            return self._loop_starts

    def is_tracked(self, path: Path) -> bool:
        """Return True when path is currently tracked."""
        return path.resolve() in self._registry

    def tracked_paths(self) -> tuple[Path, ...]:
        """Return currently tracked paths."""
        return self._registry.paths()

    def track(self, path: Path, scope: ModuleType) -> bool:
        """Start watching path for scope; return False if it was already tracked."""
        resolved = path.resolve()
        if resolved in self._registry:
            return False
        snapshot = resolved.read_bytes()
        subscription = self._watch_factory(resolved)
        entry = TrackedFile(
            path=resolved,
            snapshot=snapshot,
            scope=scope,
            subscription=subscription,
        )
        if not self._registry.add_if_absent(entry):
            subscription.close()
            return False

        thread = threading.Thread(
            target=self._watch_loop,
            args=(entry,),
            name=f"codecells-watch:{resolved.name}",
            daemon=True,
        )
        entry.thread = thread
        with self._counter_lock:
            self._loop_starts += 1
        thread.start()
        logger.debug("Tracking %s for module %s", resolved, scope.__name__)
        return True

    def untrack(self, path: Path) -> bool:
        """Stop watching path; return False if it was not tracked."""
        entry = self._registry.remove(path.resolve())
        if entry is None:
            return False
        entry.cancelled.set()
        entry.subscription.cancel()
        entry.subscription.close()
        logger.debug("Stopped tracking %s", entry.path)
        return True

    def close(self) -> None:
        """Untrack every path."""
        for path in self._registry.paths():
            self.untrack(path)

    def _should_stop(self, entry: TrackedFile) -> bool:
        return entry.cancelled.is_set() or not self._registry.is_current(entry)

    def _watch_loop(self, entry: TrackedFile) -> None:
        while not self._should_stop(entry):
            entry.subscription.wait()
            if self._should_stop(entry):
                break
            try:
                self._reconcile(entry)
            except FileMissingTransient:
                time.sleep(self._backoff_seconds)
            except Exception as error:
                logger.warning("Re-declaring cells in %s failed: %s", entry.path, error)
                self._record_failure(entry, error)
        logger.debug("Watch loop for %s exited", entry.path)

    def _reconcile(self, entry: TrackedFile) -> None:
        try:
            content = entry.path.read_bytes()
        except FileNotFoundError as error:
            raise FileMissingTransient(entry.path) from error
        if content == entry.snapshot:
            return
        self._redeclare(entry.path, content, entry.scope)
        self._registry.update_snapshot(entry, content)
        if self._journal is not None:
            self._journal.record("file.redeclare", entry.path, metadata={"bytes": len(content)})

    def _record_failure(self, entry: TrackedFile, error: Exception) -> None:
        if self._journal is None:
            return
        code = error.code if isinstance(error, CodeCellsError) else "REDECLARE_FAILED"
        try:
            self._journal.record(
                "file.redeclare_failed",
                entry.path,
                ok=False,
                error_code=code,
                metadata={"error_type": type(error).__name__},
            )
        except OSError as journal_error:
            logger.warning("Cannot write journal %s: %s", self._journal.path, journal_error)
