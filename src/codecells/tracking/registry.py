"""Process-wide map of tracked files guarded by a lock."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

from codecells.tracking.watch import WatchSubscription


@dataclass(slots=True)
class TrackedFile:
    """Watch state for one tracked source file."""

    path: Path
    snapshot: bytes
    scope: ModuleType
    subscription: WatchSubscription
    cancelled: threading.Event = field(default_factory=threading.Event)
    thread: threading.Thread | None = None


class TrackedFileRegistry:
    """Thread-safe path -> TrackedFile map.

    ``add_if_absent`` and ``remove`` are the only mutators; watch loops only
    read membership and snapshots.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[Path, TrackedFile] = {}

    def add_if_absent(self, entry: TrackedFile) -> bool:
        """Insert entry unless its path is already tracked; return True on insert."""
        with self._lock:
            if entry.path in self._entries:
                return False
            self._entries[entry.path] = entry
            return True

    def remove(self, path: Path) -> TrackedFile | None:
        """Remove and return the entry for path, if any."""
        with self._lock:
            return self._entries.pop(path, None)

    def get(self, path: Path) -> TrackedFile | None:
        """Return the entry for path, if tracked."""
        with self._lock:
            return self._entries.get(path)

    def is_current(self, entry: TrackedFile) -> bool:
        """Return True while entry is still the registered one for its path."""
        with self._lock:
            return self._entries.get(entry.path) is entry

    def update_snapshot(self, entry: TrackedFile, snapshot: bytes) -> None:
        """Store the last-seen content for entry."""
        with self._lock:
            entry.snapshot = snapshot

    def paths(self) -> tuple[Path, ...]:
        """Return tracked paths in sorted order."""
        with self._lock:
            return tuple(sorted(self._entries))

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
