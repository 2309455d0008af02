"""File tracking: registry, watch subscriptions, and re-declaration loops."""

from .registry import TrackedFile, TrackedFileRegistry
from .tracker import FileTracker, Redeclare, WatchFactory
from .watch import WatchdogSubscription, WatchHub, WatchSubscription

__all__ = [
    "FileTracker",
    "Redeclare",
    "TrackedFile",
    "TrackedFileRegistry",
    "WatchFactory",
    "WatchHub",
    "WatchSubscription",
    "WatchdogSubscription",
]
