"""Structured event journal utilities."""

from .journal import CellEvent, JsonlEventJournal, utc_timestamp

__all__ = ["CellEvent", "JsonlEventJournal", "utc_timestamp"]
