"""Typed failures raised by the patch engine, renderers, and file tracker."""

from __future__ import annotations

from pathlib import Path


class CodeCellsError(Exception):
    """Base class for codecells failures with a stable error code."""

    code = "CODECELLS_ERROR"


class LineOutOfRange(CodeCellsError):
    """Raised when a recorded line no longer exists in the file."""

    code = "LINE_OUT_OF_RANGE"

    def __init__(self, line: int, line_count: int) -> None:
        super().__init__(f"Line {line} exceeds file length (file has {line_count} lines).")
        self.line = line
        self.line_count = line_count


class UnparsableRegion(CodeCellsError):
    """Raised when no complete statement can be parsed at an offset."""

    code = "UNPARSABLE_REGION"

    def __init__(self, offset: int, reason: str) -> None:
        super().__init__(f"Cannot parse statement at byte {offset}: {reason}")
        self.offset = offset
        self.reason = reason


class WriteFailed(CodeCellsError):
    """Raised when a source file cannot be read back or rewritten."""

    code = "WRITE_FAILED"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot rewrite {path}: {reason}")
        self.path = path
        self.reason = reason


class FileMissingTransient(CodeCellsError):
    """Raised inside a watch loop while a tracked file is briefly absent."""

    code = "FILE_MISSING_TRANSIENT"

    def __init__(self, path: Path) -> None:
        super().__init__(f"Tracked file is missing: {path}")
        self.path = path


class RenderFailed(CodeCellsError):
    """Raised when a renderer cannot produce a display string."""

    code = "RENDER_FAILED"

    def __init__(self, type_name: str, reason: str) -> None:
        super().__init__(f"Cannot render result of type {type_name}: {reason}")
        self.type_name = type_name
        self.reason = reason
