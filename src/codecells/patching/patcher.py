"""Idempotent splice of rendered output blocks into source files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from codecells.errors import WriteFailed
from codecells.patching.blocks import find_block_end, render_block
from codecells.patching.boundary import PythonStatementParser, StatementParser
from codecells.patching.locator import NEWLINE, locate


@dataclass(slots=True, frozen=True)
class PatchResult:
    """Outcome of one output block splice."""

    path: Path
    line: int
    insert_offset: int
    replaced_bytes: int
    replaced: bool
    bytes_written: int


class SourcePatcher:
    """Rewrite the output block that follows the statement at a given line.

    Only the bytes between the end of the statement and the end of any stale
    block are replaced; everything else is written back verbatim. The read and
    the write are not locked against other writers, so callers serialize
    patches to the same file when that matters.
    """

    def __init__(self, parser: StatementParser | None = None) -> None:
        self._parser = parser or PythonStatementParser()

    def splice(self, content: bytes, line: int, rendered: str) -> tuple[bytes, int, int]:
        """Return new content plus the replaced range for an in-memory source."""
        offset_before = locate(content, line)
        offset_after_expr = self._parser.find_end(content, offset_before)
        offset_after_old_block = find_block_end(content[offset_after_expr:], offset_after_expr)

        head = content[:offset_after_expr]
        if head and not head.endswith(NEWLINE):
            head += NEWLINE
        new_content = head + render_block(rendered) + content[offset_after_old_block:]
        return new_content, offset_after_expr, offset_after_old_block

    def patch(self, path: Path, line: int, rendered: str) -> PatchResult:
        """Replace or insert the output block after the statement at line."""
        try:
            content = path.read_bytes()
        except OSError as error:
            raise WriteFailed(path, f"read failed: {error.strerror or error}") from error

        new_content, start, end = self.splice(content, line, rendered)
        try:
            with path.open("wb") as handle:
                handle.write(new_content)
        except OSError as error:
            raise WriteFailed(path, f"write failed: {error.strerror or error}") from error

        return PatchResult(
            path=path,
            line=line,
            insert_offset=start,
            replaced_bytes=end - start,
            replaced=end > start,
            bytes_written=len(new_content),
        )
