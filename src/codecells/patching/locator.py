"""Line-number to byte-offset mapping over raw file bytes."""

from __future__ import annotations

from codecells.errors import LineOutOfRange

NEWLINE = b"\n"


def line_count(content: bytes) -> int:
    """Return the number of newline-delimited records in content."""
    count = content.count(NEWLINE)
    if content and not content.endswith(NEWLINE):
        count += 1
    return count


def line_starts(content: bytes) -> list[int]:
    """Return the start offset of every record, in order."""
    starts = [0]
    position = content.find(NEWLINE)
    while position != -1:
        starts.append(position + 1)
        position = content.find(NEWLINE, position + 1)
    if len(starts) > 1 and starts[-1] == len(content):
        starts.pop()
    return starts


def locate(content: bytes, line: int) -> int:
    """Return the 0-based offset of the first byte of a 1-based line."""
    if line == 1:
        return 0
    if line < 1:
        raise LineOutOfRange(line=line, line_count=line_count(content))
    current_line = 1
    position = 0
    while current_line < line:
        newline_at = content.find(NEWLINE, position)
        if newline_at == -1 or newline_at + 1 == len(content):
            raise LineOutOfRange(line=line, line_count=line_count(content))
        position = newline_at + 1
        current_line += 1
    return position
