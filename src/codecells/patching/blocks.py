"""Output block markers, escaping, and stale block detection."""

from __future__ import annotations

from typing import Final

MARKER_WIDTH: Final[int] = 50
PREFIX: Final[bytes] = b'r"""' + b"=" * MARKER_WIDTH + b"\n"
SUFFIX: Final[bytes] = b"=" * MARKER_WIDTH + b'"""' + b"\n"

_QUOTE_RUN = '"""'
_ESCAPED_QUOTE_RUN = '""\\"'


def escape_rendered(rendered: str) -> str:
    """Neutralize triple quotes so the text cannot close the block early."""
    return rendered.replace(_QUOTE_RUN, _ESCAPED_QUOTE_RUN)


def render_block(rendered: str) -> bytes:
    """Return the exact bytes of an output block holding rendered text."""
    return PREFIX + escape_rendered(rendered).encode("utf-8") + b"\n" + SUFFIX


def find_block_end(content_after_expr: bytes, offset: int) -> int:
    """Return the offset just past an output block at the start of the text.

    When the text does not open with the prefix marker, or the block is never
    closed, the input offset is returned unchanged and nothing is consumed.
    """
    if not content_after_expr.startswith(PREFIX):
        return offset
    suffix_at = content_after_expr.find(SUFFIX, len(PREFIX))
    if suffix_at == -1:
        return offset
    return offset + suffix_at + len(SUFFIX)
