"""Source patch engine: offsets, statement bounds, output blocks, rewrite."""

from .blocks import MARKER_WIDTH, PREFIX, SUFFIX, escape_rendered, find_block_end, render_block
from .boundary import PythonStatementParser, StatementParser
from .locator import line_count, line_starts, locate
from .patcher import PatchResult, SourcePatcher

__all__ = [
    "MARKER_WIDTH",
    "PREFIX",
    "PatchResult",
    "PythonStatementParser",
    "SUFFIX",
    "SourcePatcher",
    "StatementParser",
    "escape_rendered",
    "find_block_end",
    "line_count",
    "line_starts",
    "locate",
    "render_block",
]
