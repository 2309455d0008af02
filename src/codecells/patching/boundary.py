"""Statement boundary detection backed by Python's tokenizer and AST parser."""

from __future__ import annotations

import ast
import io
import tokenize
from collections.abc import Iterator
from typing import Protocol

from codecells.errors import UnparsableRegion
from codecells.patching.locator import line_starts

CLAUSE_KEYWORDS = frozenset({"elif", "else", "except", "finally"})
_TRIVIA = frozenset({tokenize.NL, tokenize.COMMENT, tokenize.ENCODING})


class StatementParser(Protocol):
    """Protocol implemented by statement boundary parsers."""

    def find_end(self, content: bytes, start_offset: int) -> int:
        """Return the offset just past one statement starting at start_offset."""


class PythonStatementParser:
    """Find the end of one top-level Python statement, decorators included.

    The returned offset sits just past the statement's terminating newline, or
    at the end of the content when the last line has no terminator. Tokens are
    consumed lazily, so problems further down the file do not matter once the
    statement is known to be complete.
    """

    def find_end(self, content: bytes, start_offset: int) -> int:
        """Return the offset just past the statement beginning at start_offset."""
        if start_offset < 0 or start_offset > len(content):
            raise UnparsableRegion(start_offset, "offset is outside the content")
        chunk = content[start_offset:]
        try:
            text = chunk.decode("utf-8")
        except UnicodeDecodeError as error:
            raise UnparsableRegion(start_offset, f"invalid UTF-8: {error.reason}") from error

        end_row = self._scan_statement(text, start_offset)
        starts = line_starts(chunk)
        relative_end = starts[end_row] if end_row < len(starts) else len(chunk)

        try:
            ast.parse(chunk[:relative_end].decode("utf-8"))
        except (SyntaxError, ValueError) as error:
            raise UnparsableRegion(start_offset, _describe(error)) from error
        return start_offset + relative_end

    def _scan_statement(self, text: str, start_offset: int) -> int:
        """Return the 1-based row holding the statement's final NEWLINE token."""
        tokens = _tokens(text)
        depth = 0
        last_newline_row = 0
        pending_row: int | None = None
        line_is_decorator = False
        at_line_start = True
        started = False
        try:
            for token in tokens:
                if token.type in _TRIVIA:
                    continue
                if token.type == tokenize.INDENT:
                    if not started:
                        raise UnparsableRegion(start_offset, "cell statement is not at top level")
                    depth += 1
                    pending_row = None
                    continue
                if token.type == tokenize.DEDENT:
                    depth -= 1
                    if depth == 0:
                        pending_row = last_newline_row
                    continue
                if token.type == tokenize.ENDMARKER:
                    if not started:
                        raise UnparsableRegion(start_offset, "no statement found")
                    return pending_row if pending_row is not None else last_newline_row
                if pending_row is not None:
                    if token.type == tokenize.NAME and token.string in CLAUSE_KEYWORDS:
                        pending_row = None
                    else:
                        return pending_row
                if token.type == tokenize.NEWLINE:
                    last_newline_row = token.start[0]
                    if depth == 0 and not line_is_decorator:
                        pending_row = last_newline_row
                    at_line_start = True
                    continue
                if at_line_start:
                    line_is_decorator = token.type == tokenize.OP and token.string == "@"
                    at_line_start = False
                started = True
        except (tokenize.TokenError, SyntaxError) as error:
            if pending_row is not None:
                return pending_row
            raise UnparsableRegion(start_offset, _describe(error)) from error
        raise UnparsableRegion(start_offset, "statement never terminated")


def _tokens(text: str) -> Iterator[tokenize.TokenInfo]:
    return tokenize.generate_tokens(io.StringIO(text).readline)


def _describe(error: Exception) -> str:
    if isinstance(error, SyntaxError) and error.msg:
        return f"{error.msg} (line {error.lineno})"
    return str(error) or type(error).__name__
