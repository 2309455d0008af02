"""Bounded, plain-text preview of arbitrary values."""

from __future__ import annotations

import pprint

from codecells.config import PreviewConfig

ELLIPSIS = "…"


class TextPreviewRenderer:
    """Pretty-print a value and clip the result to configured bounds."""

    def __init__(self, config: PreviewConfig) -> None:
        self._config = config

    def __call__(self, result: object, asset_stem: str) -> str:
        _ = asset_stem
        text = pprint.pformat(
            result,
            width=self._config.width,
            depth=self._config.depth,
            compact=True,
            sort_dicts=False,
        )
        return clip_text(text, max_lines=self._config.max_lines, max_chars=self._config.max_chars)


def clip_text(text: str, max_lines: int, max_chars: int) -> str:
    """Keep at most max_lines lines and max_chars characters, marking any cut."""
    clipped = False
    lines = text.splitlines()
    if len(lines) > max_lines:
        lines = lines[:max_lines]
        clipped = True
    output = "\n".join(lines)
    if len(output) > max_chars:
        output = output[:max_chars]
        clipped = True
    if clipped:
        output += ELLIPSIS
    return output
