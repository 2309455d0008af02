from __future__ import annotations

from codecells.config import PreviewConfig
from codecells.render import ELLIPSIS, TextPreviewRenderer, clip_text


def test_preview_matches_pretty_repr_for_small_values() -> None:
    render = TextPreviewRenderer(PreviewConfig())

    assert render(42, "stem") == "42"
    assert render("text", "stem") == "'text'"
    assert render(None, "stem") == "None"
    assert render({"b": 1, "a": 2}, "stem") == "{'b': 1, 'a': 2}"


def test_preview_wraps_to_configured_width() -> None:
    render = TextPreviewRenderer(PreviewConfig(width=20))

    text = render(list(range(30)), "stem")

    assert all(len(line) <= 20 for line in text.splitlines())
    assert len(text.splitlines()) > 1


def test_preview_is_bounded_in_lines() -> None:
    render = TextPreviewRenderer(PreviewConfig(width=10, max_lines=3))

    text = render(list(range(100)), "stem")

    assert len(text.splitlines()) == 3
    assert text.endswith(ELLIPSIS)


def test_preview_limits_nesting_depth() -> None:
    render = TextPreviewRenderer(PreviewConfig(depth=1))

    assert render([[1, [2]]], "stem") == "[[...]]"


def test_clip_text_by_characters() -> None:
    assert clip_text("abcdef", max_lines=10, max_chars=3) == "abc" + ELLIPSIS
    assert clip_text("abc", max_lines=10, max_chars=3) == "abc"


def test_preview_has_no_ansi_color_codes() -> None:
    render = TextPreviewRenderer(PreviewConfig())

    assert "\x1b[" not in render({"nested": [1, 2, {"x": "y"}]}, "stem")
