from __future__ import annotations

import ast

from codecells.patching import PREFIX, SUFFIX, escape_rendered, find_block_end, render_block


def test_markers_are_fixed_fifty_wide_delimiter_lines() -> None:
    assert PREFIX == b'r"""' + b"=" * 50 + b"\n"
    assert SUFFIX == b"=" * 50 + b'"""\n'


def test_text_without_prefix_returns_input_offset() -> None:
    assert find_block_end(b"y = 2\n", 17) == 17
    assert find_block_end(b"", 3) == 3


def test_existing_block_is_consumed_through_suffix() -> None:
    after = render_block("42") + b"rest = 1\n"

    end = find_block_end(after, 10)

    assert end == 10 + len(render_block("42"))


def test_unterminated_block_is_left_alone() -> None:
    after = PREFIX + b"42\nrest = 1\n"

    assert find_block_end(after, 5) == 5


def test_block_must_start_immediately() -> None:
    after = b"\n" + render_block("42")

    assert find_block_end(after, 0) == 0


def test_rendered_triple_quotes_are_escaped() -> None:
    rendered = 'He said """hi""" and ' + "=" * 50 + '"""'

    escaped = escape_rendered(rendered)

    assert '"""' not in escaped
    assert SUFFIX not in render_block(rendered)[len(PREFIX) : -len(SUFFIX)]


def test_block_is_valid_python_even_with_awkward_text() -> None:
    for rendered in ['"""', 'ends with quote"', "back\\slash\\", "", "multi\nline\noutput"]:
        source = b"x = 1\n" + render_block(rendered)

        tree = ast.parse(source)

        assert len(tree.body) == 2
