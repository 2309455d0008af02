from __future__ import annotations

import pytest

from codecells.errors import LineOutOfRange
from codecells.patching import line_count, line_starts, locate


def test_line_one_maps_to_offset_zero() -> None:
    assert locate(b"", 1) == 0
    assert locate(b"x = 1\n", 1) == 0


def test_every_line_maps_to_its_first_byte() -> None:
    content = b"alpha\n\nbeta = 2\ngamma\n"
    lines = content.split(b"\n")[:-1]

    for number, text in enumerate(lines, start=1):
        offset = locate(content, number)
        assert content[offset : offset + len(text)] == text
        if offset > 0:
            assert content[offset - 1 : offset] == b"\n"


def test_offsets_count_bytes_not_characters() -> None:
    content = "s = 'héllo wörld'\nt = 1\n".encode()

    offset = locate(content, 2)

    assert content[offset:] == b"t = 1\n"
    assert offset == len("s = 'héllo wörld'\n".encode())


def test_line_past_end_reports_actual_line_count() -> None:
    content = b"a\nb\nc\n"

    with pytest.raises(LineOutOfRange) as excinfo:
        locate(content, 4)

    assert excinfo.value.line == 4
    assert excinfo.value.line_count == 3
    assert "file has 3 lines" in str(excinfo.value)


def test_unterminated_last_line_is_addressable() -> None:
    content = b"a\nb"

    assert locate(content, 2) == 2
    with pytest.raises(LineOutOfRange) as excinfo:
        locate(content, 3)
    assert excinfo.value.line_count == 2


def test_line_below_one_is_out_of_range() -> None:
    with pytest.raises(LineOutOfRange):
        locate(b"a\n", 0)


def test_line_count_and_starts_agree() -> None:
    content = b"one\ntwo\nthree"

    assert line_count(content) == 3
    assert line_starts(content) == [0, 4, 8]
    assert line_count(b"one\n") == 1
    assert line_starts(b"one\n") == [0]
    assert line_count(b"") == 0
