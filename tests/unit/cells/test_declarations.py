from __future__ import annotations

from pathlib import Path
from types import ModuleType

import pytest

from codecells.declarations import find_cell_declarations, redeclare_cells
from codecells.patching import render_block

SOURCE = b'''import codecells
from codecells import cell

side_effects = []
side_effects.append("module body ran")


@cell
def plain():
    raise AssertionError("cell body must not run")


@codecells.cell
@other
def qualified():
    return 2


@cell(runtime=None)
def configured():
    return 3


def not_a_cell():
    return 4


@other
def decorated_elsewhere():
    return 5


class Holder:
    @cell
    def method(self):
        return 6
'''


def test_declarations_list_top_level_cells_in_order() -> None:
    declarations = find_cell_declarations(SOURCE, filename="demo.py")

    assert [(item.name, item.line, item.end_line) for item in declarations] == [
        ("plain", 8, 10),
        ("qualified", 13, 16),
        ("configured", 19, 21),
    ]
    assert not any(item.has_output for item in declarations)


def test_declarations_report_existing_output() -> None:
    content = SOURCE.replace(
        b'    return 2\n', b"    return 2\n" + render_block("2"), 1
    )

    declarations = {item.name: item for item in find_cell_declarations(content)}

    assert declarations["qualified"].has_output is True
    assert declarations["plain"].has_output is False


def test_declarations_raise_on_invalid_source() -> None:
    with pytest.raises(SyntaxError):
        find_cell_declarations(b"@cell\ndef broken(:\n    pass\n")


def test_redeclare_runs_definitions_but_not_bodies(tmp_path: Path) -> None:
    declared: list[tuple[str, int]] = []

    def fake_cell(func=None, **kwargs):
        def register(inner):
            declared.append((inner.__name__, inner.__code__.co_firstlineno))
            return inner

        return register if func is None else register(func)

    scope = ModuleType("scope")
    scope.cell = fake_cell
    scope.codecells = ModuleType("codecells")
    scope.codecells.cell = fake_cell
    scope.other = lambda func: func
    path = tmp_path / "demo.py"

    names = redeclare_cells(path, SOURCE, scope)

    assert names == ["plain", "qualified", "configured"]
    assert declared == [("plain", 8), ("qualified", 13), ("configured", 19)]
    assert not hasattr(scope, "side_effects")
    assert not hasattr(scope, "not_a_cell")
    assert scope.plain.__code__.co_filename == str(path)


def test_redeclare_without_cells_is_a_no_op(tmp_path: Path) -> None:
    scope = ModuleType("scope")

    assert redeclare_cells(tmp_path / "empty.py", b"x = 1\n", scope) == []
    assert not hasattr(scope, "x")
