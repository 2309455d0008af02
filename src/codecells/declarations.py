"""Static discovery and re-declaration of ``@cell`` definitions."""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from codecells.errors import LineOutOfRange
from codecells.patching import find_block_end, locate

CELL_DECORATOR_NAME = "cell"


@dataclass(slots=True, frozen=True)
class CellDeclaration:
    """A cell definition found in source text."""

    name: str
    line: int
    end_line: int
    has_output: bool


def is_cell_decorator(node: ast.expr) -> bool:
    """Return True for ``cell``, ``<module>.cell`` and calls to either."""
    if isinstance(node, ast.Call):
        node = node.func
    if isinstance(node, ast.Name):
        return node.id == CELL_DECORATOR_NAME
    if isinstance(node, ast.Attribute):
        return node.attr == CELL_DECORATOR_NAME
    return False


def cell_definitions(tree: ast.Module) -> list[ast.FunctionDef]:
    """Return top-level function definitions decorated as cells, in file order."""
    return [
        node
        for node in tree.body
        if isinstance(node, ast.FunctionDef)
        and any(is_cell_decorator(decorator) for decorator in node.decorator_list)
    ]


def find_cell_declarations(content: bytes, filename: str = "<unknown>") -> list[CellDeclaration]:
    """List the cells declared in content; raises SyntaxError on invalid source."""
    tree = ast.parse(content, filename=filename)
    declarations: list[CellDeclaration] = []
    for node in cell_definitions(tree):
        line = min([node.lineno, *(decorator.lineno for decorator in node.decorator_list)])
        end_line = node.end_lineno or node.lineno
        declarations.append(
            CellDeclaration(
                name=node.name,
                line=line,
                end_line=end_line,
                has_output=_has_output_after(content, end_line),
            )
        )
    return declarations


def redeclare_cells(path: Path, content: bytes, scope: ModuleType) -> list[str]:
    """Re-run the definitions (never the bodies) of every cell into scope.

    Only the decorated ``def`` statements are compiled, with their original
    line numbers, so each fresh ``Cell`` records where it now lives.
    """
    tree = ast.parse(content, filename=str(path))
    nodes = cell_definitions(tree)
    if not nodes:
        return []
    module = ast.Module(body=list(nodes), type_ignores=[])
    code = compile(module, str(path), "exec")
    exec(code, vars(scope))
    return [node.name for node in nodes]


def _has_output_after(content: bytes, end_line: int) -> bool:
    try:
        offset = locate(content, end_line + 1)
    except LineOutOfRange:
        return False
    return find_block_end(content[offset:], offset) != offset
