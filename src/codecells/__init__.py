"""Runnable code cells that record their results inside the source file."""

from .cells import Cell, cell, declare_cell
from .config import CodeCellsConfig, ConfigOverrides, load_effective_config
from .declarations import CellDeclaration, find_cell_declarations, redeclare_cells
from .errors import (
    CodeCellsError,
    FileMissingTransient,
    LineOutOfRange,
    RenderFailed,
    UnparsableRegion,
    WriteFailed,
)
from .patching import PatchResult, SourcePatcher
from .runtime import (
    Runtime,
    build_runtime,
    configure,
    default_runtime,
    result_representation,
    track_file,
    untrack_file,
)

__all__ = [
    "Cell",
    "CellDeclaration",
    "CodeCellsConfig",
    "CodeCellsError",
    "ConfigOverrides",
    "FileMissingTransient",
    "LineOutOfRange",
    "PatchResult",
    "RenderFailed",
    "Runtime",
    "SourcePatcher",
    "UnparsableRegion",
    "WriteFailed",
    "build_runtime",
    "cell",
    "configure",
    "declare_cell",
    "default_runtime",
    "find_cell_declarations",
    "load_effective_config",
    "redeclare_cells",
    "result_representation",
    "track_file",
    "untrack_file",
]
