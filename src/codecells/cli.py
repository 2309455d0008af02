"""Command line entrypoint: list cells, run cells, read the event journal."""

from __future__ import annotations

import argparse
import importlib.util
import json
import logging
import sys
from pathlib import Path
from types import ModuleType
from typing import TextIO

from codecells.cells import Cell
from codecells.config import ConfigOverrides, load_effective_config
from codecells.declarations import find_cell_declarations, redeclare_cells
from codecells.errors import CodeCellsError
from codecells.logging import JsonlEventJournal
from codecells.runtime import configure

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the codecells command."""
    parser = argparse.ArgumentParser(prog="codecells")
    parser.add_argument("--root", required=False, default=".")
    parser.add_argument("--journal", required=False, default=None)
    parser.add_argument("--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    cells_parser = subparsers.add_parser("cells", help="List cells declared in a file.")
    cells_parser.add_argument("file")

    run_parser = subparsers.add_parser("run", help="Run cells and record their output.")
    run_parser.add_argument("file")
    run_parser.add_argument("names", nargs="*")

    events_parser = subparsers.add_parser("events", help="Print journal entries.")
    events_parser.add_argument("--since", required=False, default=None)
    events_parser.add_argument("--limit", type=int, required=False, default=50)
    return parser


def list_cells(path: Path, out_stream: TextIO) -> int:
    """Print one line per declared cell."""
    declarations = find_cell_declarations(path.read_bytes(), filename=str(path))
    for declaration in declarations:
        marker = "output" if declaration.has_output else "no output"
        out_stream.write(
            f"{declaration.name}\t{declaration.line}-{declaration.end_line}\t{marker}\n"
        )
    return 0


def load_module(path: Path) -> ModuleType:
    """Import a source file as a fresh module registered in sys.modules."""
    module_name = f"codecells_run_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


def run_cells(path: Path, names: list[str], out_stream: TextIO) -> int:
    """Run the named cells of a file (all of them when names is empty)."""
    declarations = find_cell_declarations(path.read_bytes(), filename=str(path))
    declared = [declaration.name for declaration in declarations]
    missing = [name for name in names if name not in declared]
    if missing:
        raise LookupError(f"Unknown cell(s) in {path}: {', '.join(missing)}")

    module = load_module(path)
    logger.debug("Loaded %s declaring %s", path, ", ".join(declared))
    for name in names or declared:
        target = getattr(module, name, None)
        if not isinstance(target, Cell):
            raise LookupError(f"{name} in {path} is not bound to a cell")
        target()
        out_stream.write(f"{name}\tline {target.line}\tok\n")
        # Earlier output blocks shift later cells; rebind them before the next run.
        redeclare_cells(path, path.read_bytes(), module)
    return 0


def print_events(journal_path: Path | None, since: str | None, limit: int, out: TextIO) -> int:
    """Print journal entries as JSON lines."""
    if journal_path is None:
        raise ValueError("No journal configured; pass --journal or set journal_path.")
    journal = JsonlEventJournal(journal_path)
    for entry in journal.read(since=since, limit=limit):
        out.write(f"{json.dumps(entry, sort_keys=True)}\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the codecells command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    overrides = ConfigOverrides(
        journal_path=Path(args.journal).resolve() if args.journal is not None else None,
    )
    try:
        config = load_effective_config(Path(args.root), overrides)
        if args.command == "events":
            return print_events(config.journal_path, args.since, args.limit, sys.stdout)
        path = Path(args.file).resolve()
        if args.command == "cells":
            return list_cells(path, sys.stdout)
        runtime = configure(config)
        try:
            return run_cells(path, list(args.names), sys.stdout)
        finally:
            runtime.close()
    except (CodeCellsError, ImportError, LookupError, OSError, SyntaxError, ValueError) as error:
        sys.stderr.write(f"codecells: {error}\n")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
