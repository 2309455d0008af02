"""The ``@cell`` decorator and the callable cells it produces."""

from __future__ import annotations

import inspect
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from codecells.errors import CodeCellsError
from codecells.patching import PatchResult
from codecells.runtime import Runtime, default_runtime

logger = logging.getLogger(__name__)

CellBody = Callable[[], object]


@dataclass(slots=True, frozen=True)
class Cell:
    """A named function whose last result is recorded below its definition.

    Identity is ``(path, line, name)``. Re-declaring a file builds new cells
    and rebinds the module names; existing instances are never updated.
    """

    name: str
    path: Path
    line: int
    body: CellBody
    scope: ModuleType | None
    runtime: Runtime | None = None

    @property
    def asset_stem(self) -> str:
        """Suggested side-car asset path for rich results, without extension."""
        return self._runtime().asset_stem(self.path, self.name)

    def __call__(self) -> object:
        runtime = self._runtime()
        result = self.body()
        if not self.path.is_file():
            logger.warning(
                "Cell %s was defined in %s, which does not exist; output insertion skipped.",
                self.name,
                self.path,
            )
            runtime.record("cell.patch_skipped", self.path, cell=self.name)
            return result
        try:
            rendered = runtime.renderers.render(result, self.asset_stem)
            patch = runtime.patcher.patch(self.path, self.line, rendered)
        except CodeCellsError as error:
            runtime.record(
                "cell.run",
                self.path,
                cell=self.name,
                ok=False,
                error_code=error.code,
                metadata={"line": self.line},
            )
            raise
        runtime.record(
            "cell.run",
            self.path,
            cell=self.name,
            metadata=_patch_metadata(patch),
        )
        return result

    def _runtime(self) -> Runtime:
        return self.runtime or default_runtime()


def _patch_metadata(patch: PatchResult) -> dict[str, object]:
    return {
        "line": patch.line,
        "replaced": patch.replaced,
        "replaced_bytes": patch.replaced_bytes,
        "bytes_written": patch.bytes_written,
    }


def declare_cell(func: CellBody, runtime: Runtime | None = None) -> Cell:
    """Build a Cell for func and track its source file."""
    if inspect.iscoroutinefunction(func) or inspect.isgeneratorfunction(func):
        raise TypeError(f"@cell requires a plain function, got {func.__qualname__}")
    if "<locals>" in func.__qualname__:
        logger.warning(
            "Cell %s is defined in a local scope; output placement will probably be wrong.",
            func.__qualname__,
        )

    code = func.__code__
    path = Path(code.co_filename)
    exists = path.is_file()
    if exists:
        path = path.resolve()
    scope = sys.modules.get(func.__module__)
    declared = Cell(
        name=func.__name__,
        path=path,
        line=code.co_firstlineno,
        body=func,
        scope=scope,
        runtime=runtime,
    )
    if exists and scope is not None:
        (runtime or default_runtime()).tracker.track(path, scope)
    else:
        logger.debug("Cell %s has no source file on disk; it will not be tracked.", func.__name__)
    return declared


def cell(
    func: CellBody | None = None, *, runtime: Runtime | None = None
) -> Cell | Callable[[CellBody], Cell]:
    """Turn a top-level function into a cell.

    Calling the cell runs the function and writes a preview of its return
    value into an output block directly below the definition. Use as ``@cell``
    or ``@cell(runtime=...)``.
    """
    if func is None:

        def decorator(inner: CellBody) -> Cell:
            return declare_cell(inner, runtime)

        return decorator
    return declare_cell(func, runtime)
