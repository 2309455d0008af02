"""Process-wide wiring of renderers, patcher, tracker, and journal."""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType

from codecells.config import CodeCellsConfig, load_effective_config
from codecells.declarations import redeclare_cells
from codecells.logging import JsonlEventJournal
from codecells.patching import SourcePatcher
from codecells.render import RendererRegistry, TextPreviewRenderer
from codecells.tracking import FileTracker, TrackedFileRegistry, WatchFactory, WatchHub

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Runtime:
    """Collaborators shared by every cell bound to this runtime."""

    config: CodeCellsConfig
    renderers: RendererRegistry
    patcher: SourcePatcher
    tracker: FileTracker
    journal: JsonlEventJournal | None = None
    hub: WatchHub | None = None

    def asset_stem(self, path: Path, cell_name: str) -> str:
        """Return the suggested side-car asset path, without extension."""
        return str(path.parent / self.config.assets_dir_name / f"{path.stem}_{cell_name}")

    def record(
        self,
        event: str,
        path: Path,
        *,
        cell: str | None = None,
        ok: bool = True,
        error_code: str | None = None,
        metadata: dict[str, object] | None = None,
    ) -> None:
        """Append a journal event when a journal is configured."""
        if self.journal is None:
            return
        try:
            self.journal.record(
                event, path, cell=cell, ok=ok, error_code=error_code, metadata=metadata
            )
        except OSError as error:
            logger.warning("Cannot write journal %s: %s", self.journal.path, error)

    def close(self) -> None:
        """Stop every watch loop and the shared observer."""
        self.tracker.close()
        if self.hub is not None:
            self.hub.stop()


def build_runtime(
    config: CodeCellsConfig,
    *,
    watch_factory: WatchFactory | None = None,
    registry: TrackedFileRegistry | None = None,
) -> Runtime:
    """Build a runtime from effective config."""
    renderers = RendererRegistry(default=TextPreviewRenderer(config.preview))
    if config.figure_renderers:
        from codecells.render.figures import register_figure_renderers

        register_figure_renderers(renderers)

    journal = JsonlEventJournal(config.journal_path) if config.journal_path is not None else None
    hub: WatchHub | None = None
    if watch_factory is None:
        hub = WatchHub(
            polling=config.watch.polling,
            poll_interval_seconds=config.watch.poll_interval_seconds,
        )
        watch_factory = hub.subscribe
    tracker = FileTracker(
        registry=registry or TrackedFileRegistry(),
        redeclare=redeclare_cells,
        watch_factory=watch_factory,
        backoff_seconds=config.watch.backoff_seconds,
        journal=journal,
    )
    return Runtime(
        config=config,
        renderers=renderers,
        patcher=SourcePatcher(),
        tracker=tracker,
        journal=journal,
        hub=hub,
    )


_default_lock = threading.Lock()
_default_runtime: Runtime | None = None


def default_runtime() -> Runtime:
    """Return the process-wide runtime, building it from the working directory."""
    global _default_runtime
    with _default_lock:
        if _default_runtime is None:
            _default_runtime = build_runtime(load_effective_config(Path.cwd()))
        return _default_runtime


def configure(
    config: CodeCellsConfig,
    *,
    watch_factory: WatchFactory | None = None,
    registry: TrackedFileRegistry | None = None,
) -> Runtime:
    """Replace the process-wide runtime, closing the previous one."""
    global _default_runtime
    runtime = build_runtime(config, watch_factory=watch_factory, registry=registry)
    with _default_lock:
        previous, _default_runtime = _default_runtime, runtime
    if previous is not None:
        previous.close()
    return runtime


def track_file(path: str | Path, scope: ModuleType | None = None) -> bool:
    """Re-declare the cells of path into scope whenever the file changes."""
    module = scope if scope is not None else sys.modules["__main__"]
    return default_runtime().tracker.track(Path(path), module)


def untrack_file(path: str | Path) -> bool:
    """Stop re-declaring the cells of path."""
    return default_runtime().tracker.untrack(Path(path))


def result_representation(result: object, asset_stem: str) -> str:
    """Render a result with the process-wide renderer registry."""
    return default_runtime().renderers.render(result, asset_stem)
