"""Side-car asset renderers for matplotlib figures."""

from __future__ import annotations

from pathlib import Path

from matplotlib.axes import Axes
from matplotlib.figure import Figure

from codecells.render.registry import RendererRegistry

FIGURE_EXTENSION = ".png"


def asset_reference(path: Path) -> str:
    """Return the bracketed reference string written into an output block."""
    return f"[[{path}]]"


def render_figure(result: object, asset_stem: str) -> str:
    """Save a figure next to the source file and return its reference."""
    if isinstance(result, Axes):
        figure = result.get_figure()
    else:
        figure = result
    if not isinstance(figure, Figure):
        raise TypeError("result is not attached to a matplotlib figure")
    asset_path = Path(asset_stem + FIGURE_EXTENSION)
    asset_path.parent.mkdir(parents=True, exist_ok=True)
    figure.savefig(asset_path)
    return asset_reference(asset_path)


def register_figure_renderers(registry: RendererRegistry) -> None:
    """Register figure and axes renderers on a registry."""
    registry.register(Figure, render_figure)
    registry.register(Axes, render_figure)
