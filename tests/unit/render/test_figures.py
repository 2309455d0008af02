from __future__ import annotations

from pathlib import Path

import pytest

matplotlib = pytest.importorskip("matplotlib")
matplotlib.use("Agg")

from matplotlib.figure import Figure  # noqa: E402

from codecells.render import RendererRegistry, TextPreviewRenderer  # noqa: E402
from codecells.config import PreviewConfig  # noqa: E402
from codecells.render.figures import register_figure_renderers, render_figure  # noqa: E402


def test_figure_is_saved_as_png_side_car(tmp_path: Path) -> None:
    figure = Figure()
    figure.add_subplot().plot([1, 2, 3])
    stem = tmp_path / ".codecells_assets" / "analysis_plot"

    reference = render_figure(figure, str(stem))

    asset = tmp_path / ".codecells_assets" / "analysis_plot.png"
    assert reference == f"[[{asset}]]"
    assert asset.exists()
    assert asset.read_bytes().startswith(b"\x89PNG")


def test_axes_render_through_their_figure(tmp_path: Path) -> None:
    axes = Figure().add_subplot()
    stem = tmp_path / "assets" / "nested" / "f_axes"

    reference = render_figure(axes, str(stem))

    assert reference.endswith("f_axes.png]]")
    assert (tmp_path / "assets" / "nested" / "f_axes.png").exists()


def test_registration_routes_figures_and_leaves_text_alone(tmp_path: Path) -> None:
    registry = RendererRegistry(default=TextPreviewRenderer(PreviewConfig()))
    register_figure_renderers(registry)

    assert registry.render([1, 2], str(tmp_path / "x")) == "[1, 2]"
    assert registry.render(Figure(), str(tmp_path / "fig")).startswith("[[")
