from __future__ import annotations

import pytest

from codecells.errors import RenderFailed
from codecells.render import RendererRegistry


class Point:
    pass


class Point3D(Point):
    pass


def _default(result: object, asset_stem: str) -> str:
    _ = asset_stem
    return f"default:{result!r}"


def test_unregistered_types_use_the_default_renderer() -> None:
    registry = RendererRegistry(default=_default)

    assert registry.render(3, "/tmp/stem") == "default:3"


def test_first_registered_match_wins_including_subclasses() -> None:
    registry = RendererRegistry(default=_default)
    registry.register(Point, lambda result, stem: "point")
    registry.register(Point3D, lambda result, stem: "point3d")

    assert registry.render(Point3D(), "stem") == "point"
    assert registry.kinds() == (Point, Point3D)


def test_reregistering_a_type_replaces_its_renderer() -> None:
    registry = RendererRegistry(default=_default)
    registry.register(Point, lambda result, stem: "old")
    registry.register(Point, lambda result, stem: "new")

    assert registry.render(Point(), "stem") == "new"
    assert registry.kinds() == (Point,)


def test_renderer_receives_asset_stem() -> None:
    registry = RendererRegistry(default=_default)
    registry.register(Point, lambda result, stem: f"[[{stem}.png]]")

    assert registry.render(Point(), "/d/.codecells_assets/f_c") == "[[/d/.codecells_assets/f_c.png]]"


def test_renderer_exceptions_become_render_failed() -> None:
    def explode(result: object, asset_stem: str) -> str:
        raise RuntimeError("disk full")

    registry = RendererRegistry(default=_default)
    registry.register(Point, explode)

    with pytest.raises(RenderFailed) as excinfo:
        registry.render(Point(), "stem")

    assert excinfo.value.type_name == "Point"
    assert excinfo.value.reason == "disk full"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_non_string_output_is_rejected() -> None:
    registry = RendererRegistry(default=lambda result, stem: 42)  # type: ignore[arg-type,return-value]

    with pytest.raises(RenderFailed, match="expected str"):
        registry.render(object(), "stem")
