"""Renderer registry with explicit per-type registration."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from codecells.errors import RenderFailed

Renderer = Callable[[object, str], str]


@dataclass(slots=True)
class RendererRegistry:
    """Ordered type-to-renderer table with an explicit default renderer."""

    default: Renderer
    _entries: list[tuple[type, Renderer]] = field(default_factory=list)

    def register(self, kind: type, renderer: Renderer) -> None:
        """Register a renderer for instances of kind, replacing any earlier entry."""
        self._entries = [(existing, fn) for existing, fn in self._entries if existing is not kind]
        self._entries.append((kind, renderer))

    def select(self, result: object) -> Renderer:
        """Select the first renderer whose type matches, else the default."""
        for kind, renderer in self._entries:
            if isinstance(result, kind):
                return renderer
        return self.default

    def kinds(self) -> tuple[type, ...]:
        """Return registered types in match order."""
        return tuple(kind for kind, _ in self._entries)

    def render(self, result: object, asset_stem: str) -> str:
        """Render result, translating renderer failures into RenderFailed."""
        renderer = self.select(result)
        try:
            rendered = renderer(result, asset_stem)
        except Exception as error:
            raise RenderFailed(type(result).__name__, str(error) or type(error).__name__) from error
        if not isinstance(rendered, str):
            raise RenderFailed(
                type(result).__name__,
                f"renderer returned {type(rendered).__name__}, expected str",
            )
        return rendered
