"""Result renderers: registry, default text preview, and asset helpers."""

from .preview import ELLIPSIS, TextPreviewRenderer, clip_text
from .registry import Renderer, RendererRegistry

__all__ = [
    "ELLIPSIS",
    "Renderer",
    "RendererRegistry",
    "TextPreviewRenderer",
    "clip_text",
]
