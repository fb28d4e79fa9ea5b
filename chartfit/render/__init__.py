from __future__ import annotations

from .backends import ChartRenderer, VlConvertRenderer, get_default_renderer
from .coordinator import RenderCoordinator, compute_overflow
from .pipeline import render_many, render_to_fitted_image

__all__ = [
    "ChartRenderer",
    "RenderCoordinator",
    "VlConvertRenderer",
    "compute_overflow",
    "get_default_renderer",
    "render_many",
    "render_to_fitted_image",
]
