"""Chart renderer boundary and the production vl-convert adapter.

The rendering engine is an injected capability: anything with an async
``render(spec) -> RenderResult`` method can drive the pipeline. Tests use a
deterministic stand-in; production uses vl-convert (the Vega engine compiled
to a native Python extension, no browser or Node.js required).

Architecture Notes:
    - Reported bounds come from the laid-out Vega scenegraph, so they are the
      engine's own view of the layout rather than a re-measurement of the SVG
    - Rendering is CPU-bound and runs in a worker thread
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol, runtime_checkable

import vl_convert as vlc

from ..core.config import Settings, get_settings
from ..core.enums import RendererBackend
from ..core.logging_config import get_logger
from ..core.models import RenderResult
from ..geometry.viewport import parse_svg_attributes
from .scenegraph import scenegraph_bounds

logger = get_logger(__name__)

# Sizing keys set by the render loop that must reach the compiled Vega spec
_VEGA_OVERRIDES = ("padding", "autosize", "bounds")


@runtime_checkable
class ChartRenderer(Protocol):
    """Anything that turns a sized chart specification into SVG markup."""

    async def render(self, spec: dict[str, Any]) -> RenderResult: ...


class VlConvertRenderer:
    """Render Vega-Lite specifications to SVG with vl-convert-python."""

    def __init__(self, vl_version: str | None = None) -> None:
        self.vl_version = vl_version

    async def render(self, spec: dict[str, Any]) -> RenderResult:
        return await asyncio.to_thread(self._render_sync, spec)

    def _compile(self, spec: dict[str, Any]) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if self.vl_version:
            kwargs["vl_version"] = self.vl_version
        vega_spec = vlc.vegalite_to_vega(spec, **kwargs)
        if isinstance(vega_spec, str):
            vega_spec = json.loads(vega_spec)
        for key in _VEGA_OVERRIDES:
            if key in spec:
                vega_spec[key] = spec[key]
        return vega_spec

    def _render_sync(self, spec: dict[str, Any]) -> RenderResult:
        vega_spec = self._compile(spec)
        svg: str = vlc.vega_to_svg(vega_spec)

        scene = vlc.vega_to_scenegraph(vega_spec)
        if isinstance(scene, str):
            scene = json.loads(scene)
        bounds = scenegraph_bounds(scene)

        attrs = parse_svg_attributes(svg)
        view_width = attrs.width if attrs.width is not None else float(scene.get("width", 0))
        view_height = attrs.height if attrs.height is not None else float(scene.get("height", 0))

        logger.debug(
            "vl-convert render complete",
            extra={
                "svg_length": len(svg),
                "view_width": view_width,
                "view_height": view_height,
                "origin": scene.get("origin"),
            },
        )
        return RenderResult(
            markup=svg, bounds=bounds, view_width=view_width, view_height=view_height
        )


def get_default_renderer(settings: Settings | None = None) -> ChartRenderer:
    """Build the renderer named by ``CHARTFIT_RENDERER``.

    Raises:
        ValueError: If the configured backend is unknown
    """
    settings = settings or get_settings()
    try:
        backend = RendererBackend(settings.renderer.lower())
    except ValueError as e:
        raise ValueError(
            f"Unknown renderer backend: '{settings.renderer}'. "
            f"Must be one of: {', '.join(b.value for b in RendererBackend)}"
        ) from e

    if backend is RendererBackend.VL_CONVERT:
        return VlConvertRenderer()
    raise ValueError(f"Unsupported renderer backend: {backend.value}")
