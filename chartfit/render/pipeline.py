"""Chart specification to fitted SVG, end to end.

Pipeline:
1. Rewrite lookup-map axis formats into label expressions (pure)
2. Render with the measure-and-correct padding loop
3. Measure the content bounds directly from the emitted SVG
4. Rewrite the root viewBox so every mark and the canvas stay visible

Every invocation is independent: nothing is cached or shared, so many charts
can be rendered concurrently.

Usage:
    from chartfit.render.pipeline import render_to_fitted_image

    svg = await render_to_fitted_image(spec, width=800, height=400)
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import Any

from ..core.exceptions import RenderFailure
from ..core.logging_config import get_logger
from ..core.models import BoxPadding
from ..geometry.extractor import extract_content_bounds
from ..geometry.viewport import fit_viewport
from ..spec.formatter import transform_spec
from .backends import ChartRenderer, get_default_renderer
from .coordinator import RenderCoordinator

logger = get_logger(__name__)

DEFAULT_WIDTH = 800
DEFAULT_HEIGHT = 400


def _is_complete_document(markup: str) -> bool:
    return "<svg" in markup and "</svg>" in markup


async def render_to_fitted_image(
    spec: Mapping[str, Any],
    width: Any = DEFAULT_WIDTH,
    height: Any = DEFAULT_HEIGHT,
    *,
    renderer: ChartRenderer | None = None,
    padding: float | Mapping[str, Any] | BoxPadding | None = None,
) -> str:
    """Render ``spec`` to a standalone SVG whose viewBox encloses every mark.

    Args:
        spec: Vega-Lite chart specification (never mutated)
        width: Requested width in pixels
        height: Requested height in pixels (ignored for step-based heights)
        renderer: Renderer to use; defaults to the configured backend
        padding: Optional initial padding (scalar or partial per-side mapping)

    Returns:
        SVG document string with a rewritten viewBox

    Raises:
        InvalidSpecError: If the specification or size is unusable
        RenderFailure: If the renderer fails or emits no SVG document
    """
    portable = transform_spec(spec)
    renderer = renderer or get_default_renderer()

    outcome = await RenderCoordinator(renderer).render(portable, width, height, padding=padding)
    if not _is_complete_document(outcome.markup):
        raise RenderFailure("Renderer did not produce a complete SVG document")

    bounds = extract_content_bounds(outcome.markup)
    fitted = fit_viewport(outcome.markup, bounds)

    logger.info(
        "Rendered fitted SVG",
        extra={
            "attempts": len(outcome.attempts),
            "converged": outcome.converged,
            "final_padding": outcome.final_padding.to_dict() if outcome.final_padding else None,
            "content_bounds": bounds.to_dict() if bounds else None,
        },
    )
    return fitted


async def render_many(
    specs: Sequence[Mapping[str, Any]],
    width: Any = DEFAULT_WIDTH,
    height: Any = DEFAULT_HEIGHT,
    *,
    renderer: ChartRenderer | None = None,
    concurrency: int | None = None,
) -> list[str | BaseException]:
    """Render several specifications concurrently.

    A failure is returned in place of that chart's SVG; siblings are
    unaffected. ``concurrency`` bounds how many renders run at once.
    """
    renderer = renderer or get_default_renderer()
    semaphore = asyncio.Semaphore(concurrency) if concurrency else None

    async def _one(spec: Mapping[str, Any]) -> str:
        if semaphore is None:
            return await render_to_fitted_image(spec, width, height, renderer=renderer)
        async with semaphore:
            return await render_to_fitted_image(spec, width, height, renderer=renderer)

    return await asyncio.gather(*(_one(spec) for spec in specs), return_exceptions=True)
