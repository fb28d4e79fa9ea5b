"""MCP tools for ChartFit rendering operations."""

from __future__ import annotations

import json
from typing import Any

from fastmcp import Context

from chartfit.core.config import get_settings
from chartfit.core.enums import InsightType
from chartfit.core.exceptions import RenderFailure
from chartfit.geometry import compute_viewport, extract_content_bounds, parse_svg_attributes
from chartfit.render.backends import ChartRenderer
from chartfit.render.pipeline import render_many, render_to_fitted_image
from chartfit.spec.insights import select_visualizations, summarize_bundle
from mcp_server.error_handling import ValidationError, handle_tool_error
from mcp_server.monitoring import metrics, track_tool_execution


def _load_json_arg(value: str | dict[str, Any], name: str) -> dict[str, Any]:
    """Accept a JSON object either already decoded or as a JSON string."""
    if isinstance(value, dict):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be a JSON object or JSON string")
    try:
        decoded = json.loads(value)
    except json.JSONDecodeError as e:
        raise ValidationError(f"'{name}' is not valid JSON: {e.msg}") from e
    if not isinstance(decoded, dict):
        raise ValidationError(f"'{name}' must decode to a JSON object")
    return decoded


def _validate_size(width: int, height: int) -> None:
    for name, value in (("width", width), ("height", height)):
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            raise ValidationError(f"Invalid {name}: {value!r}. Must be a positive number")


@track_tool_execution
async def render_chart_svg_tool(
    spec: str | dict[str, Any],
    width: int = 800,
    height: int = 400,
    ctx: Context | None = None,
    renderer: ChartRenderer | None = None,
) -> dict[str, Any]:
    """
    Render a Vega-Lite chart specification to a fitted SVG.

    Args:
        spec: Vega-Lite specification (object or JSON string); custom
            lookup-map axis formats are rewritten automatically
        width: Width of the SVG output in pixels
        height: Height of the SVG output in pixels
        renderer: Renderer override (tests); defaults to the configured backend

    Returns:
        Success: {"success": True, "svg": str, "width": int, "height": int}
        Failure: {"success": False, "error_type": str, "message": str, "tool": str}
    """
    try:
        chart_spec = _load_json_arg(spec, "spec")
        _validate_size(width, height)

        if ctx:
            await ctx.info(f"Rendering chart at {width}x{height}")

        svg = await render_to_fitted_image(chart_spec, width, height, renderer=renderer)
        metrics.record_svgs(1)

        return {"success": True, "svg": svg, "width": width, "height": height}

    except Exception as e:
        return await handle_tool_error(e, "render_chart_svg", ctx)


@track_tool_execution
async def render_insight_svgs_tool(
    bundle: str | dict[str, Any],
    insight_type: str = "all",
    width: int = 800,
    height: int = 400,
    ctx: Context | None = None,
    renderer: ChartRenderer | None = None,
) -> dict[str, Any]:
    """
    Render every visualization of an insight bundle to fitted SVGs.

    Args:
        bundle: Insight bundle response (object or JSON string)
        insight_type: popc, currenttrend, unusualchange, topcontributor or all
        width: Width of each SVG in pixels
        height: Height of each SVG in pixels
        renderer: Renderer override (tests); defaults to the configured backend

    Returns:
        Success: {"success": True, "metric_name": str | None, "summary": dict,
                  "visualizations": [{"insight_type": str, "svg": str}]}
        Failure: {"success": False, "error_type": str, "message": str, "tool": str}
    """
    try:
        bundle_data = _load_json_arg(bundle, "bundle")
        _validate_size(width, height)

        try:
            wanted = InsightType(insight_type.lower())
        except ValueError:
            raise ValidationError(
                f"Invalid insight_type: '{insight_type}'. "
                f"Must be one of: {', '.join(t.value for t in InsightType)}"
            ) from None

        selected = select_visualizations(bundle_data, wanted)

        if ctx:
            await ctx.info(f"Rendering {len(selected)} visualization(s)")

        results = await render_many(
            [insight.viz for insight in selected],
            width,
            height,
            renderer=renderer,
            concurrency=get_settings().max_render_concurrency,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures and len(failures) == len(results):
            first = failures[0]
            raise first if isinstance(first, Exception) else RenderFailure(str(first))

        visualizations: list[dict[str, Any]] = []
        for insight, result in zip(selected, results):
            if isinstance(result, BaseException):
                if ctx:
                    await ctx.warning(f"Skipping {insight.type} visualization: {result}")
                continue
            visualizations.append({"insight_type": insight.type, "svg": result})

        metrics.record_svgs(len(visualizations))
        summary = summarize_bundle(bundle_data)

        return {
            "success": True,
            "metric_name": summary["metric_name"],
            "summary": summary,
            "visualizations": visualizations,
            "failed": len(failures),
        }

    except Exception as e:
        return await handle_tool_error(e, "render_insight_svgs", ctx)


@track_tool_execution
async def extract_svg_bounds_tool(svg: str, ctx: Context | None = None) -> dict[str, Any]:
    """
    Measure the content bounds of an SVG document.

    Returns:
        Success: {"success": True, "content_bounds": dict | None, "view_box": str | None}
    """
    try:
        if not isinstance(svg, str) or "<svg" not in svg:
            raise ValidationError("'svg' must be an SVG document string")

        content = extract_content_bounds(svg)
        if content is None:
            return {"success": True, "content_bounds": None, "view_box": None}

        attrs = parse_svg_attributes(svg)
        viewport = compute_viewport(content, attrs.width, attrs.height)
        return {
            "success": True,
            "content_bounds": content.to_dict(),
            "view_box": str(viewport),
        }

    except Exception as e:
        return await handle_tool_error(e, "extract_svg_bounds", ctx)
