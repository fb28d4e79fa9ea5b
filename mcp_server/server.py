"""FastMCP server for ChartFit."""

from __future__ import annotations

from fastmcp import Context, FastMCP
from starlette.responses import JSONResponse

from chartfit import __version__
from chartfit.core.config import get_settings
from chartfit.core.logging_config import setup_logging
from mcp_server.monitoring import metrics
from mcp_server.resources import get_render_defaults_resource
from mcp_server.tools import (
    extract_svg_bounds_tool,
    render_chart_svg_tool,
    render_insight_svgs_tool,
)

mcp = FastMCP(
    "ChartFit",
    instructions="Render declarative chart specifications to tightly fitted SVG images",
    version=__version__,
)


# Register Tools
@mcp.tool()
async def render_chart_svg(
    spec: str,
    width: int = 800,
    height: int = 400,
    ctx: Context | None = None,
) -> dict:
    """Render a Vega-Lite chart specification (JSON) to a fitted SVG."""
    return await render_chart_svg_tool(spec, width, height, ctx)


@mcp.tool()
async def render_insight_svgs(
    bundle: str,
    insight_type: str = "all",
    width: int = 800,
    height: int = 400,
    ctx: Context | None = None,
) -> dict:
    """Render the visualizations of an insight bundle (JSON) to fitted SVGs."""
    return await render_insight_svgs_tool(bundle, insight_type, width, height, ctx)


@mcp.tool()
async def extract_svg_bounds(svg: str, ctx: Context | None = None) -> dict:
    """Measure the content bounds of an SVG and propose a fitted viewBox."""
    return await extract_svg_bounds_tool(svg, ctx)


# Register Resources
@mcp.resource("chartfit://defaults")
def render_defaults() -> str:
    """Rendering defaults: padding, attempt budget, margins."""
    return get_render_defaults_resource()


# Health check endpoint
@mcp.custom_route("/health", methods=["GET"])
async def health_check(request) -> JSONResponse:  # type: ignore[no-untyped-def]
    """Health check endpoint for monitoring."""
    return JSONResponse({"status": "healthy", "service": "ChartFit MCP Server"})


# Metrics endpoint
@mcp.custom_route("/metrics", methods=["GET"])
async def get_metrics_endpoint(request) -> JSONResponse:  # type: ignore[no-untyped-def]
    """Metrics endpoint for monitoring."""
    return JSONResponse(metrics.get_metrics())


def main() -> None:
    settings = get_settings()
    setup_logging(json_output=settings.json_logs, log_level=settings.log_level)

    if settings.mcp_transport == "http":
        mcp.run(transport="streamable-http", host=settings.mcp_host, port=settings.mcp_port)
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
