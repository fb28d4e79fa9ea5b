from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import typer

from .. import __version__
from ..core.config import get_settings
from ..core.exceptions import ChartFitError
from ..core.logging_config import get_logger, setup_logging
from ..geometry import compute_viewport, extract_content_bounds, fit_viewport, parse_svg_attributes
from ..render.pipeline import render_to_fitted_image
from ..spec.formatter import transform_spec
from ..spec.insights import summarize_bundle
from . import output as cli_output

app = typer.Typer(help="ChartFit CLI")

logger = get_logger(__name__)


@app.callback()
def callback(
    json_logs: bool = typer.Option(False, "--json-logs", help="Output logs in JSON format"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)"),
) -> None:
    """Configure global CLI options."""
    setup_logging(json_output=json_logs, log_level=log_level)
    logger.debug("CLI initialized", extra={"json_logs": json_logs, "log_level": log_level})


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        cli_output.error(f"File not found: {path}")
        raise typer.Exit(code=1) from None
    except json.JSONDecodeError as e:
        cli_output.error(f"Invalid JSON in {path}: {e}")
        raise typer.Exit(code=1) from e


def _read_svg(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        cli_output.error(f"File not found: {path}")
        raise typer.Exit(code=1) from None


def _emit(content: str, output: Path | None) -> None:
    if output is None:
        cli_output.plain(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    cli_output.success(f"Wrote {output}")


@app.command()
def version() -> None:
    """Print version."""
    typer.echo(__version__)


@app.command()
def render(
    spec_path: Path = typer.Argument(..., help="Vega-Lite JSON specification file"),  # noqa: B008
    width: int | None = typer.Option(None, min=1, help="Width in pixels (default from settings)"),  # noqa: B008
    height: int | None = typer.Option(None, min=1, help="Height in pixels (default from settings)"),  # noqa: B008
    padding: float | None = typer.Option(
        None, min=0.0, help="Uniform initial padding on all sides (overrides defaults)"
    ),  # noqa: B008
    output: Path | None = typer.Option(None, "--output", "-o", help="Write SVG to this file"),  # noqa: B008
) -> None:
    """Render a chart specification to a fitted SVG."""
    settings = get_settings()
    spec = _read_json(spec_path)

    try:
        svg = asyncio.run(
            render_to_fitted_image(
                spec,
                width or settings.default_width,
                height or settings.default_height,
                padding=padding,
            )
        )
    except ChartFitError as e:
        logger.error("Render failed", extra={"spec_path": str(spec_path), "error": str(e)})
        cli_output.error(f"Render failed: {e}")
        raise typer.Exit(code=1) from e

    _emit(svg, output)


@app.command()
def fit(
    svg_path: Path = typer.Argument(..., help="SVG file to re-fit"),  # noqa: B008
    output: Path | None = typer.Option(None, "--output", "-o", help="Write SVG to this file"),  # noqa: B008
) -> None:
    """Rewrite an existing SVG's viewBox to enclose all of its content."""
    markup = _read_svg(svg_path)
    bounds = extract_content_bounds(markup)
    if bounds is None:
        cli_output.warning("No recognized shapes found; SVG left unchanged")
    _emit(fit_viewport(markup, bounds), output)


@app.command()
def bounds(
    svg_path: Path = typer.Argument(..., help="SVG file to measure"),  # noqa: B008
) -> None:
    """Print the content bounds and proposed viewBox of an SVG as JSON."""
    markup = _read_svg(svg_path)
    content = extract_content_bounds(markup)
    if content is None:
        cli_output.error("No recognized shapes found")
        raise typer.Exit(code=1)

    attrs = parse_svg_attributes(markup)
    viewport = compute_viewport(content, attrs.width, attrs.height)
    cli_output.plain(
        json.dumps(
            {"content_bounds": content.to_dict(), "view_box": str(viewport)}, indent=2
        )
    )


@app.command()
def inspect(
    spec_path: Path = typer.Argument(..., help="Vega-Lite JSON specification file"),  # noqa: B008
) -> None:
    """Print the specification after custom formatter rewriting."""
    spec = _read_json(spec_path)
    try:
        transformed = transform_spec(spec)
    except ChartFitError as e:
        cli_output.error(str(e))
        raise typer.Exit(code=1) from e
    cli_output.plain(json.dumps(transformed, indent=2, ensure_ascii=False))


@app.command()
def summary(
    bundle_path: Path = typer.Argument(..., help="Insight bundle JSON file"),  # noqa: B008
) -> None:
    """Print the headline facts of an insight bundle as JSON."""
    bundle = _read_json(bundle_path)
    if not isinstance(bundle, dict):
        cli_output.error("Insight bundle must be a JSON object")
        raise typer.Exit(code=1)
    cli_output.plain(json.dumps(summarize_bundle(bundle), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    app()
