"""Shared fixtures for ChartFit tests."""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Any

import pytest

from chartfit.core.models import ReportedBounds, RenderResult
from mcp_server.monitoring import metrics


class StubRenderer:
    """Deterministic renderer that replays scripted results.

    Each call records a copy of the spec it received. Once the script is
    exhausted the last entry is repeated. An exception in the script is
    raised instead of returned.
    """

    def __init__(self, results: list[RenderResult | Exception]) -> None:
        if not results:
            raise ValueError("StubRenderer needs at least one scripted result")
        self.results = list(results)
        self.calls: list[dict[str, Any]] = []

    async def render(self, spec: dict[str, Any]) -> RenderResult:
        self.calls.append(copy.deepcopy(spec))
        result = self.results[min(len(self.calls), len(self.results)) - 1]
        if isinstance(result, Exception):
            raise result
        return result


def svg_document(body: str, width: float = 800, height: float = 400, extra: str = "") -> str:
    """Minimal SVG document in the shape vl-convert emits."""
    return (
        f'<svg xmlns="http://www.w3.org/2000/svg" class="marks" '
        f'width="{width}" height="{height}"{extra}>'
        f'<rect width="{width}" height="{height}" fill="white"/>'
        f"{body}</svg>"
    )


def render_result(
    body: str = "",
    bounds: tuple[float, float, float, float] | None = (0, 0, 800, 400),
    width: float = 800,
    height: float = 400,
) -> RenderResult:
    return RenderResult(
        markup=svg_document(body, width, height),
        bounds=ReportedBounds(*bounds) if bounds is not None else None,
        view_width=width,
        view_height=height,
    )


@pytest.fixture
def stub_renderer() -> Callable[..., StubRenderer]:
    """Factory for scripted renderers: ``stub_renderer(result, ...)``."""

    def _make(*results: RenderResult | Exception) -> StubRenderer:
        return StubRenderer(list(results))

    return _make


@pytest.fixture
def make_result() -> Callable[..., RenderResult]:
    return render_result


@pytest.fixture
def make_svg() -> Callable[..., str]:
    return svg_document


@pytest.fixture(autouse=True)
def reset_metrics():
    """Keep the global MCP metrics collector isolated between tests."""
    metrics.reset()
    yield
    metrics.reset()
