"""End-to-end tests for render_to_fitted_image and render_many."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import pytest

from chartfit.core.exceptions import InvalidSpecError, RenderFailure
from chartfit.core.models import RenderResult
from chartfit.geometry.viewport import parse_svg_attributes
from chartfit.render.pipeline import render_many, render_to_fitted_image


def _view_box(svg: str) -> tuple[float, float, float, float]:
    view_box = parse_svg_attributes(svg).view_box
    assert view_box is not None
    min_x, min_y, width, height = (float(v) for v in view_box.split())
    return min_x, min_y, width, height


class MarkRenderer:
    """Fails for specs whose mark is ``"fail"``; renders everything else."""

    def __init__(self, make_result):
        self.make_result = make_result
        self.rendered: list[str] = []

    async def render(self, spec: dict[str, Any]) -> RenderResult:
        if spec.get("mark") == "fail":
            raise RuntimeError("cannot render this mark")
        self.rendered.append(spec.get("mark"))
        return self.make_result(body=f'<g class="mark-{spec.get("mark")}"/>')


async def test_overflowing_chart_is_fitted(stub_renderer, make_result, make_svg):
    final = RenderResult(
        markup=make_svg('<rect x="-5" y="10" width="50" height="20"/>'),
        bounds=None,
        view_width=800,
        view_height=400,
    )
    renderer = stub_renderer(make_result(bounds=(-5, 0, 790, 390)), final)

    svg = await render_to_fitted_image({"mark": "bar"}, 800, 400, renderer=renderer)

    assert len(renderer.calls) == 2
    assert svg.lstrip().startswith("<svg")
    assert svg.rstrip().endswith("</svg>")
    min_x, min_y, width, height = _view_box(svg)
    assert min_x == 0
    assert min_y == 0
    assert width >= 806
    assert height >= 400


async def test_custom_formatters_are_rewritten_before_rendering(stub_renderer, make_result):
    renderer = stub_renderer(make_result())
    spec = {
        "customFormatterMaps": {"q": {"Q1": "First quarter"}},
        "mark": "bar",
        "encoding": {"x": {"axis": {"format": {"custom": True, "mapName": "q"}}}},
    }

    await render_to_fitted_image(spec, renderer=renderer)

    sent = renderer.calls[0]
    assert "customFormatterMaps" not in sent
    axis = sent["encoding"]["x"]["axis"]
    assert "format" not in axis
    assert axis["labelExpr"].startswith("datum.value === 'Q1'")


async def test_default_size(stub_renderer, make_result):
    renderer = stub_renderer(make_result())
    await render_to_fitted_image({}, renderer=renderer)
    assert (renderer.calls[0]["width"], renderer.calls[0]["height"]) == (800, 400)


async def test_incomplete_document_is_render_failure(stub_renderer):
    renderer = stub_renderer(RenderResult(markup="<g></g>", bounds=None, view_width=1, view_height=1))
    with pytest.raises(RenderFailure):
        await render_to_fitted_image({}, renderer=renderer)


async def test_invalid_spec_is_rejected(stub_renderer, make_result):
    renderer = stub_renderer(make_result())
    with pytest.raises(InvalidSpecError):
        await render_to_fitted_image("not a spec", renderer=renderer)  # type: ignore[arg-type]
    assert renderer.calls == []


async def test_uses_configured_renderer_when_none_given(stub_renderer, make_result):
    renderer = stub_renderer(make_result())
    with patch("chartfit.render.pipeline.get_default_renderer", return_value=renderer) as factory:
        svg = await render_to_fitted_image({"mark": "line"})
    factory.assert_called_once()
    assert "viewBox" in svg


async def test_render_many_isolates_failures(make_result):
    renderer = MarkRenderer(make_result)
    results = await render_many(
        [{"mark": "bar"}, {"mark": "fail"}, {"mark": "line"}],
        renderer=renderer,
        concurrency=2,
    )

    assert len(results) == 3
    assert isinstance(results[0], str) and "mark-bar" in results[0]
    assert isinstance(results[1], RenderFailure)
    assert isinstance(results[2], str) and "mark-line" in results[2]
    assert sorted(renderer.rendered) == ["bar", "line"]


async def test_render_many_without_concurrency_limit(make_result):
    renderer = MarkRenderer(make_result)
    results = await render_many([{"mark": "point"}] * 4, renderer=renderer)
    assert all(isinstance(r, str) for r in results)
    assert len(renderer.rendered) == 4
