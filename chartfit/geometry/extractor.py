"""Recompute the content bounding box of an SVG document from its markup.

The renderer's own layout report cannot always be trusted (text overflow,
strokes at the edges), so the emitted markup is scanned directly. The scan is
a single left-to-right pass over tags, tracking the cumulative translation of
nested ``<g>`` groups. Only translations are modeled; rotation and scale are
ignored.
"""

from __future__ import annotations

import re
from collections.abc import Iterator

from ..core.enums import ShapeKind
from ..core.logging_config import get_logger
from ..core.models import ContentBounds, ShapeBox, TransformFrame
from . import shapes

logger = get_logger(__name__)

_TAG_RE = re.compile(
    r"<(?P<name>g|path|circle|line|rect|text)\b(?P<attrs>[^>]*?)(?P<self_closing>/)?>"
    r"|</(?P<close>g)\s*>"
)
_TEXT_CONTENT_RE = re.compile(r"([^<]*)<")


class GeometryExtractor:
    """Collect transformed shape boxes from raw SVG markup."""

    def __init__(self, markup: str) -> None:
        self.markup = markup
        self.skipped = 0

    def iter_boxes(self) -> Iterator[ShapeBox]:
        stack: list[TransformFrame] = [TransformFrame()]

        for match in _TAG_RE.finditer(self.markup):
            if match.group("close"):
                if len(stack) > 1:
                    stack.pop()
                continue

            name = match.group("name")
            attrs = match.group("attrs") or ""
            own = shapes.parse_translate(shapes.get_attribute(attrs, "transform"))

            if name == "g":
                if not match.group("self_closing"):
                    stack.append(stack[-1].compose(own))
                continue

            try:
                content_start = None if match.group("self_closing") else match.end()
                box = self._shape_box(ShapeKind(name), attrs, content_start)
            except ValueError as e:
                self.skipped += 1
                logger.debug(
                    "Skipping unparseable shape",
                    extra={"shape": name, "error": str(e)},
                )
                continue

            if box is not None:
                yield box.translated(stack[-1].compose(own))

    def _shape_box(
        self, kind: ShapeKind, attrs: str, content_start: int | None
    ) -> ShapeBox | None:
        if kind is ShapeKind.PATH:
            return shapes.path_box(attrs)
        if kind is ShapeKind.CIRCLE:
            return shapes.circle_box(attrs)
        if kind is ShapeKind.RECT:
            return shapes.rect_box(attrs)
        if kind is ShapeKind.LINE:
            return shapes.line_box(attrs)
        if content_start is None:
            return shapes.text_box(attrs)
        content = _TEXT_CONTENT_RE.match(self.markup, content_start)
        return shapes.text_box(attrs, content.group(1) if content else None)

    def extract(self) -> ContentBounds | None:
        return ContentBounds.from_boxes(self.iter_boxes())


def extract_content_bounds(markup: str) -> ContentBounds | None:
    """Union of every recognized, transformed shape box; None if there are none."""
    bounds = GeometryExtractor(markup).extract()
    if bounds is None:
        logger.debug("No recognized shapes in markup", extra={"markup_length": len(markup)})
    return bounds
