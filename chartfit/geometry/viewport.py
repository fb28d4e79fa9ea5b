"""Rewrite the root ``viewBox`` of an SVG document to enclose its content."""

from __future__ import annotations

import re

from ..core.logging_config import get_logger
from ..core.models import ContentBounds, SvgAttributes, Viewport
from .shapes import get_attribute, parse_number

logger = get_logger(__name__)

MIN_MARGIN = 5.0
MARGIN_RATIO = 0.02

_ROOT_TAG_RE = re.compile(r"<svg\b[^>]*>")
_VIEWBOX_RE = re.compile(r"""(?<=\s)viewBox\s*=\s*(["'])[^"']*\1""")


def parse_svg_attributes(markup: str) -> SvgAttributes:
    """Read width, height and viewBox from the root ``<svg>`` opening tag only."""
    root = _ROOT_TAG_RE.search(markup)
    if not root:
        return SvgAttributes()
    tag = " " + root.group(0)[4:]
    return SvgAttributes(
        width=parse_number(get_attribute(tag, "width")),
        height=parse_number(get_attribute(tag, "height")),
        view_box=get_attribute(tag, "viewBox"),
    )


def compute_viewport(
    bounds: ContentBounds, width: float | None, height: float | None
) -> Viewport:
    """Viewport covering the margin-expanded content and the declared canvas.

    The origin is clamped to ``(0, 0)``: a negative minimum is folded into the
    extent on that axis. Width and height are at least 1.
    """
    margin_x = max(MIN_MARGIN, bounds.width * MARGIN_RATIO)
    margin_y = max(MIN_MARGIN, bounds.height * MARGIN_RATIO)

    canvas_width = width if width is not None else bounds.max_x
    canvas_height = height if height is not None else bounds.max_y

    min_x = min(0.0, bounds.min_x - margin_x)
    min_y = min(0.0, bounds.min_y - margin_y)
    max_x = max(canvas_width, bounds.max_x + margin_x)
    max_y = max(canvas_height, bounds.max_y + margin_y)

    view_width = max_x - min_x
    view_height = max_y - min_y

    if min_x < 0:
        view_width += abs(min_x)
        min_x = 0.0
    if min_y < 0:
        view_height += abs(min_y)
        min_y = 0.0

    return Viewport(
        min_x=min_x,
        min_y=min_y,
        width=max(1.0, view_width),
        height=max(1.0, view_height),
    )


def replace_viewbox(markup: str, viewport: Viewport) -> str:
    """Replace the root viewBox, or add one at the end of the root opening tag."""
    root = _ROOT_TAG_RE.search(markup)
    if not root:
        return markup

    tag = root.group(0)
    value = f'viewBox="{viewport}"'
    if _VIEWBOX_RE.search(tag):
        new_tag = _VIEWBOX_RE.sub(value, tag, count=1)
    elif tag.endswith("/>"):
        new_tag = f"{tag[:-2].rstrip()} {value}/>"
    else:
        new_tag = f"{tag[:-1].rstrip()} {value}>"
    return markup[: root.start()] + new_tag + markup[root.end():]


def fit_viewport(markup: str, bounds: ContentBounds | None) -> str:
    """Return ``markup`` with a viewBox enclosing ``bounds`` and the canvas.

    Markup is returned unchanged when there are no content bounds or no root
    ``<svg>`` element.
    """
    if bounds is None:
        return markup

    attrs = parse_svg_attributes(markup)
    viewport = compute_viewport(bounds, attrs.width, attrs.height)
    logger.debug(
        "Fitted viewport",
        extra={
            "content": bounds.to_dict(),
            "previous_view_box": attrs.view_box,
            "view_box": str(viewport),
        },
    )
    return replace_viewbox(markup, viewport)
